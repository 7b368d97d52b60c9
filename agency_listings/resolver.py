# agency_listings/resolver.py
"""Choose between curated overrides and the bulk store for a (service, city) page.

Curated rows win whenever at least one active row exists, and the bulk store
is then never queried. A curated store that cannot be read is treated the
same as one with no rows: the page falls back to bulk data rather than
failing. The two cases are kept apart in `CuratedLookup` and in the logs so
an outage does not go unnoticed. Bulk store errors are not recovered here.
"""
import enum
from dataclasses import dataclass, field
from typing import List, Literal, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .assembler import assemble, build_sponsor_entry, map_curated_rows
from .catalog import city_name_from_slug
from .config import SponsorProfile
from .errors import OverrideLookupFailed
from .models import PageListing
from .schemas import Listing, Source
from .selector import CandidateSelector
from .utils import logger

SourcePreference = Literal["auto", "curated", "bulk"]


class LookupStatus(enum.Enum):
    OK = "ok"
    NOT_FOUND = "not_found"
    TRANSIENT_ERROR = "transient_error"


@dataclass
class CuratedLookup:
    status: LookupStatus
    rows: List[PageListing] = field(default_factory=list)
    error: Optional[OverrideLookupFailed] = None

    @property
    def found(self) -> bool:
        return self.status is LookupStatus.OK


@dataclass
class ResolvedListings:
    listings: List[Listing]
    source: Source


class SourceResolver:
    def __init__(self, session: Session, selector: CandidateSelector, sponsor: SponsorProfile):
        self.session = session
        self.selector = selector
        self.sponsor = sponsor

    def lookup_curated(self, service_slug: str, city_slug: str) -> CuratedLookup:
        stmt = (
            select(PageListing)
            .where(
                PageListing.service_slug == service_slug,
                PageListing.city_slug == city_slug,
                PageListing.is_active.is_(True),
            )
            .order_by(PageListing.rank.asc())
        )
        try:
            rows = list(self.session.scalars(stmt))
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.warning("Curated lookup failed for %s/%s, using bulk data: %s", service_slug, city_slug, e)
            return CuratedLookup(LookupStatus.TRANSIENT_ERROR, error=OverrideLookupFailed(str(e)))
        if not rows:
            return CuratedLookup(LookupStatus.NOT_FOUND)
        return CuratedLookup(LookupStatus.OK, rows=rows)

    def resolve_bulk(self, service_name: str, city_name: str) -> List[Listing]:
        """Sponsor plus ranked bulk candidates. Raises BulkLookupFailed."""
        sponsor = build_sponsor_entry(self.sponsor, service_name)
        candidates = self.selector.select(service_name, city_name, exclude_names=[sponsor.name])
        return assemble(sponsor, candidates, service_name, city_name)

    def resolve(
        self,
        service_slug: str,
        city_slug: str,
        service_name: str,
        city_name: Optional[str] = None,
        source: SourcePreference = "auto",
    ) -> ResolvedListings:
        city_name = city_name or city_name_from_slug(city_slug)

        if source != "bulk":
            lookup = self.lookup_curated(service_slug, city_slug)
            if lookup.found:
                logger.info("Serving %d curated listings for %s/%s", len(lookup.rows), service_slug, city_slug)
                return ResolvedListings(map_curated_rows(lookup.rows, service_name, city_name), "curated")
            if source == "curated":
                return ResolvedListings([], "curated")
            logger.info("No curated listings for %s/%s (%s)", service_slug, city_slug, lookup.status.value)

        listings = self.resolve_bulk(service_name, city_name)
        logger.info("Serving %d bulk listings for %s/%s", len(listings), service_slug, city_slug)
        return ResolvedListings(listings, "bulk")
