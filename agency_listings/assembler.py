# agency_listings/assembler.py
"""Mapping of sponsor, bulk and curated records into the uniform `Listing` shape.

Every display field a renderer reads is filled: missing values come from
FIELD_DEFAULTS, never None.
"""
from typing import Any, Iterable, List, Optional, Sequence

from .config import SponsorProfile
from .rating import MAX_RATING, rewrite_rating_mentions, synthesize
from .schemas import Listing, RawAgencyRecord
from .text import clean, first_sentence, to_paragraphs
from .utils import as_float, as_int, as_text, logger

FIELD_DEFAULTS = {
    "min_project_size": "Varies",
    "hourly_rate": "Contact for pricing",
    "employees_count": "10+",
    "year_founded": "N/A",
    "website_url": "",
    "clutch_url": "",
    "description": "",
    "why_choose": "",
}

CURATED_FALLBACK_RATING = 4.5
CLUTCH_BASE_URL = "https://clutch.co/"


def display(field: str, value: Any) -> str:
    return as_text(value) or FIELD_DEFAULTS[field]


def clean_url(url: Any) -> str:
    return "".join(as_text(url).split()).replace("%20", "")


def clutch_link(value: Any) -> str:
    path = clean_url(value)
    if not path:
        return FIELD_DEFAULTS["clutch_url"]
    if path.startswith("http"):
        return path
    return CLUTCH_BASE_URL + path.lstrip("/")


def split_services(value: Any, service_name: str) -> List[str]:
    if isinstance(value, (list, tuple)):
        items = [as_text(v) for v in value]
    else:
        items = as_text(value).split(",")
    services = [s.strip() for s in items if s and s.strip()]
    return services or [service_name]


def build_sponsor_entry(profile: SponsorProfile, service_name: str) -> Listing:
    service_lower = service_name.lower()
    return Listing(
        rank=1,
        name=profile.name,
        tagline=f"Leading {service_name} Company — Trusted by Fortune 500 Brands",
        rating=MAX_RATING,
        website_url=profile.website_url,
        services=[service_name, "Custom Software Development", "Mobile App Development", "AI Development"],
        description=(
            f"{profile.name} is a globally recognized technology company delivering world-class "
            f"{service_lower} solutions. With 700+ tech experts and 15+ years of experience, "
            f"{profile.name} has successfully delivered 1500+ projects for clients across the US, "
            "UK, and Middle East."
        ),
        why_choose=[
            f"{profile.name} brings **15+ years of expertise** in {service_lower} with a proven track "
            "record of delivering enterprise-grade solutions for Fortune 500 companies and "
            "high-growth startups alike.",
            f"With a team of **700+ skilled engineers** and offices in the US and Pakistan, "
            f"{profile.name} offers cost-effective, scalable development with **24/7 support** and "
            "transparent communication.",
        ],
        min_project_size=profile.min_project_size,
        hourly_rate=profile.hourly_rate,
        employees_count=profile.employees_count,
        year_founded=profile.year_founded,
        reviews_count=profile.reviews_count,
        clutch_url=profile.clutch_url,
        location=profile.location,
        is_sponsor=True,
    )


def map_raw_record(record: RawAgencyRecord, index: int, service_name: str, city_name: str) -> Listing:
    """Listing for the bulk record at `index` (0 = first after the sponsor)."""
    name = as_text(record.name)
    rating = synthesize(name, index)

    description = rewrite_rating_mentions(clean(record.description), rating)
    why_source = (
        as_text(record.generated_desc)
        or as_text(record.why_choose)
        or f"Leading experts in {service_name.lower()} with a proven track record in {city_name}."
    )
    why_choose = to_paragraphs(rewrite_rating_mentions(clean(why_source), rating))

    tagline = (
        as_text(record.tagline)
        or first_sentence(record.generated_desc)
        or f"Premium {service_name} in {city_name}"
    )
    reviews = record.reviews_count if as_text(record.reviews_count) else record.reviews

    return Listing(
        rank=index + 2,
        name=name,
        tagline=tagline,
        rating=rating,
        website_url=clean_url(record.website_url or record.url),
        services=split_services(record.services, service_name),
        description=description,
        why_choose=why_choose,
        min_project_size=display("min_project_size", record.min_project_size),
        hourly_rate=display("hourly_rate", record.hourly_rate),
        employees_count=display("employees_count", record.employees_count),
        year_founded=display("year_founded", record.year_founded),
        reviews_count=as_int(reviews),
        clutch_url=clutch_link(record.clutch_url),
        location=as_text(record.locality) or as_text(record.location) or city_name,
    )


def assemble(
    sponsor: Listing,
    candidates: Sequence[RawAgencyRecord],
    service_name: str,
    city_name: str,
) -> List[Listing]:
    """Sponsor at rank 1 followed by the candidates ranked 2..N."""
    listings = [sponsor.model_copy(update={"rank": 1})]
    listings += [map_raw_record(c, i, service_name, city_name) for i, c in enumerate(candidates)]
    return listings


def map_curated_row(row: Any, rank: int, service_name: str, city_name: str) -> Listing:
    """Curated rows are taken as entered: no rating synthesis, no text rewriting."""
    rating = as_float(row.clutch_rating)
    services = row.services if isinstance(row.services, list) else None
    return Listing(
        rank=rank,
        name=as_text(row.name),
        tagline=as_text(row.tagline) or f"Premium {service_name}",
        rating=CURATED_FALLBACK_RATING if rating is None else rating,
        website_url=display("website_url", row.website_url),
        services=split_services(services, service_name),
        description=display("description", row.description),
        why_choose=display("why_choose", row.why_choose),
        min_project_size=display("min_project_size", row.min_project_size),
        hourly_rate=display("hourly_rate", row.hourly_rate),
        employees_count=display("employees_count", row.employees_count),
        year_founded=display("year_founded", row.year_founded),
        reviews_count=as_int(row.reviews_count),
        clutch_url=display("clutch_url", row.clutch_url),
        location=as_text(row.location) or city_name,
    )


def map_curated_rows(rows: Iterable[Any], service_name: str, city_name: str) -> List[Listing]:
    """Curated rows in rank order, renumbered 1..N if the stored ranks have gaps."""
    rows = list(rows)
    listings = [map_curated_row(row, i + 1, service_name, city_name) for i, row in enumerate(rows)]
    stored = [row.rank for row in rows]
    if stored != [listing.rank for listing in listings]:
        logger.info("Curated ranks %s renumbered to 1..%d", stored, len(listings))
    return listings


def why_choose_text(listing: Listing) -> Optional[str]:
    """Flatten a listing's why-choose paragraphs for storage."""
    if isinstance(listing.why_choose, list):
        return "\n\n".join(listing.why_choose) or None
    return listing.why_choose or None
