# agency_listings/crud.py
"""CRUD operations for curated `PageListing` rows.

Writes never overwrite an occupied (service_slug, city_slug, rank) slot: the
session is rolled back and `RankConflict` is raised for the caller to report.
"""
from datetime import datetime, timezone
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from typing import Any, Dict, Iterable, List, Optional

from .assembler import why_choose_text
from .errors import RankConflict
from .models import PageListing
from .schemas import Listing
from .utils import logger


def _taken_ranks(db: Session, service_slug: str, city_slug: str, exclude_id: Optional[int] = None) -> set:
    stmt = select(PageListing.rank).where(
        PageListing.service_slug == service_slug,
        PageListing.city_slug == city_slug,
    )
    if exclude_id is not None:
        stmt = stmt.where(PageListing.id != exclude_id)
    return set(db.scalars(stmt))


def _commit(db: Session, service_slug: str, city_slug: str, rank: int):
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.warning("Rank %s already taken on %s/%s: %s", rank, service_slug, city_slug, e.orig)
        raise RankConflict(service_slug, city_slug, rank) from e


def create_listing(db: Session, data: Dict[str, Any]) -> PageListing:
    service_slug, city_slug, rank = data["service_slug"], data["city_slug"], data["rank"]
    if rank in _taken_ranks(db, service_slug, city_slug):
        raise RankConflict(service_slug, city_slug, rank)
    obj = PageListing(**data)
    db.add(obj)
    _commit(db, service_slug, city_slug, rank)
    db.refresh(obj)
    logger.info("Created curated listing %s at %s/%s #%s", obj.name, service_slug, city_slug, rank)
    return obj


def get_listing(db: Session, listing_id: int) -> Optional[PageListing]:
    return db.get(PageListing, listing_id)


def list_page_listings(db: Session, service_slug: str, city_slug: str, active_only: bool = False) -> List[PageListing]:
    stmt = select(PageListing).where(
        PageListing.service_slug == service_slug,
        PageListing.city_slug == city_slug,
    )
    if active_only:
        stmt = stmt.where(PageListing.is_active.is_(True))
    return list(db.scalars(stmt.order_by(PageListing.rank.asc())))


def update_listing(db: Session, listing_id: int, updates: Dict[str, Any]) -> Optional[PageListing]:
    obj = db.get(PageListing, listing_id)
    if not obj:
        return None
    if updates.get("rank") is None:
        updates.pop("rank", None)
    rank = updates.get("rank", obj.rank)
    if "rank" in updates and rank in _taken_ranks(db, obj.service_slug, obj.city_slug, exclude_id=obj.id):
        raise RankConflict(obj.service_slug, obj.city_slug, rank)
    for k, v in updates.items():
        setattr(obj, k, v)
    obj.updated_at = datetime.now(timezone.utc)
    _commit(db, obj.service_slug, obj.city_slug, rank)
    db.refresh(obj)
    return obj


def delete_listing(db: Session, listing_id: int) -> bool:
    obj = db.get(PageListing, listing_id)
    if not obj:
        return False
    db.delete(obj)
    db.commit()
    return True


def listing_to_row(listing: Listing, service_slug: str, city_slug: str) -> Dict[str, Any]:
    return {
        "service_slug": service_slug,
        "city_slug": city_slug,
        "rank": listing.rank,
        "name": listing.name,
        "tagline": listing.tagline,
        "clutch_rating": listing.rating,
        "website_url": listing.website_url or None,
        "services": list(listing.services),
        "description": listing.description or None,
        "why_choose": why_choose_text(listing),
        "min_project_size": listing.min_project_size,
        "hourly_rate": listing.hourly_rate,
        "employees_count": listing.employees_count,
        "year_founded": listing.year_founded,
        "reviews_count": listing.reviews_count,
        "clutch_url": listing.clutch_url or None,
        "location": listing.location,
        "is_active": True,
        "is_featured": listing.is_sponsor,
    }


def import_listings(db: Session, service_slug: str, city_slug: str, listings: Iterable[Listing]) -> List[PageListing]:
    """Persist resolved listings as curated rows, keeping their ranks. All or nothing."""
    rows = [PageListing(**listing_to_row(l, service_slug, city_slug)) for l in listings]
    taken = _taken_ranks(db, service_slug, city_slug)
    clash = sorted(r.rank for r in rows if r.rank in taken)
    if clash:
        raise RankConflict(service_slug, city_slug, clash[0])
    db.add_all(rows)
    _commit(db, service_slug, city_slug, rows[0].rank if rows else 0)
    for row in rows:
        db.refresh(row)
    logger.info("Imported %d listings into %s/%s", len(rows), service_slug, city_slug)
    return rows
