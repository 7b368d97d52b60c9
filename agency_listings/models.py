# agency_listings/models.py
"""SQLAlchemy ORM models for the curated listings store.

`PageListing` rows pin an agency at a rank on a (service, city) page. The
unique constraint on (service_slug, city_slug, rank) is what turns a rank
collision into a `RankConflict` instead of a silent overwrite.
"""
from sqlalchemy import Boolean, Column, Integer, Numeric, Text, TIMESTAMP, JSON, func, true, false, Index, UniqueConstraint
from sqlalchemy.dialects.postgresql import JSONB
from .db import Base


class PageListing(Base):
    __tablename__ = "page_listings"
    __table_args__ = (
        UniqueConstraint("service_slug", "city_slug", "rank", name="uq_page_listings_page_rank"),
    )

    id = Column(Integer, primary_key=True, index=True)
    service_slug = Column(Text, nullable=False)
    city_slug = Column(Text, nullable=False)
    rank = Column(Integer, nullable=False)
    name = Column(Text, nullable=False)
    tagline = Column(Text)
    clutch_rating = Column(Numeric(2, 1))
    website_url = Column(Text)
    services = Column(JSON().with_variant(JSONB, "postgresql"))
    description = Column(Text)
    why_choose = Column(Text)
    min_project_size = Column(Text)
    hourly_rate = Column(Text)
    employees_count = Column(Text)
    year_founded = Column(Text)
    reviews_count = Column(Integer)
    clutch_url = Column(Text)
    location = Column(Text)
    is_active = Column(Boolean, nullable=False, default=True, server_default=true())
    is_featured = Column(Boolean, nullable=False, default=False, server_default=false())
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now())

Index("idx_page_listings_page", PageListing.service_slug, PageListing.city_slug, PageListing.is_active)
