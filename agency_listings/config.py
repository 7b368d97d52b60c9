# agency_listings/config.py
"""Environment-driven settings for the listings service.

Values come from the process environment (optionally a `.env` file) and are
cached for the lifetime of the process.
"""
import os
import logging
from dataclasses import dataclass, field
from functools import lru_cache
from dotenv import load_dotenv

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SponsorProfile:
    name: str = "tkxel"
    website_url: str = "https://www.tkxel.com"
    location: str = "Dallas, TX"
    min_project_size: str = "$25,000+"
    hourly_rate: str = "$25 - $49 / hr"
    employees_count: str = "700+"
    year_founded: str = "2008"
    reviews_count: int = 85
    clutch_url: str = "https://clutch.co/profile/tkxel"

    @property
    def brand_token(self) -> str:
        return self.name.strip().lower()


@dataclass(frozen=True)
class Settings:
    database_url: str
    mongodb_uri: str = "mongodb://localhost:27017"
    mongodb_db: str = "agency_directory"
    mongodb_collection: str = "agencies"
    mongodb_timeout_ms: int = 5000
    db_pool_size: int = 5
    db_max_overflow: int = 10
    page_size: int = 10
    log_level: str = "INFO"
    sponsor: SponsorProfile = field(default_factory=SponsorProfile)


def normalize_database_url(url: str) -> str:
    # SQLAlchemy 2.x doesn't accept 'postgres://'
    if url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql+psycopg2://", 1)
    return url


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings from environment variables with sensible defaults."""
    load_dotenv()

    database_url = normalize_database_url(os.getenv("POSTGRES_URL", ""))
    mongodb_uri = os.getenv("MONGODB_URI", "")
    if not database_url:
        logger.warning("POSTGRES_URL is not set; curated listings will be unavailable.")
    if not mongodb_uri:
        logger.warning("MONGODB_URI is not set; falling back to mongodb://localhost:27017.")
        mongodb_uri = "mongodb://localhost:27017"

    page_size = int(os.getenv("PAGE_SIZE", "10"))
    if page_size < 1:
        logger.warning("PAGE_SIZE=%d leaves no room for listings; using 1.", page_size)
        page_size = 1

    defaults = SponsorProfile()
    sponsor = SponsorProfile(
        name=os.getenv("SPONSOR_NAME", defaults.name),
        website_url=os.getenv("SPONSOR_WEBSITE", defaults.website_url),
        location=os.getenv("SPONSOR_LOCATION", defaults.location),
    )

    return Settings(
        database_url=database_url,
        mongodb_uri=mongodb_uri,
        mongodb_db=os.getenv("MONGODB_DB", "agency_directory"),
        mongodb_collection=os.getenv("MONGODB_COLLECTION", "agencies"),
        mongodb_timeout_ms=int(os.getenv("MONGODB_TIMEOUT_MS", "5000")),
        db_pool_size=int(os.getenv("DB_POOL_SIZE", "5")),
        db_max_overflow=int(os.getenv("DB_MAX_OVERFLOW", "10")),
        page_size=page_size,
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        sponsor=sponsor,
    )
