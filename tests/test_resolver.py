# tests/test_resolver.py
import pytest
from conftest import FakeCollection, agency
from sqlalchemy.exc import OperationalError

from agency_listings import crud
from agency_listings.config import SponsorProfile
from agency_listings.errors import BulkLookupFailed
from agency_listings.resolver import LookupStatus, SourceResolver
from agency_listings.selector import CandidateSelector

SERVICE_SLUG = "mobile-app-development"
SERVICE = "Mobile App Development"

BULK_DOCS = [agency(i, f"Bulk {i}", avg_rating=4.0 + i / 10) for i in range(1, 7)]


class BrokenSession:
    def __init__(self):
        self.rolled_back = False

    def scalars(self, stmt):
        raise OperationalError("SELECT", {}, Exception("connection refused"))

    def rollback(self):
        self.rolled_back = True


def make_resolver(session, docs=BULK_DOCS, fail=False):
    collection = FakeCollection(docs, fail=fail)
    selector = CandidateSelector(collection, sponsor_token="tkxel")
    return SourceResolver(session, selector, SponsorProfile()), collection


def curated_row(rank, name, **extra):
    data = {"service_slug": SERVICE_SLUG, "city_slug": "austin", "rank": rank, "name": name, "clutch_rating": 4.4}
    data.update(extra)
    return data


def test_curated_rows_take_precedence(db):
    crud.create_listing(db, curated_row(1, "Curated Co"))
    resolver, collection = make_resolver(db)

    resolved = resolver.resolve(SERVICE_SLUG, "austin", SERVICE, "Austin")

    assert resolved.source == "curated"
    assert [l.name for l in resolved.listings] == ["Curated Co"]
    assert resolved.listings[0].rating == 4.4
    assert collection.queries == []


def test_inactive_curated_rows_are_ignored(db):
    crud.create_listing(db, curated_row(1, "Hidden", is_active=False))
    resolver, _ = make_resolver(db)

    assert resolver.lookup_curated(SERVICE_SLUG, "austin").status is LookupStatus.NOT_FOUND
    assert resolver.resolve(SERVICE_SLUG, "austin", SERVICE, "Austin").source == "bulk"


def test_bulk_path_injects_sponsor(db):
    resolver, collection = make_resolver(db)

    resolved = resolver.resolve(SERVICE_SLUG, "austin", SERVICE, "Austin")

    assert resolved.source == "bulk"
    assert resolved.listings[0].name == "tkxel"
    assert resolved.listings[0].rating == 5.0
    assert [l.rank for l in resolved.listings] == list(range(1, len(resolved.listings) + 1))
    assert resolved.listings[1].name == "Bulk 6"
    assert len(collection.queries) == 1


def test_curated_store_error_falls_back_to_bulk():
    session = BrokenSession()
    resolver, _ = make_resolver(session)

    lookup = resolver.lookup_curated(SERVICE_SLUG, "austin")
    assert lookup.status is LookupStatus.TRANSIENT_ERROR
    assert lookup.error is not None
    assert session.rolled_back is True

    resolved = resolver.resolve(SERVICE_SLUG, "austin", SERVICE, "Austin")
    assert resolved.source == "bulk"
    assert resolved.listings[0].name == "tkxel"


def test_bulk_store_error_propagates(db):
    resolver, _ = make_resolver(db, fail=True)

    with pytest.raises(BulkLookupFailed):
        resolver.resolve(SERVICE_SLUG, "austin", SERVICE, "Austin")


def test_curated_only_preference(db):
    resolver, collection = make_resolver(db)

    resolved = resolver.resolve(SERVICE_SLUG, "austin", SERVICE, "Austin", source="curated")

    assert resolved.listings == [] and resolved.source == "curated"
    assert collection.queries == []


def test_bulk_preference_skips_curated(db):
    crud.create_listing(db, curated_row(1, "Curated Co"))
    resolver, _ = make_resolver(db)

    resolved = resolver.resolve(SERVICE_SLUG, "austin", SERVICE, "Austin", source="bulk")

    assert resolved.source == "bulk"
    assert "Curated Co" not in [l.name for l in resolved.listings]


def test_city_name_falls_back_to_slug(db):
    resolver, collection = make_resolver(db)

    resolver.resolve(SERVICE_SLUG, "round-rock", SERVICE)

    assert collection.queries[0]["locality"]["$regex"] == "Round\\ Rock"


def test_no_duplicate_names_in_bulk_page(db):
    docs = BULK_DOCS + [agency(99, " bulk 6", avg_rating=3.0), agency(100, "TKXEL")]
    resolver, _ = make_resolver(db, docs=docs)

    names = [l.name.strip().lower() for l in resolver.resolve(SERVICE_SLUG, "austin", SERVICE, "Austin").listings]

    assert len(names) == len(set(names))
