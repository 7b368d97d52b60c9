# tests/conftest.py
import re

import pytest
from pymongo.errors import ServerSelectionTimeoutError

from agency_listings.config import Settings, get_settings
from agency_listings.db import Base, create_db_engine, create_session_factory
import agency_listings.models  # noqa: F401 register tables on Base.metadata


class FakeCursor:
    def __init__(self, docs):
        self.docs = list(docs)

    def sort(self, keys):
        for key, direction in reversed(keys):
            self.docs.sort(key=lambda d: (d.get(key) is not None, d.get(key) or 0), reverse=direction < 0)
        return self

    def limit(self, n):
        self.docs = self.docs[:n]
        return self

    def __iter__(self):
        return iter(self.docs)


def _regex_match(cond, value):
    if value is None:
        return False
    flags = re.I if "i" in cond.get("$options", "") else 0
    values = value if isinstance(value, list) else [value]
    return any(re.search(cond["$regex"], str(v), flags) for v in values)


def _matches(doc, query):
    for key, cond in query.items():
        if key == "$or":
            if not any(_matches(doc, sub) for sub in cond):
                return False
        elif isinstance(cond, dict) and "$regex" in cond:
            if not _regex_match(cond, doc.get(key)):
                return False
        elif isinstance(cond, dict) and "$nin" in cond:
            if doc.get(key) in cond["$nin"]:
                return False
        elif doc.get(key) != cond:
            return False
    return True


class FakeCollection:
    """Enough of a pymongo collection for find(query).sort(keys).limit(n)."""

    def __init__(self, docs=(), fail=False):
        self.docs = [dict(d) for d in docs]
        self.fail = fail
        self.queries = []

    def find(self, query):
        self.queries.append(query)
        if self.fail:
            raise ServerSelectionTimeoutError("mongo down")
        return FakeCursor(d for d in self.docs if _matches(d, query))


def agency(_id, name, locality="Austin, TX", services="Mobile App Development", **extra):
    doc = {
        "_id": _id,
        "table_name": "agencies",
        "name": name,
        "locality": locality,
        "services": services,
    }
    doc.update(extra)
    return doc


@pytest.fixture
def settings():
    return Settings(database_url="sqlite://")


@pytest.fixture
def engine(settings):
    engine = create_db_engine(settings)
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    session = create_session_factory(engine)()
    yield session
    session.close()


@pytest.fixture(autouse=True)
def clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
