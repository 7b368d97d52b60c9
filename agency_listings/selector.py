# agency_listings/selector.py
"""Candidate selection from the bulk agency store.

A page for (service, city) first looks for agencies whose locality mentions
the city. When that local pass finds fewer than WIDENING_THRESHOLD agencies,
a nationwide pass tops it up so thin city/service combinations never render
a near-empty page. Relevance drops for those pages; that is accepted.

The only identity a bulk record has is its case-insensitive trimmed name, so
de-duplication happens on that key, first occurrence winning.
"""
import re
from typing import Any, Dict, Iterable, List, Optional, Sequence

from pymongo import DESCENDING
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from .errors import BulkLookupFailed
from .schemas import RawAgencyRecord
from .utils import as_text, logger

PLATFORM_SYNONYMS: Dict[str, str] = {
    "iphone": "mobile",
    "android": "mobile",
    "ios": "mobile",
    "ipad": "mobile",
    "flutter": "mobile",
    "react": "mobile",
    "kotlin": "mobile",
    "swift": "mobile",
    "angular": "web",
    "vue": "web",
    "node": "web",
    "php": "web",
    "laravel": "web",
    "aws": "cloud",
    "azure": "cloud",
    "google": "cloud",
}

LOCAL_LIMIT = 20
NATIONWIDE_LIMIT = 10
WIDENING_THRESHOLD = 5
MAX_CANDIDATES = 9  # page of 10 minus the sponsor slot

LOCAL_SORT = [("avg_rating", DESCENDING)]
NATIONWIDE_SORT = [("avg_rating", DESCENDING), ("reviews", DESCENDING)]


def primary_term(service_name: str) -> str:
    """First word longer than two characters, lower-cased."""
    words = [w for w in as_text(service_name).lower().split() if len(w) > 2]
    if words:
        return words[0]
    return as_text(service_name).lower()


def broad_term(primary: str) -> str:
    return PLATFORM_SYNONYMS.get(primary, primary)


def name_key(name: Any) -> str:
    return as_text(name).lower()


def _contains(value: str) -> Dict[str, str]:
    return {"$regex": re.escape(value), "$options": "i"}


def _text_match(terms: Iterable[str], fields=("services", "description")) -> List[Dict[str, Any]]:
    unique_terms = []
    for term in terms:
        if term and term not in unique_terms:
            unique_terms.append(term)
    return [{field: _contains(term)} for term in unique_terms for field in fields]


def build_local_query(service_name: str, city_name: str, table_name: Optional[str] = "agencies") -> Dict[str, Any]:
    query: Dict[str, Any] = {
        "locality": _contains(city_name),
        "$or": _text_match([primary_term(service_name), service_name]),
    }
    if table_name:
        query["table_name"] = table_name
    return query


def build_nationwide_query(
    service_name: str,
    exclude_ids: Sequence[Any] = (),
    table_name: Optional[str] = "agencies",
) -> Dict[str, Any]:
    primary = primary_term(service_name)
    query: Dict[str, Any] = {
        "$or": _text_match([primary, broad_term(primary), service_name]),
    }
    if exclude_ids:
        query["_id"] = {"$nin": list(exclude_ids)}
    if table_name:
        query["table_name"] = table_name
    return query


def to_record(doc: Dict[str, Any]) -> RawAgencyRecord:
    data = dict(doc)
    data["name"] = as_text(doc.get("name")) or None
    return RawAgencyRecord.model_validate(data)


def dedupe_by_name(records: Iterable[RawAgencyRecord]) -> List[RawAgencyRecord]:
    """Drop nameless records and repeats of an earlier (case/space-insensitive) name."""
    seen = set()
    unique = []
    for record in records:
        key = name_key(record.name)
        if not key or key in seen:
            continue
        seen.add(key)
        unique.append(record)
    return unique


class CandidateSelector:
    def __init__(
        self,
        collection: Collection,
        sponsor_token: str,
        table_name: Optional[str] = "agencies",
        max_candidates: int = MAX_CANDIDATES,
    ):
        self.collection = collection
        self.sponsor_token = sponsor_token.strip().lower()
        self.table_name = table_name
        self.max_candidates = max(0, max_candidates)

    def _find(self, query: Dict[str, Any], sort, limit: int) -> List[Dict[str, Any]]:
        try:
            return list(self.collection.find(query).sort(sort).limit(limit))
        except PyMongoError as e:
            logger.error("Bulk agency lookup failed: %s", e)
            raise BulkLookupFailed(str(e)) from e

    def select(self, service_name: str, city_name: str, exclude_names: Iterable[str] = ()) -> List[RawAgencyRecord]:
        docs = self._find(
            build_local_query(service_name, city_name, self.table_name), LOCAL_SORT, LOCAL_LIMIT
        )
        local_count = len(docs)
        if local_count < WIDENING_THRESHOLD:
            seen_ids = [d["_id"] for d in docs if d.get("_id") is not None]
            docs += self._find(
                build_nationwide_query(service_name, seen_ids, self.table_name),
                NATIONWIDE_SORT,
                NATIONWIDE_LIMIT,
            )
        logger.info(
            "Bulk candidates for %r in %r: %d local, %d nationwide",
            service_name, city_name, local_count, len(docs) - local_count,
        )

        excluded = {name_key(n) for n in exclude_names}
        candidates = [
            r for r in dedupe_by_name(to_record(d) for d in docs)
            if name_key(r.name) not in excluded
            and not (self.sponsor_token and self.sponsor_token in name_key(r.name))
        ]
        return candidates[: self.max_candidates]
