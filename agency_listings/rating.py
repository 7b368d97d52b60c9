# agency_listings/rating.py
"""Deterministic ratings for bulk-imported agencies.

Bulk records carry no trustworthy rating, so one is derived from the agency
name and its position on the page: a gently descending curve by rank with a
small per-name jitter so neighbours rarely tie. The scraped prose often quotes
a stale number ("rating of 4.8", "4.9 stars"); `rewrite_rating_mentions`
brings it in line with the displayed value.

Curated and sponsor listings keep their own rating and are never passed
through this module.
"""
import math
import re
from typing import Any

from .utils import as_text

MAX_RATING = 5.0
MIN_RATING = 4.0
RANK_STEP = 0.1
VARIANCE_STEP = 0.1
VARIANCE_BUCKETS = 3

_RATING_OF = re.compile(r"rating of \d+\.\d+", re.I)
_BARE_RATING = re.compile(r"\b\d\.\d(\s+(?:rating|stars))", re.I)


def name_hash(name: Any) -> int:
    return sum(ord(ch) for ch in as_text(name))


def synthesize(name: Any, position_index: int) -> float:
    """Rating in [MIN_RATING, MAX_RATING] for the record at `position_index`.

    `position_index` counts from 0 for the first listing after the sponsor.
    """
    variance = (name_hash(name) % VARIANCE_BUCKETS) * VARIANCE_STEP
    base = max(MIN_RATING, MAX_RATING - position_index * RANK_STEP - variance)
    rating = math.floor(base * 10 + 0.5) / 10
    return min(MAX_RATING, max(MIN_RATING, rating))


def format_rating(rating: float) -> str:
    return f"{rating:.1f}"


def rewrite_rating_mentions(text: Any, rating: float) -> str:
    text = as_text(text)
    if not text:
        return ""
    shown = format_rating(rating)
    text = _RATING_OF.sub(f"rating of {shown}", text)
    return _BARE_RATING.sub(lambda m: f"{shown}{m.group(1)}", text)
