# agency_listings/utils.py
"""Shared utilities: logging setup and lenient value coercion for raw records."""
import os
import math
import re
import logging
from typing import Any, Optional
from dotenv import load_dotenv

load_dotenv()

def get_logger(name=__name__):
    level = os.getenv("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        format="%(asctime)s | %(levelname)-7s | %(name)s | %(message)s",
        level=getattr(logging, level, logging.INFO)
    )
    return logging.getLogger(name)

logger = get_logger("agency-listings")


def set_log_level(level: str):
    logging.getLogger().setLevel(getattr(logging, level.upper(), logging.INFO))


_LEADING_INT = re.compile(r"\s*\+?(\d+)")


def as_text(value: Any) -> str:
    """Coerce a loosely-typed field to a stripped string ('' for missing)."""
    if value is None:
        return ""
    if isinstance(value, float) and value != value:
        return ""
    return str(value).strip()


def as_int(value: Any, default: int = 0) -> int:
    """parseInt-style coercion: leading digits of the value, else `default`."""
    if isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        return int(value) if math.isfinite(value) else default
    m = _LEADING_INT.match(as_text(value).replace(",", ""))
    return int(m.group(1)) if m else default


def as_float(value: Any) -> Optional[float]:
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if result != result:
        return None
    return result
