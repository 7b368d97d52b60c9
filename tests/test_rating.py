# tests/test_rating.py
import pytest
from agency_listings import rating

NAMES = ["abc", "abd", "abe", "Acme Inc", "Zeta Labs", "", "Ünïcode Studio", "x" * 200]


def test_synthesize_first_after_sponsor():
    # sum of codes for "abc" is 294, divisible by 3 -> no variance
    assert rating.synthesize("abc", 0) == 5.0
    assert rating.synthesize("abd", 0) == 4.9
    assert rating.synthesize("abe", 0) == 4.8


def test_synthesize_descends_by_position():
    assert rating.synthesize("abc", 3) == 4.7
    assert rating.synthesize("abd", 3) == 4.6


def test_synthesize_floors_at_minimum():
    assert rating.synthesize("abc", 50) == 4.0


@pytest.mark.parametrize("name", NAMES)
@pytest.mark.parametrize("index", [0, 1, 2, 5, 8, 12, 100])
def test_synthesize_bounds_and_precision(name, index):
    value = rating.synthesize(name, index)
    assert 4.0 <= value <= 5.0
    assert abs(value * 10 - round(value * 10)) < 1e-9


def test_synthesize_is_deterministic():
    assert [rating.synthesize(n, 2) for n in NAMES] == [rating.synthesize(n, 2) for n in NAMES]


def test_synthesize_missing_name():
    assert rating.synthesize(None, 0) == 5.0


def test_rewrite_rating_of():
    result = rating.rewrite_rating_mentions("Holds a rating of 4.8 on Clutch", 4.6)
    assert result == "Holds a rating of 4.6 on Clutch"


def test_rewrite_bare_rating_keeps_trailing_word():
    result = rating.rewrite_rating_mentions("A 4.9 rating and 5.0 stars", 4.6)
    assert result == "A 4.6 rating and 4.6 stars"


def test_rewrite_formats_whole_numbers_with_one_decimal():
    assert rating.rewrite_rating_mentions("Rating of 4.2 overall", 5.0) == "rating of 5.0 overall"


def test_rewrite_leaves_other_numbers():
    assert rating.rewrite_rating_mentions("Version 2.0 released", 4.1) == "Version 2.0 released"
    assert rating.rewrite_rating_mentions(None, 4.1) == ""


def test_rewrite_ignores_digits_inside_larger_numbers():
    text = "Rated 14.5 stars by 2,000 users"
    assert rating.rewrite_rating_mentions(text, 4.2) == text
    assert rating.rewrite_rating_mentions("Scored 4.5 stars", 4.2) == "Scored 4.2 stars"
