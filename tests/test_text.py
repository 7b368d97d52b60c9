# tests/test_text.py
import pytest
from agency_listings import text

SAMPLES = [
    "",
    "helloWorld",
    "DEVELOPMENTLocated in Austin.Our team",
    "We build apps.They ship!Fast?Yes",
    "  spaced   out \n\t text  ",
    "ABcDEf aBCd",
    "Café Ünïcode.Ñandú",
    "iPhone and iPad apps",
]


def test_clean_inserts_space_between_lower_and_upper():
    assert text.clean("helloWorld") == "hello World"


def test_clean_splits_upper_run_from_capitalized_word():
    assert text.clean("DEVELOPMENTLocated in Austin.Our team") == "DEVELOPMENT Located in Austin. Our team"


def test_clean_spaces_after_sentence_punctuation():
    assert text.clean("Great work!Thanks.Really?Yes") == "Great work! Thanks. Really? Yes"


def test_clean_collapses_whitespace():
    assert text.clean("  a   b \n c ") == "a b c"


@pytest.mark.parametrize("value", [None, "", "   ", 0.0 * float("nan")])
def test_clean_tolerates_missing_text(value):
    assert text.clean(value) == ""


def test_clean_coerces_non_strings():
    assert text.clean(2015) == "2015"


@pytest.mark.parametrize("sample", SAMPLES)
def test_clean_is_idempotent(sample):
    once = text.clean(sample)
    assert text.clean(once) == once


def test_to_paragraphs_empty():
    assert text.to_paragraphs("") == []
    assert text.to_paragraphs(None) == []


def test_to_paragraphs_combines_short_sentences():
    assert text.to_paragraphs("We build apps.We ship fast.") == ["We build apps. We ship fast."]


def test_to_paragraphs_long_sentence_stands_alone():
    long_sentence = "This one runs " + "x" * 150 + "."
    result = text.to_paragraphs(f"Short one. {long_sentence} Tail here.")
    assert result == ["Short one.", long_sentence, "Tail here."]


def test_to_paragraphs_flushes_before_limit():
    sentence = "b" * 89 + "."
    result = text.to_paragraphs(" ".join([sentence] * 3))
    assert result == [f"{sentence} {sentence}", sentence]


def test_to_paragraphs_highlights_each_paragraph():
    result = text.to_paragraphs("Based in Austin.Founded in 2015.")
    assert result == ["Based in **Austin**. **Founded in 2015**."]


def test_highlight_currency_range():
    assert text.highlight_keywords("Rates from $25 - $49 / hr") == "Rates from **$25 - $49 / hr**"
    assert text.highlight_keywords("Projects $25,000+ only") == "Projects **$25,000+** only"


def test_highlight_employee_range_and_rating():
    assert text.highlight_keywords("Team of 50 - 249 employees") == "Team of **50 - 249 employees**"
    assert text.highlight_keywords("A 4.9 rating") == "A **4.9 rating**"


def test_highlight_places_and_states():
    assert text.highlight_keywords("Dallas, TX") == "**Dallas**, **TX**"
    assert text.highlight_keywords("the tx team") == "the tx team"


def test_highlight_earlier_pattern_wins_overlap():
    # the currency match "$10" claims the span the employee range would take
    assert text.highlight_keywords("$10 - 49") == "**$10** - 49"


def test_highlight_leaves_bold_text_alone():
    once = text.highlight_keywords("Cloud Services in Seattle since 2010, 4.8 stars")
    assert once == "**Cloud Services** in **Seattle** **since 2010**, **4.8 stars**"
    assert text.highlight_keywords(once) == once


def test_first_sentence():
    assert text.first_sentence("Acme builds apps.More text") == "Acme builds apps"
    assert text.first_sentence(None) == ""
