# agency_listings/text.py
"""Cleanup and reflow of free text pulled from the bulk agency import.

The CSV-to-document migration left descriptions with run-together words,
missing spaces after sentence punctuation and no paragraph breaks. `clean`
repairs a single field, `to_paragraphs` reflows it into short paragraphs and
bolds recognisable facts (prices, team sizes, ratings, places, founding years,
service names) with `**...**` for the renderer.

None of these functions raise: missing or non-string input is empty text.
"""
import re
from typing import Any, List, Tuple

from .utils import as_text

_LOWER_UPPER = re.compile(r"([a-z])([A-Z])")
_UPPER_RUN_WORD = re.compile(r"([A-Z])([A-Z][a-z])")
_PUNCT_LETTER = re.compile(r"([.!?])([A-Za-z])")
_WHITESPACE = re.compile(r"\s+")
_SENTENCE_BREAK = re.compile(r"(?<=[.!?])\s+")
_BOLD_SPAN = re.compile(r"\*\*.+?\*\*")

LONG_SENTENCE = 150
PARAGRAPH_LIMIT = 200

# Ordered by priority: on overlapping matches the earlier pattern wins.
HIGHLIGHT_PATTERNS = (
    # $25,000+ / $25 - $49 / hr / $10,000 to $49,999
    re.compile(r"\$[\d,]+(?:\+|\s*(?:to|-)\s*\$[\d,]+)?(?:\s*/\s*hr)?", re.I),
    # 50 - 249 employees / 10 to 49
    re.compile(
        r"\b\d+\s*(?:to|-)\s*\d+(?:\s*(?:skilled professionals|team members|employees|professionals))?\b",
        re.I,
    ),
    # 4.9 rating / 5.0 stars / 4.8 from 32 reviews
    re.compile(r"\b\d\.\d(?:\s*(?:rating|stars|from\s+\d+\s+reviews))?\b", re.I),
    re.compile(
        r"\b(?:San Francisco|New York|Los Angeles|Chicago|Austin|Seattle|Boston|Denver|Miami|"
        r"Dallas|Houston|Phoenix|Philadelphia|Atlanta|Washington D\.?C\.?"
        r"|(?-i:CA|NY|TX|FL|IL|WA))\b",
        re.I,
    ),
    re.compile(r"\b(?:since|founded in|established in)\s+\d{4}\b", re.I),
    re.compile(
        r"\b(?:Io\s*T Development|Custom Software Development|Mobile App Development|Web Development|"
        r"E-Commerce Development|UX/UI Design|Cloud Services|AI|Machine Learning|Blockchain|"
        r"Data Analytics|Cybersecurity)\b",
        re.I,
    ),
)


def clean(text: Any) -> str:
    """Fix run-together words and punctuation spacing; collapse whitespace."""
    text = as_text(text)
    if not text:
        return ""
    text = _LOWER_UPPER.sub(r"\1 \2", text)
    text = _UPPER_RUN_WORD.sub(r"\1 \2", text)
    text = _PUNCT_LETTER.sub(r"\1 \2", text)
    return _WHITESPACE.sub(" ", text).strip()


def split_sentences(text: str) -> List[str]:
    return [s for s in _SENTENCE_BREAK.split(text) if s.strip()]


def to_paragraphs(text: Any) -> List[str]:
    """Clean `text` and pack its sentences into short, highlighted paragraphs.

    A sentence longer than LONG_SENTENCE characters stands alone; otherwise
    sentences accumulate until the paragraph would pass PARAGRAPH_LIMIT.
    """
    cleaned = clean(text)
    if not cleaned:
        return []

    paragraphs = []
    current = ""
    for sentence in split_sentences(cleaned):
        if len(sentence) > LONG_SENTENCE:
            if current:
                paragraphs.append(current)
            paragraphs.append(sentence)
            current = ""
        elif len(current) + len(sentence) > PARAGRAPH_LIMIT:
            paragraphs.append(current)
            current = sentence
        else:
            current = f"{current} {sentence}" if current else sentence
    if current:
        paragraphs.append(current)

    return [highlight_keywords(p) for p in paragraphs]


def _overlaps(span: Tuple[int, int], taken: List[Tuple[int, int]]) -> bool:
    start, end = span
    return any(start < t_end and t_start < end for t_start, t_end in taken)


def highlight_keywords(text: Any) -> str:
    """Wrap HIGHLIGHT_PATTERNS matches in `**...**`.

    Text that is already bold is left untouched, so highlighting twice is a
    no-op.
    """
    text = as_text(text)
    if not text:
        return ""

    taken = [m.span() for m in _BOLD_SPAN.finditer(text)]
    chosen = []
    for pattern in HIGHLIGHT_PATTERNS:
        for m in pattern.finditer(text):
            span = (m.start(), m.end())
            if span[0] == span[1] or _overlaps(span, taken):
                continue
            taken.append(span)
            chosen.append(span)

    out = []
    pos = 0
    for start, end in sorted(chosen):
        out.append(text[pos:start])
        out.append(f"**{text[start:end]}**")
        pos = end
    out.append(text[pos:])
    return "".join(out)


def first_sentence(text: Any) -> str:
    """Leading clause of `text` up to the first period, cleaned."""
    return clean(as_text(text).split(".")[0])
