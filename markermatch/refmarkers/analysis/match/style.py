from __future__ import annotations

import re

from markermatch.refmarkers.analysis.match.types import CitationStyle

YEAR_RE = re.compile(r"[12][0-9]{3}")
AUTHOR_NAME_RE = re.compile(r"[A-Z][A-Za-z]+")

_NUM_ITEM = r"\d+(?:\s*[-–]\s*\d+)?"
NUMBERED_CITATION_RE = re.compile(
    rf"\s*[\(\[]?\s*{_NUM_ITEM}(?:\s*[,;]\s*{_NUM_ITEM})*\s*[\)\]]?\s*"
)


def is_author_style(text: str) -> bool:
    return bool(YEAR_RE.search(text) and AUTHOR_NAME_RE.search(text))


def is_numbered_style(text: str) -> bool:
    return NUMBERED_CITATION_RE.fullmatch(text) is not None


def classify_style(text: str) -> CitationStyle:
    # Author style wins outright: "[Smith 1990]" never reaches the numbered test.
    if is_author_style(text):
        return "author"
    if is_numbered_style(text):
        return "numbered"
    return "other"
