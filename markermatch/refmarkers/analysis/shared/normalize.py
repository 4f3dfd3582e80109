from __future__ import annotations

import re
import unicodedata


_WORD_RE = re.compile(r"[^\W_]+")
_YEAR_RE = re.compile(r"[12][0-9]{3}")

# Characters NFKD leaves alone but which readers treat as their ASCII base letter.
_FOLD = str.maketrans({"ı": "i", "ø": "o", "đ": "d", "ł": "l", "ß": "ss", "æ": "ae", "œ": "oe"})

# Classic English analyzer stop set. "et" and "al" are deliberately absent so that
# "Smith et al." still has to agree with the indexed "... et al" suffix.
_STOPWORDS = {
    "a",
    "an",
    "and",
    "are",
    "as",
    "at",
    "be",
    "but",
    "by",
    "for",
    "if",
    "in",
    "into",
    "is",
    "it",
    "no",
    "not",
    "of",
    "on",
    "or",
    "such",
    "that",
    "the",
    "their",
    "then",
    "there",
    "these",
    "they",
    "this",
    "to",
    "was",
    "will",
    "with",
}


def fold_text(value: str | None) -> str:
    if not value:
        return ""
    decomposed = unicodedata.normalize("NFKD", str(value))
    stripped = "".join(ch for ch in decomposed if unicodedata.category(ch) != "Mn")
    return stripped.lower().translate(_FOLD)


def analyzer_tokens(text: str | None) -> list[str]:
    """Lower-cased, diacritic-free word tokens with English stop words removed."""
    return [t for t in _WORD_RE.findall(fold_text(text)) if t not in _STOPWORDS]


def first_analyzer_token(text: str | None) -> str | None:
    tokens = analyzer_tokens(text)
    return tokens[0] if tokens else None


def count_years(text: str | None) -> int:
    return len(_YEAR_RE.findall(text or ""))
