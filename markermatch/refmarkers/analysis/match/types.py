from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from markermatch.refmarkers.analysis.parse.bib_records import BibRecord
from markermatch.refmarkers.layout.tokens import LayoutToken, TokenSpan


CitationStyle = Literal["author", "numbered", "other"]


class IndexBuildError(RuntimeError):
    pass


class RangeParseError(ValueError):
    pass


@dataclass(frozen=True)
class MatchResult:
    text: str
    span: TokenSpan
    record: BibRecord | None

    @property
    def tokens(self) -> list[LayoutToken]:
        return self.span.tokens
