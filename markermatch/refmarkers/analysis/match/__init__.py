from __future__ import annotations

from markermatch.refmarkers.analysis.match.index import RecordIndex
from markermatch.refmarkers.analysis.match.matcher import ReferenceMarkerMatcher, post_filter
from markermatch.refmarkers.analysis.match.style import classify_style
from markermatch.refmarkers.analysis.match.types import CitationStyle, IndexBuildError, MatchResult, RangeParseError

__all__ = [
    "CitationStyle",
    "IndexBuildError",
    "MatchResult",
    "RangeParseError",
    "RecordIndex",
    "ReferenceMarkerMatcher",
    "classify_style",
    "post_filter",
]
