from __future__ import annotations

import logging
import math
from collections.abc import Callable, Iterable

from markermatch.refmarkers.analysis.match.types import IndexBuildError
from markermatch.refmarkers.analysis.parse.bib_records import BibRecord
from markermatch.refmarkers.analysis.shared.normalize import analyzer_tokens

logger = logging.getLogger(__name__)


class RecordIndex:
    """Inverted index from analyzer tokens of a record key to records.

    A record is a candidate for a query when its key contains at least
    ``ceil(must_match_ratio * n)`` of the ``n`` distinct query tokens. With the
    default ratio every query token must be present, in any order.
    """

    def __init__(self, key_fn: Callable[[BibRecord], str], *, must_match_ratio: float = 1.0) -> None:
        if not 0.0 < must_match_ratio <= 1.0:
            raise IndexBuildError(f"must_match_ratio must be in (0, 1], got {must_match_ratio!r}")
        self._key_fn = key_fn
        self._ratio = must_match_ratio
        self._records: list[BibRecord] = []
        self._postings: dict[str, list[int]] = {}
        self._loaded = False

    def load(self, records: Iterable[BibRecord]) -> "RecordIndex":
        if self._loaded:
            raise IndexBuildError("Record index is already loaded.")
        postings: dict[str, list[int]] = {}
        items = list(records)
        for pos, record in enumerate(items):
            try:
                key = self._key_fn(record)
            except Exception as e:
                raise IndexBuildError(f"Cannot build index key for record {pos}: {e}") from e
            for token in set(analyzer_tokens(key)):
                postings.setdefault(token, []).append(pos)
        self._records = items
        self._postings = postings
        self._loaded = True
        logger.debug("Indexed %d records under %d distinct tokens", len(items), len(postings))
        return self

    def match(self, query: str) -> list[BibRecord]:
        if not self._loaded:
            raise IndexBuildError("Record index queried before load().")
        tokens = list(dict.fromkeys(analyzer_tokens(query)))
        if not tokens:
            return []
        need = math.ceil(self._ratio * len(tokens))
        hits: dict[int, int] = {}
        for token in tokens:
            for pos in self._postings.get(token, ()):
                hits[pos] = hits.get(pos, 0) + 1
        return [self._records[pos] for pos in sorted(hits) if hits[pos] >= need]
