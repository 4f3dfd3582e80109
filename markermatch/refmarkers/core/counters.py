from __future__ import annotations

import enum
import threading
from collections import Counter
from typing import Protocol


class Counters(enum.Enum):
    MATCHED_REF_MARKERS = "MATCHED_REF_MARKERS"
    UNMATCHED_REF_MARKERS = "UNMATCHED_REF_MARKERS"
    NO_CANDIDATES = "NO_CANDIDATES"
    MANY_CANDIDATES = "MANY_CANDIDATES"
    STYLE_AUTHORS = "STYLE_AUTHORS"
    STYLE_NUMBERED = "STYLE_NUMBERED"
    STYLE_OTHER = "STYLE_OTHER"
    MATCHED_REF_MARKERS_AFTER_POST_FILTERING = "MATCHED_REF_MARKERS_AFTER_POST_FILTERING"
    MANY_CANDIDATES_AFTER_POST_FILTERING = "MANY_CANDIDATES_AFTER_POST_FILTERING"
    NO_CANDIDATES_AFTER_POST_FILTERING = "NO_CANDIDATES_AFTER_POST_FILTERING"


class CounterSink(Protocol):
    def increment(self, counter: Counters) -> None: ...


class CntManager:
    """In-memory counter sink; safe to share between matcher threads."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._counts: Counter[Counters] = Counter()

    def increment(self, counter: Counters) -> None:
        with self._lock:
            self._counts[counter] += 1

    def get(self, counter: Counters) -> int:
        with self._lock:
            return self._counts[counter]

    def snapshot(self) -> dict[str, int]:
        with self._lock:
            return {c.value: self._counts[c] for c in Counters}


class NullCounters:
    def increment(self, counter: Counters) -> None:
        return None
