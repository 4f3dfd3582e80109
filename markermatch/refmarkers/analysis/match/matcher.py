from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from markermatch.refmarkers.analysis.match.authors import split_author_mentions
from markermatch.refmarkers.analysis.match.index import RecordIndex
from markermatch.refmarkers.analysis.match.numbered import MAX_RANGE, numbered_labels
from markermatch.refmarkers.analysis.match.style import classify_style
from markermatch.refmarkers.analysis.match.types import MatchResult
from markermatch.refmarkers.analysis.parse.bib_records import BibRecord, author_key, label_key
from markermatch.refmarkers.core.counters import CounterSink, Counters, NullCounters
from markermatch.refmarkers.layout.tokens import LayoutToken, TokenSpan, to_text_dehyphenized, tokenize_text

logger = logging.getLogger(__name__)


def post_filter(mention: str, candidates: Sequence[BibRecord]) -> list[BibRecord]:
    """Keep candidates whose bibliography text starts with the mention's first word.

    Used when an author-year mention hits several records: the lead author of the
    cited work is expected to open the raw reference string.
    """
    words = mention.split()
    if not words:
        return list(candidates)
    author = words[0].lower()
    return [c for c in candidates if c.raw.strip().lower().startswith(author)]


class ReferenceMarkerMatcher:
    """Resolve in-text reference markers to parsed bibliography records.

    Both indexes are built once here; ``match`` only reads them and may be called
    from several threads as long as the counter sink tolerates it.
    """

    def __init__(
        self,
        records: Iterable[BibRecord],
        counters: CounterSink | None = None,
        *,
        must_match_ratio: float = 1.0,
        max_range: int = MAX_RANGE,
    ) -> None:
        items = list(records)
        self._counters: CounterSink = counters if counters is not None else NullCounters()
        self._max_range = max_range
        self._author_index = RecordIndex(author_key, must_match_ratio=must_match_ratio).load(items)
        self._label_index = RecordIndex(label_key, must_match_ratio=must_match_ratio).load(items)

    def match_text(self, text: str) -> list[MatchResult]:
        return self.match(tokenize_text(text))

    def match(self, tokens: Sequence[LayoutToken]) -> list[MatchResult]:
        source = tuple(tokens)
        text = to_text_dehyphenized(source)
        style = classify_style(text)

        if style == "author":
            self._counters.increment(Counters.STYLE_AUTHORS)
            return self._match_authors(text, source)
        if style == "numbered":
            self._counters.increment(Counters.STYLE_NUMBERED)
            return self._match_numbered(text, source)

        self._counters.increment(Counters.STYLE_OTHER)
        self._counters.increment(Counters.UNMATCHED_REF_MARKERS)
        logger.debug("Other citation style: %r", text)
        return [MatchResult(text=text, span=TokenSpan(source, 0, len(source)), record=None)]

    def _matched(self, text: str, span: TokenSpan, record: BibRecord) -> MatchResult:
        self._counters.increment(Counters.MATCHED_REF_MARKERS)
        return MatchResult(text=text, span=span, record=record)

    def _unmatched(self, text: str, span: TokenSpan) -> MatchResult:
        self._counters.increment(Counters.UNMATCHED_REF_MARKERS)
        return MatchResult(text=text, span=span, record=None)

    def _match_numbered(self, marker: str, source: tuple[LayoutToken, ...]) -> list[MatchResult]:
        results: list[MatchResult] = []
        for label, span in numbered_labels(source, max_range=self._max_range):
            candidates = self._label_index.match(label)
            if len(candidates) == 1:
                results.append(self._matched(label, span, candidates[0]))
                continue
            if candidates:
                self._counters.increment(Counters.MANY_CANDIDATES)
                logger.info(
                    "Many candidates for label %r in %r: %s",
                    label,
                    marker,
                    [c.raw for c in candidates],
                )
            else:
                self._counters.increment(Counters.NO_CANDIDATES)
                logger.info("No candidates for label %r in %r", label, marker)
            results.append(self._unmatched(label, span))
        return results

    def _match_authors(self, marker: str, source: tuple[LayoutToken, ...]) -> list[MatchResult]:
        results: list[MatchResult] = []
        for span in split_author_mentions(source):
            mention = span.text_dehyphenized()
            candidates = self._author_index.match(mention)
            if len(candidates) == 1:
                results.append(self._matched(mention, span, candidates[0]))
                continue
            if not candidates:
                self._counters.increment(Counters.NO_CANDIDATES)
                logger.info("No candidates for %r in %r", mention, marker)
                results.append(self._unmatched(mention, span))
                continue

            self._counters.increment(Counters.MANY_CANDIDATES)
            filtered = post_filter(mention, candidates)
            if len(filtered) == 1:
                self._counters.increment(Counters.MATCHED_REF_MARKERS_AFTER_POST_FILTERING)
                results.append(self._matched(mention, span, filtered[0]))
                continue
            if filtered:
                self._counters.increment(Counters.MANY_CANDIDATES_AFTER_POST_FILTERING)
                logger.info(
                    "Many candidates for %r in %r after post-filtering: %s",
                    mention,
                    marker,
                    [c.raw for c in filtered],
                )
            else:
                self._counters.increment(Counters.NO_CANDIDATES_AFTER_POST_FILTERING)
                logger.info("Post-filtering dropped all %d candidates for %r", len(candidates), mention)
            results.append(self._unmatched(mention, span))
        return results
