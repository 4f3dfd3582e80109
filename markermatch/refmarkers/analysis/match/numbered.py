from __future__ import annotations

import logging
import re
from collections.abc import Sequence

from markermatch.refmarkers.analysis.match.types import RangeParseError
from markermatch.refmarkers.analysis.shared.normalize import first_analyzer_token
from markermatch.refmarkers.layout.tokens import HYPHENS, LayoutToken, TokenSpan, split_spans, to_text, token_pos, trim_span

logger = logging.getLogger(__name__)

MAX_RANGE = 20

_SEPARATOR_RE = re.compile(r"[,;]")
_BRACKET_RE = re.compile(r"[\[\]\(\)]")


def _parse_bound(tokens: Sequence[LayoutToken], start: int, end: int) -> int:
    text = to_text(tokens[start:end])
    token = first_analyzer_token(text)
    if token is None:
        raise RangeParseError(f"no number in {text!r}")
    try:
        return int(token, 10)
    except ValueError as e:
        raise RangeParseError(f"not an integer: {token!r}") from e


def _expand_range(
    source: tuple[LayoutToken, ...],
    start: int,
    op: int,
    end: int,
    *,
    max_range: int,
) -> list[tuple[str, TokenSpan]]:
    left_start, left_end = trim_span(source, start, op)
    right_start, right_end = trim_span(source, op + 1, end)
    a = _parse_bound(source, left_start, left_end)
    b = _parse_bound(source, right_start, right_end)

    if a >= b or b - a >= max_range:
        logger.debug("Not expanding numeric range %d-%d", a, b)
        return []

    out: list[tuple[str, TokenSpan]] = []
    for i in range(a, b + 1):
        if i == a:
            span = TokenSpan(source, left_start, left_end)
        elif i == b:
            span = TokenSpan(source, right_start, right_end)
        else:
            # Interior numbers have no text of their own; they all point at the range operator.
            span = TokenSpan(source, op, op + 1)
        out.append((str(i), span))
    return out


def numbered_labels(tokens: Sequence[LayoutToken], *, max_range: int = MAX_RANGE) -> list[tuple[str, TokenSpan]]:
    """Break a numbered marker such as ``[3, 5-7]`` into ``(label, span)`` pairs.

    Ranges are expanded one label per integer. Reversed ranges and ranges
    spanning ``max_range`` or more are dropped; unparseable ones are logged
    and dropped.
    """
    source = tuple(tokens)
    start, end = trim_span(source, 0, len(source), strip=_BRACKET_RE)

    labels: list[tuple[str, TokenSpan]] = []
    for seg_start, seg_end in split_spans(source, _SEPARATOR_RE, start=start, end=end):
        op = token_pos(source, HYPHENS, start=seg_start, end=seg_end)
        if op < 0:
            labels.append((to_text(source[seg_start:seg_end]), TokenSpan(source, seg_start, seg_end)))
            continue
        try:
            labels.extend(_expand_range(source, seg_start, op, seg_end, max_range=max_range))
        except RangeParseError as e:
            logger.warning("Cannot parse citation reference range %r: %s", to_text(source[seg_start:seg_end]), e)
    return labels
