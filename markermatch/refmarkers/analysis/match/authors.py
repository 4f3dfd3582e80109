from __future__ import annotations

import re
from collections.abc import Sequence

from markermatch.refmarkers.analysis.match.style import YEAR_RE
from markermatch.refmarkers.analysis.shared.normalize import count_years
from markermatch.refmarkers.layout.tokens import LayoutToken, TokenSpan, split_spans, to_text, token_pos, trim_span

_AUTHOR_SEPARATOR_RE = re.compile(r";")
_AND_WORD_RE = re.compile(r"and")
_CHUNK_EDGE_RE = re.compile(r"[,;]")
_ENCLOSING = {"(": ")", "[": "]"}


def _year_chunks(source: tuple[LayoutToken, ...], start: int, end: int) -> list[tuple[int, int]]:
    # One chunk per year occurrence, each running up to and including its year token;
    # trailing text joins the last chunk. Further years inside the same token
    # ("19901991") get chunks that all point at that token.
    chunks: list[tuple[int, int]] = []
    chunk_start = start
    for i in range(start, end):
        years = len(YEAR_RE.findall(source[i].text))
        if years:
            chunks.append((chunk_start, i + 1))
            chunks.extend((i, i + 1) for _ in range(years - 1))
            chunk_start = i + 1
    if chunks and chunk_start < end:
        last_start, _ = chunks[-1]
        chunks[-1] = (last_start, end)

    out: list[tuple[int, int]] = []
    for s, e in chunks:
        s, e = trim_span(source, s, e, strip=_CHUNK_EDGE_RE)
        if e > s:
            out.append((s, e))
    return out


def _strip_enclosing(source: tuple[LayoutToken, ...]) -> tuple[int, int]:
    start, end = trim_span(source, 0, len(source))
    if end - start >= 2 and _ENCLOSING.get(source[start].text) == source[end - 1].text:
        return start + 1, end - 1
    return start, end


def split_author_mentions(tokens: Sequence[LayoutToken]) -> list[TokenSpan]:
    """Split an author-year marker into one span per cited work.

    Handles lists such as ``Kuwajima et al., 1985; Creighton, 1990`` as well as
    ``Khechinashvili et al. (1973) and Privalov (1979)``.
    """
    source = tuple(tokens)
    start, end = _strip_enclosing(source)
    out: list[TokenSpan] = []
    for g_start, g_end in split_spans(source, _AUTHOR_SEPARATOR_RE, start=start, end=end):
        years = count_years(to_text(source[g_start:g_end]))
        if years == 2 and token_pos(source, ("and",), start=g_start, end=g_end) >= 0:
            parts = split_spans(source, _AND_WORD_RE, start=g_start, end=g_end)
        elif years > 1:
            parts = _year_chunks(source, g_start, g_end)
        else:
            parts = [(g_start, g_end)]
        out.extend(TokenSpan(source, s, e) for s, e in parts)
    return out
