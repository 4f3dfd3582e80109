from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

# Layout-stage granularity: words/numbers, runs of horizontal whitespace, single punctuation marks.
_TOKEN_RE = re.compile(r"\r\n|\r|\n|[^\S\r\n]+|\w+|[^\w\s]")

HYPHENS = ("-", "–")


@dataclass(frozen=True)
class LayoutToken:
    text: str
    new_line_after: bool = False
    offset: int | None = None

    def is_blank(self) -> bool:
        return not self.text.strip()


@dataclass(frozen=True)
class TokenSpan:
    """Non-owning view over ``source[start:end]``.

    Several spans may point at the same source tokens; nothing is copied until
    ``tokens`` is read.
    """

    source: tuple[LayoutToken, ...]
    start: int
    end: int

    @property
    def tokens(self) -> list[LayoutToken]:
        return list(self.source[self.start : self.end])

    def __len__(self) -> int:
        return self.end - self.start

    def text(self) -> str:
        return to_text(self.source[self.start : self.end])

    def text_dehyphenized(self) -> str:
        return to_text_dehyphenized(self.source[self.start : self.end])


def tokenize_text(text: str) -> list[LayoutToken]:
    out: list[LayoutToken] = []
    for m in _TOKEN_RE.finditer(text or ""):
        piece = m.group(0)
        if piece in ("\r\n", "\r", "\n"):
            if out:
                prev = out[-1]
                out[-1] = LayoutToken(text=prev.text, new_line_after=True, offset=prev.offset)
            continue
        out.append(LayoutToken(text=piece, offset=m.start()))
    return out


def to_text(tokens: Iterable[LayoutToken]) -> str:
    return "".join(t.text for t in tokens)


def to_text_dehyphenized(tokens: Sequence[LayoutToken]) -> str:
    """Rebuild plain text, joining words hyphenated across a line break."""
    parts: list[str] = []
    joining = False
    n = len(tokens)
    for i, tok in enumerate(tokens):
        if joining and tok.is_blank():
            continue
        joining = False
        if (
            tok.new_line_after
            and tok.text in HYPHENS
            and 0 < i < n - 1
            and tokens[i - 1].text[-1:].isalpha()
        ):
            joining = True
            continue
        parts.append(tok.text)
        if tok.new_line_after and i < n - 1 and not tokens[i + 1].is_blank():
            parts.append(" ")
    return "".join(parts)


def trim_span(tokens: Sequence[LayoutToken], start: int, end: int, *, strip: re.Pattern[str] | None = None) -> tuple[int, int]:
    def droppable(tok: LayoutToken) -> bool:
        if tok.is_blank():
            return True
        return bool(strip is not None and strip.fullmatch(tok.text))

    while start < end and droppable(tokens[start]):
        start += 1
    while end > start and droppable(tokens[end - 1]):
        end -= 1
    return start, end


def split_spans(
    tokens: Sequence[LayoutToken],
    pattern: re.Pattern[str],
    *,
    start: int = 0,
    end: int | None = None,
) -> list[tuple[int, int]]:
    """Split ``tokens[start:end]`` on tokens whose text fully matches ``pattern``.

    Separator tokens are dropped, surrounding whitespace is trimmed and empty
    runs are skipped. Returned offsets index into ``tokens``.
    """
    if end is None:
        end = len(tokens)
    out: list[tuple[int, int]] = []
    run_start = start
    for i in range(start, end + 1):
        if i < end and not pattern.fullmatch(tokens[i].text):
            continue
        s, e = trim_span(tokens, run_start, i)
        if e > s:
            out.append((s, e))
        run_start = i + 1
    return out


def token_pos(tokens: Sequence[LayoutToken], texts: Iterable[str], *, start: int = 0, end: int | None = None) -> int:
    wanted = set(texts)
    if end is None:
        end = len(tokens)
    for i in range(start, end):
        if tokens[i].text in wanted:
            return i
    return -1
