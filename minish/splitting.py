"""Quote-aware splitting helpers."""

from __future__ import annotations

from minish.lexer import NO_QUOTE, next_quote_state

_SPACE_IN_QUOTES = "' '"


def strip_quotes(text: str) -> str:
    """Remove the quote characters that open and close quoted runs in ``text``."""
    if text == "''":
        return ""
    if text.startswith(_SPACE_IN_QUOTES):
        text = " "
    kept = []
    quote = NO_QUOTE
    for char in text:
        state = next_quote_state(char, quote)
        if state != quote:
            quote = state
            continue
        kept.append(char)
    return "".join(kept)


def _first_not(text: str, sep: str) -> int | None:
    return next((i for i, char in enumerate(text) if char != sep), None)


def _find_separator(text: str, sep: str) -> int | None:
    """Find ``sep`` in ``text`` outside quoted runs."""
    if text.startswith(_SPACE_IN_QUOTES):
        return 3
    length = len(text)
    pos = 0
    while pos < length:
        char = text[pos]
        if char in ("'", '"'):
            pos += 1
            while pos < length and text[pos] != char:
                pos += 1
            if pos >= length:
                return None
            char = text[pos]
        if char == sep:
            return pos
        pos += 1
    return None


def split_out_quotes(text: str, sep: str) -> list[str]:
    """Split ``text`` on ``sep`` except inside quotes, then strip the quotes."""
    if len(sep) != 1:
        raise ValueError("separator must be a single character")
    pieces: list[str] = []
    start = 0
    offset = 0
    while True:
        skip = _first_not(text[start + offset:], sep)
        if skip is None:
            break
        start += offset + skip
        found = _find_separator(text[start:], sep)
        if found is None:
            pieces.append(strip_quotes(text[start:]))
            break
        pieces.append(strip_quotes(text[start:start + found]))
        offset = found
    return pieces


def _count_pieces(text: str, sep: str) -> int:
    words = 1
    separated = True
    pos = 0
    while pos < len(text):
        if not text.startswith(sep, pos):
            if not separated:
                separated = True
                words += 1
        else:
            pos += len(sep) - 1
            words += 1
            separated = False
        pos += 1
    return words


def split_keep_separator(text: str, sep: str) -> list[str]:
    """Split ``text`` on the string ``sep``, keeping separators between pieces."""
    if not sep:
        raise ValueError("separator must not be empty")
    length = len(text)
    width = len(sep)
    total = _count_pieces(text, sep)
    pieces: list[str] = []
    pos = -1
    if text.startswith(sep):
        pos += width
        pieces.append(sep)
    start = -1
    while True:
        pos += 1
        if pos > length:
            break
        matched = text.startswith(sep, pos)
        if not matched and start < 0:
            start = pos
        elif (matched or pos == length) and start >= 0:
            pieces.append(text[start:pos])
            pos += width - 1
            if len(pieces) != total - 1 and pos < length:
                pieces.append(sep)
            start = -1
    return pieces