"""Low-level tokenising helpers for Wavefront OBJ and MTL text."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import IO, Iterator, Optional, Union

_SPACE = " \t"
_DELIMS = " \t\r"
_INDEX_DELIMS = "/ \t\r"
_C_WHITESPACE = " \t\n\v\f\r"
_DIGITS = "0123456789"
_POW_LUT = (1.0, 0.1, 0.01, 0.001, 0.0001, 0.00001, 0.000001, 0.0000001)
_LINE_BREAK = re.compile(r"\r\n|\r|\n")


@dataclass
class VertexIndex:
    """Zero-based vertex, texcoord and normal indices of one face corner."""

    v_idx: int = -1
    vt_idx: int = -1
    vn_idx: int = -1


class Tokens:
    """A cursor over one line of text."""

    def __init__(self, text: str, pos: int = 0) -> None:
        self.text = text
        self.pos = pos

    @property
    def rest(self) -> str:
        """The text from the cursor to the end of the line."""
        return self.text[self.pos:]

    def peek(self, offset: int = 0) -> str:
        """The character ``offset`` places ahead, or '' past the end."""
        index = self.pos + offset
        return self.text[index] if 0 <= index < len(self.text) else ""

    def advance(self, count: int = 1) -> None:
        """Move the cursor forward, never past the end."""
        self.pos = min(self.pos + count, len(self.text))

    def skip(self, chars: str) -> None:
        """Skip any run of the given characters."""
        while self.pos < len(self.text) and self.text[self.pos] in chars:
            self.pos += 1

    def skip_until(self, chars: str) -> None:
        """Skip up to the next occurrence of any of the given characters."""
        while self.pos < len(self.text) and self.text[self.pos] not in chars:
            self.pos += 1

    def match_keyword(self, keyword: str) -> bool:
        """Whether the text at the cursor is ``keyword`` followed by a space or tab."""
        return self.text.startswith(keyword, self.pos) and self.peek(len(keyword)) in (
            " ",
            "\t",
        ) and self.peek(len(keyword)) != ""

    def at_end(self) -> bool:
        """Whether the cursor sits on a line break or at the end of the text."""
        return self.peek() in ("", "\r", "\n")

    def skip_space(self) -> None:
        """Skip spaces and tabs."""
        self.skip(_SPACE)

    def string(self) -> str:
        """Read the next whitespace-delimited word."""
        self.skip_space()
        start = self.pos
        self.skip_until(_DELIMS)
        return self.text[start:self.pos]

    def int(self) -> int:
        """Read the next word as an integer, reading 0 if it is not one."""
        self.skip_space()
        value = atoi(self.rest)
        self.skip_until(_DELIMS)
        return value

    def real(self, default: float = 0.0) -> float:
        """Read the next word as a number, falling back to ``default``."""
        self.skip_space()
        start = self.pos
        self.skip_until(_DELIMS)
        value = try_parse_double(self.text[start:self.pos])
        return default if value is None else value


def try_parse_double(text: str) -> Optional[float]:
    """Parse a leading decimal number greedily; None if there is none.

    Accepts ``[sign] digits ["." digits] [("e"|"E") [sign] digits]``.
    """
    end = len(text)
    if end == 0:
        return None
    pos = 0
    sign = 1.0
    if text[0] in "+-":
        sign = -1.0 if text[0] == "-" else 1.0
        pos = 1
    elif text[0] not in _DIGITS:
        return None

    mantissa = 0.0
    read = 0
    while pos < end and text[pos] in _DIGITS:
        mantissa = mantissa * 10 + int(text[pos])
        pos += 1
        read += 1
    if read == 0:
        return None

    exponent = 0
    if pos < end:
        if text[pos] == ".":
            pos += 1
            read = 1
            while pos < end and text[pos] in _DIGITS:
                scale = _POW_LUT[read] if read < len(_POW_LUT) else 10.0 ** -read
                mantissa += int(text[pos]) * scale
                read += 1
                pos += 1
        if pos < end and text[pos] in "eE":
            pos += 1
            exp_sign = 1
            if pos < end and text[pos] in "+-":
                exp_sign = -1 if text[pos] == "-" else 1
                pos += 1
            elif pos >= end or text[pos] not in _DIGITS:
                return None
            read = 0
            while pos < end and text[pos] in _DIGITS:
                exponent = exponent * 10 + int(text[pos])
                pos += 1
                read += 1
            if read == 0:
                return None
            exponent *= exp_sign

    if not exponent:
        return sign * mantissa
    try:
        return sign * math.ldexp(mantissa * 5.0 ** exponent, exponent)
    except OverflowError:
        return sign * math.inf if mantissa else 0.0


def atoi(text: str) -> int:
    """Read a leading integer the way C's atoi does; 0 when there is none."""
    stripped = text.lstrip(_C_WHITESPACE)
    match = re.match(r"[+-]?\d+", stripped)
    return int(match.group(0)) if match else 0


def fix_index(idx: int, n: int) -> Optional[int]:
    """Turn a one-based or negative (relative) OBJ index into a zero-based one.

    Returns None for 0, which the format does not allow.
    """
    if idx > 0:
        return idx - 1
    if idx == 0:
        return None
    return n + idx


def read_lines(stream: IO) -> Iterator[str]:
    """Yield the lines of a stream, accepting LF, CR LF and CR line endings."""
    data: Union[str, bytes] = stream.read()
    if isinstance(data, bytes):
        data = data.decode("utf-8", errors="replace")
    if not data:
        return
    pieces = _LINE_BREAK.split(data)
    if pieces and pieces[-1] == "":
        pieces.pop()
    yield from pieces


def _fixed(token: Tokens, size: int) -> int:
    index = fix_index(atoi(token.rest), size)
    if index is None:
        raise ValueError("zero value for face index")
    return index


def parse_vertex_triple(
    token: Tokens, vsize: int, vnsize: int, vtsize: int
) -> VertexIndex:
    """Parse ``i``, ``i/j``, ``i//k`` or ``i/j/k`` into zero-based indices.

    Raises ValueError when an index is zero.
    """
    vi = VertexIndex(-1, -1, -1)
    vi.v_idx = _fixed(token, vsize)
    token.skip_until(_INDEX_DELIMS)
    if token.peek() != "/":
        return vi
    token.advance()

    if token.peek() == "/":
        token.advance()
        vi.vn_idx = _fixed(token, vnsize)
        token.skip_until(_INDEX_DELIMS)
        return vi

    vi.vt_idx = _fixed(token, vtsize)
    token.skip_until(_INDEX_DELIMS)
    if token.peek() != "/":
        return vi

    token.advance()
    vi.vn_idx = _fixed(token, vnsize)
    token.skip_until(_INDEX_DELIMS)
    return vi


def parse_raw_triple(token: Tokens) -> VertexIndex:
    """Parse a face corner keeping the indices exactly as written (0 if absent)."""
    vi = VertexIndex(0, 0, 0)
    vi.v_idx = atoi(token.rest)
    token.skip_until(_INDEX_DELIMS)
    if token.peek() != "/":
        return vi
    token.advance()

    if token.peek() == "/":
        token.advance()
        vi.vn_idx = atoi(token.rest)
        token.skip_until(_INDEX_DELIMS)
        return vi

    vi.vt_idx = atoi(token.rest)
    token.skip_until(_INDEX_DELIMS)
    if token.peek() != "/":
        return vi

    token.advance()
    vi.vn_idx = atoi(token.rest)
    token.skip_until(_INDEX_DELIMS)
    return vi