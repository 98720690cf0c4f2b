# ===-----------------------------------------------------------------------===#
# Distributed under the 3-Clause BSD License. See accompanying file LICENSE or
# copy at https://opensource.org/licenses/BSD-3-Clause.
# SPDX-License-Identifier: BSD-3-Clause
# ===-----------------------------------------------------------------------===#

"""Byte encoding: raw bytes to a C array initializer.

Layout and byte correctness are kept apart: :func:`wrap` only splits text
into fixed-width lines, while :func:`encode_bytes` decides which bytes go in
and what the reported size is.
"""

from __future__ import annotations

from dataclasses import dataclass
import re

__all__ = [
    "BYTES_PER_LINE",
    "EncodedLiteral",
    "wrap",
    "encode_bytes",
    "decode_tokens",
]

BYTES_PER_LINE = 16
_HEX_COLUMNS = BYTES_PER_LINE * 2
_INDENT = "  "
_TOKEN_RE = re.compile(r"0[xX]([0-9a-fA-F]{2})")


def wrap(text: str, column_width: int) -> list[str]:
    """Split ``text`` into consecutive chunks of at most ``column_width``.

    Concatenating the result gives back ``text``. Empty input yields no
    lines.
    """
    if column_width <= 0:
        raise ValueError(f"column_width must be positive, got {column_width}")
    return [
        text[offset : offset + column_width]
        for offset in range(0, len(text), column_width)
    ]


@dataclass(frozen=True, slots=True)
class EncodedLiteral:
    """Formatted ``0xHH`` tokens for one resource.

    :ivar lines: Rendered token lines, at most 16 tokens each, without the
        trailing separator.
    :ivar size: Number of original bytes (never counts the terminator).
    :ivar null_terminated: Whether a zero byte was appended.
    """

    lines: tuple[str, ...]
    size: int
    null_terminated: bool = False

    @property
    def element_count(self) -> int:
        return self.size + (1 if self.null_terminated else 0)

    @property
    def tokens(self) -> list[str]:
        return [t for line in self.lines for t in line.split(", ") if t]

    def render(self) -> str:
        """Render the brace-enclosed initializer."""
        if not self.lines:
            return "{ }"
        if len(self.lines) == 1:
            return "{ " + self.lines[0] + " }"
        body = (",\n" + _INDENT).join(self.lines)
        return "{\n" + _INDENT + body + "\n}"


def encode_bytes(data: bytes, null_terminate: bool = False) -> EncodedLiteral:
    hex_text = bytes(data).hex()
    if null_terminate:
        hex_text += "00"
    lines = tuple(
        ", ".join(
            "0x" + chunk[i : i + 2] for i in range(0, len(chunk), 2)
        )
        for chunk in wrap(hex_text, _HEX_COLUMNS)
    )
    return EncodedLiteral(
        lines=lines, size=len(data), null_terminated=null_terminate
    )


def decode_tokens(text: str) -> bytes:
    """Decode every ``0xHH`` token in ``text`` (either hex case)."""
    return bytes(int(m.group(1), 16) for m in _TOKEN_RE.finditer(text))
