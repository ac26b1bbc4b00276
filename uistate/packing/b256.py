"""One byte per character: `#` header, chars U+0000..U+00FF, `&` trailer."""

from __future__ import annotations

from uistate.packing._framing import SUFFIX, split
from uistate.packing.errors import ContentFormat

PREFIX = "#"


def max_byte_len(char_count: int) -> int:
    return max(char_count - 2, 0)


def encode(data: bytes) -> str:
    return PREFIX + "".join(chr(b) for b in data) + SUFFIX


def decode(text: str) -> bytes:
    _, body = split(text, headers=PREFIX)
    out = bytearray()
    for ch in body:
        cp = ord(ch)
        if cp > 0xFF:
            raise ContentFormat(f"U+{cp:04X} is not a b256 character")
        out.append(cp)
    return bytes(out)
