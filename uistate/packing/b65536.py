"""Two bytes per character.

The header is `&` for an even byte count and `%` when the last character holds
a single padded byte. Each character is one little-endian u16, shifted past the
surrogate range.
"""

from __future__ import annotations

from uistate.packing._framing import SUFFIX, char_to_code, code_to_char, split
from uistate.packing.errors import ContentFormat, LenMismatch

EVEN = "&"
ODD = "%"


def max_byte_len(char_count: int) -> int:
    return max(char_count - 2, 0) * 2


def encode(data: bytes) -> str:
    header = ODD if len(data) % 2 else EVEN
    padded = data + b"\x00" if len(data) % 2 else data
    body = "".join(code_to_char(int.from_bytes(padded[i : i + 2], "little")) for i in range(0, len(padded), 2))
    return header + body + SUFFIX


def decode(text: str) -> bytes:
    header, body = split(text, headers=EVEN + ODD)
    if header == ODD and not body:
        raise LenMismatch("odd header with empty content")

    out = bytearray()
    for ch in body:
        code = char_to_code(ch)
        if code is None or code > 0xFFFF:
            raise ContentFormat(f"U+{ord(ch):04X} is not a b65536 character")
        out += code.to_bytes(2, "little")

    if header == ODD:
        if out[-1]:
            raise LenMismatch("padding byte is not zero")
        del out[-1]
    return bytes(out)
