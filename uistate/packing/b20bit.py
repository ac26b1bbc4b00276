"""Five bytes per two characters.

A chunk `b0..b4` becomes two 20-bit codes: the low 16 bits of each hold
`b0,b1` / `b3,b4` little-endian and the top 4 bits hold one nibble of `b2`.

The header records how the input length relates to the chunk size:

- `A`: multiple of 5, every pair of codes is a full chunk
- `B`: remainder 2 or 4, the final code(s) carry one byte less than they could
- `C`: remainder 1 or 3, the final code(s) carry two bytes less than they could

A 1 or 2 byte remainder is written as a single 16-bit code, a 3 or 4 byte
remainder as a zero-padded full chunk.
"""

from __future__ import annotations

from uistate.packing._framing import SUFFIX, char_to_code, code_to_char, split
from uistate.packing.errors import ContentFormat, LenMismatch

FULL = "A"
TRIM_ONE = "B"
TRIM_TWO = "C"

MAX_CODE = 0xFFFFF


def max_byte_len(char_count: int) -> int:
    return max(char_count - 2, 0) * 5 // 2


def _chunk_codes(chunk: bytes) -> tuple[int, int]:
    b0, b1, b2, b3, b4 = chunk
    return (
        b0 | b1 << 8 | (b2 & 0x0F) << 16,
        b3 | b4 << 8 | (b2 >> 4) << 16,
    )


def _codes_chunk(c0: int, c1: int) -> bytes:
    return bytes(
        (
            c0 & 0xFF,
            c0 >> 8 & 0xFF,
            (c0 >> 16) | (c1 >> 16) << 4,
            c1 & 0xFF,
            c1 >> 8 & 0xFF,
        )
    )


def _header(n: int) -> str:
    rem = n % 5
    if rem == 0:
        return FULL
    return TRIM_ONE if rem in (2, 4) else TRIM_TWO


def encode(data: bytes) -> str:
    rem = len(data) % 5
    full = len(data) - rem
    out = [_header(len(data))]

    for i in range(0, full, 5):
        out.extend(code_to_char(c) for c in _chunk_codes(data[i : i + 5]))

    tail = data[full:]
    if rem in (1, 2):
        out.append(code_to_char(int.from_bytes(tail, "little")))
    elif rem in (3, 4):
        out.extend(code_to_char(c) for c in _chunk_codes(tail.ljust(5, b"\x00")))

    out.append(SUFFIX)
    return "".join(out)


def decode(text: str) -> bytes:
    header, body = split(text, headers=FULL + TRIM_ONE + TRIM_TWO)

    codes: list[int] = []
    for ch in body:
        code = char_to_code(ch)
        if code is None or code > MAX_CODE:
            raise ContentFormat(f"U+{ord(ch):04X} is not a b20bit character")
        codes.append(code)

    if header == FULL:
        if len(codes) % 2:
            raise LenMismatch("full-chunk header with a trailing half chunk")
    elif not codes:
        raise LenMismatch("partial-chunk header with empty content")

    out = bytearray()
    for i in range(0, len(codes) - 1, 2):
        out += _codes_chunk(codes[i], codes[i + 1])

    if len(codes) % 2:
        last = codes[-1]
        if last >> 16:
            raise LenMismatch("half chunk has bits above 16")
        out += last.to_bytes(2, "little")

    if len(codes) % 2:
        drop = {TRIM_ONE: 0, TRIM_TWO: 1}[header]
    else:
        drop = {FULL: 0, TRIM_ONE: 1, TRIM_TWO: 2}[header]
    if drop:
        if any(out[-drop:]):
            raise LenMismatch("padding bytes are not zero")
        del out[-drop:]
    return bytes(out)
