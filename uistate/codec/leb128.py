"""LEB128 integers.

Unsigned values are written 7 bits at a time, low group first, with the high
bit of each byte set while more groups follow. Signed values are zig-zag mapped
first so small magnitudes stay short regardless of sign.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from uistate.codec.errors import IntegerOverflow

if TYPE_CHECKING:
    from uistate.codec.io import Reader


def encode_unsigned(value: int) -> bytes:
    if value < 0:
        raise ValueError(f"LEB128 unsigned value must be >= 0, got {value}")

    out = bytearray()
    while True:
        byte = value & 0x7F
        value >>= 7
        if value:
            out.append(byte | 0x80)
        else:
            out.append(byte)
            return bytes(out)


def zigzag(value: int, *, bits: int) -> int:
    # Valid for any value in the signed range of `bits`; result fits in `bits` unsigned.
    return (value << 1) ^ (value >> (bits - 1))


def unzigzag(value: int) -> int:
    return (value >> 1) ^ -(value & 1)


def read_unsigned(reader: Reader, *, bits: int) -> int:
    result = 0
    shift = 0
    while True:
        byte = reader.read_byte()
        if shift >= bits:
            raise IntegerOverflow(f"LEB128 value exceeds {bits} bits")

        group = byte & 0x7F
        if (group << shift) >> bits:
            raise IntegerOverflow(f"LEB128 value exceeds {bits} bits")

        result |= group << shift
        if not byte & 0x80:
            return result
        shift += 7


def read_signed(reader: Reader, *, bits: int) -> int:
    return unzigzag(read_unsigned(reader, bits=bits))
