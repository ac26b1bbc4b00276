"""Bijective packing of bytes into printable text.

Three density tiers share the same framing: one header character, the packed
characters, and a `&` trailer. The header alone identifies the tier, so
`decode` needs no hint.
"""

from __future__ import annotations

from enum import StrEnum

from uistate.packing import b20bit, b256, b65536
from uistate.packing.errors import ContentFormat, InvalidCustomId, LenMismatch, PrefixSuffix


class Scheme(StrEnum):
    b256 = "b256"
    b65536 = "b65536"
    b20bit = "b20bit"


_MODULES = {Scheme.b256: b256, Scheme.b65536: b65536, Scheme.b20bit: b20bit}


def scheme_of(text: str) -> Scheme:
    header = text[:1]
    if header == b256.PREFIX:
        return Scheme.b256
    if header in (b65536.EVEN, b65536.ODD):
        return Scheme.b65536
    if header in (b20bit.FULL, b20bit.TRIM_ONE, b20bit.TRIM_TWO):
        return Scheme.b20bit
    raise PrefixSuffix(f"unknown header {header!r}")


def encode(data: bytes, *, scheme: Scheme = Scheme.b20bit) -> str:
    return _MODULES[scheme].encode(data)


def decode(text: str) -> bytes:
    return _MODULES[scheme_of(text)].decode(text)


def max_byte_len(char_count: int, *, scheme: Scheme = Scheme.b20bit) -> int:
    return _MODULES[scheme].max_byte_len(char_count)


__all__ = [
    "ContentFormat",
    "InvalidCustomId",
    "LenMismatch",
    "PrefixSuffix",
    "Scheme",
    "decode",
    "encode",
    "max_byte_len",
    "scheme_of",
]
