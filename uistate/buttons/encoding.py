from __future__ import annotations

from typing import Any

from uistate import packing
from uistate.codec import Reader, from_reader


class Decoder:
    """Reads `key ++ value` back out of an unpacked custom id."""

    __slots__ = ("_reader",)

    def __init__(self, payload: bytes):
        self._reader = Reader(payload)

    def read_key(self) -> int:
        return self._reader.read_unsigned(bits=64)

    def into_value(self, tp: Any) -> Any:
        value = from_reader(self._reader, tp)
        self._reader.end()
        return value


def decode_custom_id(text: str) -> Decoder:
    return Decoder(packing.decode(text))
