from __future__ import annotations

from uistate.codec import leb128
from uistate.codec.errors import TrailingBytes, UnexpectedEof


class Writer:
    """Append-only byte sink shared by every schema while encoding."""

    __slots__ = ("_buf",)

    def __init__(self) -> None:
        self._buf = bytearray()

    def write_byte(self, value: int) -> None:
        self._buf.append(value)

    def write_bytes(self, data: bytes) -> None:
        self._buf += data

    def write_unsigned(self, value: int) -> None:
        self._buf += leb128.encode_unsigned(value)

    def __len__(self) -> int:
        return len(self._buf)

    def getvalue(self) -> bytes:
        return bytes(self._buf)


class Reader:
    """Cursor over an immutable byte payload."""

    __slots__ = ("_data", "_pos")

    def __init__(self, data: bytes) -> None:
        self._data = bytes(data)
        self._pos = 0

    @property
    def remaining(self) -> int:
        return len(self._data) - self._pos

    def read_byte(self) -> int:
        if self._pos >= len(self._data):
            raise UnexpectedEof()
        byte = self._data[self._pos]
        self._pos += 1
        return byte

    def read_exact(self, n: int) -> bytes:
        if n > self.remaining:
            raise UnexpectedEof(f"needed {n} bytes, {self.remaining} left")
        chunk = self._data[self._pos : self._pos + n]
        self._pos += n
        return chunk

    def read_unsigned(self, *, bits: int) -> int:
        return leb128.read_unsigned(self, bits=bits)

    def read_rest(self) -> bytes:
        return self.read_exact(self.remaining)

    def end(self) -> None:
        if self.remaining:
            raise TrailingBytes(self.remaining)
