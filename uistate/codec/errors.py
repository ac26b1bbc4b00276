from __future__ import annotations

from uistate.errors import DecodeError, EncodeError


class SchemaError(TypeError):
    """A type cannot be described by the binary codec."""


class IntegerOutOfRange(EncodeError):
    pass


class ValueTypeMismatch(EncodeError):
    pass


class UnexpectedEof(DecodeError):
    def __init__(self, msg: str = "unexpected end of input"):
        super().__init__(msg)


class IntegerOverflow(DecodeError):
    def __init__(self, msg: str = "integer overflow"):
        super().__init__(msg)


class StructureMismatch(DecodeError):
    """The bytes do not describe a value of the expected shape."""


class InvalidBool(StructureMismatch):
    def __init__(self, byte: int):
        super().__init__(f"invalid bool byte {byte:#04x}")


class InvalidOption(StructureMismatch):
    def __init__(self, byte: int):
        super().__init__(f"invalid option tag {byte:#04x}")


class InvalidUtf8(StructureMismatch):
    pass


class InvalidChar(StructureMismatch):
    def __init__(self, code: int):
        super().__init__(f"invalid char code point {code:#x}")


class TrailingBytes(StructureMismatch):
    def __init__(self, count: int):
        super().__init__(f"{count} trailing byte(s) after value")
        self.count = count


class VersionMismatch(StructureMismatch):
    def __init__(self, *, got: int, expected: int):
        super().__init__(f"version check failed; got: {got}, expected: {expected}")
        self.got = got
        self.expected = expected
