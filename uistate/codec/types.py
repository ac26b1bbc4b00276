"""Annotation markers that pin a Python scalar to a wire format.

Python has one `int` and one `float`, so width and signedness are declared with
`typing.Annotated`:

    @dataclass(frozen=True, slots=True)
    class PageView:
        page: U16
        offset: I32 = 0
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated


@dataclass(frozen=True, slots=True)
class IntFormat:
    bits: int
    signed: bool

    @property
    def min(self) -> int:
        return -(1 << (self.bits - 1)) if self.signed else 0

    @property
    def max(self) -> int:
        return (1 << (self.bits - 1)) - 1 if self.signed else (1 << self.bits) - 1

    @property
    def name(self) -> str:
        return f"{'i' if self.signed else 'u'}{self.bits}"


@dataclass(frozen=True, slots=True)
class FloatFormat:
    bits: int


@dataclass(frozen=True, slots=True)
class CharFormat:
    pass


@dataclass(frozen=True, slots=True)
class VersionTag:
    """Constant version number stored in a struct field.

    Decoding fails unless the payload carries exactly `version`, which lets a
    type reject custom ids produced by an older, incompatible layout.
    """

    version: int


U8 = Annotated[int, IntFormat(8, False)]
U16 = Annotated[int, IntFormat(16, False)]
U32 = Annotated[int, IntFormat(32, False)]
U64 = Annotated[int, IntFormat(64, False)]
U128 = Annotated[int, IntFormat(128, False)]
I8 = Annotated[int, IntFormat(8, True)]
I16 = Annotated[int, IntFormat(16, True)]
I32 = Annotated[int, IntFormat(32, True)]
I64 = Annotated[int, IntFormat(64, True)]
I128 = Annotated[int, IntFormat(128, True)]

F32 = Annotated[float, FloatFormat(32)]
F64 = Annotated[float, FloatFormat(64)]

Char = Annotated[str, CharFormat()]

DEFAULT_INT = IntFormat(64, True)
