"""Compact, non-self-describing binary codec.

`serialize(value)` / `deserialize(data, tp)` map typed Python values to bytes
using a schema derived from type hints. Use the markers in `uistate.codec.types`
to pin integer widths.
"""

from __future__ import annotations

from typing import Any

from uistate.codec.io import Reader, Writer
from uistate.codec.schema import Schema, resolve_schema, schema_for
from uistate.codec.types import (
    F32,
    F64,
    I8,
    I16,
    I32,
    I64,
    I128,
    U8,
    U16,
    U32,
    U64,
    U128,
    Char,
    VersionTag,
)


def to_writer(w: Writer, value: Any, tp: Any = None) -> None:
    schema_for(type(value) if tp is None else tp).encode(value, w)


def from_reader(r: Reader, tp: Any) -> Any:
    return schema_for(tp).decode(r)


def serialize(value: Any, tp: Any = None) -> bytes:
    w = Writer()
    to_writer(w, value, tp)
    return w.getvalue()


def deserialize(data: bytes, tp: Any) -> Any:
    """Decode exactly one value of type `tp`; leftover bytes are an error."""

    r = Reader(data)
    value = from_reader(r, tp)
    r.end()
    return value


__all__ = [
    "F32",
    "F64",
    "I8",
    "I16",
    "I32",
    "I64",
    "I128",
    "U8",
    "U16",
    "U32",
    "U64",
    "U128",
    "Char",
    "Reader",
    "Schema",
    "VersionTag",
    "Writer",
    "deserialize",
    "from_reader",
    "resolve_schema",
    "schema_for",
    "serialize",
    "to_writer",
]
