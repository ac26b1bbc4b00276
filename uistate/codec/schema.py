"""Binary schemas compiled from Python type hints.

The wire format is not self-describing: both sides must agree on the type, so a
schema is derived once per type and cached. Layout rules:

- integers of at most 8 bits are one raw byte, wider ones are LEB128 (zig-zag for signed)
- structs (dataclasses, pydantic models) are a LEB128 field count followed by the fields
- fixed tuples carry no prefix; lists, variable tuples and dicts carry a LEB128 length
- enums and tagged unions are a LEB128 variant index followed by the variant payload
- `T | None` is a single 0/1 tag byte followed by the value when present
"""

from __future__ import annotations

import dataclasses
import enum
import struct
import types
import typing
from abc import ABC, abstractmethod
from collections import abc as cabc
from dataclasses import dataclass
from typing import Annotated, Any, Callable

from pydantic import BaseModel, ValidationError

from uistate.codec.errors import (
    InvalidBool,
    InvalidChar,
    InvalidOption,
    InvalidUtf8,
    IntegerOutOfRange,
    SchemaError,
    StructureMismatch,
    UnexpectedEof,
    ValueTypeMismatch,
    VersionMismatch,
)
from uistate.codec.io import Reader, Writer
from uistate.codec.leb128 import unzigzag, zigzag
from uistate.codec.types import DEFAULT_INT, CharFormat, FloatFormat, IntFormat, VersionTag
from uistate.errors import EncodeError

# Upper bound on the declared length of a sequence whose elements take no bytes.
MAX_ZERO_SIZED_LEN = 1 << 16


class Schema(ABC):
    # Fewest bytes any encoded value of this schema can take.
    min_size: int = 1

    @abstractmethod
    def encode(self, value: Any, w: Writer) -> None:
        raise NotImplementedError

    @abstractmethod
    def decode(self, r: Reader) -> Any:
        raise NotImplementedError

    def resolve(self, seen: set[int]) -> None:
        """Compile nested schemas eagerly so unsupported types fail early."""


def _check_int(value: Any, fmt: IntFormat) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueTypeMismatch(f"expected int for {fmt.name}, got {type(value).__name__}")
    if not fmt.min <= value <= fmt.max:
        raise IntegerOutOfRange(f"{value} does not fit in {fmt.name}")
    return int(value)


class UnitSchema(Schema):
    min_size = 0

    def encode(self, value: Any, w: Writer) -> None:
        if value is not None:
            raise ValueTypeMismatch(f"expected None, got {type(value).__name__}")

    def decode(self, r: Reader) -> None:
        return None


class BoolSchema(Schema):
    def encode(self, value: Any, w: Writer) -> None:
        if not isinstance(value, bool):
            raise ValueTypeMismatch(f"expected bool, got {type(value).__name__}")
        w.write_byte(1 if value else 0)

    def decode(self, r: Reader) -> bool:
        byte = r.read_byte()
        if byte == 0:
            return False
        if byte == 1:
            return True
        raise InvalidBool(byte)


@dataclass(frozen=True, slots=True)
class ByteIntSchema(Schema):
    fmt: IntFormat

    def encode(self, value: Any, w: Writer) -> None:
        w.write_byte(_check_int(value, self.fmt) & 0xFF)

    def decode(self, r: Reader) -> int:
        byte = r.read_byte()
        if self.fmt.signed and byte >= 0x80:
            return byte - 0x100
        return byte


@dataclass(frozen=True, slots=True)
class VarIntSchema(Schema):
    fmt: IntFormat

    def encode(self, value: Any, w: Writer) -> None:
        v = _check_int(value, self.fmt)
        if self.fmt.signed:
            v = zigzag(v, bits=self.fmt.bits)
        w.write_unsigned(v)

    def decode(self, r: Reader) -> int:
        v = r.read_unsigned(bits=self.fmt.bits)
        return unzigzag(v) if self.fmt.signed else v


@dataclass(frozen=True, slots=True)
class FloatSchema(Schema):
    fmt: FloatFormat

    @property
    def _code(self) -> str:
        return "<f" if self.fmt.bits == 32 else "<d"

    @property
    def min_size(self) -> int:  # type: ignore[override]
        return self.fmt.bits // 8

    def encode(self, value: Any, w: Writer) -> None:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueTypeMismatch(f"expected float, got {type(value).__name__}")
        try:
            w.write_bytes(struct.pack(self._code, value))
        except OverflowError as e:
            raise EncodeError(f"{value} does not fit in f{self.fmt.bits}") from e

    def decode(self, r: Reader) -> float:
        (v,) = struct.unpack(self._code, r.read_exact(self.fmt.bits // 8))
        return v


class CharSchema(Schema):
    def encode(self, value: Any, w: Writer) -> None:
        if not isinstance(value, str) or len(value) != 1:
            raise ValueTypeMismatch(f"expected a single character, got {value!r}")
        if 0xD800 <= ord(value) <= 0xDFFF:
            raise ValueTypeMismatch(f"lone surrogate U+{ord(value):04X} is not a valid char")
        w.write_unsigned(ord(value))

    def decode(self, r: Reader) -> str:
        code = r.read_unsigned(bits=32)
        if 0xD800 <= code <= 0xDFFF or code > 0x10FFFF:
            raise InvalidChar(code)
        return chr(code)


class StrSchema(Schema):
    def encode(self, value: Any, w: Writer) -> None:
        if not isinstance(value, str):
            raise ValueTypeMismatch(f"expected str, got {type(value).__name__}")
        try:
            data = value.encode("utf-8")
        except UnicodeEncodeError as e:
            raise ValueTypeMismatch(f"string is not valid unicode: {e}") from e
        w.write_unsigned(len(data))
        w.write_bytes(data)

    def decode(self, r: Reader) -> str:
        n = r.read_unsigned(bits=64)
        raw = r.read_exact(n)
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise InvalidUtf8(str(e)) from e


class BytesSchema(Schema):
    def encode(self, value: Any, w: Writer) -> None:
        if not isinstance(value, (bytes, bytearray, memoryview)):
            raise ValueTypeMismatch(f"expected bytes, got {type(value).__name__}")
        data = bytes(value)
        w.write_unsigned(len(data))
        w.write_bytes(data)

    def decode(self, r: Reader) -> bytes:
        return r.read_exact(r.read_unsigned(bits=64))


@dataclass(frozen=True, slots=True)
class VersionTagSchema(Schema):
    tag: VersionTag

    def encode(self, value: Any, w: Writer) -> None:
        if value != self.tag.version:
            raise ValueTypeMismatch(f"version tag must be {self.tag.version}, got {value!r}")
        w.write_unsigned(self.tag.version)

    def decode(self, r: Reader) -> int:
        got = r.read_unsigned(bits=64)
        if got != self.tag.version:
            raise VersionMismatch(got=got, expected=self.tag.version)
        return got


@dataclass(frozen=True, slots=True)
class OptionSchema(Schema):
    inner: Schema

    def encode(self, value: Any, w: Writer) -> None:
        if value is None:
            w.write_byte(0)
        else:
            w.write_byte(1)
            self.inner.encode(value, w)

    def decode(self, r: Reader) -> Any:
        tag = r.read_byte()
        if tag == 0:
            return None
        if tag == 1:
            return self.inner.decode(r)
        raise InvalidOption(tag)

    def resolve(self, seen: set[int]) -> None:
        self.inner.resolve(seen)


@dataclass(frozen=True, slots=True)
class TupleSchema(Schema):
    items: tuple[Schema, ...]

    @property
    def min_size(self) -> int:  # type: ignore[override]
        return sum(s.min_size for s in self.items)

    def encode(self, value: Any, w: Writer) -> None:
        if not isinstance(value, cabc.Sequence) or isinstance(value, (str, bytes)):
            raise ValueTypeMismatch(f"expected a tuple, got {type(value).__name__}")
        if len(value) != len(self.items):
            raise ValueTypeMismatch(f"expected {len(self.items)} items, got {len(value)}")
        for schema, item in zip(self.items, value):
            schema.encode(item, w)

    def decode(self, r: Reader) -> tuple[Any, ...]:
        return tuple(schema.decode(r) for schema in self.items)

    def resolve(self, seen: set[int]) -> None:
        for s in self.items:
            s.resolve(seen)


def _read_length(r: Reader, *, min_item_size: int) -> int:
    n = r.read_unsigned(bits=64)
    if min_item_size:
        if n > r.remaining // min_item_size:
            raise UnexpectedEof(f"declared length {n} exceeds remaining input")
    elif n > MAX_ZERO_SIZED_LEN:
        raise StructureMismatch(f"declared length {n} is too large")
    return n


@dataclass(frozen=True, slots=True)
class SeqSchema(Schema):
    item: Schema
    factory: Callable[[list[Any]], Any] = list

    def encode(self, value: Any, w: Writer) -> None:
        if not isinstance(value, cabc.Sequence) or isinstance(value, (str, bytes)):
            raise ValueTypeMismatch(f"expected a sequence, got {type(value).__name__}")
        w.write_unsigned(len(value))
        for item in value:
            self.item.encode(item, w)

    def decode(self, r: Reader) -> Any:
        n = _read_length(r, min_item_size=self.item.min_size)
        return self.factory([self.item.decode(r) for _ in range(n)])

    def resolve(self, seen: set[int]) -> None:
        self.item.resolve(seen)


@dataclass(frozen=True, slots=True)
class MapSchema(Schema):
    key: Schema
    value: Schema

    def encode(self, value: Any, w: Writer) -> None:
        if not isinstance(value, cabc.Mapping):
            raise ValueTypeMismatch(f"expected a mapping, got {type(value).__name__}")
        w.write_unsigned(len(value))
        for k, v in value.items():
            self.key.encode(k, w)
            self.value.encode(v, w)

    def decode(self, r: Reader) -> dict[Any, Any]:
        n = _read_length(r, min_item_size=self.key.min_size + self.value.min_size)
        out: dict[Any, Any] = {}
        for _ in range(n):
            k = self.key.decode(r)
            out[k] = self.value.decode(r)
        return out

    def resolve(self, seen: set[int]) -> None:
        self.key.resolve(seen)
        self.value.resolve(seen)


class EnumSchema(Schema):
    """`enum.Enum` members by definition index, never by value."""

    def __init__(self, cls: type[enum.Enum]):
        self.cls = cls
        self.members = list(cls)
        self._index = {m: i for i, m in enumerate(self.members)}

    def encode(self, value: Any, w: Writer) -> None:
        if not isinstance(value, self.cls):
            raise ValueTypeMismatch(f"expected {self.cls.__name__}, got {type(value).__name__}")
        w.write_unsigned(self._index[value])

    def decode(self, r: Reader) -> enum.Enum:
        i = r.read_unsigned(bits=32)
        if i >= len(self.members):
            raise StructureMismatch(f"unknown variant index {i} for {self.cls.__name__}")
        return self.members[i]


class VariantSchema(Schema):
    """Tagged union of struct types, indexed by position in the union."""

    def __init__(self, variants: tuple[type, ...]):
        self.variants = variants

    def _schema(self, i: int) -> Schema:
        return schema_for(self.variants[i])

    def encode(self, value: Any, w: Writer) -> None:
        for i, tp in enumerate(self.variants):
            if type(value) is tp:
                w.write_unsigned(i)
                self._schema(i).encode(value, w)
                return
        names = ", ".join(tp.__name__ for tp in self.variants)
        raise ValueTypeMismatch(f"{type(value).__name__} is not one of: {names}")

    def decode(self, r: Reader) -> Any:
        i = r.read_unsigned(bits=32)
        if i >= len(self.variants):
            raise StructureMismatch(f"unknown variant index {i}")
        return self._schema(i).decode(r)

    def resolve(self, seen: set[int]) -> None:
        for i in range(len(self.variants)):
            self._schema(i).resolve(seen)


@dataclass(frozen=True, slots=True)
class _Field:
    name: str
    schema: Schema
    has_default: bool


class StructSchema(Schema):
    """Field count followed by fields in declaration order.

    Fields are resolved lazily so self-referential types compile. A payload may
    carry fewer fields than the type declares as long as every missing field
    has a default, which is what lets new trailing fields be added safely.
    """

    def __init__(self, cls: type):
        self.cls = cls
        self._fields: tuple[_Field, ...] | None = None

    @property
    def fields(self) -> tuple[_Field, ...]:
        if self._fields is None:
            self._fields = tuple(_struct_fields(self.cls))
        return self._fields

    def encode(self, value: Any, w: Writer) -> None:
        if not isinstance(value, self.cls):
            raise ValueTypeMismatch(f"expected {self.cls.__name__}, got {type(value).__name__}")
        fields = self.fields
        w.write_unsigned(len(fields))
        for f in fields:
            f.schema.encode(getattr(value, f.name), w)

    def decode(self, r: Reader) -> Any:
        fields = self.fields
        n = r.read_unsigned(bits=64)
        if n > len(fields):
            raise StructureMismatch(f"{self.cls.__name__} has {len(fields)} fields, payload has {n}")

        kwargs = {f.name: f.schema.decode(r) for f in fields[:n]}
        for f in fields[n:]:
            if not f.has_default:
                raise StructureMismatch(f"{self.cls.__name__}.{f.name} is missing and has no default")

        if issubclass(self.cls, BaseModel):
            try:
                return self.cls.model_validate(kwargs)
            except ValidationError as e:
                raise StructureMismatch(f"{self.cls.__name__}: {e}") from e
        return self.cls(**kwargs)

    def resolve(self, seen: set[int]) -> None:
        if id(self) in seen:
            return
        seen.add(id(self))
        for f in self.fields:
            f.schema.resolve(seen)


def _struct_fields(cls: type) -> list[_Field]:
    out: list[_Field] = []
    if issubclass(cls, BaseModel):
        # pydantic strips the outer Annotated into `metadata`; put it back.
        for name, info in cls.model_fields.items():
            tp = Annotated[info.annotation, *info.metadata] if info.metadata else info.annotation
            out.append(_Field(name, schema_for(tp), not info.is_required()))
        return out

    try:
        hints = typing.get_type_hints(cls, include_extras=True)
    except NameError as e:
        raise SchemaError(f"cannot resolve annotations of {cls.__name__}: {e}") from e

    for f in dataclasses.fields(cls):
        if not f.init:
            continue
        has_default = f.default is not dataclasses.MISSING or f.default_factory is not dataclasses.MISSING
        out.append(_Field(f.name, schema_for(hints[f.name]), has_default))
    return out


def _is_struct(tp: Any) -> bool:
    if not isinstance(tp, type):
        return False
    return dataclasses.is_dataclass(tp) or issubclass(tp, BaseModel) or hasattr(tp, "__codec_schema__")


_CACHE: dict[Any, Schema] = {}


def _cache_key(tp: Any) -> Any:
    # `A | B == B | A`, but variant indices follow declaration order.
    args = typing.get_args(tp)
    if not args:
        return tp
    return (typing.get_origin(tp), tuple(_cache_key(a) for a in args))


def schema_for(tp: Any) -> Schema:
    try:
        key = _cache_key(tp)
        return _CACHE[key]
    except KeyError:
        pass
    except TypeError:
        # Unhashable annotation metadata; compile without caching.
        return _compile(tp)

    schema = _compile(tp)
    _CACHE[key] = schema
    return schema


def resolve_schema(tp: Any) -> Schema:
    """Compile `tp` and everything it references."""

    schema = schema_for(tp)
    schema.resolve(set())
    return schema


def _compile(tp: Any) -> Schema:
    origin = typing.get_origin(tp)
    args = typing.get_args(tp)

    if origin is Annotated:
        base, *meta = args
        for m in meta:
            if isinstance(m, IntFormat):
                return ByteIntSchema(m) if m.bits <= 8 else VarIntSchema(m)
            if isinstance(m, FloatFormat):
                return FloatSchema(m)
            if isinstance(m, CharFormat):
                return CharSchema()
            if isinstance(m, VersionTag):
                return VersionTagSchema(m)
        return schema_for(base)

    if tp is None or tp is type(None):
        return UnitSchema()
    if isinstance(tp, typing.NewType):
        return schema_for(tp.__supertype__)

    if tp is bool:
        return BoolSchema()
    if tp is int:
        return VarIntSchema(DEFAULT_INT)
    if tp is float:
        return FloatSchema(FloatFormat(64))
    if tp is str:
        return StrSchema()
    if tp in (bytes, bytearray):
        return BytesSchema()

    if origin in (typing.Union, types.UnionType):
        non_none = tuple(a for a in args if a is not type(None))
        if len(non_none) < len(args):
            inner = non_none[0] if len(non_none) == 1 else typing.Union[non_none]
            return OptionSchema(schema_for(inner))
        if all(_is_struct(a) for a in non_none):
            return VariantSchema(non_none)
        raise SchemaError(f"untagged union {tp!r}: only unions of struct types are supported")

    if origin is tuple:
        if len(args) == 2 and args[1] is Ellipsis:
            return SeqSchema(schema_for(args[0]), tuple)
        return TupleSchema(tuple(schema_for(a) for a in args))
    if origin in (list, cabc.Sequence, cabc.MutableSequence):
        if not args:
            raise SchemaError(f"{tp!r} needs an item type")
        return SeqSchema(schema_for(args[0]))
    if origin in (dict, cabc.Mapping, cabc.MutableMapping):
        if len(args) != 2:
            raise SchemaError(f"{tp!r} needs key and value types")
        return MapSchema(schema_for(args[0]), schema_for(args[1]))

    if origin is None and isinstance(tp, type):
        custom = getattr(tp, "__codec_schema__", None)
        if custom is not None:
            return custom()
        if issubclass(tp, enum.Enum):
            return EnumSchema(tp)
        if dataclasses.is_dataclass(tp) or issubclass(tp, BaseModel):
            return StructSchema(tp)

    raise SchemaError(f"{tp!r} has no binary encoding")
