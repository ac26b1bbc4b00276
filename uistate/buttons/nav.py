from __future__ import annotations

from typing import TYPE_CHECKING, Any

from uistate import packing
from uistate.codec import Reader, Writer, to_writer
from uistate.codec.errors import ValueTypeMismatch
from uistate.codec.schema import Schema
from uistate.config import DEFAULT_MAX_CUSTOM_ID_LEN
from uistate.errors import CustomIdTooLong

if TYPE_CHECKING:
    from uistate.buttons.action import ButtonValue


class Nav:
    """Immutable encoded `key ++ value` payload for a button value.

    This is the only way to turn a value into a custom id. A `Nav` can also be
    stored inside another button value, which is how "open a form, then come
    back to this view" flows carry their destination.
    """

    __slots__ = ("_payload",)

    def __init__(self, payload: bytes):
        self._payload = bytes(payload)

    @classmethod
    def from_value(cls, value: ButtonValue) -> Nav:
        from uistate.buttons.action import action_of

        action = action_of(type(value))
        w = Writer()
        w.write_unsigned(action.key)
        to_writer(w, value, action.value_type)
        return cls(w.getvalue())

    @classmethod
    def from_custom_id(cls, text: str) -> Nav:
        return cls(packing.decode(text))

    @property
    def payload(self) -> bytes:
        return self._payload

    def to_custom_id(self, *, max_len: int | None = DEFAULT_MAX_CUSTOM_ID_LEN) -> str:
        text = packing.encode(self._payload)
        if max_len is not None and len(text) > max_len:
            raise CustomIdTooLong(length=len(text), max_len=max_len)
        return text

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Nav):
            return NotImplemented
        return self._payload == other._payload

    def __hash__(self) -> int:
        return hash(self._payload)

    def __repr__(self) -> str:
        return f"Nav({self._payload.hex()})"

    @classmethod
    def __codec_schema__(cls) -> Schema:
        return _NavSchema()


class _NavSchema(Schema):
    def encode(self, value: Any, w: Writer) -> None:
        if not isinstance(value, Nav):
            raise ValueTypeMismatch(f"expected Nav, got {type(value).__name__}")
        w.write_unsigned(len(value.payload))
        w.write_bytes(value.payload)

    def decode(self, r: Reader) -> Nav:
        return Nav(r.read_exact(r.read_unsigned(bits=64)))


def encode_custom_id(value: ButtonValue, *, max_len: int | None = DEFAULT_MAX_CUSTOM_ID_LEN) -> str:
    return Nav.from_value(value).to_custom_id(max_len=max_len)
