from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Annotated, NewType

import pytest

from uistate.codec import I32, U8, U16, U32, U64, VersionTag, deserialize, serialize
from uistate.codec.errors import StructureMismatch, VersionMismatch


@dataclass(frozen=True, slots=True)
class ProfileV1:
    user: U64
    page: U16


@dataclass(frozen=True, slots=True)
class ProfileV2:
    user: U64
    page: U16
    compact: bool = False
    filters: list[str] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class ProfileV2Required:
    user: U64
    page: U16
    compact: bool


class ModeV1(enum.Enum):
    list = 1
    grid = 2


class ModeV2(enum.Enum):
    list = 1
    grid = 2
    cards = 3


Page = NewType("Page", int)


@dataclass(frozen=True, slots=True)
class Versioned:
    version: Annotated[int, VersionTag(2)] = 2
    page: U16 = 0


@dataclass(frozen=True, slots=True)
class VersionedOld:
    version: Annotated[int, VersionTag(1)] = 1
    page: U16 = 0


def test_trailing_defaulted_fields_are_filled_in() -> None:
    old = serialize(ProfileV1(user=123456789, page=3))
    assert deserialize(old, ProfileV2) == ProfileV2(user=123456789, page=3, compact=False, filters=[])


def test_new_field_without_default_is_rejected() -> None:
    old = serialize(ProfileV1(user=1, page=1))
    with pytest.raises(StructureMismatch):
        deserialize(old, ProfileV2Required)


def test_more_fields_than_declared_is_rejected() -> None:
    new = serialize(ProfileV2(user=1, page=1, compact=True))
    with pytest.raises(StructureMismatch):
        deserialize(new, ProfileV1)


def test_inlining_a_tuple_keeps_the_bytes() -> None:
    nested = serialize((1, (2, 3)), tuple[U8, tuple[U8, U8]])
    flat = serialize((1, 2, 3), tuple[U8, U8, U8])
    assert nested == flat
    assert deserialize(nested, tuple[U8, U8, U8]) == (1, 2, 3)


def test_widening_an_integer_keeps_the_bytes() -> None:
    assert deserialize(serialize(300, U16), U32) == 300
    assert deserialize(serialize(-300, I32), int) == -300


def test_signedness_change_is_not_compatible() -> None:
    assert deserialize(serialize(-1, I32), U32) != -1


def test_appending_enum_variants_keeps_old_indices() -> None:
    assert deserialize(serialize(ModeV1.grid), ModeV2) is ModeV2.grid


def test_newtype_is_transparent() -> None:
    assert serialize(Page(5), Page) == serialize(5, int)
    assert deserialize(serialize(5, int), Page) == 5


def test_version_tag_round_trip() -> None:
    v = Versioned(page=7)
    assert deserialize(serialize(v), Versioned) == v


def test_version_tag_rejects_other_versions() -> None:
    old = serialize(VersionedOld(page=7))
    with pytest.raises(VersionMismatch) as e:
        deserialize(old, Versioned)

    assert "version check failed; got: 1, expected: 2" in str(e.value)
