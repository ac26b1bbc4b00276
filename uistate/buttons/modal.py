from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from uistate.errors import ModalParseError

M = TypeVar("M", bound=BaseModel)


def _walk(components: Iterable[Mapping[str, Any]]) -> Iterator[Mapping[str, Any]]:
    for comp in components:
        yield comp
        yield from _walk(comp.get("components") or ())
        child = comp.get("component")
        if isinstance(child, Mapping):
            yield from _walk((child,))


def extract_fields(components: Iterable[Mapping[str, Any]]) -> dict[str, str]:
    """Flatten submitted form rows into `{custom_id: value}`."""

    out: dict[str, str] = {}
    for comp in _walk(components):
        custom_id = comp.get("custom_id")
        value = comp.get("value")
        if isinstance(custom_id, str) and isinstance(value, str):
            out[custom_id] = value
    return out


def parse_fields(fields: Mapping[str, str], model: type[M]) -> M:
    try:
        return model.model_validate(dict(fields))
    except ValidationError as e:
        raise ModalParseError(f"invalid form submission: {e.error_count()} error(s)") from e
