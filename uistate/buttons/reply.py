from __future__ import annotations

from enum import IntEnum
from typing import Any

from pydantic import BaseModel, Field

from uistate.infra.discord_client import EPHEMERAL_FLAG


class CreateReply(BaseModel):
    content: str | None = None
    embeds: list[dict[str, Any]] = Field(default_factory=list)
    components: list[dict[str, Any]] = Field(default_factory=list)
    ephemeral: bool = False

    def to_payload(self) -> dict[str, Any]:
        data = self.model_dump(exclude={"ephemeral"}, exclude_none=True)
        if self.ephemeral:
            data["flags"] = EPHEMERAL_FLAG
        return data


class EditReply(BaseModel):
    """Partial message update; fields left as None are not touched."""

    content: str | None = None
    embeds: list[dict[str, Any]] | None = None
    components: list[dict[str, Any]] | None = None

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


class TextInputStyle(IntEnum):
    short = 1
    paragraph = 2


class TextInput(BaseModel):
    custom_id: str
    label: str
    style: TextInputStyle = TextInputStyle.short
    min_length: int | None = None
    max_length: int | None = None
    placeholder: str | None = None
    value: str | None = None
    required: bool = True

    def to_component(self) -> dict[str, Any]:
        data = self.model_dump(exclude_none=True)
        data["style"] = int(self.style)
        # Text inputs live in their own action row.
        return {"type": 1, "components": [{"type": 4, **data}]}


class CreateModal(BaseModel):
    custom_id: str
    title: str = Field(..., max_length=45)
    inputs: list[TextInput] = Field(..., min_length=1, max_length=5)

    def to_payload(self) -> dict[str, Any]:
        return {
            "custom_id": self.custom_id,
            "title": self.title,
            "components": [i.to_component() for i in self.inputs],
        }
