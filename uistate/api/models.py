from __future__ import annotations

from enum import IntEnum, StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class InteractionType(IntEnum):
    ping = 1
    application_command = 2
    message_component = 3
    autocomplete = 4
    modal_submit = 5


class Origin(StrEnum):
    """Where an encoded custom id came back from."""

    component = "component"
    modal = "modal"


class InteractionData(BaseModel):
    model_config = ConfigDict(extra="allow")

    custom_id: str | None = None
    component_type: int | None = None
    # Chosen option values of a select menu.
    values: list[str] = Field(default_factory=list)
    # Submitted form rows (modal submits only).
    components: list[dict[str, Any]] = Field(default_factory=list)


class Interaction(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    application_id: str
    type: InteractionType
    token: str
    data: InteractionData | None = None
    guild_id: str | None = None
    channel_id: str | None = None
    message: dict[str, Any] | None = None

    @property
    def origin(self) -> Origin | None:
        if self.type == InteractionType.message_component:
            return Origin.component
        if self.type == InteractionType.modal_submit:
            return Origin.modal
        return None

    @property
    def custom_id(self) -> str:
        if self.data is None or self.data.custom_id is None:
            raise ValueError("interaction has no custom_id")
        return self.data.custom_id


class InteractionAccepted(BaseModel):
    status: str = "accepted"
    origin: Origin


class DecodeCustomIdRequest(BaseModel):
    custom_id: str = Field(..., min_length=2)


class DecodeCustomIdResponse(BaseModel):
    scheme: str
    key: int
    payload_hex: str
    registered: bool
    action: str | None = None
    # Character count against the configured custom id limit.
    length: int
    within_limit: bool
