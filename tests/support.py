"""Sample button values and a recording platform transport shared by tests.

Value types live at module level so their type hints resolve.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

import httpx
from pydantic import BaseModel

from uistate.api.models import Interaction, InteractionType
from uistate.buttons import (
    AnyContext,
    ButtonContext,
    ButtonValue,
    CreateModal,
    CreateReply,
    EditReply,
    Hooks,
    ModalContext,
    TextInput,
    ToPage,
    button_value,
)
from uistate.codec.types import I32, U16, U32
from uistate.infra.discord_client import InteractionClient

APP_ID = "app-1"
TOKEN = "tok"


@button_value(4294967295)
@dataclass(frozen=True, slots=True)
class Scenario(ButtonValue):
    a: I32
    b: str
    c: I32

    async def reply(self, ctx: ButtonContext) -> None:
        await ctx.reply(CreateReply(content=f"{self.a} {self.b} {self.c}"))


@button_value(65535)
@dataclass(frozen=True, slots=True)
class LegacyScenario(ButtonValue):
    a: I32
    b: str
    c: I32

    async def reply(self, ctx: ButtonContext) -> None:
        raise NotImplementedError


@button_value(10)
@dataclass(frozen=True, slots=True)
class Counter(ButtonValue):
    count: U32 = 0

    async def reply(self, ctx: ButtonContext) -> None:
        await ctx.edit(EditReply(content=f"count={self.count + 1}"))


@button_value(11)
@dataclass(frozen=True, slots=True)
class PagedList(ButtonValue):
    page: U16 = 0

    async def reply(self, ctx: ButtonContext) -> None:
        await ctx.edit(EditReply(content=f"page {self.page}"))

    async def modal_reply(self, ctx: ModalContext) -> None:
        page = ToPage.get_page(ctx)
        await ctx.edit(EditReply(content=f"page {page}"))


@button_value(12)
@dataclass(frozen=True, slots=True)
class Failing(ButtonValue):
    reason: str

    async def reply(self, ctx: ButtonContext) -> None:
        raise RuntimeError(self.reason)


class RenameForm(BaseModel):
    name: str


@button_value(13)
@dataclass(frozen=True, slots=True)
class Profile(ButtonValue):
    name: str
    fail_after_modal: bool = False

    async def reply(self, ctx: ButtonContext) -> None:
        await ctx.modal(
            CreateModal(
                custom_id=self.to_custom_id(),
                title="Rename",
                inputs=[TextInput(custom_id="name", label="Name", value=self.name)],
            )
        )
        if self.fail_after_modal:
            raise RuntimeError("boom after modal")

    async def modal_reply(self, ctx: ModalContext) -> None:
        form = ctx.parse(RenameForm)
        await ctx.reply(CreateReply(content=f"renamed {self.name} to {form.name}"))


SAMPLE_ACTIONS = [Scenario.ACTION, Counter.ACTION, PagedList.ACTION, Failing.ACTION, Profile.ACTION]


@dataclass
class RecordedCall:
    method: str
    path: str
    body: dict[str, Any] | None


@dataclass
class PlatformRecorder:
    """Stands in for the chat platform's HTTP API and records every call."""

    calls: list[RecordedCall] = field(default_factory=list)
    status_code: int = 204

    def handler(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content) if request.content else None
        self.calls.append(RecordedCall(request.method, request.url.path, body))
        return httpx.Response(self.status_code)

    def client(self) -> InteractionClient:
        return InteractionClient(
            httpx.AsyncClient(base_url="https://discord.test/api/v10", transport=httpx.MockTransport(self.handler))
        )

    @property
    def callbacks(self) -> list[RecordedCall]:
        return [c for c in self.calls if c.path.endswith("/callback")]

    @property
    def followups(self) -> list[RecordedCall]:
        return [c for c in self.calls if c.method == "POST" and c.path.endswith(f"/webhooks/{APP_ID}/{TOKEN}")]

    @property
    def edits(self) -> list[RecordedCall]:
        return [c for c in self.calls if c.method == "PATCH"]


def make_interaction(
    custom_id: str | None,
    *,
    type: InteractionType = InteractionType.message_component,
    values: list[str] | None = None,
    fields: dict[str, str] | None = None,
    interaction_id: str = "1",
) -> Interaction:
    components = [
        {"type": 1, "components": [{"type": 4, "custom_id": k, "value": v}]} for k, v in (fields or {}).items()
    ]
    return Interaction(
        id=interaction_id,
        application_id=APP_ID,
        type=type,
        token=TOKEN,
        data={"custom_id": custom_id, "values": values or [], "components": components},
    )


def make_modal_submit(custom_id: str, fields: dict[str, str]) -> Interaction:
    return make_interaction(custom_id, type=InteractionType.modal_submit, fields=fields)


class RecordingHooks(Hooks):
    """Default hooks that also remember what they saw."""

    def __init__(self) -> None:
        self.errors: list[Exception] = []
        self.buttons: list[Any] = []
        self.modals: list[Any] = []

    async def handle_error(self, ctx: AnyContext, err: Exception) -> None:
        self.errors.append(err)
        await super().handle_error(ctx, err)

    def on_button(self, ctx: Any, value: Any) -> None:
        self.buttons.append(value)

    def on_modal(self, ctx: Any, value: Any) -> None:
        self.modals.append(value)
