from __future__ import annotations

from typing import TYPE_CHECKING, TypeVar

from pydantic import BaseModel

from uistate.api.models import Interaction
from uistate.buttons.modal import extract_fields, parse_fields
from uistate.buttons.reply import CreateModal, CreateReply, EditReply
from uistate.fsm import ReplyState, ReplyTracker
from uistate.infra.discord_client import EPHEMERAL_FLAG, CallbackType, InteractionClient

if TYPE_CHECKING:
    from uistate.buttons.dispatch import EventHandler

M = TypeVar("M", bound=BaseModel)


class AnyContext:
    """Per-interaction handle passed to button and form handlers.

    Owns the reply state, so whichever handler answers first sends the initial
    response and everything after it becomes an edit or a follow-up.
    """

    def __init__(self, *, handler: EventHandler, interaction: Interaction):
        self.handler = handler
        self.interaction = interaction
        self.reply_state = ReplyTracker()

    @property
    def client(self) -> InteractionClient:
        return self.handler.client

    async def acknowledge(self) -> None:
        """Acknowledge without a visible reply; later edits target the source message."""

        if self.reply_state.claim_defer():
            await self.client.create_response(
                self.interaction.id,
                self.interaction.token,
                {"type": CallbackType.deferred_update_message},
            )

    async def defer(self, *, ephemeral: bool = False) -> None:
        if self.reply_state.claim_defer():
            payload: dict = {"type": CallbackType.deferred_channel_message_with_source}
            if ephemeral:
                payload["data"] = {"flags": EPHEMERAL_FLAG}
            await self.client.create_response(self.interaction.id, self.interaction.token, payload)

    async def reply(self, reply: CreateReply) -> None:
        prev = self.reply_state.claim_send()
        if prev == ReplyState.unsent:
            await self.client.create_response(
                self.interaction.id,
                self.interaction.token,
                {"type": CallbackType.channel_message_with_source, "data": reply.to_payload()},
            )
        else:
            await self.client.create_followup(
                self.interaction.application_id, self.interaction.token, reply.to_payload()
            )

    async def edit(self, edit: EditReply) -> None:
        prev = self.reply_state.claim_send()
        if prev == ReplyState.unsent:
            await self.client.create_response(
                self.interaction.id,
                self.interaction.token,
                {"type": CallbackType.update_message, "data": edit.to_payload()},
            )
        else:
            await self.client.edit_original(
                self.interaction.application_id, self.interaction.token, edit.to_payload()
            )

    async def delete_response(self) -> None:
        await self.client.delete_original(self.interaction.application_id, self.interaction.token)


class ButtonContext(AnyContext):
    @property
    def selected_values(self) -> list[str]:
        data = self.interaction.data
        return list(data.values) if data is not None else []

    async def modal(self, modal: CreateModal) -> None:
        """Open a form. Only allowed as the initial response."""

        self.reply_state.claim_modal()
        await self.client.create_response(
            self.interaction.id,
            self.interaction.token,
            {"type": CallbackType.modal, "data": modal.to_payload()},
        )


class ModalContext(AnyContext):
    @property
    def fields(self) -> dict[str, str]:
        data = self.interaction.data
        return extract_fields(data.components) if data is not None else {}

    def field(self, custom_id: str) -> str:
        try:
            return self.fields[custom_id]
        except KeyError as e:
            raise ValueError(f"form has no field `{custom_id}`") from e

    def parse(self, model: type[M]) -> M:
        return parse_fields(self.fields, model)
