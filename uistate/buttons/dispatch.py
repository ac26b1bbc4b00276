from __future__ import annotations

import logging

from uistate.api.models import Interaction, Origin
from uistate.buttons.context import AnyContext, ButtonContext, ModalContext
from uistate.buttons.encoding import decode_custom_id
from uistate.buttons.hooks import Hooks
from uistate.buttons.registry import Registry
from uistate.infra.discord_client import InteractionClient

logger = logging.getLogger(__name__)


class EventHandler:
    """Routes inbound custom ids to their registered handlers.

    Nothing raised while decoding or handling escapes `handle`: failures go to
    `hooks.handle_error` so one bad string can't take the process down.
    """

    def __init__(self, registry: Registry, *, client: InteractionClient, hooks: Hooks | None = None):
        self.registry = registry
        self.client = client
        self.hooks = hooks or Hooks()

    async def dispatch(self, interaction: Interaction) -> None:
        origin = interaction.origin
        if origin is None:
            raise ValueError(f"interaction type {interaction.type.name} carries no custom id")
        await self.handle(interaction, origin)

    async def dispatch_component(self, interaction: Interaction) -> None:
        await self.handle(interaction, Origin.component)

    async def dispatch_modal(self, interaction: Interaction) -> None:
        await self.handle(interaction, Origin.modal)

    async def handle(self, interaction: Interaction, origin: Origin) -> AnyContext:
        ctx: AnyContext
        if origin == Origin.component:
            ctx = ButtonContext(handler=self, interaction=interaction)
        else:
            ctx = ModalContext(handler=self, interaction=interaction)

        try:
            if isinstance(ctx, ButtonContext):
                await self.invoke_button_text(ctx, interaction.custom_id)
            else:
                await self.invoke_modal_text(ctx, interaction.custom_id)
        except Exception as err:
            await self.hooks.handle_error(ctx, err)
        return ctx

    async def invoke_button_text(self, ctx: ButtonContext, custom_id: str) -> None:
        decoder = decode_custom_id(custom_id)
        action = self.registry.lookup(decoder.read_key())
        logger.debug("Dispatching button %s", action.name)
        await action.invoke_button(ctx, decoder)

    async def invoke_modal_text(self, ctx: ModalContext, custom_id: str) -> None:
        decoder = decode_custom_id(custom_id)
        action = self.registry.lookup(decoder.read_key())
        logger.debug("Dispatching modal %s", action.name)
        await action.invoke_modal(ctx, decoder)
