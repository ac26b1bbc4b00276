from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import httpx
import redis

from uistate.buttons.reply import CreateReply
from uistate.errors import DecodeError, ReplyStateError
from uistate.fsm import ReplyState
from uistate.streams import ErrorReport, publish_error_report

if TYPE_CHECKING:
    from uistate.buttons.context import AnyContext, ButtonContext, ModalContext

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Sorry, something went wrong handling that. Please try again."


def _custom_id_of(ctx: AnyContext) -> str:
    data = ctx.interaction.data
    return (data.custom_id or "") if data is not None else ""


class Hooks:
    """Callbacks around dispatch.

    The default implementation logs failures and tells the user something went
    wrong without leaking details. Subclass to add reporting.
    """

    async def handle_error(self, ctx: AnyContext, err: Exception) -> None:
        if isinstance(err, DecodeError):
            # Stale or hand-edited custom ids are expected now and then.
            logger.warning("Dispatching event failed for custom id %r: %s", _custom_id_of(ctx), err)
        else:
            logger.error("Dispatching event failed: %s", err, exc_info=err)
        await self.notify_user(ctx)

    async def notify_user(self, ctx: AnyContext) -> None:
        if ctx.reply_state.state == ReplyState.modal_opened:
            return
        try:
            await ctx.reply(CreateReply(content=GENERIC_ERROR_MESSAGE, ephemeral=True))
        except (httpx.HTTPError, ReplyStateError):
            logger.exception("Failed to send error message for interaction %s", ctx.interaction.id)

    def on_button(self, ctx: ButtonContext, value: Any) -> None:
        logger.debug("Button %s on interaction %s", type(value).__name__, ctx.interaction.id)

    def on_modal(self, ctx: ModalContext, value: Any) -> None:
        logger.debug("Modal %s on interaction %s", type(value).__name__, ctx.interaction.id)


class RedisErrorHooks(Hooks):
    """Also appends every failure to a Redis stream for later inspection."""

    def __init__(self, *, r: redis.Redis, stream: str):
        self.r = r
        self.stream = stream

    async def handle_error(self, ctx: AnyContext, err: Exception) -> None:
        origin = ctx.interaction.origin
        report = ErrorReport.now(
            interaction_id=ctx.interaction.id,
            origin=origin.value if origin is not None else "",
            custom_id=_custom_id_of(ctx),
            error=err,
        )
        try:
            publish_error_report(r=self.r, stream=self.stream, report=report)
        except redis.RedisError:
            logger.exception("Failed to publish error report to %s", self.stream)
        await super().handle_error(ctx, err)
