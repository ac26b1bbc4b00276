"""Actions every bot gets for free.

They take the top of the u16 key range so application keys can start at 0.
"""

from __future__ import annotations

import zlib
from dataclasses import dataclass

from pydantic import BaseModel, Field

from uistate.buttons.action import ButtonAction, ButtonValue, button_value
from uistate.buttons.context import ButtonContext, ModalContext
from uistate.buttons.encoding import decode_custom_id
from uistate.buttons.nav import Nav
from uistate.buttons.reply import CreateModal, TextInput
from uistate.codec.types import U8, U16
from uistate.errors import HandlerUnsupported

NOOP_KEY = 0xFFFF
DELETE_KEY = 0xFFFE
SELECT_NAV_KEY = 0xFFFD
TO_PAGE_KEY = 0xFFFC

PAGE_FIELD = "page"


@button_value(NOOP_KEY)
@dataclass(frozen=True, slots=True)
class Noop(ButtonValue):
    """Custom id for a disabled component.

    Components on one message need distinct custom ids, so `key` tells apart
    placeholders from different places and `value` from the same place.
    """

    key: U16
    value: U16 = 0

    @classmethod
    def for_path(cls, path: str, value: int = 0) -> "Noop":
        return cls(key=zlib.crc32(path.encode("utf-8")) & 0xFFFF, value=value)

    async def reply(self, ctx: ButtonContext) -> None:
        raise HandlerUnsupported("this button is not intended to be used")


@button_value(DELETE_KEY)
@dataclass(frozen=True, slots=True)
class Delete(ButtonValue):
    """Deletes the message the component is attached to."""

    async def reply(self, ctx: ButtonContext) -> None:
        await ctx.acknowledge()
        await ctx.delete_response()

    async def modal_reply(self, ctx: ModalContext) -> None:
        await ctx.acknowledge()
        await ctx.delete_response()


@button_value(SELECT_NAV_KEY)
@dataclass(frozen=True, slots=True)
class SelectNav(ButtonValue):
    """Select menu whose option values are themselves custom ids.

    `index` keeps several such menus on one message distinct.
    """

    index: U8 = 0

    async def reply(self, ctx: ButtonContext) -> None:
        values = ctx.selected_values
        if len(values) != 1:
            raise ValueError(f"expected exactly one selected value, got {len(values)}")

        decoder = decode_custom_id(values[0])
        key = decoder.read_key()
        if key == SELECT_NAV_KEY:
            raise ValueError("select menu option points at another select menu")
        action = ctx.handler.registry.lookup(key)
        await action.invoke_button(ctx, decoder)


class PageForm(BaseModel):
    page: int = Field(..., ge=1)


@button_value(TO_PAGE_KEY)
@dataclass(frozen=True, slots=True)
class ToPage(ButtonValue):
    """Opens a "go to page" form.

    The form's custom id is `target`'s own, so the submission is dispatched to
    the target type's `modal_reply`, which reads the page with `get_page`.
    """

    target: Nav

    @classmethod
    def for_value(cls, target: ButtonValue) -> "ToPage":
        return cls(target=Nav.from_value(target))

    async def reply(self, ctx: ButtonContext) -> None:
        modal = CreateModal(
            custom_id=self.target.to_custom_id(),
            title="Go to page",
            inputs=[
                TextInput(custom_id=PAGE_FIELD, label="Page", min_length=1, max_length=4, placeholder="1"),
            ],
        )
        await ctx.modal(modal)

    @staticmethod
    def get_page(ctx: ModalContext) -> int:
        """Zero-based page submitted through the form."""

        return ctx.parse(PageForm).page - 1


def builtin_actions() -> list[ButtonAction]:
    return [Noop.ACTION, Delete.ACTION, SelectNav.ACTION, ToPage.ACTION]
