from __future__ import annotations

import dataclasses
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, ClassVar, TypeVar

from uistate.config import DEFAULT_MAX_CUSTOM_ID_LEN
from uistate.errors import HandlerUnsupported

if TYPE_CHECKING:
    from uistate.buttons.context import ButtonContext, ModalContext
    from uistate.buttons.encoding import Decoder
    from uistate.buttons.nav import Nav

T = TypeVar("T", bound=type)

_MAX_KEY = (1 << 64) - 1


class ButtonValue(ABC):
    """State carried in a component's custom id.

    Subclasses are usually frozen dataclasses registered with `@button_value(key)`.
    `reply` runs when the component is used; `modal_reply` runs when a form
    opened from it is submitted and is only available to types that override it.
    """

    ACTION: ClassVar[ButtonAction]

    @abstractmethod
    async def reply(self, ctx: ButtonContext) -> None:
        raise NotImplementedError

    async def modal_reply(self, ctx: ModalContext) -> None:
        raise HandlerUnsupported("this button args type does not support modals")

    def to_nav(self) -> Nav:
        from uistate.buttons.nav import Nav

        return Nav.from_value(self)

    def to_custom_id(self, *, max_len: int | None = DEFAULT_MAX_CUSTOM_ID_LEN) -> str:
        return self.to_nav().to_custom_id(max_len=max_len)


@dataclass(frozen=True, slots=True)
class ButtonAction:
    key: int
    value_type: type[ButtonValue]

    @property
    def name(self) -> str:
        return self.value_type.__qualname__

    @property
    def supports_modal(self) -> bool:
        return self.value_type.modal_reply is not ButtonValue.modal_reply

    def alias(self, key: int) -> ButtonAction:
        """Same handlers under another key, e.g. to keep old custom ids working after a renumber."""

        return dataclasses.replace(self, key=key)

    async def invoke_button(self, ctx: ButtonContext, decoder: Decoder) -> None:
        value = decoder.into_value(self.value_type)
        ctx.handler.hooks.on_button(ctx, value)
        await value.reply(ctx)

    async def invoke_modal(self, ctx: ModalContext, decoder: Decoder) -> None:
        if not self.supports_modal:
            raise HandlerUnsupported(f"{self.name} does not support modals")
        value = decoder.into_value(self.value_type)
        ctx.handler.hooks.on_modal(ctx, value)
        await value.modal_reply(ctx)


def button_value(key: int) -> Callable[[T], T]:
    """Bind `key` to a `ButtonValue` subclass.

    Apply it above `@dataclass` so it sees the final class.
    """

    if not 0 <= key <= _MAX_KEY:
        raise ValueError(f"action key must fit in u64, got {key}")

    def wrap(cls: T) -> T:
        if not (isinstance(cls, type) and issubclass(cls, ButtonValue)):
            raise TypeError(f"{cls!r} must subclass ButtonValue")
        cls.ACTION = ButtonAction(key=key, value_type=cls)
        return cls

    return wrap


def action_of(cls: type[ButtonValue]) -> ButtonAction:
    # Read from the class itself so an undecorated subclass doesn't reuse its parent's key.
    action = cls.__dict__.get("ACTION")
    if action is None:
        raise TypeError(f"{cls.__qualname__} is not registered with @button_value")
    return action


__all__ = ["ButtonAction", "ButtonValue", "action_of", "button_value"]
