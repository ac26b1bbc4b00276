"""Encodable button values, their registry, and dispatch of returning custom ids."""

from __future__ import annotations

from uistate.buttons.action import ButtonAction, ButtonValue, action_of, button_value
from uistate.buttons.builtins import Delete, Noop, SelectNav, ToPage, builtin_actions
from uistate.buttons.context import AnyContext, ButtonContext, ModalContext
from uistate.buttons.dispatch import EventHandler
from uistate.buttons.encoding import Decoder, decode_custom_id
from uistate.buttons.hooks import Hooks, RedisErrorHooks
from uistate.buttons.nav import Nav, encode_custom_id
from uistate.buttons.registry import Registry, RegistryBuilder
from uistate.buttons.reply import CreateModal, CreateReply, EditReply, TextInput

__all__ = [
    "AnyContext",
    "ButtonAction",
    "ButtonContext",
    "ButtonValue",
    "CreateModal",
    "CreateReply",
    "Decoder",
    "Delete",
    "EditReply",
    "EventHandler",
    "Hooks",
    "ModalContext",
    "Nav",
    "Noop",
    "RedisErrorHooks",
    "Registry",
    "RegistryBuilder",
    "SelectNav",
    "TextInput",
    "ToPage",
    "action_of",
    "builtin_actions",
    "button_value",
    "decode_custom_id",
    "encode_custom_id",
]
