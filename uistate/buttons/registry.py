from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from uistate.buttons.action import ButtonAction, ButtonValue, action_of
from uistate.codec import resolve_schema
from uistate.errors import RegistrationConflict, UnknownActionKey

logger = logging.getLogger(__name__)

ActionLike = ButtonAction | type[ButtonValue]


def _as_action(item: ActionLike) -> ButtonAction:
    if isinstance(item, ButtonAction):
        return item
    return action_of(item)


@dataclass(frozen=True, slots=True)
class Registry:
    """Immutable `key -> ButtonAction` table.

    Built once at startup and shared read-only by every dispatch.
    """

    actions: Mapping[int, ButtonAction]

    @staticmethod
    def build(actions: Iterable[ActionLike]) -> "Registry":
        """Build the table, failing on the first duplicate key.

        Every value type's schema is compiled here so an unsupported field type
        fails at startup rather than on the first click.
        """

        table: dict[int, ButtonAction] = {}
        for item in actions:
            action = _as_action(item)
            if action.key in table:
                raise RegistrationConflict(action.key)
            resolve_schema(action.value_type)
            table[action.key] = action

        logger.info("Registered %d button actions", len(table))
        return Registry(actions=MappingProxyType(table))

    def lookup(self, key: int) -> ButtonAction:
        try:
            return self.actions[key]
        except KeyError:
            raise UnknownActionKey(key) from None

    def __contains__(self, key: object) -> bool:
        return key in self.actions

    def __len__(self) -> int:
        return len(self.actions)

    def __iter__(self) -> Iterator[ButtonAction]:
        return iter(self.actions.values())


class RegistryBuilder:
    def __init__(self) -> None:
        self._actions: list[ActionLike] = []

    def add(self, action: ActionLike) -> "RegistryBuilder":
        self._actions.append(action)
        return self

    def extend(self, actions: Iterable[ActionLike]) -> "RegistryBuilder":
        self._actions.extend(actions)
        return self

    def build(self) -> Registry:
        return Registry.build(self._actions)
