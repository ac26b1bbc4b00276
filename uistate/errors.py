from __future__ import annotations


class UiStateError(Exception):
    """Base class for every error raised by this package."""


class EncodeError(UiStateError, ValueError):
    """A value could not be written to its encoded form."""


class CustomIdTooLong(EncodeError):
    def __init__(self, *, length: int, max_len: int):
        super().__init__(f"encoded custom id is {length} chars, max is {max_len}")
        self.length = length
        self.max_len = max_len


class DecodeError(UiStateError, ValueError):
    """An inbound string or byte payload could not be decoded."""


class UnknownActionKey(DecodeError):
    def __init__(self, key: int):
        super().__init__(f"unknown button action `{key}`")
        self.key = key


class DispatchError(UiStateError):
    """Routing an interaction to its handler failed."""


class HandlerUnsupported(DispatchError):
    pass


class RegistrationConflict(DispatchError):
    def __init__(self, key: int):
        super().__init__(f"duplicate button action for key `{key}`")
        self.key = key


class ReplyStateError(DispatchError):
    """A reply was attempted that the interaction no longer allows."""


class ModalParseError(UiStateError, ValueError):
    """Submitted form fields did not validate."""
