from __future__ import annotations

from uistate.errors import DecodeError


class InvalidCustomId(DecodeError):
    """Packed text is not a valid encoding of any byte string."""


class PrefixSuffix(InvalidCustomId):
    def __init__(self, msg: str = "missing or unknown header/trailer"):
        super().__init__(msg)


class LenMismatch(InvalidCustomId):
    def __init__(self, msg: str = "packed length does not match header"):
        super().__init__(msg)


class ContentFormat(InvalidCustomId):
    def __init__(self, msg: str = "character outside the packed range"):
        super().__init__(msg)
