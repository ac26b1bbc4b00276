from __future__ import annotations

from uistate.packing.errors import PrefixSuffix

SUFFIX = "&"

# Surrogates cannot appear in a valid string, so codes at or above the gap are
# moved past it.
SURROGATE_START = 0xD800
OFFSET = 0x800


def split(text: str, *, headers: str) -> tuple[str, str]:
    """Strip the trailer and return `(header, body)`."""

    if len(text) < 2 or not text.endswith(SUFFIX) or text[0] not in headers:
        raise PrefixSuffix()
    return text[0], text[1:-1]


def code_to_char(code: int) -> str:
    return chr(code + OFFSET if code >= SURROGATE_START else code)


def char_to_code(ch: str) -> int | None:
    """Inverse of `code_to_char`, or None for a surrogate."""

    cp = ord(ch)
    if cp < SURROGATE_START:
        return cp
    if cp < SURROGATE_START + OFFSET:
        return None
    return cp - OFFSET
