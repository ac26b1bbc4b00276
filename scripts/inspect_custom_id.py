"""Decode a packed custom id and print what it carries.

Usage:
    uv run python scripts/inspect_custom_id.py 'A<packed text>&'

Prints the packing scheme, the action key, the registered built-in it maps to
(if any) and the remaining payload bytes in hex. Exits non-zero if the text is
not a valid custom id.
"""

from __future__ import annotations

import argparse
import sys

from uistate import packing
from uistate.buttons.builtins import builtin_actions
from uistate.buttons.registry import Registry
from uistate.codec import Reader


def describe(custom_id: str, *, registry: Registry) -> list[str]:
    scheme = packing.scheme_of(custom_id)
    payload = packing.decode(custom_id)
    reader = Reader(payload)
    key = reader.read_unsigned(bits=64)
    action = registry.actions.get(key)

    return [
        f"scheme:  {scheme.value}",
        f"chars:   {len(custom_id)}",
        f"bytes:   {len(payload)}",
        f"key:     {key}",
        f"action:  {action.name if action is not None else '(not a built-in)'}",
        f"payload: {reader.read_rest().hex(' ')}",
    ]


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("custom_id", help="packed custom id, including header and trailer")
    args = parser.parse_args(argv)

    try:
        lines = describe(args.custom_id, registry=Registry.build(builtin_actions()))
    except ValueError as e:
        print(f"invalid custom id: {e}", file=sys.stderr)
        return 1

    print("\n".join(lines))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
