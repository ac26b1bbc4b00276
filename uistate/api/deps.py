from __future__ import annotations

from collections.abc import Generator

import redis
from fastapi import Depends, Request

from uistate.buttons.dispatch import EventHandler
from uistate.buttons.registry import Registry
from uistate.infra.redis_client import create_redis


def get_event_handler(request: Request) -> EventHandler:
    handler = getattr(request.app.state, "event_handler", None)
    if handler is None:
        raise RuntimeError("Event handler not initialized. It is built on app startup.")
    return handler


def get_registry(handler: EventHandler = Depends(get_event_handler)) -> Registry:
    return handler.registry


def get_redis() -> Generator[redis.Redis, None, None]:
    client = create_redis()
    try:
        yield client
    finally:
        client.close()
