from __future__ import annotations

import logging

from fastapi import FastAPI

from uistate.api.routes import router
from uistate.buttons.builtins import builtin_actions
from uistate.buttons.dispatch import EventHandler
from uistate.buttons.hooks import Hooks, RedisErrorHooks
from uistate.buttons.registry import Registry
from uistate.config import Settings, load_settings
from uistate.infra.discord_client import InteractionClient
from uistate.infra.redis_client import create_redis

settings = load_settings()

app = FastAPI(title="uistate", version="0.1.0")
app.include_router(router)
# Configure logging
logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)


def build_event_handler(settings: Settings, *, registry: Registry | None = None) -> EventHandler:
    hooks: Hooks
    if settings.report_errors_to_redis:
        hooks = RedisErrorHooks(r=create_redis(settings.redis_url), stream=settings.error_stream)
    else:
        hooks = Hooks()
    return EventHandler(
        registry or Registry.build(builtin_actions()),
        client=InteractionClient.from_settings(settings),
        hooks=hooks,
    )


@app.on_event("startup")
async def _startup() -> None:
    # Registration conflicts raise here and abort startup.
    app.state.event_handler = build_event_handler(settings)
    logger.info("Dispatcher ready with %d actions", len(app.state.event_handler.registry))


@app.on_event("shutdown")
async def _shutdown() -> None:
    handler = getattr(app.state, "event_handler", None)
    if handler is not None:
        await handler.client.aclose()


@app.get("/info")
async def info() -> dict[str, str]:
    return {"name": "uistate", "version": "0.1.0"}
