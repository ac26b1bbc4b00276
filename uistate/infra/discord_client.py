"""Thin async client for the interaction response endpoints.

Only the calls the reply state machine needs are covered: the one-time initial
callback, follow-ups, and edits/deletes of the original response.
"""

from __future__ import annotations

import logging
from enum import IntEnum
from typing import Any

import httpx

from uistate.config import Settings

logger = logging.getLogger(__name__)

EPHEMERAL_FLAG = 1 << 6


class CallbackType(IntEnum):
    pong = 1
    channel_message_with_source = 4
    deferred_channel_message_with_source = 5
    deferred_update_message = 6
    update_message = 7
    modal = 9


class InteractionClient:
    def __init__(self, http: httpx.AsyncClient):
        self.http = http

    @classmethod
    def from_settings(cls, settings: Settings, *, transport: httpx.AsyncBaseTransport | None = None) -> "InteractionClient":
        headers = {}
        if settings.discord_bot_token:
            headers["Authorization"] = f"Bot {settings.discord_bot_token}"
        http = httpx.AsyncClient(base_url=settings.discord_api_base, headers=headers, transport=transport, timeout=10.0)
        return cls(http)

    async def aclose(self) -> None:
        await self.http.aclose()

    async def _request(self, method: str, url: str, payload: dict[str, Any] | None = None) -> httpx.Response:
        logger.debug("%s %s", method, url)
        resp = await self.http.request(method, url, json=payload)
        resp.raise_for_status()
        return resp

    async def create_response(self, interaction_id: str, token: str, payload: dict[str, Any]) -> None:
        await self._request("POST", f"/interactions/{interaction_id}/{token}/callback", payload)

    async def create_followup(self, application_id: str, token: str, payload: dict[str, Any]) -> None:
        await self._request("POST", f"/webhooks/{application_id}/{token}", payload)

    async def edit_original(self, application_id: str, token: str, payload: dict[str, Any]) -> None:
        await self._request("PATCH", f"/webhooks/{application_id}/{token}/messages/@original", payload)

    async def delete_original(self, application_id: str, token: str) -> None:
        await self._request("DELETE", f"/webhooks/{application_id}/{token}/messages/@original")
