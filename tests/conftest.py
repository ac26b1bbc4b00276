from __future__ import annotations

import os
from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest

from support import SAMPLE_ACTIONS, PlatformRecorder, RecordingHooks
from uistate.buttons import EventHandler, Registry, builtin_actions


@pytest.fixture(scope="session", autouse=True)
def _load_dotenv_for_tests() -> None:
    """Load repo .env for local runs.

    Skipped in CI unless UISTATE_LOAD_DOTENV_FOR_TESTS=1 so CI stays hermetic.
    """

    if os.environ.get("CI") and os.environ.get("UISTATE_LOAD_DOTENV_FOR_TESTS") != "1":
        return

    env_path = Path(__file__).resolve().parents[1] / ".env"
    if env_path.exists():
        from dotenv import load_dotenv

        load_dotenv(dotenv_path=env_path, override=False)


@pytest.fixture()
def recorder() -> PlatformRecorder:
    return PlatformRecorder()


@pytest.fixture()
def registry() -> Registry:
    return Registry.build([*builtin_actions(), *SAMPLE_ACTIONS])


@pytest.fixture()
def hooks() -> RecordingHooks:
    return RecordingHooks()


@pytest.fixture()
def event_handler(registry: Registry, recorder: PlatformRecorder, hooks: RecordingHooks) -> EventHandler:
    return EventHandler(registry, client=recorder.client(), hooks=hooks)


@pytest.fixture()
def api_client(event_handler: EventHandler) -> Generator[tuple[Any, Any], None, None]:
    """FastAPI TestClient wired to the recording dispatcher and fakeredis."""

    import fakeredis
    from fastapi.testclient import TestClient

    from uistate.api.deps import get_event_handler, get_redis
    from uistate.main import app

    r = fakeredis.FakeRedis(decode_responses=True)

    def _override_redis() -> Generator[fakeredis.FakeRedis, None, None]:
        yield r

    app.dependency_overrides[get_event_handler] = lambda: event_handler
    app.dependency_overrides[get_redis] = _override_redis
    with TestClient(app) as c:
        yield c, r
    app.dependency_overrides.clear()
