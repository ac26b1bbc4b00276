from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

DEFAULT_MAX_CUSTOM_ID_LEN = 100


@dataclass(frozen=True, slots=True)
class Settings:
    max_custom_id_len: int
    discord_api_base: str
    discord_bot_token: str | None
    redis_url: str
    error_stream: str
    report_errors_to_redis: bool
    log_level: str


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() in {"1", "true", "yes", "on"}


def settings_from_env() -> Settings:
    return Settings(
        max_custom_id_len=int(os.environ.get("UISTATE_MAX_CUSTOM_ID_LEN", DEFAULT_MAX_CUSTOM_ID_LEN)),
        discord_api_base=os.environ.get("DISCORD_API_BASE", "https://discord.com/api/v10"),
        discord_bot_token=os.environ.get("DISCORD_BOT_TOKEN"),
        redis_url=os.environ.get("REDIS_URL", "redis://localhost:6379/0"),
        error_stream=os.environ.get("UISTATE_ERROR_STREAM", "uistate:errors"),
        report_errors_to_redis=_env_flag("UISTATE_REPORT_ERRORS_TO_REDIS"),
        log_level=os.environ.get("UISTATE_LOG_LEVEL", "INFO").upper(),
    )


def load_settings(*, project_root: Path | None = None) -> Settings:
    """Read `.env` (if any) without overriding the real environment, then build settings."""

    root = project_root or Path(__file__).resolve().parents[1]
    env_path = root / ".env"
    if env_path.exists():
        load_dotenv(dotenv_path=env_path, override=False)
    return settings_from_env()
