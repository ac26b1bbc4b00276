from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import UTC, datetime
from typing import cast

import redis

# Keep the error stream bounded; reports are for debugging, not auditing.
ERROR_STREAM_MAXLEN = 10_000


@dataclass(frozen=True, slots=True)
class ErrorReport:
    interaction_id: str
    origin: str
    custom_id: str
    error_type: str
    message: str
    created_at: str

    @staticmethod
    def now(*, interaction_id: str, origin: str, custom_id: str, error: BaseException) -> "ErrorReport":
        return ErrorReport(
            interaction_id=interaction_id,
            origin=origin,
            custom_id=custom_id,
            error_type=type(error).__name__,
            message=str(error),
            created_at=datetime.now(tz=UTC).isoformat(),
        )

    def to_fields(self) -> dict[str, str]:
        return {k: str(v) for k, v in asdict(self).items()}


def publish_error_report(*, r: redis.Redis, stream: str, report: ErrorReport) -> str:
    """Append a dispatch failure to the error stream."""

    stream_id = r.xadd(stream, report.to_fields(), maxlen=ERROR_STREAM_MAXLEN, approximate=True)
    return cast(str, stream_id)


def recent_error_reports(*, r: redis.Redis, stream: str, count: int = 50) -> list[tuple[str, ErrorReport]]:
    out: list[tuple[str, ErrorReport]] = []
    for stream_id, fields in r.xrevrange(stream, count=count):
        out.append((cast(str, stream_id), ErrorReport(**fields)))
    return out
