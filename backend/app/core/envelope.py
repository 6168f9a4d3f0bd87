"""
Uniform response envelope.

Every reply leaves the API as::

    {"success": bool, "status_code": int, "timestamp": "YYYY-MM-DD HH:MM:SS", "data": ...}
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional
from zoneinfo import ZoneInfo

from pydantic import BaseModel, model_validator
from starlette.responses import Response

from backend.app.core.exceptions import AppException

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
JSON_MEDIA_TYPE = "application/json; charset=utf-8"


class ResponseEnvelope(BaseModel):
    """Wire schema of every reply body."""
    success: bool
    status_code: int
    timestamp: str
    data: Any = None

    @model_validator(mode="after")
    def check_success_flag(self):
        expected = 200 <= self.status_code < 300
        if self.success != expected:
            raise ValueError(f"success={self.success} contradicts status_code={self.status_code}")
        return self


@dataclass(frozen=True)
class Reply:
    """Outcome of a handler, turned into an HTTP response exactly once."""
    status_code: int
    data: Any = None
    empty: bool = False

    @classmethod
    def ok(cls, data: Any, status_code: int = 200) -> "Reply":
        return cls(status_code=status_code, data=data)

    @classmethod
    def failure(cls, error: AppException) -> "Reply":
        return cls(status_code=error.status_code, data=error.to_payload())

    @classmethod
    def blank(cls) -> "Reply":
        """Bodiless 200, used for CORS preflight."""
        return cls(status_code=200, empty=True)

    @property
    def success(self) -> bool:
        return 200 <= self.status_code < 300


def local_timestamp(timezone: str) -> str:
    return datetime.now(ZoneInfo(timezone)).strftime(TIMESTAMP_FORMAT)


def build_envelope(reply: Reply, timezone: str) -> ResponseEnvelope:
    return ResponseEnvelope(
        success=reply.success,
        status_code=reply.status_code,
        timestamp=local_timestamp(timezone),
        data=reply.data,
    )


def render(reply: Reply, timezone: str, headers: Optional[Dict[str, str]] = None) -> Response:
    """Serialize a reply into a Starlette response."""
    if reply.empty:
        return Response(status_code=reply.status_code, headers=headers)

    envelope = build_envelope(reply, timezone)
    return Response(
        content=envelope.model_dump_json(),
        status_code=reply.status_code,
        media_type=JSON_MEDIA_TYPE,
        headers=headers,
    )
