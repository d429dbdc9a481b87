"""Unified API response wrapper.

All API endpoints return this format:
{
    "code": 0,           // 0=success, non-0=AppError code
    "message": "success",
    "data": { ... },     // validation details on 400, otherwise null on error
    "timestamp": "...",
    "request_id": "..."  // same value as the X-Request-ID response header
}
"""

import uuid
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field
from starlette.requests import Request


def _new_request_id() -> str:
    return f"req_{uuid.uuid4().hex[:12]}"


class ApiResponse(BaseModel):
    code: int = 0
    message: str = "success"
    data: Any = None
    timestamp: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    request_id: str = Field(default_factory=_new_request_id)


def request_id_of(request: Request) -> str | None:
    """Request ID assigned by RequestLogMiddleware, if it ran."""
    return getattr(request.state, "request_id", None)


def success_response(
    data: Any = None, message: str = "success", request_id: str | None = None
) -> ApiResponse:
    return ApiResponse(
        code=0, message=message, data=data, request_id=request_id or _new_request_id()
    )


def error_response(
    code: int, message: str, data: Any = None, request_id: str | None = None
) -> ApiResponse:
    return ApiResponse(
        code=code, message=message, data=data, request_id=request_id or _new_request_id()
    )
