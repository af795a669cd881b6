"""Unified API response envelope.

Every endpoint, success or failure, returns:
{
    "code": 0,           // 0=success, otherwise the AppError code
    "message": "success",
    "data": { ... },     // null on error
    "kind": null,        // ErrorKind value on error, null on success
    "timestamp": "...",
    "request_id": "..."
}
"""

import uuid
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field
from starlette.requests import Request

from src.ct_common.errors import AppError


def new_request_id() -> str:
    return f"req_{uuid.uuid4().hex[:12]}"


class ApiResponse(BaseModel):
    code: int = 0
    message: str = "success"
    data: Any = None
    kind: str | None = None
    timestamp: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    request_id: str = Field(default_factory=new_request_id)


def success_response(data: Any = None) -> ApiResponse:
    return ApiResponse(data=data)


def error_response(code: int, message: str, kind: str | None = None) -> ApiResponse:
    return ApiResponse(code=code, message=message, data=None, kind=kind)


def error_response_for(exc: AppError, request_id: str | None = None) -> ApiResponse:
    """Envelope for a raised AppError, tagged with the request id when known."""
    resp = error_response(exc.code, exc.message, exc.kind.value)
    if request_id:
        resp.request_id = request_id
    return resp


def respond(request: Request, data: Any = None, message: str = "success") -> ApiResponse:
    """Success envelope carrying the id RequestLogMiddleware put on request.state."""
    resp = ApiResponse(data=data, message=message)
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp
