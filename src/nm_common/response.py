"""Unified API response envelope.

{
    "code": 0,             // 0=success, otherwise an AppError code
    "message": "success",
    "data": { ... },       // null on error
    "timestamp": "...",
    "request_id": "..."
}

Wei amounts inside `data` are always decimal strings; uint256 values do not
survive a round trip through a JSON number.
"""

import uuid
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field

from src.nm_common.errors import AppError


class ApiResponse(BaseModel):
    code: int = 0
    message: str = "success"
    data: Any = None
    timestamp: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    request_id: str = Field(default_factory=lambda: f"req_{uuid.uuid4().hex[:12]}")


def success_response(data: Any = None, request_id: str | None = None) -> ApiResponse:
    if isinstance(data, BaseModel):
        data = data.model_dump(mode="json")
    resp = ApiResponse(code=0, message="success", data=data)
    if request_id:
        resp.request_id = request_id
    return resp


def error_response(code: int, message: str) -> ApiResponse:
    return ApiResponse(code=code, message=message, data=None)


def response_for_error(exc: AppError, request_id: str | None = None) -> ApiResponse:
    resp = error_response(exc.code, exc.message)
    if request_id:
        resp.request_id = request_id
    return resp
