from __future__ import annotations

from decimal import Decimal
import time
from typing import Generic, TypeVar

from pydantic import BaseModel, Field


T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    success: bool = True
    data: T | None = None
    error: str | None = None
    timestamp: int = Field(..., description="Unix time in milliseconds.")


def now_ms() -> int:
    return int(time.time() * 1000)


def ok(data) -> ApiResponse:
    return ApiResponse(success=True, data=data, timestamp=now_ms())


def failure(error: str) -> dict:
    return {"success": False, "error": error, "timestamp": now_ms()}


def dec_to_str(value: Decimal) -> str:
    return str(value)


def dec_to_str_or_none(value: Decimal | None) -> str | None:
    return str(value) if value is not None else None
