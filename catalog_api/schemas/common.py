"""Common schemas used across the API."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error response format.

    Format: { "error": str, "message": str | null }
    """

    error: str
    message: str | None = None


class HealthResponse(BaseModel):
    """Liveness probe payload."""

    status: Literal["ok"] = "ok"
    timestamp: datetime
