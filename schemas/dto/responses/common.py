"""
Common response DTOs shared across endpoints.

ErrorResponse         — standard error shape from AppError.to_dict()
UnauthorizedResponse  — bare {message} body returned on a bad shared secret
HealthResponse        — GET /health
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error JSON body produced by the AppError exception handler."""

    error: str
    code: str
    details: Optional[Any] = None


class UnauthorizedResponse(BaseModel):
    message: str = "Unauthorized"


class HealthResponse(BaseModel):
    """Response body for GET /health."""

    status: str
    checks: dict[str, str]
