"""Shared Pydantic schemas for common API elements."""
from __future__ import annotations

from pydantic import BaseModel, Field


class SuccessResponse(BaseModel):
    """Acknowledgement returned by action endpoints."""

    success: bool = True


class ErrorResponse(BaseModel):
    """Body of every domain error response."""

    error: str = Field(..., description="Human-readable message")
    status: int = Field(..., description="HTTP status code")