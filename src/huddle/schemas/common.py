"""Shared Pydantic schemas for common API elements."""
from __future__ import annotations

from pydantic import BaseModel, Field


class ValidationErrors(BaseModel):
    """Field-keyed validation messages returned with HTTP 422."""

    errors: dict[str, str] = Field(..., description="Map of field name to user-facing message.")
