"""
Pydantic schemas for error responses.
"""

from typing import Any

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """
    Standard error response format.

    Examples:
        400: {"error": "validation_failed", "message": "No file uploaded (use field name \"file\")"}
        400: {"error": "file_too_large", "message": "...", "details": {"maxSizeBytes": 200000000}}
        404: {"error": "not_found", "message": "File with ID '...' not found"}
        500: {"error": "storage_error", "message": "..."}
    """

    error: str = Field(
        ...,
        description="Error code string",
        examples=["validation_failed", "file_too_large", "not_found", "storage_error", "persistence_error"],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] | None = Field(
        default=None,
        description="Optional additional error details",
    )
