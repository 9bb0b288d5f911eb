"""
Base response schemas for standardized API responses.

Every error leaves the API as ``{"error", "code", "details"}``.
"""

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field


class ErrorResponse(BaseModel):
    """Standard error body."""

    error: str = Field(description="Human-readable error message")
    code: str = Field(description="Error code for programmatic handling")
    details: Dict[str, Any] = Field(default_factory=dict, description="Structured context")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "error": "This time slot conflicts with an existing booking",
                "code": "BOOKING_CONFLICT",
                "details": {"staff_id": "01HV6Y0M4J7Q3K8R2T5W9X1ZAB"},
            }
        }
    )


class PaginationInfo(BaseModel):
    page: int = Field(ge=1)
    limit: int = Field(ge=1)
    total: int = Field(ge=0)
    pages: int = Field(ge=0)


class PingResponse(BaseModel):
    ok: bool = True
