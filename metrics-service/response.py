"""
Server Metrics Recorder - Standardized Response Models

Provides consistent error structure across all endpoints.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field


class ErrorDetail(BaseModel):
    """Error detail structure."""

    code: str = Field(..., description="Error code for programmatic handling")
    message: str = Field(..., description="Human-readable error message")

    model_config = {
        "json_schema_extra": {
            "example": {"code": "INTERNAL_ERROR", "message": "internal server error"}
        }
    }


class APIResponse(BaseModel):
    """Standardized API response structure."""

    success: bool = Field(..., description="Whether the request was successful")
    data: Optional[Any] = Field(None, description="Response data on success")
    error: Optional[ErrorDetail] = Field(None, description="Error details on failure")

    model_config = {
        "json_schema_extra": {
            "example": {
                "success": False,
                "data": None,
                "error": {"code": "INTERNAL_ERROR", "message": "internal server error"},
            }
        }
    }


def error_response(code: str, message: str) -> APIResponse:
    """Build a failed APIResponse."""
    return APIResponse(success=False, data=None, error=ErrorDetail(code=code, message=message))


# --- Error codes ---


class ErrorCodes:
    """Standardized error codes."""

    INTERNAL_ERROR = "INTERNAL_ERROR"
