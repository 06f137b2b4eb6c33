from pydantic import BaseModel, Field
from typing import Any, List, Optional


class Envelope(BaseModel):
    """Base shape shared by every JSON response"""
    success: bool = Field(True, description="Whether the request succeeded")
    message: str = Field(..., description="Human readable outcome", example="All Categories List")


class ErrorEnvelope(BaseModel):
    success: bool = Field(False, description="Always false for errors")
    message: str = Field(..., description="Human readable error", example="Category not found")
    error: Optional[str] = Field(None, description="Exception type for unexpected failures")
    errors: Optional[List[Any]] = Field(None, description="Validation error details")


class OkResponse(BaseModel):
    ok: bool = True


ERROR_RESPONSES = {
    400: {"model": ErrorEnvelope, "description": "Invalid request data"},
    401: {"model": ErrorEnvelope, "description": "Authentication required"},
}
ADMIN_ERROR_RESPONSES = {
    **ERROR_RESPONSES,
    403: {"model": ErrorEnvelope, "description": "Requires admin role"},
}
