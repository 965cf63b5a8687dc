"""
Auth Schema Definitions

Pydantic models for authentication API endpoints.
"""

from pydantic import BaseModel


class MessageResponse(BaseModel):
    """Generic message response for auth endpoints."""

    message: str


class LogoutResponse(MessageResponse):
    """Response for logout endpoint."""

    pass
