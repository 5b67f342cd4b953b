"""API request and response schemas.

This module contains Pydantic models for API request validation
and response serialization.
"""

from typing import Dict, Optional

from pydantic import BaseModel, Field


class ShortenRequest(BaseModel):
    """Request schema for shortening a URL."""
    url: str = Field(..., description="URL to shorten, with or without http(s):// prefix")


class ShortenResponse(BaseModel):
    """Response schema for a shortened URL."""
    short_code: str
    short_url: str  # Full URL including base domain


class DeleteRequest(BaseModel):
    """Credentials authorizing a delete."""
    username: str
    password: str


class MessageResponse(BaseModel):
    """Plain confirmation message."""
    detail: str


class ErrorResponse(BaseModel):
    """Response schema for errors."""
    detail: str
    field_errors: Optional[Dict[str, list]] = None
