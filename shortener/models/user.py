"""Credential data models.

The user table is only consulted to authorize deletions. It has no
relationship with the URL mapping table.
"""
from datetime import datetime
from typing import Optional

from pydantic import field_validator
from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel

from shortener.core.config import settings
from shortener.models.url import utc_now

# bcrypt only looks at the first 72 bytes of a password
MAX_PASSWORD_BYTES = 72


class CredentialBase(SQLModel):
    """Base model for credential data."""

    username: str = Field(
        unique=True,
        index=True,
        max_length=150,
        description="Login name allowed to delete mappings",
    )


class Credential(CredentialBase, table=True):
    """Stored credential with a bcrypt password hash."""

    __tablename__ = settings.USER_TABLE_NAME

    id: Optional[int] = Field(default=None, primary_key=True)
    password_hash: str = Field(description="bcrypt hash of the password")
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))


class CredentialCreate(CredentialBase):
    """Schema for creating a credential from a plaintext password."""
    password: str = Field(min_length=1)

    @field_validator("password")
    def validate_password_size(cls, v: str) -> str:
        if len(v.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
        return v
