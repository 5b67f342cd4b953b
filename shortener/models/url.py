"""URL mapping data models.

This module defines the UrlMapping model that stores the relation between
a short code and the normalized URL it redirects to.
"""
import hashlib
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import CheckConstraint, DateTime, Text
from sqlmodel import Field, SQLModel

from shortener.core.config import settings

URL_HASH_LENGTH = 64


def url_digest(original_url: str) -> str:
    """Hex sha256 of a normalized URL, the key URL uniqueness is enforced on."""
    return hashlib.sha256(original_url.encode("utf-8")).hexdigest()


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class UrlMappingBase(SQLModel):
    """Base model for URL mapping data."""

    short_code: str = Field(
        max_length=settings.URL_CODE_LENGTH,
        unique=True,  # Creates the unique index backing code uniqueness
        index=True,
        description="Public identifier of the mapping",
    )
    original_url: str = Field(
        sa_type=Text,
        description="Target URL with any leading http:// or https:// removed",
    )


class UrlMapping(UrlMappingBase, table=True):
    """
    Persisted short_code -> original_url mapping.

    Mappings are immutable: they are created once by the shorten workflow
    and removed by the delete workflow, never updated. The code and the
    digest of the URL carry unique indexes so that concurrent writers cannot
    create a second mapping for the same URL or reuse a code. URLs have no
    length limit, so the URL itself is not indexed.
    """

    __tablename__ = settings.URL_TABLE_NAME

    id: Optional[int] = Field(default=None, primary_key=True)
    url_hash: str = Field(
        max_length=URL_HASH_LENGTH,
        unique=True,
        index=True,
        description="sha256 of original_url, see url_digest()",
    )
    created_at: datetime = Field(
        default_factory=utc_now,
        sa_type=DateTime(timezone=True),
        description="Timestamp when this mapping was created",
    )

    __table_args__ = (
        CheckConstraint(
            f"length(short_code) = {settings.URL_CODE_LENGTH}",
            name=f"ck_{settings.URL_TABLE_NAME}_short_code_length",
        ),
    )


class UrlMappingCreate(UrlMappingBase):
    """Schema for inserting a new mapping."""
    pass


class UrlMappingRead(UrlMappingBase):
    """Schema for reading a mapping."""
    id: int
    created_at: datetime
