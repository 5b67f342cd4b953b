"""
Data models for the URL shortener application.

This module imports and exports all SQLModel models used in the application.
"""

# First import SQLModel itself to ensure metadata is initialized
from sqlmodel import SQLModel

from shortener.models.url import UrlMapping, UrlMappingBase, UrlMappingCreate, UrlMappingRead
from shortener.models.user import Credential, CredentialBase, CredentialCreate

__all__ = [
    "SQLModel",

    # URL mapping models
    "UrlMapping",
    "UrlMappingBase",
    "UrlMappingCreate",
    "UrlMappingRead",

    # Credential models
    "Credential",
    "CredentialBase",
    "CredentialCreate",
]
