"""Application configuration module.

This module contains settings for the URL shortener application,
loaded from environment variables with appropriate defaults.
"""

from __future__ import annotations

import logging
import string
from enum import Enum
from pathlib import Path
from typing import Any, List, Optional, Union

from pydantic import Field, ValidationInfo, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Set up basic logger for config module
logger = logging.getLogger(__name__)

# Base directory of the project
BASE_DIR = Path(__file__).resolve().parent.parent.parent

# Codes are always six symbols drawn from [a-zA-Z0-9]
SHORT_CODE_LENGTH = 6
SHORT_CODE_ALPHABET = string.ascii_lowercase + string.ascii_uppercase + string.digits


class EnvironmentType(str, Enum):
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


class Settings(BaseSettings):
    """Application settings loaded from environment variables with defaults.

    Settings are loaded from environment variables, with fallback to
    values in .env file if present, and finally to the default values
    specified here.
    """
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Environment setting
    ENVIRONMENT: EnvironmentType = EnvironmentType.DEVELOPMENT

    # App Information
    APP_NAME: str = "URL Shortener"
    APP_VERSION: str = "0.1.0"
    APP_DESCRIPTION: str = "Short-code allocation and URL mapping service"

    # API Configuration
    BASE_URL: str = "http://localhost:8000"  # Used for generating short URLs
    API_PREFIX: str = "/api"
    DEBUG: bool = False

    # CORS settings
    CORS_ORIGINS: Union[List[str], str] = ["*"]

    # Short code configuration
    URL_CODE_LENGTH: int = SHORT_CODE_LENGTH
    # Index order matters: lower-case, upper-case, digits
    URL_CODE_CHARS: str = SHORT_CODE_ALPHABET
    URL_CODE_MAX_ATTEMPTS: int = Field(default=10, ge=1)

    # PostgreSQL settings
    POSTGRES_SERVER: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = "postgres"
    POSTGRES_DB: str = "url_shortener"

    # Full connection string; takes precedence over the POSTGRES_* components
    DATABASE_URL: Optional[str] = None

    # PostgreSQL pool settings
    POSTGRES_POOL_SIZE: int = 20
    POSTGRES_POOL_MAX_OVERFLOW: int = 10
    POSTGRES_POOL_TIMEOUT: int = 30
    POSTGRES_POOL_RECYCLE: int = 300
    DB_ECHO: bool = False

    # Persisted record sets
    URL_TABLE_NAME: str = "url_mappings"
    USER_TABLE_NAME: str = "users"
    DB_CREATE_TABLES: bool = True  # Create missing tables on startup

    # Security
    BCRYPT_ROUNDS: int = Field(default=12, ge=4, le=31)

    # Logging configuration
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"
    LOG_FILENAME: str = "app.log"
    LOG_ROTATION: str = "10 MB"
    LOG_RETENTION: str = "7 days"
    LOG_FORMAT: str = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level} | {name}:{line} | {message}"
    LOG_JSON: bool = True
    LOG_TO_FILE: bool = True
    REQUEST_LOGGING_ENABLED: bool = True

    # Validators
    @field_validator("DATABASE_URL", mode="before")
    def validate_database_url(cls, v: Any) -> Optional[str]:
        """Treat an empty DATABASE_URL as unset."""
        if v is None or (isinstance(v, str) and not v.strip()):
            return None
        return v

    @field_validator("URL_CODE_LENGTH")
    def validate_code_length(cls, v: int) -> int:
        if v != SHORT_CODE_LENGTH:
            raise ValueError(f"URL_CODE_LENGTH must be {SHORT_CODE_LENGTH}")
        return v

    @field_validator("URL_CODE_CHARS")
    def validate_code_chars(cls, v: str) -> str:
        if len(v) != len(SHORT_CODE_ALPHABET) or set(v) != set(SHORT_CODE_ALPHABET):
            raise ValueError("URL_CODE_CHARS must hold each ASCII letter and digit exactly once")
        return v

    @field_validator("BCRYPT_ROUNDS")
    def validate_bcrypt_rounds(cls, v: int, info: ValidationInfo) -> int:
        env_value = info.data.get("ENVIRONMENT", EnvironmentType.DEVELOPMENT)
        if v < 10 and env_value == EnvironmentType.PRODUCTION:
            logger.warning("BCRYPT_ROUNDS below 10 in production environment! This is a security risk.")
        return v

    @field_validator("CORS_ORIGINS")
    def validate_list_or_string(cls, v: Union[List[str], str]) -> List[str]:
        """Convert comma-separated string to list if needed."""
        if isinstance(v, str):
            if not v.strip():
                return []
            if v == "*":
                return ["*"]
            return [item.strip() for item in v.split(",")]
        return v

    # Computed fields
    @computed_field
    def SQLALCHEMY_DATABASE_URI(self) -> str:
        """Construct the SQLAlchemy database URI from settings or use override."""
        if self.DATABASE_URL:
            return self.DATABASE_URL

        return f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"


# Create a singleton instance of the settings
settings = Settings()
