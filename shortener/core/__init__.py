"""Core module for the URL shortener application."""

from shortener.core.config import settings

__all__ = ["settings"]
