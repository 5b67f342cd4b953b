"""URL shortener: short-code allocation and URL mapping service."""

__version__ = "0.1.0"
