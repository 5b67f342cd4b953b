"""Exceptions for the URL shortener service layer.

This module contains the exception hierarchy for the service layer,
providing domain-specific exceptions that abstract underlying implementation details.
"""


class ServiceError(Exception):
    """Base exception for all service-level errors."""
    pass


class URLValidationError(ServiceError):
    """The submitted URL is empty or otherwise unusable."""
    pass


class StoreError(ServiceError):
    """The persistence layer failed (connection, query or write)."""
    pass


class ShortCodeExhaustedError(StoreError):
    """No unused short code was found within the allowed number of draws."""
    pass


class URLNotFoundError(ServiceError):
    """No mapping exists for the short code, or nothing was deleted."""
    pass


class AuthError(ServiceError):
    """Username and password do not match a stored credential."""
    pass
