"""
Custom exceptions for nanogen.

This module defines all custom exceptions used throughout the application.
"""


class NanogenError(Exception):
    """Base exception for all nanogen errors."""

    pass


class ConfigurationError(NanogenError):
    """Raised when there is a configuration problem (e.g. missing API key)."""

    pass


class ValidationError(NanogenError):
    """Raised when input validation fails."""

    def __init__(self, message: str, field: str = "") -> None:
        """
        Initialize validation error.

        Args:
            message: Error message
            field: Name of the field that failed validation (optional)
        """
        self.field = field
        super().__init__(message)


class ProviderRefusalError(NanogenError):
    """Raised when the provider answers with text instead of an image."""

    def __init__(self, message: str, text: str = "") -> None:
        """
        Initialize provider refusal error.

        Args:
            message: Error message (embeds the provider text)
            text: The provider's text, verbatim
        """
        self.text = text
        super().__init__(message)


class EmptyResultError(NanogenError):
    """Raised when the provider returns neither an image nor text."""

    pass


class TransportError(NanogenError):
    """Raised when the call to the provider fails (network, HTTP status, bad body)."""

    def __init__(
        self,
        message: str,
        status_code: int = 0,
        response: str = "",
        original_error: Exception | None = None,
    ) -> None:
        """
        Initialize transport error.

        Args:
            message: Error message
            status_code: HTTP status code (if applicable)
            response: Raw response body (if available)
            original_error: The underlying exception that caused this error
        """
        self.status_code = status_code
        self.response = response
        self.original_error = original_error
        super().__init__(message)


class RequestTimeoutError(TransportError):
    """Raised when the provider request times out."""

    pass
