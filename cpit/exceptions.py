"""
Exception hierarchy for the Cockpit client.

All errors raised by the library derive from CockpitError, so callers can
catch a single base class or pick the specific failure they care about.
"""

from typing import Optional, Any


class CockpitError(Exception):
    """Base exception for all cpit errors."""

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        return self.message


class ConfigError(CockpitError):
    """Invalid or incomplete client configuration."""


class MissingConfigError(ConfigError):
    """API key or base URL is not set, neither as default nor as option."""


class ValidationError(CockpitError):
    """An option argument or request payload is invalid."""


class EmptyValueError(ValidationError):
    """A required option value was given as an empty string."""


class MissingBodyError(ValidationError):
    """A state-mutating request was issued without a body."""


class EncodingError(CockpitError):
    """The request body could not be serialized as JSON."""


class TransportError(CockpitError):
    """
    The HTTP call itself failed (connection error, timeout, invalid URL).

    The underlying requests exception is kept in ``original`` and is also
    chained as ``__cause__``.
    """

    def __init__(
        self,
        message: str,
        original: Optional[BaseException] = None,
        details: Optional[str] = None
    ):
        super().__init__(message, details=details)
        self.original = original


class APIError(CockpitError):
    """The server answered with a status other than 200."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response_data: Optional[Any] = None
    ):
        super().__init__(message)
        self.status_code = status_code
        self.response_data = response_data


class NotFoundError(APIError):
    """The requested item, singleton or asset does not exist (HTTP 404)."""


class UnexpectedStatusError(APIError):
    """Any non-200, non-404 response."""

    def __init__(self, status_code: int, status_text: str, body: str):
        super().__init__(
            f"unexpected status code {status_code} {status_text}: {body}",
            status_code=status_code,
            response_data=body
        )
        self.status_text = status_text
        self.body = body


class DecodeError(CockpitError):
    """The response body does not match the expected output type."""
