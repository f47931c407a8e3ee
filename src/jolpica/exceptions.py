"""Custom exceptions for the Jolpica client and stats engine."""

from __future__ import annotations


class JolpicaError(Exception):
    """Base exception for all Jolpica client errors."""

    retryable: bool = False


class NetworkError(JolpicaError):
    """Raised when the API cannot be reached at all."""

    retryable = True


class JolpicaConnectionError(NetworkError):
    """Raised when the client cannot connect to the API."""


class JolpicaTimeoutError(NetworkError):
    """Raised when a request to the API times out."""


class JolpicaAPIError(JolpicaError):
    """Raised when the API returns an error response (4xx/5xx)."""

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        self.message = message
        super().__init__(f"HTTP {status_code}: {message}")


class RateLimitedError(JolpicaAPIError):
    """Raised when the API kept throttling us after every retry."""

    retryable = True


class ServerError(JolpicaAPIError):
    """Raised when the API kept failing with 5xx after every retry."""

    retryable = True


class ClientError(JolpicaAPIError):
    """Raised for non-transient 4xx responses. Never retried."""


class JolpicaValidationError(JolpicaError):
    """Raised when API response data fails model validation."""


class CacheCorruptError(JolpicaError):
    """Raised when a cache entry cannot be decoded. Callers treat it as a miss."""


class FetchCancelledError(JolpicaError):
    """Raised when a composite fetch observes its cancellation flag."""


class DeadlineExceededError(JolpicaError):
    """Raised when a composite fetch runs past its overall deadline."""

    retryable = True


def user_message(exc: BaseException) -> str:
    """Return text suitable for showing to an end user instead of the raw error."""
    if isinstance(exc, JolpicaError) and exc.retryable:
        return "Please retry in a moment."
    if isinstance(exc, ClientError) and exc.status_code == 404:
        return "No data is available for this selection."
    return "Something went wrong loading this data."
