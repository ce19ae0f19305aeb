"""Exception types for the memo8 API client."""

from typing import Any


class ApiError(Exception):
    """Base exception for API errors.

    Attributes:
        status: HTTP status code, or 0 when no response was received
        data: Decoded response body, if any
    """

    def __init__(self, message: str, status: int = 0, data: Any = None):
        super().__init__(message)
        self.message = message
        self.status = status
        self.data = data


class AuthenticationError(ApiError):
    """The token was rejected (401)."""

    pass


class ValidationError(ApiError):
    """The request was rejected with field errors (422)."""

    def __init__(self, message: str, errors: dict[str, list[str]] | None = None):
        super().__init__(message, 422, errors)
        self.errors: dict[str, list[str]] = errors or {}


class PayloadTooLargeError(ApiError):
    """Error indicating the request body exceeded the server limit (413).

    The indexing service reacts to this error by splitting the batch in
    half and resubmitting; every other ApiError is fatal for the run.
    """

    pass
