"""
API client module for memo8.

Provides the async HTTP client for the memo8 REST API and its error types.
"""

from .client import Memo8ApiClient, create_api_client, raise_for_api_status
from .errors import (
    ApiError,
    AuthenticationError,
    PayloadTooLargeError,
    ValidationError,
)
from .interface import IndexingApiInterface

__all__ = [
    "IndexingApiInterface",
    "Memo8ApiClient",
    "create_api_client",
    "raise_for_api_status",
    "ApiError",
    "AuthenticationError",
    "ValidationError",
    "PayloadTooLargeError",
]
