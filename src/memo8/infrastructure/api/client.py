"""HTTP client for the memo8 API."""

import logging
from typing import Any, Optional

import httpx

from .errors import (
    ApiError,
    AuthenticationError,
    PayloadTooLargeError,
    ValidationError,
)
from .interface import IndexingApiInterface

logger = logging.getLogger(__name__)

CONNECT_ERROR_MESSAGE = "Cannot connect to API. Is the server running?"
SESSION_EXPIRED_MESSAGE = "Session expired. Please login again with: memo8 login"


def _decode_body(response: httpx.Response) -> Any:
    """Best-effort JSON decode of a response body."""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


def raise_for_api_status(response: httpx.Response) -> None:
    """
    Translate a non-2xx response into the matching ApiError subclass.

    Raises:
        AuthenticationError: 401
        PayloadTooLargeError: 413
        ValidationError: 422
        ApiError: Any other non-success status
    """
    if response.is_success:
        return

    status = response.status_code
    data = _decode_body(response)
    server_message = data.get("message") if isinstance(data, dict) else None

    if status == 401:
        raise AuthenticationError(SESSION_EXPIRED_MESSAGE, status, data)
    if status == 413:
        raise PayloadTooLargeError(server_message or "Payload too large", status, data)
    if status == 422:
        errors = data.get("errors") if isinstance(data, dict) else None
        raise ValidationError(
            server_message or "Validation failed",
            errors if isinstance(errors, dict) else {},
        )
    raise ApiError(server_message or f"API error: {status}", status, data)


class Memo8ApiClient(IndexingApiInterface):
    """
    Async client for the memo8 REST API.

    Sends the bearer token and team header on every request, applies a
    fixed per-request timeout and maps failures onto the ApiError
    hierarchy. Requests are issued one at a time by callers; the pooled
    httpx client is reused between them.
    """

    def __init__(
        self,
        base_url: str,
        token: str = "",
        team_id: Optional[int] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the API client.

        Args:
            base_url: API root, e.g. https://api.memo8.ai/api
            token: Bearer token; omitted from requests when empty
            team_id: Value for the X-Team-Id header, if any
            timeout: Per-request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self._base_url = base_url.rstrip("/")
        self._token = token
        self._team_id = team_id
        self._timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    def _headers(self) -> dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        if self._team_id:
            headers["X-Team-Id"] = str(self._team_id)
        return headers

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the pooled HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self._base_url + "/",
                headers=self._headers(),
                timeout=self._timeout,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client and release connections."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "Memo8ApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def request(
        self,
        method: str,
        path: str,
        json: Any = None,
        params: Optional[dict[str, Any]] = None,
    ) -> Any:
        """
        Issue a request and return the decoded response body.

        Args:
            method: HTTP method
            path: Path relative to the API root (e.g. "/projects/1")
            json: Optional JSON body
            params: Optional query parameters

        Returns:
            Decoded JSON body, text for non-JSON bodies, or None when empty

        Raises:
            ApiError: For transport failures and non-2xx responses
        """
        client = await self._get_client()
        url = path.lstrip("/")

        try:
            response = await client.request(method, url, json=json, params=params)
        except httpx.TimeoutException as e:
            raise ApiError(f"Request timed out after {self._timeout:g}s") from e
        except httpx.ConnectError as e:
            raise ApiError(CONNECT_ERROR_MESSAGE) from e
        except httpx.RequestError as e:
            raise ApiError(f"Request error: {e}") from e

        logger.debug(f"{method} {url} -> {response.status_code}")
        raise_for_api_status(response)
        return _decode_body(response)

    async def post(self, path: str, data: Any = None) -> Any:
        return await self.request("POST", path, json=data)

    async def index_files(self, project_id: int, files: list[dict[str, str]]) -> None:
        await self.post(f"/projects/{project_id}/codebase/index", {"files": files})


def create_api_client(
    base_url: str,
    token: str = "",
    team_id: Optional[int] = None,
    timeout: float = 30.0,
) -> Memo8ApiClient:
    """
    Factory function to create an API client.

    Args:
        base_url: API root URL
        token: Bearer token
        team_id: Optional team header value
        timeout: Per-request timeout in seconds

    Returns:
        Configured Memo8ApiClient instance
    """
    return Memo8ApiClient(
        base_url=base_url,
        token=token,
        team_id=team_id,
        timeout=timeout,
    )
