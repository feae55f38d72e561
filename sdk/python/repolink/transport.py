"""
HTTP Transport for the hosting API.

Handles HTTP communication, token authentication, Link-header pagination
and error handling. Requests are never retried here; retry policy belongs
to the caller.
"""

import time
from collections.abc import Iterator
from typing import Any

import httpx

from repolink.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    NetworkError,
    NotFoundError,
    RateLimitedError,
    RepoLinkError,
    ServerError,
    ValidationError,
)
from repolink.logging import log_http_request, log_http_response

DEFAULT_PER_PAGE = 100


class HTTPTransport:
    """
    HTTP transport layer with bearer-token authentication.

    Handles:
    - Authorization and API version headers
    - Transparent pagination over ``Link: rel="next"``
    - Error response parsing into typed exceptions
    - Connection failures surfaced as NetworkError
    """

    def __init__(
        self,
        base_url: str,
        token: str,
        timeout: float = 30.0,
        http_transport: httpx.BaseTransport | None = None,
    ) -> None:
        """
        Initialize HTTP transport.

        Args:
            base_url: Base URL for API requests (e.g., "https://api.github.com")
            token: Personal access token used as a bearer credential
            timeout: Request timeout in seconds
            http_transport: Optional httpx transport (used by tests to stub the network)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

        self._client = httpx.Client(
            base_url=self.base_url,
            timeout=timeout,
            transport=http_transport,
            headers={
                "Accept": "application/vnd.github+json",
                "Authorization": f"Bearer {token}",
                "X-GitHub-Api-Version": "2022-11-28",
            },
        )

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    def __enter__(self) -> "HTTPTransport":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        body: dict[str, Any] | None = None,
    ) -> Any:
        """
        Make a single authenticated request.

        Args:
            method: HTTP method
            path: API path or absolute URL
            params: Query parameters
            body: JSON request body (for POST/PATCH)

        Returns:
            Parsed JSON response ({} for empty bodies)

        Raises:
            RepoLinkError: On API or network errors
        """
        response = self._send(method, path, params=params, body=body)
        return self._decode(response)

    def paginate(
        self,
        path: str,
        params: dict[str, Any] | None = None,
    ) -> Iterator[Any]:
        """
        Iterate over every item of a paginated list endpoint.

        Follows ``Link: rel="next"`` until exhausted, so callers see the
        full collection rather than one page.

        Args:
            path: API path of the list endpoint
            params: Query parameters for the first page

        Yields:
            Items of each page, in order
        """
        query = {"per_page": DEFAULT_PER_PAGE, **(params or {})}
        url: str | None = path

        while url is not None:
            response = self._send("GET", url, params=query)
            page = self._decode(response)
            if not isinstance(page, list):
                raise ServerError(
                    "UNEXPECTED_RESPONSE",
                    f"Expected a list from {url}, got {type(page).__name__}",
                )
            yield from page

            # The next link already carries the query string
            url = response.links.get("next", {}).get("url")
            query = None

    def _send(
        self,
        method: str,
        url: str,
        params: dict[str, Any] | None = None,
        body: dict[str, Any] | None = None,
    ) -> httpx.Response:
        log_http_request(method, url, body=body)
        started = time.monotonic()

        try:
            response = self._client.request(method, url, params=params, json=body)
        except httpx.RequestError as e:
            raise NetworkError("NETWORK_ERROR", f"{method} {url}: {e}") from e

        elapsed_ms = (time.monotonic() - started) * 1000

        if response.status_code >= 400:
            log_http_response(response.status_code, url, elapsed_ms=elapsed_ms)
            raise self._parse_error_response(response)

        return response

    def _decode(self, response: httpx.Response) -> Any:
        if not response.content:
            data: Any = {}
        else:
            data = response.json()
        log_http_response(response.status_code, str(response.url), body=data)
        return data

    def _parse_error_response(self, response: httpx.Response) -> RepoLinkError:
        """
        Parse an error response into a typed exception.

        Args:
            response: HTTP response with error status

        Returns:
            Appropriate RepoLinkError subclass
        """
        try:
            data = response.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        message = data.get("message") or f"HTTP {response.status_code}"
        details = [
            e.get("message") or e.get("code")
            for e in data.get("errors", [])
            if isinstance(e, dict) and (e.get("message") or e.get("code"))
        ]
        if details:
            message = f"{message} ({'; '.join(details)})"
        request_id = response.headers.get("X-GitHub-Request-Id")

        status_code = response.status_code

        if status_code == 401:
            return AuthenticationError("UNAUTHORIZED", message, request_id)
        elif status_code == 403:
            if self._is_rate_limited(response, message):
                return RateLimitedError(
                    "RATE_LIMITED", message, self._retry_after(response), request_id
                )
            return AuthorizationError("FORBIDDEN", message, request_id)
        elif status_code == 404:
            return NotFoundError("NOT_FOUND", message, request_id)
        elif status_code == 409:
            return ConflictError("CONFLICT", message, request_id)
        elif status_code == 422:
            return ValidationError("UNPROCESSABLE_ENTITY", message, request_id)
        elif status_code == 429:
            return RateLimitedError(
                "RATE_LIMITED", message, self._retry_after(response), request_id
            )
        elif status_code >= 500:
            return ServerError("SERVER_ERROR", message, request_id)
        else:
            return ValidationError("BAD_REQUEST", message, request_id)

    @staticmethod
    def _is_rate_limited(response: httpx.Response, message: str) -> bool:
        if response.headers.get("X-RateLimit-Remaining") == "0":
            return True
        return "rate limit" in message.lower()

    @staticmethod
    def _retry_after(response: httpx.Response) -> int:
        """Seconds until the rate limit resets, defaulting to 60."""
        retry_after = response.headers.get("Retry-After")
        if retry_after is not None:
            try:
                return int(retry_after)
            except ValueError:
                return 60

        reset = response.headers.get("X-RateLimit-Reset")
        if reset is not None:
            try:
                return max(int(reset) - int(time.time()), 0)
            except ValueError:
                return 60

        return 60
