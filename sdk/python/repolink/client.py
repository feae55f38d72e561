"""
repolink hosting API client.

Provides the primary interface for talking to the hosting service.
"""

import os
from typing import Any

import httpx

from repolink.clients import ReposClient, UsersClient
from repolink.credentials import DEFAULT_TOKEN_ENV_VARS, resolve_pat
from repolink.exceptions import ConfigurationError
from repolink.transport import HTTPTransport


class HostingClient:
    """
    Main client for the hosting API.

    Aggregates the resource clients and handles authentication.

    Example:
        ```python
        from repolink import HostingClient

        client = HostingClient(token="ghp_...")
        # Or read GITHUB_PAT / GITHUB_TOKEN
        client = HostingClient.from_env()

        login = client.users.me()
        repo = client.repos.create(name="my-repo", options={"private": True})
        ```
    """

    DEFAULT_BASE_URL = "https://api.github.com"
    DEFAULT_TIMEOUT = 30.0

    def __init__(
        self,
        token: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        http_transport: httpx.BaseTransport | None = None,
    ) -> None:
        """
        Initialize the hosting client.

        Args:
            token: Personal access token with the "repo" scope
            base_url: Base URL for API requests (default: https://api.github.com)
            timeout: Request timeout in seconds (default: 30.0)
            http_transport: Optional httpx transport, for tests
        """
        self.token = token
        self.base_url = base_url
        self.timeout = timeout

        self._transport = HTTPTransport(
            base_url=base_url,
            token=token,
            timeout=timeout,
            http_transport=http_transport,
        )

        self.users = UsersClient(self._transport)
        self.repos = ReposClient(self._transport)

    @classmethod
    def from_env(cls, timeout: float | None = None) -> "HostingClient":
        """
        Create a client from environment variables.

        Environment variables:
            GITHUB_PAT, GITHUB_TOKEN: Personal access token, checked in that order (required)
            REPOLINK_API_URL: Base URL for the API (optional, default: https://api.github.com)
            REPOLINK_TIMEOUT: Request timeout in seconds (optional, default: 30)

        Raises:
            ConfigurationError: If no token is set or the timeout is malformed
        """
        token = resolve_pat()
        if not token:
            raise ConfigurationError(
                f"No access token found; set one of {', '.join(DEFAULT_TOKEN_ENV_VARS)}"
            )

        base_url = os.environ.get("REPOLINK_API_URL", cls.DEFAULT_BASE_URL)

        if timeout is None:
            raw_timeout = os.environ.get("REPOLINK_TIMEOUT")
            try:
                timeout = float(raw_timeout) if raw_timeout else cls.DEFAULT_TIMEOUT
            except ValueError as e:
                raise ConfigurationError(
                    f"Invalid REPOLINK_TIMEOUT: {raw_timeout!r}"
                ) from e

        return cls(token=token, base_url=base_url, timeout=timeout)

    @property
    def transport(self) -> HTTPTransport:
        """Get the underlying HTTP transport (for advanced use cases)."""
        return self._transport

    def close(self) -> None:
        """Close the client and release resources."""
        self._transport.close()

    def __enter__(self) -> "HostingClient":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
