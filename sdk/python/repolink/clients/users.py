"""Authenticated user resource client."""

from typing import TYPE_CHECKING

from repolink.exceptions import AuthenticationError

if TYPE_CHECKING:
    from repolink.transport import HTTPTransport


class UsersClient:
    """Client for the authenticated identity."""

    def __init__(self, transport: "HTTPTransport") -> None:
        """
        Initialize the users client.

        Args:
            transport: HTTP transport for making requests
        """
        self.transport = transport

    def me(self) -> str:
        """
        Return the login of the identity that owns the access token.

        Raises:
            AuthenticationError: If the token is invalid or expired
        """
        data = self.transport.request(method="GET", path="/user")
        login = data.get("login") if isinstance(data, dict) else None
        if not login:
            raise AuthenticationError(
                "UNAUTHORIZED", "Could not determine username from access token"
            )
        return login
