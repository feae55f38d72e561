"""Repositories resource client."""

from typing import TYPE_CHECKING, Any

from repolink.types.repos import RemoteDescriptor

if TYPE_CHECKING:
    from repolink.transport import HTTPTransport


class ReposClient:
    """Client for repository-related operations."""

    def __init__(self, transport: "HTTPTransport") -> None:
        """
        Initialize the repos client.

        Args:
            transport: HTTP transport for making requests
        """
        self.transport = transport

    def create(
        self,
        name: str,
        description: str | None = None,
        options: dict[str, Any] | None = None,
    ) -> RemoteDescriptor:
        """
        Create a new repository owned by the authenticated user.

        Args:
            name: Repository name
            description: Optional repository description
            options: Provider-specific flags passed through verbatim
                (e.g. ``{"private": True}``)

        Returns:
            RemoteDescriptor with clone, SSH and web URLs

        Raises:
            AuthenticationError: If the token is invalid
            ValidationError: If the API rejects the request (e.g. name taken)
        """
        body: dict[str, Any] = dict(options or {})
        body["name"] = name
        if description is not None:
            body["description"] = description

        data = self.transport.request(method="POST", path="/user/repos", body=body)
        return RemoteDescriptor.from_api(data)

    def list_owned(self) -> list[dict[str, Any]]:
        """
        List every repository owned by the authenticated user.

        All pages are fetched.

        Returns:
            Raw repository payloads
        """
        return list(
            self.transport.paginate("/user/repos", params={"affiliation": "owner"})
        )
