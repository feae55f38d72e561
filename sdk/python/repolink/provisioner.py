"""Creation of repositories on the hosting service."""

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from repolink.exceptions import AuthenticationError, NameConflictError, ValidationError
from repolink.logging import get_logger
from repolink.types.repos import RemoteDescriptor

if TYPE_CHECKING:
    from repolink.client import HostingClient

logger = get_logger()

_ELLIPSIS_WIDTH = 60


def ellipsize(text: str, width: int = _ELLIPSIS_WIDTH) -> str:
    """Shorten ``text`` to ``width`` characters for log messages."""
    if len(text) <= width:
        return text
    return text[: width - 3] + "..."


class RemoteRepoProvisioner:
    """
    Resolves the authenticated identity and creates hosted repositories.

    Transient failures (RateLimitedError, NetworkError) propagate unchanged;
    retrying is left to the caller.
    """

    def __init__(self, client: "HostingClient") -> None:
        self.client = client

    def resolve_identity(self) -> str:
        """
        Return the username that owns the client's access token.

        Raises:
            AuthenticationError: If the token is missing, invalid or expired
        """
        if not self.client.token:
            raise AuthenticationError("MISSING_TOKEN", "No personal access token provided")
        return self.client.users.me()

    def create_repository(
        self,
        name: str,
        description: str | None,
        options: Mapping[str, Any] | None = None,
    ) -> RemoteDescriptor:
        """
        Create a repository owned by the authenticated user.

        Args:
            name: Repository name
            description: Short description
            options: Provider-specific flags, passed through verbatim

        Raises:
            NameConflictError: If the API reports the name is already taken
            RateLimitedError: If the API rate limit is exhausted
            NetworkError: If the API cannot be reached
        """
        logger.info(
            "Creating remote repository: name=%s description=%s",
            name,
            ellipsize(description or ""),
        )
        try:
            return self.client.repos.create(
                name=name, description=description, options=dict(options or {})
            )
        except ValidationError as e:
            if "already exists" in e.message.lower():
                raise NameConflictError(name, request_id=e.request_id) from e
            raise
