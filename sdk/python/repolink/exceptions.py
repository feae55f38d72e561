"""repolink exception classes."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from repolink.types.repos import RemoteDescriptor


class RepoLinkError(Exception):
    """Base exception for all repolink errors."""

    def __init__(
        self, code: str, message: str, request_id: str | None = None
    ) -> None:
        self.code = code
        self.message = message
        self.request_id = request_id
        # Set by LinkOrchestrator to the name of the failing step
        self.step: str | None = None
        super().__init__(f"[{code}] {message}")


class ConfigurationError(RepoLinkError):
    """Raised when configuration is invalid or missing."""

    def __init__(self, message: str) -> None:
        super().__init__("CONFIGURATION_ERROR", message)


class AuthenticationError(RepoLinkError):
    """Raised when the access token is missing, invalid or expired."""

    pass


class AuthorizationError(RepoLinkError):
    """Raised when access is denied."""

    pass


class NotFoundError(RepoLinkError):
    """Raised when a resource is not found."""

    pass


class ConflictError(RepoLinkError):
    """Raised on conflicts with existing local or remote state."""

    pass


class NameConflictError(ConflictError):
    """Raised when the identity already owns a repository with that name."""

    def __init__(
        self,
        name: str,
        message: str | None = None,
        request_id: str | None = None,
    ) -> None:
        self.name = name
        super().__init__(
            "NAME_CONFLICT",
            message or f"You already own a repository named '{name}'",
            request_id,
        )


class AlreadyExistsConflictError(ConflictError):
    """Raised when a directory is in an ambiguous state for initialization."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        super().__init__("ALREADY_EXISTS", f"{path}: {reason}")


class RemoteAlreadyConfiguredError(ConflictError):
    """Raised when the local repository already has one or more remotes."""

    def __init__(self, remotes: dict[str, str]) -> None:
        self.remotes = dict(remotes)
        names = ", ".join(sorted(remotes))
        super().__init__(
            "REMOTE_ALREADY_CONFIGURED",
            f"Repository already has remote(s): {names}. "
            "Linking a repository with an existing remote is not supported",
        )


class RateLimitedError(RepoLinkError):
    """Raised when rate limited."""

    def __init__(
        self,
        code: str,
        message: str,
        retry_after: int,
        request_id: str | None = None,
    ) -> None:
        super().__init__(code, message, request_id)
        self.retry_after = retry_after


class NetworkError(RepoLinkError):
    """Raised when the hosting API cannot be reached."""

    pass


class ValidationError(RepoLinkError):
    """Raised on validation errors."""

    pass


class ServerError(RepoLinkError):
    """Raised on server errors (5xx)."""

    pass


class GitCommandError(RepoLinkError):
    """Raised when a git invocation exits non-zero."""

    def __init__(
        self,
        command: list[str],
        returncode: int,
        stderr: str,
        code: str = "GIT_COMMAND_FAILED",
    ) -> None:
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        detail = stderr.strip() or f"exit status {returncode}"
        super().__init__(code, f"{' '.join(command)}: {detail}")


class NothingToCommitError(GitCommandError):
    """Raised when a commit is requested on a clean working tree."""

    def __init__(self, command: list[str]) -> None:
        super().__init__(command, 1, "nothing to commit", code="NOTHING_TO_COMMIT")


class PartialLinkageError(RepoLinkError):
    """
    Raised when a step fails after the remote repository was created.

    The remote exists but is not (fully) linked or pushed. It must be
    reconciled or deleted by hand.
    """

    def __init__(
        self,
        step: str,
        cause: RepoLinkError,
        descriptor: "RemoteDescriptor",
    ) -> None:
        self.cause = cause
        self.descriptor = descriptor
        super().__init__(
            "PARTIAL_LINKAGE",
            f"Remote repository {descriptor.html_url or descriptor.name} was "
            f"created but step '{step}' failed: {cause}",
        )
        self.step = step
