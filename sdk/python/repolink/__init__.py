"""repolink - link a local project to a freshly created hosted repository."""

from repolink.client import HostingClient
from repolink.config_store import ConfigStore
from repolink.credentials import (
    HttpsCredential,
    PushCredential,
    SshCredential,
    resolve_pat,
    resolve_push_credential,
)
from repolink.exceptions import (
    AlreadyExistsConflictError,
    AuthenticationError,
    AuthorizationError,
    ConfigurationError,
    ConflictError,
    GitCommandError,
    NameConflictError,
    NetworkError,
    NotFoundError,
    NothingToCommitError,
    PartialLinkageError,
    RateLimitedError,
    RemoteAlreadyConfiguredError,
    RepoLinkError,
    ServerError,
    ValidationError,
)
from repolink.git import LocalRepoManager
from repolink.logging import configure_logging, get_logger
from repolink.orchestrator import LinkOrchestrator, LinkReport, LinkRequest, LinkStep
from repolink.provisioner import RemoteRepoProvisioner
from repolink.registry import RemoteRegistry
from repolink.scaffold import ProjectMarker, RStudioProjectMarker
from repolink.transport import HTTPTransport
from repolink.types import (
    DEFAULT_SCHEMA,
    CommitRef,
    LinkageSchema,
    Protocol,
    RemoteDescriptor,
    Repository,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Workflow
    "LinkOrchestrator",
    "LinkRequest",
    "LinkReport",
    "LinkStep",
    # Components
    "LocalRepoManager",
    "RemoteRegistry",
    "RemoteRepoProvisioner",
    "ConfigStore",
    "ProjectMarker",
    "RStudioProjectMarker",
    # Hosting API
    "HostingClient",
    "HTTPTransport",
    # Credentials
    "PushCredential",
    "HttpsCredential",
    "SshCredential",
    "resolve_pat",
    "resolve_push_credential",
    # Types
    "Repository",
    "CommitRef",
    "Protocol",
    "RemoteDescriptor",
    "LinkageSchema",
    "DEFAULT_SCHEMA",
    # Exceptions
    "RepoLinkError",
    "ConfigurationError",
    "AuthenticationError",
    "AuthorizationError",
    "NotFoundError",
    "ConflictError",
    "NameConflictError",
    "AlreadyExistsConflictError",
    "RemoteAlreadyConfiguredError",
    "RateLimitedError",
    "NetworkError",
    "ValidationError",
    "ServerError",
    "GitCommandError",
    "NothingToCommitError",
    "PartialLinkageError",
    # Logging
    "configure_logging",
    "get_logger",
]
