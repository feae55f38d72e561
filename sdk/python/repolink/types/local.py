"""Local repository data models."""

from dataclasses import dataclass
from pathlib import Path


@dataclass
class Repository:
    """Handle to a local git work tree."""

    path: Path
    branch: str | None
    fresh: bool = False  # True if `git init` ran during this invocation
    # Work tree status as of the last LocalRepoManager.is_dirty() call (None: not checked)
    dirty: bool | None = None


@dataclass(frozen=True)
class CommitRef:
    """A commit created or read by LocalRepoManager."""

    oid: str
    message: str
