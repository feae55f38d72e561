"""
Repository-local configuration storage.

Linkage metadata lives in the repository's own git config (``--local``
scope), never in the user's global or the system config.
"""

import re
from collections.abc import Mapping

from repolink.exceptions import ConfigurationError, GitCommandError
from repolink.git import LocalRepoManager
from repolink.logging import get_logger
from repolink.types.config import DEFAULT_SCHEMA, LinkageConfig, LinkageSchema
from repolink.types.local import Repository

logger = get_logger()

# <section>.<name>, no subsections and no separators inside the name
_KEY_RE = re.compile(r"^[A-Za-z][A-Za-z0-9-]*\.[A-Za-z][A-Za-z0-9-]*$")

# `git config` exits 1 when the key is absent
_KEY_NOT_FOUND = 1


class ConfigStore:
    """Read and write key/value pairs in a repository's local git config."""

    def __init__(
        self,
        manager: LocalRepoManager,
        schema: LinkageSchema = DEFAULT_SCHEMA,
    ) -> None:
        """
        Initialize the store.

        Args:
            manager: Runs git inside the repository
            schema: Namespace and field names of the linkage keys
        """
        self.manager = manager
        self.schema = schema

    def set_local(self, repo: Repository, values: Mapping[str, str]) -> None:
        """
        Write ``values`` to the repository's local config.

        Existing keys are overwritten; new keys are added.

        Raises:
            ConfigurationError: If a key is malformed or a value is not a string
        """
        for key, value in values.items():
            self._validate(key, value)

        for key, value in values.items():
            self.manager.run(repo, "config", "--local", "--replace-all", key, value)
            logger.debug("Set local config %s", key)

    def get_local(self, repo: Repository, key: str) -> str | None:
        """Return the stored value of ``key``, or None when it is not set."""
        self._validate(key, "")
        result = self.manager.run(repo, "config", "--local", "--get", key, check=False)
        if result.returncode == _KEY_NOT_FOUND:
            return None
        if result.returncode != 0:
            raise GitCommandError(
                ["git", "config", "--local", "--get", key],
                result.returncode,
                result.stderr,
            )
        return result.stdout[:-1] if result.stdout.endswith("\n") else result.stdout

    def set_fields(self, repo: Repository, values: Mapping[str, str]) -> None:
        """Write schema fields (e.g. ``{"user": "octocat"}``) under the namespace."""
        self.set_local(repo, {self.schema.key(k): v for k, v in values.items()})

    def get_field(self, repo: Repository, field: str) -> str | None:
        """Read one schema field from the namespace."""
        return self.get_local(repo, self.schema.key(field))

    def read_linkage(self, repo: Repository) -> LinkageConfig:
        """Return every key stored under the schema namespace."""
        pattern = f"^{re.escape(self.schema.namespace.lower())}\\."
        result = self.manager.run(
            repo, "config", "--local", "-z", "--get-regexp", pattern, check=False
        )
        if result.returncode == _KEY_NOT_FOUND:
            return {}
        if result.returncode != 0:
            raise GitCommandError(
                ["git", "config", "--local", "--get-regexp", pattern],
                result.returncode,
                result.stderr,
            )

        linkage: LinkageConfig = {}
        for record in result.stdout.split("\0"):
            if not record:
                continue
            key, _, value = record.partition("\n")
            linkage[key] = value
        return linkage

    @staticmethod
    def _validate(key: str, value: object) -> None:
        if not _KEY_RE.match(key):
            raise ConfigurationError(
                f"Invalid config key {key!r}; expected '<section>.<name>'"
            )
        if not isinstance(value, str):
            raise ConfigurationError(
                f"Config value for {key!r} must be a string, got {type(value).__name__}"
            )
