"""
Credentials for repolink.

The hosting API is always called with a personal access token (PAT). Pushing
uses a PushCredential chosen once from the transfer protocol:

- HttpsCredential: the PAT sent as the password of a placeholder username
- SshCredential: a keypair on disk, or whatever ssh-agent offers
"""

import base64
import hashlib
import os
import shlex
from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field, replace
from pathlib import Path

from cryptography.hazmat.primitives import serialization

from repolink.exceptions import AuthenticationError, ConfigurationError
from repolink.types.repos import Protocol

DEFAULT_TOKEN_ENV_VARS = ("GITHUB_PAT", "GITHUB_TOKEN")
DEFAULT_SSH_KEY_NAMES = ("id_ed25519", "id_rsa")
PLACEHOLDER_USERNAME = "USERNAME"


def resolve_pat(
    env_vars: Sequence[str] = DEFAULT_TOKEN_ENV_VARS,
    environ: Mapping[str, str] | None = None,
) -> str | None:
    """
    Look up a personal access token in the environment.

    Args:
        env_vars: Variable names to check, in priority order
        environ: Environment mapping (default: os.environ)

    Returns:
        The first non-empty value found, or None
    """
    if environ is None:
        environ = os.environ
    for name in env_vars:
        value = environ.get(name, "").strip()
        if value:
            return value
    return None


class PushCredential(ABC):
    """Abstract base class for push credentials."""

    protocol: Protocol

    @abstractmethod
    def git_config(self) -> list[str]:
        """Return ``-c key=value`` arguments to place before the git subcommand."""
        pass

    @abstractmethod
    def git_env(self) -> dict[str, str]:
        """Return environment variables to add to the git process."""
        pass


@dataclass(frozen=True)
class HttpsCredential(PushCredential):
    """Token-as-password credential for HTTPS remotes."""

    token: str = field(repr=False)
    username: str = PLACEHOLDER_USERNAME
    protocol = Protocol.HTTPS

    def git_config(self) -> list[str]:
        # One-shot header; never written to the repository config
        basic = base64.b64encode(f"{self.username}:{self.token}".encode()).decode()
        return ["-c", f"http.extraHeader=Authorization: Basic {basic}"]

    def git_env(self) -> dict[str, str]:
        return {"GIT_TERMINAL_PROMPT": "0"}


@dataclass(frozen=True)
class SshCredential(PushCredential):
    """
    Keypair credential for SSH remotes.

    With no private key, git falls back to the user's ssh configuration and
    ssh-agent, which also handles passphrases.
    """

    private_key: Path | None = None
    public_key: Path | None = None
    # Restrict ssh to private_key; off for auto-detected keys so ~/.ssh/config still applies
    identities_only: bool = True
    protocol = Protocol.SSH

    def git_config(self) -> list[str]:
        return []

    def git_env(self) -> dict[str, str]:
        if self.private_key is None:
            return {}
        command = f"ssh -i {shlex.quote(str(self.private_key))}"
        if self.identities_only:
            command += " -o IdentitiesOnly=yes"
        return {"GIT_SSH_COMMAND": command}

    def fingerprint(self) -> str | None:
        """
        Return the SHA256 fingerprint of the public key, as ``ssh-keygen -l`` prints it.

        Returns:
            "SHA256:<base64>" or None when no public key file is known

        Raises:
            ConfigurationError: If the public key file cannot be parsed
        """
        if self.public_key is None:
            return None
        try:
            key = serialization.load_ssh_public_key(self.public_key.read_bytes())
        except (OSError, ValueError) as e:
            raise ConfigurationError(
                f"Cannot read SSH public key {self.public_key}: {e}"
            ) from e

        openssh = key.public_bytes(
            encoding=serialization.Encoding.OpenSSH,
            format=serialization.PublicFormat.OpenSSH,
        )
        blob = base64.b64decode(openssh.split()[1])
        digest = base64.b64encode(hashlib.sha256(blob).digest()).decode().rstrip("=")
        return f"SHA256:{digest}"

    @classmethod
    def from_key_file(cls, path: str | Path) -> "SshCredential":
        """
        Build a credential from a private key file.

        The public key is expected next to it with a ``.pub`` suffix.

        Raises:
            ConfigurationError: If the private key file does not exist
        """
        private_key = Path(path).expanduser()
        if not private_key.is_file():
            raise ConfigurationError(f"SSH private key not found: {private_key}")
        public_key = private_key.with_name(private_key.name + ".pub")
        return cls(
            private_key=private_key,
            public_key=public_key if public_key.is_file() else None,
        )

    @classmethod
    def default(cls, ssh_dir: str | Path | None = None) -> "SshCredential":
        """Use the first default keypair found in ``~/.ssh``, else defer to ssh-agent."""
        base = Path(ssh_dir) if ssh_dir is not None else Path.home() / ".ssh"
        for name in DEFAULT_SSH_KEY_NAMES:
            if (base / name).is_file():
                return replace(cls.from_key_file(base / name), identities_only=False)
        return cls()


def resolve_push_credential(
    protocol: Protocol | str,
    token: str | None,
    ssh_key: str | Path | None = None,
) -> PushCredential:
    """
    Choose the push credential for ``protocol``.

    Args:
        protocol: "https" or "ssh"
        token: Personal access token (required for https)
        ssh_key: Explicit private key path (ssh only, optional)

    Raises:
        AuthenticationError: If https is requested without a token
        ConfigurationError: If the protocol is unknown or the key file is missing
    """
    try:
        protocol = Protocol(protocol)
    except ValueError as e:
        raise ConfigurationError(
            f"Invalid protocol: {protocol!r}. Must be 'https' or 'ssh'"
        ) from e

    if protocol is Protocol.HTTPS:
        if not token:
            raise AuthenticationError(
                "MISSING_TOKEN", "A personal access token is required to push over https"
            )
        return HttpsCredential(token=token)

    if ssh_key is not None:
        return SshCredential.from_key_file(ssh_key)
    return SshCredential.default()
