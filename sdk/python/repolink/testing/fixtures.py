"""
Pytest fixtures for repolink testing.

Provides isolated git environments, local stand-ins for hosted remotes,
and a mock hosting client.
"""

import subprocess
from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ed25519

from repolink.testing.mock import MockHostingClient
from repolink.types.repos import RemoteDescriptor


# ============================================================================
# Helper functions
# ============================================================================


def create_mock_descriptor(
    name: str = "demo",
    owner: str = "mock-user",
    clone_url: str | None = None,
    ssh_url: str | None = None,
    description: str | None = None,
    **kwargs: Any,
) -> RemoteDescriptor:
    """
    Create a RemoteDescriptor with sensible defaults.

    Pass a local bare repository path as ``clone_url``/``ssh_url`` to make
    pushes land on disk instead of a hosting service.
    """
    return RemoteDescriptor(
        name=name,
        description=description,
        clone_url=clone_url or f"https://github.com/{owner}/{name}.git",
        ssh_url=ssh_url or f"git@github.com:{owner}/{name}.git",
        html_url=kwargs.pop("html_url", f"https://github.com/{owner}/{name}"),
        owner=owner,
        full_name=kwargs.pop("full_name", f"{owner}/{name}"),
        url=kwargs.pop("url", f"https://api.github.com/repos/{owner}/{name}"),
        default_branch=kwargs.pop("default_branch", "main"),
        private=kwargs.pop("private", False),
    )


def create_owned_repo_payload(name: str, owner: str = "mock-user") -> dict[str, Any]:
    """Create a minimal API payload for an owned repository."""
    return {
        "name": name,
        "full_name": f"{owner}/{name}",
        "owner": {"login": owner},
        "clone_url": f"https://github.com/{owner}/{name}.git",
        "ssh_url": f"git@github.com:{owner}/{name}.git",
        "html_url": f"https://github.com/{owner}/{name}",
    }


def init_bare_repository(path: Path) -> Path:
    """Create a bare repository to stand in for a hosted remote."""
    subprocess.run(
        ["git", "init", "--bare", "-q", str(path)],
        check=True,
        capture_output=True,
        text=True,
    )
    return path


# ============================================================================
# Environment fixtures
# ============================================================================


@pytest.fixture
def git_env(tmp_path_factory: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch) -> Path:
    """
    Isolate git from the user's and the system's configuration.

    Returns the path of the (empty) global config file in use.
    """
    home = tmp_path_factory.mktemp("home")
    global_config = home / ".gitconfig"
    global_config.write_text("")

    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("GIT_CONFIG_GLOBAL", str(global_config))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.setenv("GIT_AUTHOR_NAME", "Test Author")
    monkeypatch.setenv("GIT_AUTHOR_EMAIL", "author@example.org")
    monkeypatch.setenv("GIT_COMMITTER_NAME", "Test Author")
    monkeypatch.setenv("GIT_COMMITTER_EMAIL", "author@example.org")
    for var in ("GIT_DIR", "GIT_WORK_TREE", "GITHUB_PAT", "GITHUB_TOKEN"):
        monkeypatch.delenv(var, raising=False)
    return global_config


@pytest.fixture
def bare_remote(tmp_path_factory: pytest.TempPathFactory) -> Path:
    """Provide an empty bare repository acting as the hosted remote."""
    return init_bare_repository(tmp_path_factory.mktemp("remote") / "remote.git")


# ============================================================================
# Mock client fixtures
# ============================================================================


@pytest.fixture
def mock_client() -> Generator[MockHostingClient, None, None]:
    """
    Provide a MockHostingClient for testing.

    Example:
        ```python
        def test_my_feature(mock_client):
            mock_client.repos.configure_create(response=my_descriptor)
            result = my_function(mock_client)
            assert mock_client.was_called("repos.create")
        ```
    """
    client = MockHostingClient(login="mock-user")
    yield client
    client.reset()


@pytest.fixture
def sample_descriptor() -> RemoteDescriptor:
    """Provide a sample RemoteDescriptor."""
    return create_mock_descriptor(name="demo", description="test repo")


# ============================================================================
# SSH fixtures
# ============================================================================


@pytest.fixture
def ssh_keypair(tmp_path_factory: pytest.TempPathFactory) -> tuple[Path, Path]:
    """Provide a generated Ed25519 keypair in OpenSSH format: (private, public)."""
    ssh_dir = tmp_path_factory.mktemp("ssh")
    private_key = ed25519.Ed25519PrivateKey.generate()

    private_path = ssh_dir / "id_ed25519"
    private_path.write_bytes(
        private_key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.OpenSSH,
            encryption_algorithm=serialization.NoEncryption(),
        )
    )
    public_path = ssh_dir / "id_ed25519.pub"
    public_path.write_bytes(
        private_key.public_key().public_bytes(
            encoding=serialization.Encoding.OpenSSH,
            format=serialization.PublicFormat.OpenSSH,
        )
        + b" test@example.org\n"
    )
    return private_path, public_path
