"""
Tests for repolink testing utilities.

Verifies that MockHostingClient and fixtures work correctly.
"""

import subprocess
from pathlib import Path

import pytest

from repolink.exceptions import RateLimitedError
from repolink.testing import (
    MockHostingClient,
    create_mock_descriptor,
    create_owned_repo_payload,
    init_bare_repository,
)
from repolink.types.repos import RemoteDescriptor


class TestMockHostingClient:
    """Tests for MockHostingClient."""

    def test_default_responses(self) -> None:
        """Test that mock client returns sensible defaults."""
        mock = MockHostingClient(login="octocat")

        assert mock.users.me() == "octocat"
        assert mock.repos.list_owned() == []

        repo = mock.repos.create("demo", "a demo", {"private": True})
        assert repo.name == "demo"
        assert repo.owner == "octocat"
        assert repo.clone_url == "https://github.com/octocat/demo.git"
        assert repo.private is True

    def test_configured_responses(self) -> None:
        """Test that configured responses are returned."""
        mock = MockHostingClient()
        custom = create_mock_descriptor(name="custom", clone_url="/srv/git/custom.git")

        mock.repos.configure_create(response=custom)
        mock.repos.configure_list_owned(response=[create_owned_repo_payload("a")])
        mock.users.configure_me(response="someone")

        assert mock.repos.create("any-name") == custom
        assert [r["name"] for r in mock.repos.list_owned()] == ["a"]
        assert mock.users.me() == "someone"

    def test_configured_errors(self) -> None:
        """Test that configured errors are raised."""
        mock = MockHostingClient()
        mock.repos.configure_list_owned(
            error=RateLimitedError("RATE_LIMITED", "slow down", retry_after=60)
        )

        with pytest.raises(RateLimitedError) as exc_info:
            mock.repos.list_owned()

        assert exc_info.value.retry_after == 60

    def test_call_tracking(self) -> None:
        """Test that calls are tracked."""
        mock = MockHostingClient()

        assert not mock.was_called("repos.create")

        mock.repos.create("one")
        mock.repos.create("two")
        mock.users.me()

        assert mock.was_called("repos.create")
        assert mock.call_count("repos.create") == 2
        assert mock.call_count("users.me") == 1
        assert mock.call_count("repos.list_owned") == 0

    def test_get_calls(self) -> None:
        """Test retrieving call details."""
        mock = MockHostingClient()

        mock.repos.create("demo", "desc", {"private": True})

        calls = mock.get_calls("repos.create")
        assert len(calls) == 1
        assert calls[0].args == ("demo",)
        assert calls[0].kwargs == {"description": "desc", "options": {"private": True}}
        assert len(mock.get_calls()) == 1

    def test_reset(self) -> None:
        """Test resetting the mock."""
        mock = MockHostingClient()
        mock.users.configure_me(response="someone")
        mock.users.me()

        mock.reset()

        assert mock.get_calls() == []
        assert mock.users.me() == "mock-user"

    def test_context_manager(self) -> None:
        """Test mock client as context manager."""
        with MockHostingClient() as mock:
            assert mock.token == "mock-token"


class TestHelperFunctions:
    """Tests for helper functions."""

    def test_create_mock_descriptor(self) -> None:
        descriptor = create_mock_descriptor(name="x", owner="octocat", private=True)

        assert isinstance(descriptor, RemoteDescriptor)
        assert descriptor.full_name == "octocat/x"
        assert descriptor.ssh_url == "git@github.com:octocat/x.git"
        assert descriptor.private is True

    def test_create_owned_repo_payload(self) -> None:
        payload = create_owned_repo_payload("demo", owner="octocat")

        assert payload["owner"] == {"login": "octocat"}
        assert RemoteDescriptor.from_api(payload).html_url == "https://github.com/octocat/demo"

    def test_init_bare_repository(self, tmp_path: Path, git_env: Path) -> None:
        path = init_bare_repository(tmp_path / "remote.git")

        result = subprocess.run(
            ["git", "rev-parse", "--is-bare-repository"],
            cwd=path,
            capture_output=True,
            text=True,
            check=True,
        )
        assert result.stdout.strip() == "true"


class TestFixtures:
    """Tests for the pytest fixtures."""

    def test_git_env_isolates_global_config(self, git_env: Path) -> None:
        assert git_env.read_text() == ""

    def test_ssh_keypair(self, ssh_keypair: tuple[Path, Path]) -> None:
        private, public = ssh_keypair

        assert b"OPENSSH PRIVATE KEY" in private.read_bytes()
        assert public.read_text().startswith("ssh-ed25519 ")

    def test_sample_descriptor(self, sample_descriptor: RemoteDescriptor) -> None:
        assert sample_descriptor.name == "demo"
        assert sample_descriptor.description == "test repo"
