"""
Integration tests for repolink.

These tests talk to the real hosting API with a real access token. They
only read (identity and owned repositories); nothing is created.
"""

import os
from collections.abc import Generator

import pytest

from repolink.client import HostingClient
from repolink.exceptions import AuthenticationError
from repolink.git import LocalRepoManager
from repolink.provisioner import RemoteRepoProvisioner
from repolink.registry import RemoteRegistry

# Skip all integration tests unless explicitly enabled
pytestmark = pytest.mark.skipif(
    os.environ.get("REPOLINK_INTEGRATION_TESTS") != "1",
    reason="Integration tests require REPOLINK_INTEGRATION_TESTS=1 and GITHUB_PAT",
)


@pytest.fixture
def client() -> Generator[HostingClient, None, None]:
    with HostingClient.from_env() as client:
        yield client


class TestIdentity:
    """Identity resolution against the live API."""

    def test_resolve_identity(self, client: HostingClient) -> None:
        login = RemoteRepoProvisioner(client).resolve_identity()

        assert login
        assert "/" not in login

    def test_bad_token_is_rejected(self) -> None:
        base_url = os.environ.get("REPOLINK_API_URL", HostingClient.DEFAULT_BASE_URL)
        with HostingClient(token="ghp_invalid", base_url=base_url) as bad:
            with pytest.raises(AuthenticationError):
                RemoteRepoProvisioner(bad).resolve_identity()


class TestOwnedRepositories:
    """Listing across every page."""

    def test_list_owned_repo_names(self, client: HostingClient) -> None:
        login = client.users.me()
        payloads = client.repos.list_owned()

        names = RemoteRegistry(LocalRepoManager(), client).list_owned_repo_names(login)

        assert len(names) == len({p["name"] for p in payloads})
        assert all(p["owner"]["login"].lower() == login.lower() for p in payloads)
