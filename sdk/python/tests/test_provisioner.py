"""
Tests for repository provisioning and remote lookups.

Feature: identity, creation, owned-name and local-remote checks
"""

from pathlib import Path

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from repolink.exceptions import (
    AuthenticationError,
    NameConflictError,
    NetworkError,
    ValidationError,
)
from repolink.git import LocalRepoManager
from repolink.provisioner import RemoteRepoProvisioner, ellipsize
from repolink.registry import RemoteRegistry
from repolink.testing import MockHostingClient, create_owned_repo_payload


# ============================================================================
# RemoteRepoProvisioner
# ============================================================================


def test_resolve_identity(mock_client: MockHostingClient) -> None:
    assert RemoteRepoProvisioner(mock_client).resolve_identity() == "mock-user"
    assert mock_client.call_count("users.me") == 1


@pytest.mark.parametrize("token", [None, ""])
def test_resolve_identity_without_token(token: str | None) -> None:
    client = MockHostingClient(token=token)

    with pytest.raises(AuthenticationError) as exc_info:
        RemoteRepoProvisioner(client).resolve_identity()

    assert exc_info.value.code == "MISSING_TOKEN"
    assert not client.was_called("users.me")


def test_create_repository_passes_options(mock_client: MockHostingClient) -> None:
    options = {"private": True, "auto_init": False}

    descriptor = RemoteRepoProvisioner(mock_client).create_repository("demo", "desc", options)

    assert descriptor.name == "demo"
    call = mock_client.get_calls("repos.create")[0]
    assert call.kwargs == {"description": "desc", "options": options}


def test_create_repository_name_taken(mock_client: MockHostingClient) -> None:
    mock_client.repos.configure_create(
        error=ValidationError(
            "UNPROCESSABLE_ENTITY",
            "Repository creation failed. (name already exists on this account)",
            request_id="ABCD",
        )
    )

    with pytest.raises(NameConflictError) as exc_info:
        RemoteRepoProvisioner(mock_client).create_repository("demo", None)

    assert exc_info.value.name == "demo"
    assert exc_info.value.request_id == "ABCD"
    assert isinstance(exc_info.value.__cause__, ValidationError)


def test_create_repository_other_validation_errors_propagate(
    mock_client: MockHostingClient,
) -> None:
    mock_client.repos.configure_create(
        error=ValidationError("UNPROCESSABLE_ENTITY", "name is too long")
    )

    with pytest.raises(ValidationError):
        RemoteRepoProvisioner(mock_client).create_repository("x" * 200, None)


def test_transient_errors_are_not_retried(mock_client: MockHostingClient) -> None:
    mock_client.repos.configure_create(error=NetworkError("NETWORK_ERROR", "down"))

    with pytest.raises(NetworkError):
        RemoteRepoProvisioner(mock_client).create_repository("demo", None)

    assert mock_client.call_count("repos.create") == 1


@given(text=st.text(max_size=200), width=st.integers(min_value=4, max_value=100))
@settings(max_examples=100)
def test_property_ellipsize_bounds_length(text: str, width: int) -> None:
    """For any text, ellipsize SHALL return at most ``width`` characters."""
    result = ellipsize(text, width)

    assert len(result) <= width
    if len(text) <= width:
        assert result == text
    else:
        assert result.endswith("...")


# ============================================================================
# RemoteRegistry
# ============================================================================


def test_owned_names_follow_identity(mock_client: MockHostingClient) -> None:
    mock_client.repos.configure_list_owned(
        response=[
            create_owned_repo_payload("a", owner="Mock-User"),
            create_owned_repo_payload("b", owner="mock-user"),
            create_owned_repo_payload("c", owner="some-org"),
        ]
    )

    names = RemoteRegistry(LocalRepoManager(), mock_client).list_owned_repo_names("mock-user")

    assert names == {"a", "b"}


def test_owned_names_empty(mock_client: MockHostingClient) -> None:
    registry = RemoteRegistry(LocalRepoManager(), mock_client)

    assert registry.list_owned_repo_names("mock-user") == set()


@pytest.mark.usefixtures("git_env")
def test_local_remotes(tmp_path: Path, mock_client: MockHostingClient) -> None:
    manager = LocalRepoManager()
    repo = manager.ensure_repository(tmp_path)
    registry = RemoteRegistry(manager, mock_client)
    assert registry.list_remotes(repo) == {}

    manager.add_remote(repo, "origin", "git@github.com:mock-user/demo.git")

    assert registry.list_remotes(repo) == {"origin": "git@github.com:mock-user/demo.git"}
