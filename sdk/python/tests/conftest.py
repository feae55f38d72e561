"""Shared fixtures for the repolink test suite."""

from repolink.testing.conftest import (  # noqa: F401
    bare_remote,
    git_env,
    mock_client,
    sample_descriptor,
    ssh_keypair,
)
