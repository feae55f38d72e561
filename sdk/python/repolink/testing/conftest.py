"""
Pytest plugin for repolink testing fixtures.

This module re-exports all fixtures from fixtures.py so they can be
automatically discovered by pytest.

To use these fixtures in your tests, add this to your conftest.py:

    pytest_plugins = ["repolink.testing.conftest"]

Or import the fixtures directly:

    from repolink.testing.fixtures import mock_client, git_env
"""

# Re-export all fixtures for pytest auto-discovery
from repolink.testing.fixtures import (
    bare_remote,
    git_env,
    mock_client,
    sample_descriptor,
    ssh_keypair,
)

__all__ = [
    "bare_remote",
    "git_env",
    "mock_client",
    "sample_descriptor",
    "ssh_keypair",
]
