"""repolink testing utilities.

Provides a mock hosting client and fixtures for testing code that uses repolink.
"""

from repolink.testing.fixtures import (
    create_mock_descriptor,
    create_owned_repo_payload,
    init_bare_repository,
)
from repolink.testing.mock import MockCall, MockHostingClient, MockResponse

__all__ = [
    # Mock client
    "MockHostingClient",
    "MockCall",
    "MockResponse",
    # Helper functions
    "create_mock_descriptor",
    "create_owned_repo_payload",
    "init_bare_repository",
]
