"""repolink type definitions.

This module exports all data model types used by the package.
"""

from repolink.types.config import DEFAULT_SCHEMA, LinkageConfig, LinkageSchema
from repolink.types.local import CommitRef, Repository
from repolink.types.repos import Protocol, RemoteDescriptor

__all__ = [
    # Local repository types
    "Repository",
    "CommitRef",
    # Hosted repository types
    "Protocol",
    "RemoteDescriptor",
    # Linkage config
    "LinkageConfig",
    "LinkageSchema",
    "DEFAULT_SCHEMA",
]
