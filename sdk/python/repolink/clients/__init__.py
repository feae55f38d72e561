"""repolink hosting API resource clients."""

from repolink.clients.repos import ReposClient
from repolink.clients.users import UsersClient

__all__ = [
    "UsersClient",
    "ReposClient",
]
