"""Lookups of existing remotes, local and hosted."""

from typing import TYPE_CHECKING

from repolink.git import LocalRepoManager
from repolink.types.local import Repository

if TYPE_CHECKING:
    from repolink.client import HostingClient


class RemoteRegistry:
    """Answers "what already exists?" before the workflow mutates anything."""

    def __init__(self, manager: LocalRepoManager, client: "HostingClient") -> None:
        self.manager = manager
        self.client = client

    def list_remotes(self, repo: Repository) -> dict[str, str]:
        """Remotes configured on the local repository (name -> URL)."""
        return self.manager.list_remotes(repo)

    def list_owned_repo_names(self, identity: str) -> set[str]:
        """
        Names of every hosted repository owned by ``identity``.

        Pagination is followed to the end, so the result is the full set.
        """
        names: set[str] = set()
        for repo in self.client.repos.list_owned():
            owner = (repo.get("owner") or {}).get("login")
            if owner is not None and owner.lower() != identity.lower():
                continue
            names.add(repo["name"])
        return names
