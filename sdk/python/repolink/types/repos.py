"""Hosted repository data models."""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class Protocol(str, Enum):
    """Transfer protocol used for the remote URL and push credentials."""

    HTTPS = "https"
    SSH = "ssh"


@dataclass(frozen=True)
class RemoteDescriptor:
    """Repository created on the hosting service."""

    name: str
    description: str | None
    clone_url: str  # HTTPS
    ssh_url: str
    html_url: str
    owner: str  # owner login
    full_name: str | None = None
    url: str | None = None  # API URL
    default_branch: str | None = None
    private: bool | None = None

    def url_for(self, protocol: Protocol | str) -> str:
        """Return the remote URL matching ``protocol``."""
        if Protocol(protocol) is Protocol.SSH:
            return self.ssh_url
        return self.clone_url

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "RemoteDescriptor":
        """Build a descriptor from a hosting API repository payload."""
        owner = data.get("owner") or {}
        return cls(
            name=data["name"],
            description=data.get("description"),
            clone_url=data["clone_url"],
            ssh_url=data["ssh_url"],
            html_url=data["html_url"],
            owner=owner.get("login", ""),
            full_name=data.get("full_name"),
            url=data.get("url"),
            default_branch=data.get("default_branch"),
            private=data.get("private"),
        )
