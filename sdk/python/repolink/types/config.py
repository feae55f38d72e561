"""Schema for the linkage metadata stored in local git config."""

import re
from dataclasses import dataclass, fields
from enum import Enum

from repolink.exceptions import ConfigurationError
from repolink.types.repos import Protocol, RemoteDescriptor

_NAMESPACE_RE = re.compile(r"^[A-Za-z][A-Za-z0-9-]*$")
_FIELD_RE = re.compile(r"^[a-z][a-z0-9]*$")

# Linkage metadata is a flat str -> str mapping of namespaced git config keys
LinkageConfig = dict[str, str]


def _render(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


@dataclass(frozen=True)
class LinkageSchema:
    """
    Names of the git config keys that record a remote linkage.

    Keys have the form ``<namespace>.<field>`` where the field is the
    descriptor attribute lower-cased with underscores removed, e.g.
    ``html_url`` becomes ``repolink.htmlurl``.
    """

    namespace: str = "repolink"
    descriptor_fields: tuple[str, ...] = (
        "name",
        "owner",
        "description",
        "full_name",
        "url",
        "html_url",
        "clone_url",
        "ssh_url",
    )
    protocol_field: str = "protocol"
    remote_name_field: str = "remote_name"
    user_field: str = "user"

    def __post_init__(self) -> None:
        if not _NAMESPACE_RE.match(self.namespace):
            raise ConfigurationError(f"Invalid config namespace: {self.namespace!r}")
        known = {f.name for f in fields(RemoteDescriptor)}
        unknown = [f for f in self.descriptor_fields if f not in known]
        if unknown:
            raise ConfigurationError(
                f"Unknown descriptor field(s) in schema: {', '.join(unknown)}"
            )

    def key(self, field: str) -> str:
        """Return the namespaced config key for ``field``."""
        name = field.replace("_", "").lower()
        if not _FIELD_RE.match(name):
            raise ConfigurationError(f"Invalid config field name: {field!r}")
        return f"{self.namespace}.{name}"

    @property
    def keys(self) -> tuple[str, ...]:
        """Every key managed by this schema."""
        names = (
            *self.descriptor_fields,
            self.protocol_field,
            self.remote_name_field,
            self.user_field,
        )
        return tuple(self.key(n) for n in names)

    def project(
        self,
        descriptor: RemoteDescriptor,
        protocol: Protocol | str,
        remote_name: str,
    ) -> LinkageConfig:
        """
        Project a descriptor plus protocol choice into linkage config.

        Descriptor fields that are None are left out. All values are strings.
        """
        config: LinkageConfig = {}
        for name in self.descriptor_fields:
            value = getattr(descriptor, name)
            if value is None:
                continue
            config[self.key(name)] = _render(value)
        config[self.key(self.protocol_field)] = _render(protocol)
        config[self.key(self.remote_name_field)] = remote_name
        return config


DEFAULT_SCHEMA = LinkageSchema()
