"""Dependency value types.

A dependency names one piece of external data a template needs at render
time. The raw specification string from the template call site is the
dependency's identity: it is the lookup key into the template context and
the deduplication key during extraction.
"""

from __future__ import annotations

import re
from typing import ClassVar

from pydantic import BaseModel, ConfigDict


# [tag.]name[@datacenter][:port]
_SERVICE_RE = re.compile(
    r"(?:(?P<tag>[\w\-.]+)\.)?"
    r"(?P<name>[\w\-/]+)"
    r"(?:@(?P<datacenter>[\w.\-]+))?"
    r"(?::(?P<port>[0-9]+))?",
    re.ASCII,
)


def _split_datacenter(raw: str) -> tuple[str, str | None]:
    path, sep, datacenter = raw.rpartition("@")
    if not sep:
        return raw, None
    return path, datacenter or None


class Dependency(BaseModel):
    """Base class for the three dependency variants.

    Instances are frozen; two dependencies compare equal only when they are
    the same variant built from the same specification string.
    """

    model_config = ConfigDict(frozen=True)

    #: Name of the template operation that produces this dependency.
    kind: ClassVar[str] = ""

    raw: str

    @property
    def key(self) -> str:
        """Canonical identity, equal to the raw specification."""
        return self.raw

    def hash_code(self) -> str:
        return f"{type(self).__name__}|{self.key}"

    def display(self) -> str:
        return f"{self.kind}({self.raw})"

    @classmethod
    def parse(cls, raw: str) -> Dependency:
        """Build a dependency from a call-site argument.

        Raises:
            ValueError: If the argument is not valid for this variant.
        """
        return cls(raw=raw)


class ServiceDependency(Dependency):
    """A lookup of every healthy instance of a service."""

    kind: ClassVar[str] = "service"

    name: str
    tag: str | None = None
    datacenter: str | None = None
    port: int | None = None

    @classmethod
    def parse(cls, raw: str) -> ServiceDependency:
        match = _SERVICE_RE.fullmatch(raw)
        if match is None:
            raise ValueError(f"invalid service dependency format: {raw!r}")

        port = match.group("port")
        return cls(
            raw=raw,
            name=match.group("name"),
            tag=match.group("tag"),
            datacenter=match.group("datacenter"),
            port=int(port) if port is not None else None,
        )


class KeyDependency(Dependency):
    """A lookup of one key in the store."""

    kind: ClassVar[str] = "key"

    path: str
    datacenter: str | None = None

    @classmethod
    def parse(cls, raw: str) -> KeyDependency:
        path, datacenter = _split_datacenter(raw)
        return cls(raw=raw, path=path, datacenter=datacenter)


class KeyPrefixDependency(Dependency):
    """A lookup of every key/value pair under a prefix."""

    kind: ClassVar[str] = "keyPrefix"

    prefix: str
    datacenter: str | None = None

    @classmethod
    def parse(cls, raw: str) -> KeyPrefixDependency:
        prefix, datacenter = _split_datacenter(raw)
        return cls(raw=raw, prefix=prefix, datacenter=datacenter)


# Template operation name -> dependency variant.
DEPENDENCY_TYPES: dict[str, type[Dependency]] = {
    ServiceDependency.kind: ServiceDependency,
    KeyDependency.kind: KeyDependency,
    KeyPrefixDependency.kind: KeyPrefixDependency,
}
