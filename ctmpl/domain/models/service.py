"""Records bound into templates by the service and keyPrefix operations."""

from __future__ import annotations

from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict, Field


class Service(BaseModel):
    """One discovered service instance.

    Field aliases match the names the discovery backend uses, so snapshot
    documents can be loaded as-is.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    node: str = Field(default="", alias="Node")
    address: str = Field(default="", alias="Address")
    id: str = Field(default="", alias="ID")
    name: str = Field(default="", alias="Name")
    port: int = Field(default=0, alias="Port")
    tags: tuple[str, ...] = Field(default=(), alias="Tags")


class KeyPair(BaseModel):
    """One key/value pair found under a key prefix."""

    model_config = ConfigDict(
        frozen=True, populate_by_name=True, coerce_numbers_to_str=True
    )

    key: str = Field(alias="Key")
    value: str = Field(default="", alias="Value")


def sort_services(services: Iterable[Service]) -> list[Service]:
    """Return services ordered by node name, then instance ID.

    The sort is stable, so instances equal on both fields keep their input
    order.
    """
    return sorted(services, key=lambda s: (s.node, s.id))
