"""Render-time data snapshot."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ctmpl.domain.models.service import KeyPair, Service, sort_services


class TemplateContext(BaseModel):
    """Resolved external data, keyed by dependency identity.

    An entry (even an empty list) means the dependency was resolved; a
    missing entry means it was not. Service lists are sorted on
    construction.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )

    services: dict[str, list[Service]] = Field(default_factory=dict, alias="Services")
    keys: dict[str, str] = Field(default_factory=dict, alias="Keys")
    key_prefixes: dict[str, list[KeyPair]] = Field(
        default_factory=dict, alias="KeyPrefixes"
    )

    @field_validator("services")
    @classmethod
    def _sort_services(cls, value: dict[str, list[Service]]) -> dict[str, list[Service]]:
        return {name: sort_services(instances) for name, instances in value.items()}
