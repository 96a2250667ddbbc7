from typing import Literal
from pydantic import BaseModel, Field


class BaseOutput(BaseModel):
    schema_version: int = 1
    command: Literal["deps", "render"]
    exit_code: int
    error: str | None = None


class DependencySummary(BaseModel):
    """One dependency as reported by `deps`."""
    kind: str
    key: str
    hash_code: str


class TemplateDependencies(BaseModel):
    path: str
    dependencies: list[DependencySummary] = Field(default_factory=list)


class DepsOutput(BaseOutput):
    command: Literal["deps"] = "deps"
    templates: list[TemplateDependencies] = Field(default_factory=list)


class RenderOutput(BaseOutput):
    command: Literal["render"] = "render"
    template: str
    # On render errors, contents is unknown; omit it from JSON via exclude_none.
    contents: str | None = None
