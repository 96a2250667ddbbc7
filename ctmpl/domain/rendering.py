"""Binding of the data-access operations to a template context."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any

from jinja2 import Environment, StrictUndefined

from ctmpl.domain.dependencies import (
    Dependency,
    KeyDependency,
    KeyPrefixDependency,
    ServiceDependency,
)
from ctmpl.domain.errors import ContextRequiredError, MissingDependencyError
from ctmpl.domain.models.engine_config import EngineConfig
from ctmpl.domain.models.template_context import TemplateContext


def create_environment(config: EngineConfig) -> Environment:
    """Build the Jinja2 environment templates are parsed and compiled with.

    No loader is configured: a template is a single source file.
    """
    return Environment(
        undefined=StrictUndefined,
        autoescape=False,
        trim_blocks=config.trim_blocks,
        lstrip_blocks=config.lstrip_blocks,
        keep_trailing_newline=config.keep_trailing_newline,
    )


def _table_for(dependency: Dependency, context: TemplateContext) -> dict[str, Any]:
    if isinstance(dependency, ServiceDependency):
        return context.services
    if isinstance(dependency, KeyDependency):
        return context.keys
    if isinstance(dependency, KeyPrefixDependency):
        return context.key_prefixes
    raise TypeError(f"Unknown dependency type: {type(dependency).__name__}")


def validate_context(
    dependencies: Sequence[Dependency], context: TemplateContext | None
) -> TemplateContext:
    """Check that the context resolves every dependency.

    Dependencies are checked in order and the first missing one is reported.

    Raises:
        ContextRequiredError: If no context was given.
        MissingDependencyError: If a dependency has no entry in the context.
    """
    if context is None:
        raise ContextRequiredError()

    for dependency in dependencies:
        if dependency.key not in _table_for(dependency, context):
            raise MissingDependencyError(dependency)
    return context


def bind_context(
    dependencies: Sequence[Dependency], context: TemplateContext | None
) -> dict[str, Callable[[str], Any]]:
    """Return the data-access functions for one render call.

    The functions hand out copies of the context's lists, so a template body
    cannot change the caller's snapshot. A lookup of anything outside
    ``dependencies`` raises MissingDependencyError.
    """
    ctx = validate_context(dependencies, context)
    required = {(type(d), d.key) for d in dependencies}

    def _lookup(dependency_type: type[Dependency], table: dict[str, Any], spec: str) -> Any:
        if (dependency_type, spec) not in required:
            raise MissingDependencyError(dependency_type.model_construct(raw=spec))
        return table[spec]

    def service(spec: str) -> list:
        return list(_lookup(ServiceDependency, ctx.services, spec))

    def key(path: str) -> str:
        return _lookup(KeyDependency, ctx.keys, path)

    def key_prefix(path: str) -> list:
        return list(_lookup(KeyPrefixDependency, ctx.key_prefixes, path))

    return {
        ServiceDependency.kind: service,
        KeyDependency.kind: key,
        KeyPrefixDependency.kind: key_prefix,
    }
