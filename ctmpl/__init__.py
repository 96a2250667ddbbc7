"""Configuration template engine.

Extracts the external data a template needs (services, keys, key
prefixes) before rendering, and renders only once all of it is present.
"""

from ctmpl.domain.dependencies import (
    Dependency,
    KeyDependency,
    KeyPrefixDependency,
    ServiceDependency,
)
from ctmpl.domain.errors import (
    ContextRequiredError,
    DependencyError,
    MissingDependencyError,
    RenderError,
    TemplateError,
    TemplateNotFoundError,
    TemplateParseError,
)
from ctmpl.domain.models import EngineConfig, KeyPair, Service, TemplateContext, sort_services
from ctmpl.domain.template import Template

__all__ = [
    "ContextRequiredError",
    "Dependency",
    "DependencyError",
    "EngineConfig",
    "KeyDependency",
    "KeyPair",
    "KeyPrefixDependency",
    "MissingDependencyError",
    "RenderError",
    "Service",
    "ServiceDependency",
    "Template",
    "TemplateContext",
    "TemplateError",
    "TemplateNotFoundError",
    "TemplateParseError",
    "sort_services",
]
