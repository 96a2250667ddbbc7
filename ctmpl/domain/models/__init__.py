"""Data records exchanged with the template engine."""

from .engine_config import EngineConfig
from .service import KeyPair, Service, sort_services
from .template_context import TemplateContext


__all__ = [
    "EngineConfig",
    "KeyPair",
    "Service",
    "TemplateContext",
    "sort_services",
]
