"""Loading of template context snapshots from disk.

A snapshot is a YAML (or JSON) document with up to three tables:

    services:
      release.webapp:
        - {Node: nyc-worker-1, Address: 10.0.0.1, ID: web1, Name: web1, Port: 8080}
    keys:
      service/redis/maxconns: "11"
    key_prefixes:
      service/redis/config:
        - {Key: minconns, Value: "2"}

A table that is absent is empty; an entry that is present (even as an
empty list) counts as resolved.
"""
from __future__ import annotations

import logging
from pathlib import Path

from pydantic import ValidationError

from ctmpl.application.config_loader import ConfigLoadError, load_yaml_mapping
from ctmpl.domain.models.template_context import TemplateContext

logger = logging.getLogger(__name__)


class ContextLoadError(ConfigLoadError):
    """Raised when a snapshot document cannot be turned into a TemplateContext."""

    pass


def load_template_context(path: Path) -> TemplateContext:
    """Read a snapshot document and validate it.

    Raises:
        ContextLoadError: If the file is missing, malformed, or does not
            match the TemplateContext shape.
    """
    if not path.is_file():
        raise ContextLoadError("Context file not found", path=path)

    data = load_yaml_mapping(path, error_cls=ContextLoadError)

    try:
        context = TemplateContext.model_validate(data)
    except ValidationError as e:
        raise ContextLoadError(f"Invalid template context ({e.error_count()} errors)", path=path, cause=e) from e

    logger.debug(
        f"Loaded context {path}: {len(context.services)} services, "
        f"{len(context.keys)} keys, {len(context.key_prefixes)} key prefixes"
    )
    return context
