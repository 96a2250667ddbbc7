"""Registry of templates managed together by one runner."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

from ctmpl.domain.dependencies import Dependency
from ctmpl.domain.models.engine_config import EngineConfig
from ctmpl.domain.models.template_context import TemplateContext
from ctmpl.domain.template import Template

logger = logging.getLogger(__name__)


class TemplateSet:
    """Templates keyed by identity, in registration order.

    Adding the same path twice yields the already registered Template, so a
    runner never parses or renders one file twice.
    """

    def __init__(self, config: EngineConfig | None = None) -> None:
        self._config = config or EngineConfig()
        self._templates: dict[str, Template] = {}

    def add(self, path: str | Path) -> Template:
        """Register the template at ``path`` and return it."""
        identity = Template.hash_code_for(path)
        existing = self._templates.get(identity)
        if existing is not None:
            logger.debug(f"Template {path} already registered")
            return existing

        template = Template(path, config=self._config)
        self._templates[identity] = template
        return template

    def dependencies(self) -> list[Dependency]:
        """Union of member dependencies, deduplicated across templates."""
        seen: set[str] = set()
        result: list[Dependency] = []
        for template in self._templates.values():
            for dependency in template.dependencies:
                if dependency.hash_code() in seen:
                    continue
                seen.add(dependency.hash_code())
                result.append(dependency)
        return result

    def render_all(self, context: TemplateContext | None) -> dict[str, bytes]:
        """Render every template; the first failure propagates."""
        return {
            template.path: template.execute(context)
            for template in self._templates.values()
        }

    def __len__(self) -> int:
        return len(self._templates)

    def __iter__(self) -> Iterator[Template]:
        return iter(self._templates.values())

    def __contains__(self, item: object) -> bool:
        if isinstance(item, Template):
            return item.hash_code() in self._templates
        if isinstance(item, (str, Path)):
            return Template.hash_code_for(item) in self._templates
        return False
