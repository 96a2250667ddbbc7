"""Parsed configuration template.

A Template is built from one source file. Its dependencies are extracted
once, at construction, from the parsed tree; execute() then renders the
template against a caller-supplied TemplateContext, refusing to render
unless every dependency is present in that context.

Templates are immutable after construction and may be shared between
threads as long as each execute() call gets its own context.
"""

from __future__ import annotations

import logging
from pathlib import Path

from jinja2 import TemplateSyntaxError

from ctmpl.domain.dependencies import Dependency
from ctmpl.domain.errors import (
    RenderError,
    TemplateError,
    TemplateNotFoundError,
    TemplateParseError,
)
from ctmpl.domain.extraction import check_functions, extract_dependencies
from ctmpl.domain.models.engine_config import EngineConfig
from ctmpl.domain.models.template_context import TemplateContext
from ctmpl.domain.rendering import bind_context, create_environment

logger = logging.getLogger(__name__)


class Template:
    """One parsed template and the dependencies it requires."""

    def __init__(
        self,
        path: str | Path,
        *,
        source: str | None = None,
        config: EngineConfig | None = None,
    ) -> None:
        """Read and parse a template.

        Args:
            path: Source file path; also the template's identity.
            source: Template text. When omitted, the file at ``path`` is read.
            config: Engine settings. Defaults to ``EngineConfig()``.

        Raises:
            TemplateNotFoundError: If the file cannot be read.
            TemplateParseError: On invalid syntax or an undefined function.
            DependencyError: If a data-access call has an invalid argument.
        """
        self._path = str(path)
        self._config = config or EngineConfig()

        if source is None:
            source = self._read_source()

        env = create_environment(self._config)
        try:
            tree = env.parse(source, name=self._path, filename=self._path)
        except TemplateSyntaxError as e:
            raise TemplateParseError(self._path, e.lineno, e.message or str(e)) from e

        check_functions(tree, path=self._path, known=env.globals)
        self._dependencies = tuple(extract_dependencies(tree))

        try:
            self._compiled = env.from_string(tree)
        except TemplateSyntaxError as e:
            raise TemplateParseError(self._path, e.lineno, e.message or str(e)) from e

        logger.debug(
            f"Parsed template {self._path} with {len(self._dependencies)} dependencies"
        )

    @classmethod
    def from_string(
        cls, source: str, *, path: str | Path, config: EngineConfig | None = None
    ) -> Template:
        """Parse template text that did not come from ``path`` on disk."""
        return cls(path, source=source, config=config)

    def _read_source(self) -> str:
        try:
            return Path(self._path).read_text(encoding=self._config.encoding)
        except OSError as e:
            raise TemplateNotFoundError(self._path, cause=e) from e
        except UnicodeDecodeError as e:
            raise TemplateParseError(self._path, None, f"cannot decode source: {e}") from e

    @property
    def path(self) -> str:
        return self._path

    @property
    def encoding(self) -> str:
        return self._config.encoding

    @property
    def dependencies(self) -> list[Dependency]:
        """Dependencies in first-occurrence order, computed at construction."""
        return list(self._dependencies)

    def execute(self, context: TemplateContext | None) -> bytes:
        """Render the template against ``context``.

        Raises:
            ContextRequiredError: If ``context`` is None.
            MissingDependencyError: For the first dependency ``context`` lacks.
            RenderError: If the template body fails to evaluate, for any reason.
        """
        functions = bind_context(self._dependencies, context)
        try:
            rendered = self._compiled.render(**functions)
        except TemplateError:
            raise
        except Exception as e:
            raise RenderError(self._path, str(e)) from e

        logger.debug(f"Rendered template {self._path} ({len(rendered)} chars)")
        return rendered.encode(self._config.encoding)

    @staticmethod
    def hash_code_for(path: str | Path) -> str:
        return f"Template|{path}"

    def hash_code(self) -> str:
        """Identity string shared by every Template built from the same path."""
        return self.hash_code_for(self._path)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Template):
            return NotImplemented
        return self.hash_code() == other.hash_code()

    def __hash__(self) -> int:
        return hash(self.hash_code())

    def __repr__(self) -> str:
        return f"Template({self._path!r})"
