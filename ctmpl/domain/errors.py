"""Domain-level exceptions for the template engine."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ctmpl.domain.dependencies import Dependency


class TemplateError(Exception):
    """Base class for every error raised by the engine."""

    pass


class TemplateNotFoundError(TemplateError):
    """Raised when the template source cannot be read."""

    def __init__(self, path: str, cause: Exception | None = None) -> None:
        super().__init__(f"Template not found: {path}")
        self.path = path
        self.cause = cause


class TemplateParseError(TemplateError):
    """Raised when the template source fails to parse or compile."""

    def __init__(self, path: str, lineno: int | None, message: str) -> None:
        location = path if lineno is None else f"{path}:{lineno}"
        super().__init__(f"template: {location}: {message}")
        self.path = path
        self.lineno = lineno


class DependencyError(TemplateError):
    """Raised when a data-access call has an invalid argument."""

    def __init__(self, operation: str, message: str) -> None:
        super().__init__(f"error calling {operation}: {message}")
        self.operation = operation


class ContextRequiredError(TemplateError):
    """Raised when execute() is called without a template context."""

    def __init__(self) -> None:
        super().__init__("templateContext must be given")


class MissingDependencyError(TemplateError):
    """Raised when the template context lacks an entry for a dependency."""

    def __init__(self, dependency: Dependency) -> None:
        super().__init__(
            f"templateContext missing {dependency.kind} `{dependency.key}'"
        )
        self.dependency = dependency


class RenderError(TemplateError):
    """Raised when the template body fails to evaluate."""

    def __init__(self, path: str, message: str) -> None:
        super().__init__(f"template: {path}: {message}")
        self.path = path
