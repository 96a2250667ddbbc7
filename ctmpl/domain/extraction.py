"""Static dependency extraction over a parsed template tree.

Extraction never evaluates the template. Every call to a data-access
operation is counted, including calls inside branches that would not run
for a given context.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

from jinja2 import nodes

from ctmpl.domain.dependencies import DEPENDENCY_TYPES, Dependency
from ctmpl.domain.errors import DependencyError, TemplateParseError

logger = logging.getLogger(__name__)


# Callables Jinja2 provides inside a template body without a global.
_IMPLICIT_CALLABLES = frozenset({"caller", "loop", "super"})

# Node fields whose Jinja2 declaration order differs from their order in the source.
_SOURCE_ORDER: dict[type[nodes.Node], tuple[str, ...]] = {
    nodes.CondExpr: ("expr1", "test", "expr2"),
    nodes.For: ("target", "iter", "test", "body", "else_", "recursive"),
    nodes.CallBlock: ("args", "defaults", "call", "body"),
}


def _walk(node: nodes.Node) -> Iterator[nodes.Node]:
    """Yield the descendants of ``node`` depth-first, in source order."""
    for field in _SOURCE_ORDER.get(type(node), node.fields):
        value = getattr(node, field, None)
        children = value if isinstance(value, list) else [value]
        for child in children:
            if isinstance(child, nodes.Node):
                yield child
                yield from _walk(child)


def _calls(tree: nodes.Template) -> Iterator[nodes.Call]:
    for node in _walk(tree):
        if isinstance(node, nodes.Call):
            yield node


def _defined_names(tree: nodes.Template) -> set[str]:
    """Collect names the template binds itself (macros, sets, loop targets, imports)."""
    names: set[str] = set()
    for macro in tree.find_all(nodes.Macro):
        names.add(macro.name)
    for name in tree.find_all(nodes.Name):
        if name.ctx in ("store", "param"):
            names.add(name.name)
    for imp in tree.find_all(nodes.Import):
        names.add(imp.target)
    for imp in tree.find_all(nodes.FromImport):
        for entry in imp.names:
            names.add(entry[1] if isinstance(entry, tuple) else entry)
    return names


def _check_operation_references(tree: nodes.Template, *, path: str) -> None:
    """Data-access operations may only appear as the callee of a direct call."""
    callees = {
        id(call.node) for call in _calls(tree) if isinstance(call.node, nodes.Name)
    }
    for node in _walk(tree):
        if isinstance(node, nodes.Macro) and node.name in DEPENDENCY_TYPES:
            raise TemplateParseError(
                path, node.lineno, f'"{node.name}" cannot be redefined'
            )
        if not isinstance(node, nodes.Name) or node.name not in DEPENDENCY_TYPES:
            continue
        if node.ctx in ("store", "param"):
            raise TemplateParseError(
                path, node.lineno, f'"{node.name}" cannot be redefined'
            )
        if id(node) not in callees:
            raise TemplateParseError(
                path, node.lineno, f'"{node.name}" must be called directly'
            )


def check_functions(tree: nodes.Template, *, path: str, known: Iterable[str]) -> None:
    """Fail on calls to functions the template cannot resolve.

    Also fails when a data-access operation is referenced without being
    called, since such a use would escape extraction.

    Raises:
        TemplateParseError: Naming the first offending name and its line.
    """
    _check_operation_references(tree, path=path)

    allowed = set(known) | set(DEPENDENCY_TYPES) | _IMPLICIT_CALLABLES
    allowed |= _defined_names(tree)

    for call in _calls(tree):
        if not isinstance(call.node, nodes.Name):
            continue
        if call.node.name not in allowed:
            raise TemplateParseError(
                path, call.lineno, f'function "{call.node.name}" not defined'
            )


def _literal_argument(call: nodes.Call, operation: str) -> str:
    if call.kwargs or call.dyn_args or call.dyn_kwargs or len(call.args) != 1:
        raise DependencyError(operation, "expected exactly one argument")

    arg = call.args[0]
    if not isinstance(arg, nodes.Const) or not isinstance(arg.value, str):
        raise DependencyError(operation, "argument must be a string literal")
    return arg.value


def extract_dependencies(tree: nodes.Template) -> list[Dependency]:
    """Return the dependencies of a parsed template in source order.

    Duplicates (same variant, same key) are dropped.

    Raises:
        DependencyError: If a call's argument is not a valid literal for its
            operation.
    """
    dependencies: list[Dependency] = []
    seen: set[tuple[type[Dependency], str]] = set()

    for call in _calls(tree):
        if not isinstance(call.node, nodes.Name):
            continue
        operation = call.node.name
        dependency_type = DEPENDENCY_TYPES.get(operation)
        if dependency_type is None:
            continue

        raw = _literal_argument(call, operation)
        try:
            dependency = dependency_type.parse(raw)
        except ValueError as e:
            raise DependencyError(operation, str(e)) from e

        identity = (dependency_type, dependency.key)
        if identity in seen:
            continue
        seen.add(identity)
        dependencies.append(dependency)

    logger.debug(f"Extracted {len(dependencies)} dependencies")
    return dependencies
