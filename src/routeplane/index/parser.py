"""Controller and route extraction from decorated TypeScript classes.

Finds the first class carrying a ``@Controller`` marker (call-style or bare)
and turns each of its methods carrying an HTTP verb marker into a
``RouteDescriptor``.

Extraction is best-effort: every failure (unreadable text, unsupported
extension, unexpected tree shape) is logged and reported as ``None``.
Tree-sitter recovers from syntax errors, so a broken method elsewhere in the
file does not hide an otherwise well-formed controller.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import structlog

from routeplane.core.errors import ParseError
from routeplane.index._internal.parsing.markers import MarkerKind, resolve_marker
from routeplane.index._internal.parsing.paths import combine_paths, extract_path_parameters
from routeplane.index._internal.parsing.sources import OpenDocumentProvider, SourceTextResolver
from routeplane.index._internal.parsing.treesitter import (
    ParseResult,
    TreeSitterParser,
    char_column,
    detect_language,
    node_text,
)
from routeplane.index.models import (
    ControllerDescriptor,
    ParameterKind,
    RouteDescriptor,
    RouteParameter,
)

logger = structlog.get_logger()

_CLASS_NODE_TYPES = frozenset({"class_declaration", "abstract_class_declaration", "class"})
_PARAMETER_NODE_TYPES = frozenset({"required_parameter", "optional_parameter"})
UNKNOWN_CONTROLLER = "UnknownController"
UNKNOWN_HANDLER = "unknown"


class SourceParser:
    """Parses one file's text into zero or one controller descriptor."""

    def __init__(self, documents: OpenDocumentProvider | None = None) -> None:
        self._ts = TreeSitterParser()
        self._resolver = SourceTextResolver(documents)

    def parse(self, file_path: str, source_text: str) -> ControllerDescriptor | None:
        """Extract the controller declared in ``source_text``, if any."""
        try:
            if detect_language(Path(file_path)) is None:
                raise ParseError.unsupported_language(file_path)
            result = self._ts.parse(Path(file_path), source_text.encode("utf-8"))
            controller = _extract_controller(result, file_path)
        except ParseError as e:
            logger.warning("parse_failed", path=file_path, error=e.error_name, reason=e.message)
            return None
        except Exception as e:
            # Unexpected tree shape
            logger.warning(
                "parse_failed",
                path=file_path,
                error=type(e).__name__,
                reason=str(e),
                exc_info=True,
            )
            return None

        if controller is None:
            logger.debug("no_controller_found", path=file_path, syntax_errors=result.error_count)
        else:
            logger.debug(
                "controller_parsed",
                path=file_path,
                controller=controller.name,
                base_path=controller.base_path,
                routes=len(controller.routes),
                syntax_errors=result.error_count,
            )
        return controller

    def parse_path(self, file_path: str) -> ControllerDescriptor | None:
        """Resolve the current text of ``file_path`` and parse it."""
        try:
            text, origin = self._resolver.read(file_path)
        except ParseError as e:
            logger.warning("parse_failed", path=file_path, error=e.error_name, reason=e.message)
            return None
        logger.debug("source_resolved", path=file_path, origin=origin, length=len(text))
        return self.parse(file_path, text)


# ----------------------------------------------------------------------
# Tree walking
# ----------------------------------------------------------------------


def _extract_controller(result: ParseResult, file_path: str) -> ControllerDescriptor | None:
    """Return the first decorated controller class in document order."""
    stack = [result.root_node]
    while stack:
        node = stack.pop()
        if node.type in _CLASS_NODE_TYPES:
            decorator = _find_decorator(_class_decorators(node), MarkerKind.CONTROLLER)
            if decorator is not None:
                return _build_controller(node, decorator, result.source, file_path)
        # Reverse so children are visited left to right
        stack.extend(reversed(node.named_children))
    return None


def _class_decorators(class_node: Any) -> list[Any]:
    """Decorators of a class, including those attached to an enclosing export."""
    decorators = [c for c in class_node.children if c.type == "decorator"]
    parent = class_node.parent
    if parent is not None and parent.type == "export_statement":
        decorators = [c for c in parent.children if c.type == "decorator"] + decorators
    return decorators


def _build_controller(
    class_node: Any,
    decorator: Any,
    source: bytes,
    file_path: str,
) -> ControllerDescriptor:
    name_node = class_node.child_by_field_name("name")
    name = node_text(name_node) if name_node is not None else UNKNOWN_CONTROLLER
    base_path = _decorator_path(decorator)

    routes: list[RouteDescriptor] = []
    body = class_node.child_by_field_name("body")
    if body is not None:
        for method, decorators in _decorated_methods(body):
            route = _build_route(method, decorators, name, base_path, source, file_path)
            if route is not None:
                routes.append(route)

    return ControllerDescriptor(
        name=name,
        base_path=base_path,
        source_file=file_path,
        routes=tuple(routes),
    )


def _decorated_methods(class_body: Any) -> list[tuple[Any, list[Any]]]:
    """Pair each method with its decorators.

    The TypeScript grammar places member decorators as siblings preceding
    the ``method_definition`` inside ``class_body``; they are also accepted
    as children of the method itself. Comments between a decorator and its
    method are trivia.
    """
    pairs: list[tuple[Any, list[Any]]] = []
    pending: list[Any] = []
    for child in class_body.named_children:
        if child.type == "comment":
            continue
        if child.type == "decorator":
            pending.append(child)
            continue
        if child.type == "method_definition":
            own = [c for c in child.children if c.type == "decorator"]
            pairs.append((child, pending + own))
        pending = []
    return pairs


def _build_route(
    method: Any,
    decorators: list[Any],
    owner_name: str,
    base_path: str,
    source: bytes,
    file_path: str,
) -> RouteDescriptor | None:
    verb_decorator = _find_decorator(decorators, MarkerKind.HTTP_VERB)
    if verb_decorator is None:
        return None

    marker = resolve_marker(_decorator_identifier(verb_decorator), MarkerKind.HTTP_VERB)
    if marker is None or marker.verb is None:
        return None
    declared_path = _decorator_path(verb_decorator)
    full_path = combine_paths(base_path, declared_path)

    name_node = method.child_by_field_name("name")
    position_node = name_node if name_node is not None else method
    handler_name = (
        node_text(name_node)
        if name_node is not None and name_node.type == "property_identifier"
        else UNKNOWN_HANDLER
    )

    return RouteDescriptor(
        http_method=marker.verb,
        declared_path=declared_path,
        full_path=full_path,
        source_file=file_path,
        line=position_node.start_point[0] + 1,
        column=char_column(source, position_node),
        owner_name=owner_name,
        handler_name=handler_name,
        parameters=tuple(_extract_parameters(method)),
        path_parameters=tuple(extract_path_parameters(full_path)),
    )


def _extract_parameters(method: Any) -> list[RouteParameter]:
    params_node = method.child_by_field_name("parameters")
    if params_node is None:
        return []

    parameters: list[RouteParameter] = []
    for param in params_node.named_children:
        if param.type not in _PARAMETER_NODE_TYPES:
            continue
        pattern = param.child_by_field_name("pattern")
        if pattern is not None and pattern.type == "rest_pattern" and pattern.named_children:
            pattern = pattern.named_children[0]
        if pattern is None or pattern.type != "identifier":
            continue

        kind = ParameterKind.QUERY
        for decorator in param.children:
            if decorator.type != "decorator":
                continue
            marker = resolve_marker(_decorator_identifier(decorator), MarkerKind.PARAM_SOURCE)
            if marker is not None and marker.param_kind and _is_call_decorator(decorator):
                kind = marker.param_kind

        declared_type: str | None = None
        annotation = param.child_by_field_name("type")
        if annotation is not None and annotation.named_children:
            declared_type = node_text(annotation.named_children[0])

        parameters.append(
            RouteParameter(
                name=node_text(pattern),
                kind=kind,
                declared_type=declared_type,
                optional=param.type == "optional_parameter",
            )
        )
    return parameters


# ----------------------------------------------------------------------
# Decorator helpers
# ----------------------------------------------------------------------


def _decorator_expression(decorator: Any) -> Any | None:
    return decorator.named_children[0] if decorator.named_children else None


def _is_call_decorator(decorator: Any) -> bool:
    expr = _decorator_expression(decorator)
    return expr is not None and expr.type == "call_expression"


def _decorator_identifier(decorator: Any) -> str | None:
    """Identifier text of ``@Name`` or ``@Name(...)``; None for other shapes."""
    expr = _decorator_expression(decorator)
    if expr is None:
        return None
    if expr.type == "call_expression":
        expr = expr.child_by_field_name("function")
    if expr is None or expr.type != "identifier":
        return None
    return node_text(expr)


def _find_decorator(decorators: list[Any], kind: MarkerKind) -> Any | None:
    """First decorator, in declaration order, resolving to a marker of ``kind``."""
    for decorator in decorators:
        if resolve_marker(_decorator_identifier(decorator), kind) is not None:
            return decorator
    return None


def _decorator_path(decorator: Any) -> str:
    """Path argument of a marker: string literal or object ``path`` property."""
    expr = _decorator_expression(decorator)
    if expr is None or expr.type != "call_expression":
        return ""
    arguments = expr.child_by_field_name("arguments")
    if arguments is None or not arguments.named_children:
        return ""

    first = arguments.named_children[0]
    if first.type == "string":
        return _string_value(first)
    if first.type == "object":
        return _object_path(first)
    return ""


def _object_path(obj: Any) -> str:
    for pair in obj.named_children:
        if pair.type != "pair":
            continue
        key = pair.child_by_field_name("key")
        value = pair.child_by_field_name("value")
        if key is None or value is None:
            continue
        if key.type == "property_identifier":
            key_name = node_text(key)
        elif key.type == "string":
            key_name = _string_value(key)
        else:
            continue
        if key_name == "path" and value.type == "string":
            return _string_value(value)
    return ""


def _string_value(node: Any) -> str:
    """Contents of a string literal without its quotes."""
    text = node_text(node)
    if len(text) >= 2 and text[0] == text[-1] and text[0] in "'\"":
        return text[1:-1]
    return text
