"""Segment trie router.

Patterns are parsed once at registration. Each trie level tries its
literal child first, then its parameter edge, then its catch-all edge,
backtracking when a branch dead-ends. A fixed table therefore always
resolves a given (method, path) to the same handler.
"""

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, NamedTuple

from wren.errors import ConfigurationError, MethodNotAllowed, NotFound
from wren.routing.route import Route, RouteMatch, Segment

logger = logging.getLogger("wren.routing")


class _Converter(NamedTuple):
    regex: re.Pattern[str]
    to_python: Callable[[str], Any]


_CONVERTERS: dict[str, _Converter] = {
    "str": _Converter(re.compile(r"[^/]+"), str),
    "int": _Converter(re.compile(r"[0-9]+"), int),
    "float": _Converter(re.compile(r"[0-9]+(?:\.[0-9]+)?"), float),
    "path": _Converter(re.compile(r".+"), str),
}

_PLACEHOLDER = re.compile(r"\{(?P<name>[A-Za-z_]\w*)(?::(?P<converter>\w+))?\}")


def parse_path(path: str) -> tuple[Segment, ...]:
    """Split a route pattern into segments, rejecting malformed ones.

    ``"/todos/{id:int}"`` gives ``(Segment("todos"), Segment("{id:int}",
    "id", "int"))``. The root ``"/"`` gives an empty tuple.
    """
    if "<" in path and ">" in path:
        msg = f"Route {path!r} uses <param> syntax. Use {{param}} instead."
        raise ConfigurationError(msg)

    segments: list[Segment] = []
    seen: set[str] = set()
    for text in filter(None, path.strip("/").split("/")):
        if "{" not in text and "}" not in text:
            segments.append(Segment(text))
            continue

        placeholder = _PLACEHOLDER.fullmatch(text)
        if placeholder is None:
            msg = f"Malformed parameter {text!r} in route {path!r}."
            raise ConfigurationError(msg)
        name = placeholder["name"]
        converter = placeholder["converter"] or "str"
        if converter not in _CONVERTERS:
            msg = (
                f"Unknown converter {converter!r} in route {path!r}. "
                f"Available: {', '.join(sorted(_CONVERTERS))}"
            )
            raise ConfigurationError(msg)
        if name in seen:
            msg = f"Route {path!r} names parameter {name!r} twice."
            raise ConfigurationError(msg)
        if segments and segments[-1].is_catch_all:
            msg = f"Route {path!r} has segments after a {{...:path}} parameter."
            raise ConfigurationError(msg)
        seen.add(name)
        segments.append(Segment(text, name, converter))
    return tuple(segments)


@dataclass(slots=True)
class _Node:
    literal: dict[str, "_Node"] = field(default_factory=dict)
    param: "_Edge | None" = None
    rest: "_Edge | None" = None
    by_method: dict[str, Route] = field(default_factory=dict)


@dataclass(slots=True)
class _Edge:
    name: str
    converter: str
    node: _Node = field(default_factory=_Node)

    @property
    def label(self) -> str:
        return f"{{{self.name}:{self.converter}}}"


class Router:
    """Maps (method, path) to a registered ``Route``.

    Usage::

        router = Router()
        router.register("GET", "/todos", list_todos)
        router.register("GET", "/todos/{id:int}", show_todo)
        router.compile()
        router.dispatch("GET", "/todos")     # -> list_todos
        router.match("GET", "/todos/42").params  # -> {"id": 42}
    """

    __slots__ = ("_compiled", "_root", "_routes")

    def __init__(self) -> None:
        self._root = _Node()
        self._routes: list[Route] = []
        self._compiled = False

    def register(
        self,
        method: str,
        pattern: str,
        handler: Callable[..., Any],
        *,
        name: str | None = None,
        fragment: str | None = None,
    ) -> Route:
        """Bind *handler* to one method and pattern; returns the new route."""
        route = Route(
            path=pattern,
            handler=handler,
            methods=frozenset({method.upper()}),
            name=name,
            fragment=fragment,
        )
        self.add(route)
        return route

    def add(self, route: Route) -> None:
        if self._compiled:
            msg = "Cannot add routes after compilation."
            raise RuntimeError(msg)

        node = self._root
        for segment in parse_path(route.path):
            if segment.param is None:
                node = node.literal.setdefault(segment.text, _Node())
                continue
            slot = "rest" if segment.is_catch_all else "param"
            edge = getattr(node, slot)
            if edge is None:
                edge = _Edge(segment.param, segment.converter)
                setattr(node, slot, edge)
            elif (edge.name, edge.converter) != (segment.param, segment.converter):
                msg = (
                    f"Route {route.path!r} declares {segment.text!r} where another "
                    f"route declares {edge.label}."
                )
                raise ConfigurationError(msg)
            node = edge.node

        for method in sorted(route.methods):
            taken = node.by_method.get(method)
            if taken is not None:
                owner = getattr(taken.handler, "__qualname__", None) or repr(taken.handler)
                msg = f"Duplicate route {method} {route.path!r} (already bound to {owner})."
                raise ConfigurationError(msg)
            node.by_method[method] = route
        self._routes.append(route)

    @property
    def routes(self) -> list[Route]:
        """Registered routes, in registration order."""
        return list(self._routes)

    def compile(self) -> None:
        """Freeze the table. Later ``add`` calls raise ``RuntimeError``."""
        self._compiled = True
        logger.debug("Compiled %d route(s)", len(self._routes))

    def dispatch(self, method: str, path: str) -> Callable[..., Any]:
        return self.match(method, path).route.handler

    def match(self, method: str, path: str) -> RouteMatch:
        """Resolve *method* and *path* to a route.

        Raises ``NotFound`` when no pattern matches the path, and
        ``MethodNotAllowed`` (carrying ``Allow``) when one does but not
        for this method. ``HEAD`` is served by a ``GET`` route.
        """
        method = method.upper()
        found = _walk(self._root, [p for p in path.split("/") if p], {})
        if found is None:
            raise NotFound(f"No route matches {method} {path!r}")

        node, raw = found
        route = node.by_method.get(method)
        if route is None and method == "HEAD":
            route = node.by_method.get("GET")
        if route is None:
            allowed = set(node.by_method)
            if "GET" in allowed:
                allowed.add("HEAD")
            raise MethodNotAllowed(frozenset(allowed))

        converters = {s.param: s.converter for s in parse_path(route.path) if s.param}
        params = {
            name: _CONVERTERS[converters[name]].to_python(value) for name, value in raw.items()
        }
        return RouteMatch(route=route, path_params=raw, params=params)


def _walk(
    node: _Node, parts: list[str], captured: dict[str, str]
) -> tuple[_Node, dict[str, str]] | None:
    if not parts:
        return (node, captured) if node.by_method else None

    head, tail = parts[0], parts[1:]
    child = node.literal.get(head)
    if child is not None and (found := _walk(child, tail, captured)) is not None:
        return found

    edge = node.param
    if edge is not None and _CONVERTERS[edge.converter].regex.fullmatch(head):
        found = _walk(edge.node, tail, {**captured, edge.name: head})
        if found is not None:
            return found

    if node.rest is not None and node.rest.node.by_method:
        return node.rest.node, {**captured, node.rest.name: "/".join(parts)}
    return None
