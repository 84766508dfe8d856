"""Route definitions and match results."""

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class Segment:
    """One ``/``-separated piece of a route pattern.

    ``param`` is None for literal text. For ``{id:int}`` it is ``"id"``
    and ``converter`` is ``"int"``.
    """

    text: str
    param: str | None = None
    converter: str = "str"

    @property
    def is_catch_all(self) -> bool:
        return self.param is not None and self.converter == "path"


@dataclass(frozen=True, slots=True)
class Route:
    """A route as registered on the app.

    ``fragment`` is the element id rendered for htmx requests that carry
    no usable ``HX-Target``.
    """

    path: str
    handler: Callable[..., Any]
    methods: frozenset[str]
    name: str | None = None
    fragment: str | None = None


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """A matched route with its captured path parameters.

    ``path_params`` holds the raw strings from the URL; ``params`` holds
    the same values run through each segment's converter.
    """

    route: Route
    path_params: dict[str, str] = field(default_factory=dict)
    params: dict[str, Any] = field(default_factory=dict)
