"""Middleware shape and chain assembly.

Middleware wraps the routed handler::

    async def no_store_fragments(request: Request, next: Next) -> Response:
        response = await next(request)
        if response.render_intent == "fragment":
            return response.with_header("Cache-Control", "no-store")
        return response

Plain functions and objects with an async ``__call__`` both fit; no
base class is involved.
"""

from collections.abc import Awaitable, Callable, Sequence
from typing import Protocol

from wren.http.request import Request
from wren.http.response import Response

type Next = Callable[[Request], Awaitable[Response]]


class Middleware(Protocol):
    async def __call__(self, request: Request, next: Next) -> Response: ...


def chain(middleware: Sequence[Middleware], endpoint: Next) -> Next:
    """Wrap *endpoint* so the first middleware in the sequence runs first."""
    wrapped = endpoint
    for layer in reversed(middleware):
        wrapped = _bind(layer, wrapped)
    return wrapped


def _bind(layer: Middleware, downstream: Next) -> Next:
    async def call(request: Request) -> Response:
        return await layer(request, downstream)

    return call
