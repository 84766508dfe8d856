"""Middleware: async callables wrapped around route dispatch.

    async def mw(request: Request, next: Next) -> Response

``StaticFiles`` serves a directory or single files ahead of routing.
"""

from wren.middleware.protocol import Middleware, Next, chain
from wren.middleware.static import StaticFiles

__all__ = ["Middleware", "Next", "StaticFiles", "chain"]
