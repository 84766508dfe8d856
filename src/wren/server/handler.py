"""Per-request pipeline behind the app's ASGI callable.

Builds the Request, runs middleware around route dispatch, turns the
handler's return value into a Response and sends it. Errors raised
anywhere on the way become error responses here::

    Received -> route match -> handler -> {FullPage, FragmentDecision} -> Rendered
                                                              \\-> Failed
"""

import inspect
import logging
from collections.abc import Callable, Sequence
from typing import Any

from wren._internal.asgi import Receive, Scope, Send
from wren._internal.invoke import invoke
from wren.errors import HTTPError
from wren.http.request import Request
from wren.http.response import Response
from wren.middleware.protocol import Middleware, chain
from wren.routing.route import RouteMatch
from wren.routing.router import Router
from wren.server.errors import ErrorHandlers, handle_http_error, handle_internal_error
from wren.server.negotiation import negotiate
from wren.server.sender import send_response
from wren.templating.store import TemplateStore

logger = logging.getLogger("wren.server")


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    router: Router,
    middleware: Sequence[Middleware],
    error_handlers: ErrorHandlers,
    store: TemplateStore | None,
    debug: bool,
    max_body: int = 16 * 1024 * 1024,
) -> None:
    if scope["type"] != "http":
        return
    request = Request.from_asgi(scope, receive, max_body=max_body)

    async def dispatch(request: Request) -> Response:
        # An unknown path or method fails here, before any template loads
        match = router.match(request.method, request.path)
        request = request.with_path_params(match.path_params)
        result = await invoke(match.route.handler, **_handler_arguments(match, request))
        return negotiate(
            result, store=store, request=request, default_fragment=match.route.fragment
        )

    try:
        response = await chain(middleware, dispatch)(request)
    except HTTPError as exc:
        response = await handle_http_error(exc, request, error_handlers, store, debug)
    except Exception as exc:
        response = await handle_internal_error(exc, request, error_handlers, store, debug)

    logger.debug(
        "%s %s -> %d (%s)", request.method, request.path, response.status, response.render_intent
    )
    await send_response(response, send, head=request.method == "HEAD")


def _handler_arguments(match: RouteMatch, request: Request) -> dict[str, Any]:
    """Keyword arguments for the matched handler.

    A parameter named ``request`` or annotated ``Request`` receives the
    request. A parameter named like a path placeholder receives the
    converted value. Anything else is left to its default.
    """
    handler: Callable[..., Any] = match.route.handler
    arguments: dict[str, Any] = {}
    for name, param in inspect.signature(handler, eval_str=True).parameters.items():
        if name == "request" or param.annotation is Request:
            arguments[name] = request
        elif name in match.params:
            arguments[name] = match.params[name]
    return arguments
