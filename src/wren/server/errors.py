"""Turning exceptions raised while serving a request into responses.

``HTTPError`` subclasses are expected outcomes (404, 405, 422, ...) and
are logged at debug level. Anything else, render failures included, is
a 500: logged in full through ``terminal_errors`` and shown to the
client only as a status line unless the app runs in debug mode.

Either way a registered error handler wins over the built-in body. For
htmx requests the built-in body is a small snippet sent to
``#wren-error`` instead of wherever the request meant to swap.
"""

import html
import logging
from collections.abc import Callable, Mapping
from typing import Any

from wren._internal.invoke import invoke_leading
from wren.errors import HTTPError
from wren.http.request import Request
from wren.http.response import Response
from wren.server.negotiation import negotiate
from wren.server.terminal_errors import log_error
from wren.templating.store import TemplateStore

logger = logging.getLogger("wren.server")

type ErrorHandlers = Mapping[int | type[BaseException], Callable[..., Any]]

ERROR_TARGET = "#wren-error"

_PLAIN = "text/plain; charset=utf-8"

_REASONS = {
    400: "Bad Request",
    403: "Forbidden",
    404: "Not Found",
    405: "Method Not Allowed",
    413: "Payload Too Large",
    415: "Unsupported Media Type",
    422: "Unprocessable Entity",
    500: "Internal Server Error",
}


def error_snippet(status: int, detail: str) -> str:
    """The fragment htmx swaps into ``#wren-error``."""
    return f'<div class="wren-error" data-status="{status}">{html.escape(detail)}</div>'


async def handle_http_error(
    exc: HTTPError,
    request: Request,
    error_handlers: ErrorHandlers,
    store: TemplateStore | None,
    debug: bool,
) -> Response:
    logger.debug("%d %s %s: %s", exc.status, request.method, request.path, exc.detail)
    custom = await _custom(exc, exc.status, request, error_handlers, store)
    if custom is not None:
        return custom
    detail = exc.detail if debug and exc.detail else reason(exc.status)
    return _builtin(exc.status, detail, request).with_headers(exc.headers)


async def handle_internal_error(
    exc: Exception,
    request: Request,
    error_handlers: ErrorHandlers,
    store: TemplateStore | None,
    debug: bool,
) -> Response:
    log_error(exc, request)
    custom = await _custom(exc, 500, request, error_handlers, store)
    if custom is not None:
        return custom
    detail = f"{reason(500)}: {exc}" if debug else reason(500)
    return _builtin(500, detail, request)


async def _custom(
    exc: Exception,
    status: int,
    request: Request,
    error_handlers: ErrorHandlers,
    store: TemplateStore | None,
) -> Response | None:
    """Run the most specific registered handler, if any.

    Exception types are tried along the MRO before the status code. A
    handler that leaves the status at 200 gets *status* instead.
    """
    handler = next(
        (error_handlers[cls] for cls in type(exc).__mro__ if cls in error_handlers),
        error_handlers.get(status),
    )
    if handler is None:
        return None
    result = await invoke_leading(handler, request, exc)
    if isinstance(result, Response):
        response = result
    else:
        response = negotiate(result, request=request, store=store)
    return response.with_status(status) if response.status == 200 else response


def _builtin(status: int, detail: str, request: Request) -> Response:
    if not request.is_fragment:
        return Response(detail, status=status, content_type=_PLAIN)
    return (
        Response(error_snippet(status, detail), status=status)
        .with_htmx(retarget=ERROR_TARGET, reswap="innerHTML", trigger="wrenError")
        .with_render_intent("fragment")
    )


def reason(status: int) -> str:
    return _REASONS.get(status, f"Error {status}")
