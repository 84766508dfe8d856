"""Server-log output for requests that failed with a 500.

A template failure is printed as a banner naming the template, the line
and the field that broke, followed by the route and, for htmx requests,
the fragment that was being rendered::

    -- Template Error -----------------------------------------------
    todos/list:12: undefined variable 'itmes' (field: itmes)

      Route: GET /todos
      Fragment: todos-list
    -----------------------------------------------------------------

Any other exception goes to the log with its traceback.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from wren.errors import RenderError

if TYPE_CHECKING:
    from wren.http.request import Request

logger = logging.getLogger("wren.server")

_RULE = "-" * 65
_TITLE = "-- Template Error "


def _from_kida(exc: BaseException) -> bool:
    return (type(exc).__module__ or "").startswith("kida")


def _compact(exc: BaseException | None) -> str | None:
    """kida's own one-screen rendering of *exc*, when it has one."""
    format_compact = getattr(exc, "format_compact", None)
    return format_compact() if callable(format_compact) else None


def format_template_error(exc: BaseException, request: Request | None = None) -> str:
    lines = [_TITLE + _RULE[len(_TITLE) :]]
    if isinstance(exc, RenderError):
        lines.append(str(exc))
        detail = _compact(exc.__cause__)
        if detail:
            lines += ["", detail]
    else:
        lines.append(_compact(exc) or str(exc))

    if request is not None:
        lines += ["", f"  Route: {request.method} {request.path}"]
        if request.is_fragment:
            lines.append(f"  Fragment: {request.htmx_target or '<default>'}")
    lines.append(_RULE)
    return "\n".join(lines)


def log_error(exc: BaseException, request: Request | None = None) -> None:
    """Log *exc* with everything the client was not shown."""
    if isinstance(exc, RenderError) or _from_kida(exc):
        logger.error("%s", format_template_error(exc, request))
        return
    where = f" {request.method} {request.path}" if request is not None else ""
    logger.error("500%s", where, exc_info=exc)
