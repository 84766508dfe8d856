"""Serving an App with pounce."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from wren.errors import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from wren._internal.asgi import Receive, Scope, Send

    type ASGIApp = Callable[[Scope, Receive, Send], Awaitable[None]]

logger = logging.getLogger("wren.server")

# Template and stylesheet edits restart the server in reload mode too
_WATCHED = (".html", ".css")


def run_dev_server(
    app: ASGIApp,
    host: str,
    port: int,
    *,
    reload: bool = False,
    app_path: str | None = None,
) -> None:
    """Serve *app* on ``host:port`` with a single pounce worker.

    pounce is handed the live object. ``app_path`` (``"module:attr"``)
    lets a reloading server import a fresh copy after each change.
    """
    try:
        from pounce.config import ServerConfig
        from pounce.server import Server
    except ImportError:
        msg = "wren needs pounce to serve requests: pip install wren[server]"
        raise ConfigurationError(msg) from None

    config = ServerConfig(
        host=host,
        port=port,
        workers=1,
        reload=reload,
        reload_include=_WATCHED if reload else (),
    )
    logger.info("Serving on http://%s:%d%s", host, port, " (reload)" if reload else "")
    Server(config, app, app_path=app_path).run()
