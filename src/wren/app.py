"""The application object.

An ``App`` collects routes, error handlers, middleware, template
filters and lifespan hooks while the module that defines it is being
imported. The first request (or lifespan startup, or an explicit
``router``/``templates`` access) freezes it: the route table is
compiled, the template store is opened and further registration raises
``RuntimeError``.
"""

import logging
import threading
from collections.abc import Callable, Iterable
from typing import Any

from wren._internal.asgi import Receive, Scope, Send
from wren._internal.invoke import invoke
from wren.config import AppConfig
from wren.middleware.protocol import Middleware
from wren.middleware.static import StaticFiles
from wren.routing.route import Route
from wren.routing.router import Router
from wren.server.handler import handle_request
from wren.templating.store import TemplateStore

logger = logging.getLogger("wren.server")

type Handler = Callable[..., Any]


class App:
    """A wren application; also its own ASGI callable.

    ::

        app = App(AppConfig(template_dir="templates"))

        @app.get("/todos", fragment="todos-list")
        def todos():
            return Page("todos/list", items=load_items())
    """

    __slots__ = (
        "_error_handlers",
        "_filters",
        "_frozen",
        "_globals",
        "_hooks",
        "_lock",
        "_middleware",
        "_router",
        "_routes",
        "_store",
        "config",
    )

    def __init__(self, config: AppConfig | None = None) -> None:
        self.config = config or AppConfig()
        self._routes: list[Route] = []
        self._middleware: list[Middleware] = []
        self._error_handlers: dict[int | type[BaseException], Handler] = {}
        self._filters: dict[str, Callable[..., Any]] = {}
        self._globals: dict[str, Any] = {}
        self._hooks: dict[str, list[Handler]] = {"startup": [], "shutdown": []}
        self._lock = threading.Lock()
        self._frozen = False
        self._router: Router | None = None
        self._store: TemplateStore | None = None

    # -- Registration --

    def route(
        self,
        path: str,
        *,
        methods: Iterable[str] = ("GET",),
        name: str | None = None,
        fragment: str | None = None,
    ) -> Callable[[Handler], Handler]:
        """Register the decorated function for *path*.

        ``fragment`` is the element id rendered for htmx requests without
        a usable ``HX-Target`` when the returned ``Page`` names none.
        """
        verbs = frozenset(m.upper() for m in methods)

        def register(func: Handler) -> Handler:
            self._check_open()
            self._routes.append(Route(path, func, verbs, name=name, fragment=fragment))
            return func

        return register

    def get(self, path: str, **options: Any) -> Callable[[Handler], Handler]:
        return self.route(path, methods=("GET",), **options)

    def post(self, path: str, **options: Any) -> Callable[[Handler], Handler]:
        return self.route(path, methods=("POST",), **options)

    def error(self, key: int | type[BaseException]) -> Callable[[Handler], Handler]:
        """Handle a status code or exception type with the decorated function.

        The handler may take no arguments, ``(request)`` or
        ``(request, exc)``, and returns anything a route can return.
        """

        def register(func: Handler) -> Handler:
            self._check_open()
            self._error_handlers[key] = func
            return func

        return register

    def add_middleware(self, middleware: Middleware) -> None:
        self._check_open()
        self._middleware.append(middleware)

    def template_filter(self, name: str | None = None) -> Callable[[Handler], Handler]:
        """Expose the decorated function to templates as ``{{ x | name }}``."""

        def register(func: Handler) -> Handler:
            self._check_open()
            self._filters[name or func.__name__] = func
            return func

        return register

    def template_global(self, name: str | None = None) -> Callable[[Any], Any]:
        """Expose the decorated value to every template under *name*."""

        def register(value: Any) -> Any:
            self._check_open()
            self._globals[name or value.__name__] = value
            return value

        return register

    def on_startup(self, func: Handler) -> Handler:
        """Run *func* (sync or async) at startup, in registration order."""
        self._check_open()
        self._hooks["startup"].append(func)
        return func

    def on_shutdown(self, func: Handler) -> Handler:
        self._check_open()
        self._hooks["shutdown"].append(func)
        return func

    # -- Frozen state --

    @property
    def router(self) -> Router:
        self._ensure_frozen()
        assert self._router is not None
        return self._router

    @property
    def templates(self) -> TemplateStore | None:
        """The template store; None when ``template_dir`` is not a directory."""
        self._ensure_frozen()
        return self._store

    # -- Serving --

    def run(self, host: str | None = None, port: int | None = None) -> None:
        """Serve with pounce (``pip install wren[server]``)."""
        from wren.server.dev import run_dev_server

        self._ensure_frozen()
        run_dev_server(
            self,
            host or self.config.host,
            port or self.config.port,
            reload=self.config.debug,
        )

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        self._ensure_frozen()
        if scope["type"] == "lifespan":
            await self._lifespan(receive, send)
            return
        assert self._router is not None
        await handle_request(
            scope,
            receive,
            send,
            router=self._router,
            middleware=tuple(self._middleware),
            error_handlers=self._error_handlers,
            store=self._store,
            debug=self.config.debug,
            max_body=self.config.max_content_length,
        )

    async def _lifespan(self, receive: Receive, send: Send) -> None:
        while True:
            message = await receive()
            if message["type"] == "lifespan.startup":
                try:
                    await self.startup()
                except Exception as exc:
                    logger.exception("Startup hook failed")
                    await send({"type": "lifespan.startup.failed", "message": str(exc)})
                    return
                await send({"type": "lifespan.startup.complete"})
            elif message["type"] == "lifespan.shutdown":
                await self.shutdown()
                await send({"type": "lifespan.shutdown.complete"})
                return

    async def startup(self) -> None:
        for hook in self._hooks["startup"]:
            await invoke(hook)

    async def shutdown(self) -> None:
        for hook in self._hooks["shutdown"]:
            await invoke(hook)

    # -- Freezing --

    def _check_open(self) -> None:
        if self._frozen:
            msg = "Cannot modify the app after it has started serving requests."
            raise RuntimeError(msg)

    def _ensure_frozen(self) -> None:
        if self._frozen:
            return
        with self._lock:
            if not self._frozen:
                self._freeze()

    def _freeze(self) -> None:
        # Caller holds self._lock
        router = Router()
        for route in self._routes:
            router.add(route)
        router.compile()

        static = self.config.static_path
        if static is not None:
            # Last, so user middleware also sees asset requests
            self._middleware.append(StaticFiles(static, prefix=self.config.static_url))

        templates = self.config.template_path
        if templates is None:
            logger.debug("No template directory at %s", self.config.template_dir)
        else:
            self._store = TemplateStore(
                templates,
                suffixes=self.config.template_suffixes,
                autoescape=self.config.autoescape,
                trim_blocks=self.config.trim_blocks,
                lstrip_blocks=self.config.lstrip_blocks,
                filters=self._filters,
                globals_=self._globals,
            )

        self._router = router
        self._frozen = True
        logger.debug(
            "App frozen: %d route(s), %d middleware, templates %s",
            len(self._routes),
            len(self._middleware),
            "off" if self._store is None else "on",
        )
