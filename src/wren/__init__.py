"""wren — a hypermedia web framework that renders whole pages or just the fragment htmx asked for.

Handlers return values, not strings. A ``Page`` renders the complete
document for a normal navigation and only the targeted block for an
htmx request, from the same template::

    from wren import App, AppConfig, Page

    app = App(AppConfig(template_dir="templates"))

    @app.get("/todos", fragment="todos-list")
    def todos():
        return Page("todos/list", items=load_items())

    app.run()

Dev server (``pip install wren[server]``)::

    wren run myapp:app
"""

import importlib

__version__ = "0.1.0"

# Public name -> defining module; imported on first attribute access
_EXPORTS = {
    "App": "wren.app",
    "AppConfig": "wren.config",
    "Request": "wren.http.request",
    "Response": "wren.http.response",
    "Redirect": "wren.http.response",
    "Template": "wren.templating.returns",
    "Fragment": "wren.templating.returns",
    "Page": "wren.templating.returns",
    "OOB": "wren.templating.returns",
    "TemplateStore": "wren.templating.store",
    "bind": "wren.templating.binding",
    "decide": "wren.server.fragments",
    "Middleware": "wren.middleware.protocol",
    "Next": "wren.middleware.protocol",
    "ConfigurationError": "wren.errors",
    "FragmentNotFound": "wren.errors",
    "HTTPError": "wren.errors",
    "MethodNotAllowed": "wren.errors",
    "NotFound": "wren.errors",
    "RenderError": "wren.errors",
    "TemplateNotFound": "wren.errors",
    "UnsupportedType": "wren.errors",
    "WrenError": "wren.errors",
}

__all__ = sorted(_EXPORTS)


def __getattr__(name: str) -> object:
    module = _EXPORTS.get(name)
    if module is None:
        msg = f"module {__name__!r} has no attribute {name!r}"
        raise AttributeError(msg)
    value = getattr(importlib.import_module(module), name)
    globals()[name] = value
    return value


def __dir__() -> list[str]:
    return [*globals(), *__all__]
