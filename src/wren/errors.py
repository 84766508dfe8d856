"""wren exception hierarchy.

Shared by the router, template store, binder, and request pipeline so
every module raises and catches the same types.
"""

from dataclasses import dataclass


class WrenError(Exception):
    """Base for all wren-specific errors."""


class ConfigurationError(WrenError):
    """Raised when app configuration is invalid.

    Typically raised during ``App._freeze()`` or route registration.
    """


@dataclass(frozen=True, slots=True)
class HTTPError(WrenError):
    """An error that maps directly to an HTTP status code.

    The ASGI handler catches these and dispatches to the matching
    ``@app.error()`` handler, or to the default error response.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """404 — no route, template, or fragment matched."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)


class TemplateNotFound(NotFound):  # noqa: N818
    """404 — a template name has no file under the template root."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Template {name!r} not found")
        object.__setattr__(self, "name", name)


class FragmentNotFound(NotFound):  # noqa: N818
    """404 — the template exists but defines no such block."""

    def __init__(self, template: str, block: str, available: list[str] | None = None) -> None:
        detail = f"Fragment {block!r} not found in template {template!r}"
        if available:
            detail += f" (available: {', '.join(sorted(available))})"
        super().__init__(detail)
        object.__setattr__(self, "template", template)
        object.__setattr__(self, "block", block)
        object.__setattr__(self, "available", tuple(available or ()))


class MethodNotAllowed(HTTPError):  # noqa: N818
    """405 — route exists but not for this HTTP method.

    Includes an ``Allow`` header listing the valid methods.
    """

    def __init__(self, allowed: frozenset[str], detail: str = "") -> None:
        allow_value = ", ".join(sorted(allowed))
        default_detail = f"Method not allowed. Allowed methods: {allow_value}"
        super().__init__(
            status=405,
            detail=detail or default_detail,
            headers=(("Allow", allow_value),),
        )


class RenderError(WrenError):
    """A template failed to render with the given context.

    Carries the template name and the offending field path so the
    server log can point at the exact variable. Never shown to clients
    outside debug mode.
    """

    def __init__(
        self,
        template: str,
        message: str,
        *,
        field: str | None = None,
        lineno: int | None = None,
    ) -> None:
        self.template = template
        self.field = field
        self.lineno = lineno
        self.message = message
        super().__init__(str(self))

    def __str__(self) -> str:
        location = self.template
        if self.lineno is not None:
            location = f"{location}:{self.lineno}"
        if self.field:
            return f"{location}: {self.message} (field: {self.field})"
        return f"{location}: {self.message}"


class UnsupportedType(WrenError, TypeError):  # noqa: N818
    """The context binder met a value it does not know how to bind.

    A programming error: binding never coerces unknown types silently.
    """

    def __init__(self, path: str, value: object) -> None:
        self.path = path
        self.value_type = type(value)
        where = path or "<root>"
        super().__init__(
            f"Cannot bind {type(value).__name__} at {where}. "
            f"Supported: str, int, float, bool, None, Decimal, date, datetime, "
            f"Enum, mapping, dataclass, list, tuple, set."
        )
