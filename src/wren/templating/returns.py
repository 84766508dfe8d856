"""Template, Fragment, Page, and OOB return types.

Frozen dataclasses that handlers return. The content negotiation layer
inspects these, binds their context, and dispatches to the template
store.

Each type takes its context as keyword arguments, optionally preceded
by one positional domain value (a dataclass or mapping) that is bound
first::

    return Page("todos/list", "todos-list", TodoPage(items=items), title="Todos")
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from wren.templating.binding import bind, bind_fields

_NO_VALUE = object()


def _context(value: Any, fields: dict[str, Any]) -> dict[str, Any]:
    if value is _NO_VALUE:
        return dict(fields)
    return {**bind(value), **fields}


@dataclass(frozen=True, slots=True)
class Template:
    """Render a full template.

    Usage::

        return Template("index", title="Home")
    """

    name: str
    context: dict[str, Any] = field(default_factory=dict)

    def __init__(self, name: str, value: Any = _NO_VALUE, /, **context: Any) -> None:
        object.__setattr__(self, "name", name)
        object.__setattr__(self, "context", _context(value, context))

    def bound_context(self) -> dict[str, Any]:
        return bind_fields(**self.context)


@dataclass(frozen=True, slots=True)
class Fragment:
    """Render one named block of a template.

    *target* is the DOM id an out-of-band swap lands on. When ``None``
    the block name is used with underscores turned into hyphens
    (block ``contact_row`` swaps into ``#contact-row``).

    Usage::

        return Fragment("counter", "count", count=3)
    """

    template_name: str
    block_name: str
    target: str | None = None
    context: dict[str, Any] = field(default_factory=dict)

    def __init__(
        self,
        template_name: str,
        block_name: str,
        value: Any = _NO_VALUE,
        /,
        *,
        target: str | None = None,
        **context: Any,
    ) -> None:
        object.__setattr__(self, "template_name", template_name)
        object.__setattr__(self, "block_name", block_name)
        object.__setattr__(self, "target", target)
        object.__setattr__(self, "context", _context(value, context))

    @property
    def target_id(self) -> str:
        return self.target if self.target is not None else self.block_name.replace("_", "-")

    def bound_context(self) -> dict[str, Any]:
        return bind_fields(**self.context)


@dataclass(frozen=True, slots=True)
class Page:
    """Render a full template or one fragment of it, depending on the request.

    The negotiator reads the htmx request headers and renders:

    * the **whole template** for normal navigations and history restores;
    * the **fragment named by HX-Target** for htmx requests that target
      an element id;
    * the **default fragment** for htmx requests with no target.

    Usage::

        return Page("todos/list", "todos-list", items=items)
    """

    name: str
    fragment: str | None = None
    context: dict[str, Any] = field(default_factory=dict)

    def __init__(
        self,
        name: str,
        fragment: str | None = None,
        value: Any = _NO_VALUE,
        /,
        **context: Any,
    ) -> None:
        object.__setattr__(self, "name", name)
        object.__setattr__(self, "fragment", fragment)
        object.__setattr__(self, "context", _context(value, context))

    def bound_context(self) -> dict[str, Any]:
        return bind_fields(**self.context)


@dataclass(frozen=True, slots=True)
class OOB:
    """Compose a primary response with out-of-band fragment swaps.

    htmx swaps the first element into the normal target, then scans the
    response for elements carrying ``hx-swap-oob`` and swaps each into
    the element with the matching id.

    Usage::

        return OOB(
            Fragment("contacts", "contact_form", form=empty_form),
            Fragment("contacts", "contact_row", target="contacts-list", contact=c),
        )
    """

    main: Fragment | Template | Page
    oob_fragments: tuple[Fragment, ...]
    swap: str = "true"

    def __init__(
        self,
        main: Fragment | Template | Page,
        /,
        *oob_fragments: Fragment,
        swap: str = "true",
    ) -> None:
        object.__setattr__(self, "main", main)
        object.__setattr__(self, "oob_fragments", oob_fragments)
        object.__setattr__(self, "swap", swap)
