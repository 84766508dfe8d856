"""Content negotiation — maps handler return values to Response objects.

isinstance-based dispatch, no magic, fully predictable. ``Page`` values
consult the fragment negotiator; every other type renders the same way
regardless of request headers.
"""

from __future__ import annotations

import json as json_module
import logging
from typing import TYPE_CHECKING, Any

from wren.errors import ConfigurationError, FragmentNotFound
from wren.http.headers import Headers
from wren.http.response import Redirect, Response
from wren.server import fragments
from wren.templating.returns import OOB, Fragment, Page, Template
from wren.templating.store import TemplateStore

if TYPE_CHECKING:
    from wren.http.request import Request

logger = logging.getLogger("wren.server")

_OOB_REPLACE = frozenset({"true", "outerHTML"})

# Every request header decide() reads; sent on full pages and fragments alike
PAGE_VARY = "HX-Request, HX-Target, HX-History-Restore-Request"


def _html_response(body: str, *, intent: str) -> Response:
    return Response(
        body=body,
        content_type="text/html; charset=utf-8",
        render_intent=intent,  # type: ignore[arg-type]
    )


def _require_store(store: TemplateStore | None, kind: str) -> TemplateStore:
    if store is None:
        msg = (
            f"{kind} return type requires a template store. "
            f"Ensure AppConfig.template_dir points at a directory."
        )
        raise ConfigurationError(msg)
    return store


def negotiate(
    value: Any,
    *,
    store: TemplateStore | None = None,
    request: Request | None = None,
    default_fragment: str | None = None,
) -> Response:
    """Convert a route handler's return value to a Response.

    Dispatch order:

    1. ``Response``            -> pass through
    2. ``Redirect``            -> 3xx with Location header
    3. ``Template``            -> whole template
    4. ``Fragment``            -> one block
    5. ``Page``                -> whole template or one block, per request headers
    6. ``OOB``                 -> primary + hx-swap-oob fragments
    7. ``str``                 -> 200, text/html
    8. ``bytes``               -> 200, application/octet-stream
    9. ``dict`` / ``list``     -> 200, application/json
    10. ``(value, int)``       -> negotiate value, override status
    11. ``(value, int, dict)`` -> negotiate value, override status + headers
    """
    match value:
        case Response():
            return value
        case Redirect():
            return (
                Response(body="")
                .with_status(value.status)
                .with_header("Location", value.url)
                .with_headers(dict(value.headers))
            )
        case Template():
            html = _require_store(store, "Template").render(value.name, value.bound_context())
            return _html_response(html, intent="full_page")
        case Fragment():
            html = _require_store(store, "Fragment").render_block(
                value.template_name, value.block_name, value.bound_context()
            )
            return _html_response(html, intent="fragment")
        case Page():
            return _render_page(value, _require_store(store, "Page"), request, default_fragment)
        case OOB():
            return _render_oob(value, _require_store(store, "OOB"), request)
        case str():
            return _html_response(value, intent="unknown")
        case bytes():
            return Response(body=value, content_type="application/octet-stream")
        case dict() | list():
            return Response(
                body=json_module.dumps(value, default=str),
                content_type="application/json; charset=utf-8",
            )
        case (inner, int() as status):
            return negotiate(
                inner, store=store, request=request, default_fragment=default_fragment
            ).with_status(status)
        case (inner, int() as status, dict() as headers):
            return (
                negotiate(inner, store=store, request=request, default_fragment=default_fragment)
                .with_status(status)
                .with_headers(headers)
            )
        case _:
            msg = (
                f"Cannot convert {type(value).__name__} to a response. "
                f"Return str, dict, list, bytes, Template, Fragment, Page, OOB, "
                f"Response, or Redirect."
            )
            raise TypeError(msg)


def _render_page(
    value: Page,
    store: TemplateStore,
    request: Request | None,
    route_fragment: str | None = None,
) -> Response:
    """Render a Page as the full document or a single fragment.

    The decision comes from ``fragments.decide()``. When the targeted
    element id has no block in the template, the page's default fragment
    is rendered instead; with no default the request fails as NotFound.
    """
    headers = request.headers if request is not None else Headers()
    default_fragment = value.fragment or route_fragment
    decision = fragments.decide(headers, default_fragment=default_fragment)
    context = value.bound_context()

    if isinstance(decision, fragments.FullPage):
        html = store.render(value.name, context)
        return _html_response(html, intent="full_page").with_header("Vary", PAGE_VARY)

    block = decision.block
    if not store.has_block(value.name, block):
        default = fragments.parse_fragment_name(default_fragment)
        if default is None or not store.has_block(value.name, fragments.block_name(default)):
            raise FragmentNotFound(value.name, block, store.load(value.name).list_blocks())
        logger.debug(
            "No block %r in %s; rendering default fragment %r", block, value.name, default
        )
        block = fragments.block_name(default)

    html = store.render_block(value.name, block, context)
    return _html_response(html, intent="fragment").with_header("Vary", PAGE_VARY)


def _render_oob(value: OOB, store: TemplateStore, request: Request | None) -> Response:
    main = negotiate(value.main, store=store, request=request)
    parts = [main.text]
    for frag in value.oob_fragments:
        html = store.render_block(frag.template_name, frag.block_name, frag.bound_context())
        if value.swap in _OOB_REPLACE:
            parts.append(f'<div id="{frag.target_id}" hx-swap-oob="{value.swap}">{html}</div>')
        else:
            parts.append(f'<div hx-swap-oob="{value.swap}:#{frag.target_id}">{html}</div>')
    return Response(
        body="\n".join(parts),
        status=main.status,
        content_type="text/html; charset=utf-8",
        headers=main.headers,
        render_intent="fragment",
    )
