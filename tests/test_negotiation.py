"""Tests for wren.server.negotiation — return values to Responses."""

import json

import pytest

from wren.errors import ConfigurationError, FragmentNotFound
from wren.http.response import Redirect, Response
from wren.server.negotiation import PAGE_VARY, negotiate
from wren.templating.returns import OOB, Fragment, Page, Template
from wren.templating.store import TemplateStore


class _Req:
    """Stand-in carrying only what the negotiator reads."""

    def __init__(self, headers: dict[str, str]) -> None:
        self.headers = headers


HTMX = {"HX-Request": "true"}


class TestNegotiatePassthrough:
    def test_response_passthrough(self) -> None:
        original = Response(body="hello", status=201)
        assert negotiate(original) is original

    def test_redirect_defaults_to_see_other(self) -> None:
        result = negotiate(Redirect("/todos"))
        assert result.status == 303
        assert result.header("Location") == "/todos"

    def test_redirect_status(self) -> None:
        assert negotiate(Redirect("/new", status=301)).status == 301

    def test_str(self) -> None:
        result = negotiate("<p>hi</p>")
        assert result.text == "<p>hi</p>"
        assert result.content_type == "text/html; charset=utf-8"

    def test_bytes(self) -> None:
        result = negotiate(b"\x00\x01")
        assert result.content_type == "application/octet-stream"

    def test_dict_is_json(self) -> None:
        result = negotiate({"ok": True})
        assert json.loads(result.text) == {"ok": True}
        assert result.content_type.startswith("application/json")

    def test_tuple_status(self) -> None:
        assert negotiate(("created", 201)).status == 201

    def test_tuple_status_and_headers(self) -> None:
        result = negotiate(("x", 202, {"X-Id": "7"}))
        assert result.status == 202
        assert result.header("X-Id") == "7"

    def test_unsupported_type(self) -> None:
        with pytest.raises(TypeError, match="Cannot convert object"):
            negotiate(object())


class TestNegotiateTemplateTypes:
    def test_template_needs_store(self) -> None:
        with pytest.raises(ConfigurationError):
            negotiate(Template("page", title="x", body="y"))

    def test_template(self, store: TemplateStore) -> None:
        result = negotiate(Template("page", title="Home", body="b"), store=store)
        assert result.status == 200
        assert "<h1>Home</h1>" in result.text
        assert result.render_intent == "full_page"

    def test_fragment(self, store: TemplateStore) -> None:
        result = negotiate(
            Fragment("rows", "row", row={"id": 3, "name": "Ann"}), store=store
        )
        assert result.text.strip() == '<li id="row-3">Ann</li>'
        assert result.render_intent == "fragment"

    def test_fragment_missing_block(self, store: TemplateStore) -> None:
        with pytest.raises(FragmentNotFound):
            negotiate(Fragment("page", "sidebar"), store=store)

    def test_dataclass_value_is_bound(self, store: TemplateStore) -> None:
        from dataclasses import dataclass

        @dataclass(frozen=True)
        class Row:
            id: int
            name: str

        result = negotiate(Fragment("rows", "row", row=Row(5, "Bo")), store=store)
        assert 'id="row-5"' in result.text


class TestNegotiatePage:
    def test_full_page_without_marker(self, store: TemplateStore) -> None:
        page = Page("todos/list", "todos-list", title="Todos", items=[])
        result = negotiate(page, store=store, request=_Req({}))
        assert "<html>" in result.text
        assert '<li class="empty">No todos</li>' in result.text
        assert result.render_intent == "full_page"
        assert result.header("Vary") == PAGE_VARY

    def test_targeted_fragment(self, store: TemplateStore) -> None:
        page = Page("todos/list", title="Todos", items=[])
        request = _Req({**HTMX, "HX-Target": "todos-list"})
        result = negotiate(page, store=store, request=request)
        assert "<html>" not in result.text
        assert "<h1>" not in result.text
        assert '<li class="empty">No todos</li>' in result.text
        assert result.render_intent == "fragment"
        assert result.header("Vary") == PAGE_VARY

    def test_other_target(self, store: TemplateStore) -> None:
        page = Page("todos/list", title="Todos", items=[{"text": "a"}])
        request = _Req({**HTMX, "HX-Target": "summary"})
        result = negotiate(page, store=store, request=request)
        assert result.text.strip() == "1 items"

    def test_page_default_fragment(self, store: TemplateStore) -> None:
        page = Page("todos/list", "todos-list", title="T", items=[])
        result = negotiate(page, store=store, request=_Req(HTMX))
        assert "No todos" in result.text
        assert "<h1>" not in result.text

    def test_route_default_fragment(self, store: TemplateStore) -> None:
        page = Page("todos/list", title="T", items=[])
        result = negotiate(
            page, store=store, request=_Req(HTMX), default_fragment="summary"
        )
        assert result.text.strip() == "0 items"

    def test_page_fragment_beats_route_fragment(self, store: TemplateStore) -> None:
        page = Page("todos/list", "todos-list", title="T", items=[])
        result = negotiate(
            page, store=store, request=_Req(HTMX), default_fragment="summary"
        )
        assert "No todos" in result.text

    def test_unknown_target_falls_back_to_default(self, store: TemplateStore) -> None:
        page = Page("todos/list", "todos-list", title="T", items=[])
        request = _Req({**HTMX, "HX-Target": "sidebar"})
        result = negotiate(page, store=store, request=request)
        assert "No todos" in result.text

    def test_unknown_target_without_default(self, store: TemplateStore) -> None:
        page = Page("todos/list", title="T", items=[])
        request = _Req({**HTMX, "HX-Target": "sidebar"})
        with pytest.raises(FragmentNotFound) as exc_info:
            negotiate(page, store=store, request=request)
        assert exc_info.value.block == "sidebar"

    def test_history_restore_is_full_page(self, store: TemplateStore) -> None:
        page = Page("todos/list", "todos-list", title="T", items=[])
        request = _Req(
            {**HTMX, "HX-Target": "todos-list", "HX-History-Restore-Request": "true"}
        )
        result = negotiate(page, store=store, request=request)
        assert "<html>" in result.text
        assert result.header("Vary") == PAGE_VARY

    def test_restore_and_swap_of_one_url_vary_alike(self, store: TemplateStore) -> None:
        page = Page("todos/list", "todos-list", title="T", items=[])
        swap = {**HTMX, "HX-Target": "todos-list"}
        restore = {**swap, "HX-History-Restore-Request": "true"}
        fragment = negotiate(page, store=store, request=_Req(swap))
        full = negotiate(page, store=store, request=_Req(restore))
        assert fragment.render_intent == "fragment"
        assert full.render_intent == "full_page"
        vary = {name.strip() for name in full.header("Vary").split(",")}
        assert vary == {"HX-Request", "HX-Target", "HX-History-Restore-Request"}
        assert fragment.header("Vary") == full.header("Vary")

    def test_no_request_is_full_page(self, store: TemplateStore) -> None:
        result = negotiate(Page("page", title="T", body="b"), store=store)
        assert "<html>" in result.text

    def test_page_with_status_tuple(self, store: TemplateStore) -> None:
        page = Page("todos/list", title="T", items=[])
        request = _Req({**HTMX, "HX-Target": "todos-list"})
        result = negotiate((page, 422), store=store, request=request)
        assert result.status == 422
        assert "<html>" not in result.text


class TestNegotiateOOB:
    def test_default_swap_wraps_with_target_id(self, store: TemplateStore) -> None:
        value = OOB(
            Fragment("page", "content", body="main"),
            Fragment("rows", "row", row={"id": 1, "name": "Ann"}),
        )
        result = negotiate(value, store=store)
        assert result.text.startswith("<p>main</p>")
        assert '<div id="row" hx-swap-oob="true"><li id="row-1">Ann</li>' in result.text
        assert result.render_intent == "fragment"

    def test_explicit_target(self, store: TemplateStore) -> None:
        value = OOB(
            Fragment("page", "content", body="main"),
            Fragment("rows", "row", target="people", row={"id": 1, "name": "Ann"}),
            swap="afterbegin",
        )
        result = negotiate(value, store=store)
        assert '<div hx-swap-oob="afterbegin:#people">' in result.text

    def test_outer_html_swap(self, store: TemplateStore) -> None:
        value = OOB(
            Fragment("page", "content", body="main"),
            Fragment("rows", "row", target="row-1", row={"id": 1, "name": "Ann"}),
            swap="outerHTML",
        )
        result = negotiate(value, store=store)
        assert '<div id="row-1" hx-swap-oob="outerHTML">' in result.text
