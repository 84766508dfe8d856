"""Tests for wren.templating.returns — render values handlers return."""

from dataclasses import dataclass

import pytest

from wren.errors import UnsupportedType
from wren.templating.returns import OOB, Fragment, Page, Template


@dataclass(frozen=True, slots=True)
class TodoPage:
    title: str
    items: list[str]


class TestTemplate:
    def test_keyword_context(self) -> None:
        t = Template("index", title="Home")
        assert t.name == "index"
        assert t.context == {"title": "Home"}

    def test_positional_value_bound_first(self) -> None:
        t = Template("todos/list", TodoPage("Todos", ["a"]), title="Override")
        assert t.bound_context() == {"title": "Override", "items": ["a"]}

    def test_unsupported_value_fails_at_construction(self) -> None:
        with pytest.raises(UnsupportedType):
            Template("index", 42)

    def test_unsupported_field_fails_at_bind(self) -> None:
        t = Template("index", thing=object())
        with pytest.raises(UnsupportedType) as exc_info:
            t.bound_context()
        assert exc_info.value.path == "thing"


class TestFragment:
    def test_target_defaults_to_block_with_hyphens(self) -> None:
        assert Fragment("contacts", "contact_row").target_id == "contact-row"

    def test_explicit_target(self) -> None:
        assert Fragment("contacts", "contact_row", target="contacts-list").target_id == (
            "contacts-list"
        )

    def test_context(self) -> None:
        f = Fragment("counter", "count", count=3)
        assert (f.template_name, f.block_name, f.context) == ("counter", "count", {"count": 3})


class TestPage:
    def test_default_fragment_positional(self) -> None:
        p = Page("todos/list", "todos-list", items=[])
        assert p.fragment == "todos-list"
        assert p.context == {"items": []}

    def test_no_fragment(self) -> None:
        assert Page("todos/list", items=[]).fragment is None

    def test_dataclass_value(self) -> None:
        p = Page("todos/list", None, TodoPage("Todos", []))
        assert p.bound_context() == {"title": "Todos", "items": []}


class TestOOB:
    def test_collects_fragments(self) -> None:
        main = Fragment("contacts", "contact_form")
        row = Fragment("contacts", "contact_row")
        value = OOB(main, row, swap="afterbegin")
        assert value.main is main
        assert value.oob_fragments == (row,)
        assert value.swap == "afterbegin"

    def test_default_swap(self) -> None:
        assert OOB(Fragment("a", "b")).swap == "true"
