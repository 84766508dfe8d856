"""Tests for wren.server.fragments — the full-page / fragment decision."""

import pytest

from wren.http.headers import Headers
from wren.server.fragments import (
    FULL_PAGE,
    FragmentDecision,
    FullPage,
    block_name,
    decide,
    parse_fragment_name,
)


class TestDecide:
    @pytest.mark.parametrize(
        ("headers", "expected"),
        [
            ({}, FULL_PAGE),
            ({"HX-Target": "todos-list"}, FULL_PAGE),
            ({"HX-Request": "false", "HX-Target": "todos-list"}, FULL_PAGE),
            ({"HX-Request": "true", "HX-Target": "todos-list"}, FragmentDecision("todos-list")),
            ({"HX-Request": "true", "HX-Target": "#todos-list"}, FragmentDecision("todos-list")),
            ({"HX-Request": "true", "HX-Target": "count"}, FragmentDecision("count")),
            ({"HX-Request": "true"}, FULL_PAGE),
            ({"HX-Request": "true", "HX-Target": ""}, FULL_PAGE),
            ({"HX-Request": "true", "HX-Target": "1abc"}, FULL_PAGE),
            ({"HX-Request": "true", "HX-Target": "div > .item"}, FULL_PAGE),
            (
                {
                    "HX-Request": "true",
                    "HX-Target": "todos-list",
                    "HX-History-Restore-Request": "true",
                },
                FULL_PAGE,
            ),
        ],
    )
    def test_decision_table(self, headers: dict[str, str], expected: object) -> None:
        assert decide(headers) == expected

    def test_default_fragment_without_target(self) -> None:
        decision = decide({"HX-Request": "true"}, default_fragment="todos-list")
        assert decision == FragmentDecision("todos-list")

    def test_target_beats_default(self) -> None:
        decision = decide(
            {"HX-Request": "true", "HX-Target": "summary"}, default_fragment="todos-list"
        )
        assert decision == FragmentDecision("summary")

    def test_malformed_target_ignores_default(self) -> None:
        decision = decide(
            {"HX-Request": "true", "HX-Target": "not valid"}, default_fragment="todos-list"
        )
        assert decision == FULL_PAGE

    def test_default_ignored_without_marker(self) -> None:
        assert decide({}, default_fragment="todos-list") == FULL_PAGE

    def test_case_insensitive_plain_dict(self) -> None:
        decision = decide({"hx-request": "true", "hx-target": "count"})
        assert decision == FragmentDecision("count")

    def test_headers_object(self) -> None:
        headers = Headers({"HX-Request": "true", "HX-Target": "count"})
        assert decide(headers) == FragmentDecision("count")

    def test_deterministic(self) -> None:
        headers = {"HX-Request": "true", "HX-Target": "todos-list"}
        assert len({decide(headers) for _ in range(10)}) == 1


class TestDecisionTypes:
    def test_full_page_is_not_fragment(self) -> None:
        assert isinstance(FULL_PAGE, FullPage)
        assert FULL_PAGE.is_fragment is False

    def test_fragment_block(self) -> None:
        decision = FragmentDecision("todos-list")
        assert decision.is_fragment is True
        assert decision.block == "todos_list"

    def test_decision_is_not_the_handler_return_type(self) -> None:
        from wren import Fragment

        assert FragmentDecision is not Fragment
        assert not isinstance(decide({"HX-Request": "true", "HX-Target": "count"}), Fragment)


class TestNames:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("count", "count"),
            ("#count", "count"),
            ("  todos-list ", "todos-list"),
            ("row_1", "row_1"),
            ("", None),
            ("#", None),
            ("-x", None),
            ("a b", None),
            (None, None),
        ],
    )
    def test_parse_fragment_name(self, value: str | None, expected: str | None) -> None:
        assert parse_fragment_name(value) == expected

    def test_block_name(self) -> None:
        assert block_name("todos-list") == "todos_list"
        assert block_name("count") == "count"
