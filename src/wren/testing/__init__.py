"""Test helpers for wren applications.

    from wren.testing import TestClient, assert_is_fragment
"""

from wren.testing.assertions import (
    assert_fragment_contains,
    assert_fragment_not_contains,
    assert_is_error_fragment,
    assert_is_fragment,
    assert_is_full_page,
    assert_swaps_oob,
)
from wren.testing.client import TestClient, TestResponse

__all__ = [
    "TestClient",
    "TestResponse",
    "assert_fragment_contains",
    "assert_fragment_not_contains",
    "assert_is_error_fragment",
    "assert_is_fragment",
    "assert_is_full_page",
    "assert_swaps_oob",
]
