"""Tests for wren.__init__ — every public name resolves lazily."""

import pytest

import wren


@pytest.mark.parametrize("name", wren.__all__)
def test_all_names_resolve(name: str) -> None:
    """Every name in __all__ must resolve via __getattr__ without error."""
    obj = getattr(wren, name)
    assert obj is not None, f"wren.{name} resolved to None"


def test_unknown_name_raises_attribute_error() -> None:
    with pytest.raises(AttributeError, match="no attribute"):
        wren.__getattr__("ThisDoesNotExist")


def test_resolved_name_is_cached() -> None:
    first = wren.Page
    assert wren.__dict__["Page"] is first


def test_dir_lists_public_names() -> None:
    assert {"App", "Page", "decide"} <= set(dir(wren))
