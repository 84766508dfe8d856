"""Context binding — typed domain values to plain template context.

Converts dataclass instances, mappings, and sequences into the dict,
list, and scalar structure kida renders from. Supported leaf types are
listed in ``SCALAR_TYPES``; everything else raises ``UnsupportedType``
with the path of the offending field, e.g. ``contacts[2].owner``.

Binding never coerces an unknown type to a string. A value that reaches
a template is always one the template author can reason about.
"""

from __future__ import annotations

import dataclasses
import datetime
import decimal
import enum
from collections.abc import Mapping
from typing import Any

from wren.errors import UnsupportedType

# Leaf values passed through unchanged (bool is an int subclass).
SCALAR_TYPES: tuple[type, ...] = (
    str,
    int,
    float,
    decimal.Decimal,
    datetime.date,
    datetime.time,
    type(None),
)

_SEQUENCE_TYPES: tuple[type, ...] = (list, tuple, set, frozenset)


def bind(value: Any) -> dict[str, Any]:
    """Bind a mapping or dataclass instance into a render context.

    Usage::

        @dataclass(frozen=True)
        class TodoPage:
            title: str
            items: list[Todo]

        ctx = bind(TodoPage("Todos", items=[]))
        # {"title": "Todos", "items": []}
    """
    if _is_dataclass_instance(value):
        return _bind_dataclass(value, "")
    if isinstance(value, Mapping):
        return _bind_mapping(value, "")
    raise UnsupportedType("", value)


def bind_fields(**fields: Any) -> dict[str, Any]:
    """Bind keyword arguments as a render context."""
    return _bind_mapping(fields, "")


def _bind_value(value: Any, path: str) -> Any:
    if isinstance(value, enum.Enum):
        return _bind_value(value.value, path)
    if isinstance(value, SCALAR_TYPES):
        return value
    if _is_dataclass_instance(value):
        return _bind_dataclass(value, path)
    if isinstance(value, Mapping):
        return _bind_mapping(value, path)
    if isinstance(value, _SEQUENCE_TYPES):
        items = value
        if isinstance(value, (set, frozenset)):
            # Sets have no order; sort so the rendered output is stable
            try:
                items = sorted(value)
            except TypeError as exc:
                raise UnsupportedType(path, value) from exc
        return [_bind_value(item, f"{path}[{i}]") for i, item in enumerate(items)]
    raise UnsupportedType(path, value)


def _bind_mapping(mapping: Mapping[Any, Any], path: str) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for key, item in mapping.items():
        if not isinstance(key, str):
            raise UnsupportedType(f"{path}[{key!r}]" if path else repr(key), key)
        result[key] = _bind_value(item, _join(path, key))
    return result


def _bind_dataclass(instance: Any, path: str) -> dict[str, Any]:
    return {
        f.name: _bind_value(getattr(instance, f.name), _join(path, f.name))
        for f in dataclasses.fields(instance)
    }


def _is_dataclass_instance(value: Any) -> bool:
    return dataclasses.is_dataclass(value) and not isinstance(value, type)


def _join(path: str, name: str) -> str:
    return f"{path}.{name}" if path else name
