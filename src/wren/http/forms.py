"""URL-encoded form parsing.

Only ``application/x-www-form-urlencoded`` bodies are supported; the
htmx forms this framework renders never post multipart data.
"""

from collections.abc import Iterator
from urllib.parse import parse_qsl


class FormData:
    """Immutable multi-valued form fields.

    ``form["name"]`` returns the first value; ``get_list`` returns all.
    """

    __slots__ = ("_fields",)

    def __init__(self, pairs: list[tuple[str, str]] | None = None) -> None:
        self._fields: tuple[tuple[str, str], ...] = tuple(pairs or ())

    def __getitem__(self, key: str) -> str:
        for name, value in self._fields:
            if name == key:
                return value
        raise KeyError(key)

    def __contains__(self, key: object) -> bool:
        return any(name == key for name, _ in self._fields)

    def __iter__(self) -> Iterator[str]:
        return iter(dict.fromkeys(name for name, _ in self._fields))

    def __len__(self) -> int:
        return len(dict.fromkeys(name for name, _ in self._fields))

    def __repr__(self) -> str:
        return f"FormData({list(self._fields)!r})"

    def get(self, key: str, default: str = "") -> str:
        try:
            return self[key]
        except KeyError:
            return default

    def get_list(self, key: str) -> list[str]:
        return [value for name, value in self._fields if name == key]


def parse_urlencoded(raw: bytes) -> FormData:
    """Parse an ``application/x-www-form-urlencoded`` body."""
    text = raw.decode("utf-8", errors="replace")
    return FormData(parse_qsl(text, keep_blank_values=True))
