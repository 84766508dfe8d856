"""Read-only request headers."""

from collections.abc import Iterable, Iterator, Mapping


def _text(value: bytes | str) -> str:
    return value.decode("latin-1") if isinstance(value, bytes) else value


class Headers(Mapping[str, str]):
    """Request headers keyed by lower-case name.

    Built from the ASGI scope's ``(bytes, bytes)`` pairs or from a plain
    ``{name: value}`` dict. A repeated header keeps every value in
    arrival order; indexing returns the first one.
    """

    __slots__ = ("_values",)

    def __init__(
        self,
        source: Mapping[str, str] | Iterable[tuple[bytes | str, bytes | str]] = (),
    ) -> None:
        pairs = source.items() if isinstance(source, Mapping) else source
        collected: dict[str, list[str]] = {}
        for name, value in pairs:
            collected.setdefault(_text(name).lower(), []).append(_text(value))
        self._values: dict[str, tuple[str, ...]] = {
            name: tuple(values) for name, values in collected.items()
        }

    def __getitem__(self, key: str) -> str:
        return self._values[key.lower()][0]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.lower() in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        first = {name: values[0] for name, values in self._values.items()}
        return f"Headers({first!r})"

    def get_list(self, key: str) -> list[str]:
        """Every value sent for *key*, in arrival order."""
        return list(self._values.get(key.lower(), ()))
