"""Fragment negotiation — full page or one fragment, decided from headers.

htmx marks its requests with ``HX-Request: true`` and names the element
it will swap into with ``HX-Target``. The decision is a pure function of
those headers:

==============================================  ==============================
Headers                                         Decision
==============================================  ==============================
no ``HX-Request``                               ``FullPage``
``HX-History-Restore-Request: true``            ``FullPage``
``HX-Request`` + well-formed ``HX-Target``      ``FragmentDecision(target)``
``HX-Request`` + no target + default fragment   ``FragmentDecision(default)``
``HX-Request`` + malformed target               ``FullPage``
==============================================  ==============================

A fragment name is an element id; ``block_name()`` maps it to the kida
block that renders it (``todos-list`` -> ``todos_list``).
"""

import re
from collections.abc import Mapping
from dataclasses import dataclass

# An element id usable as a fragment name. A leading "#" is tolerated
# because hx-target values are CSS selectors.
_FRAGMENT_NAME = re.compile(r"^#?([A-Za-z][A-Za-z0-9_-]*)$")


@dataclass(frozen=True, slots=True)
class FullPage:
    """Render the complete document."""

    @property
    def is_fragment(self) -> bool:
        return False


@dataclass(frozen=True, slots=True)
class FragmentDecision:
    """Render only the fragment whose element id is *name*."""

    name: str

    @property
    def is_fragment(self) -> bool:
        return True

    @property
    def block(self) -> str:
        return block_name(self.name)


type Decision = FullPage | FragmentDecision

FULL_PAGE = FullPage()


def parse_fragment_name(value: str | None) -> str | None:
    """Return the element id in *value*, or None if it is not well-formed."""
    if value is None:
        return None
    match = _FRAGMENT_NAME.match(value.strip())
    return match.group(1) if match else None


def block_name(fragment: str) -> str:
    """Map an element id to its template block name."""
    return fragment.replace("-", "_")


def _header(headers: Mapping[str, str], name: str) -> str | None:
    value = headers.get(name)
    if value is None:
        # Plain dicts are case-sensitive; Headers is not.
        lowered = name.lower()
        for key, item in headers.items():
            if key.lower() == lowered:
                return item
    return value


def decide(
    headers: Mapping[str, str],
    *,
    default_fragment: str | None = None,
) -> Decision:
    """Decide whether a request gets the full page or one fragment.

    Never performs I/O; the same headers always give the same decision.
    """
    if _header(headers, "HX-Request") != "true":
        return FULL_PAGE
    if _header(headers, "HX-History-Restore-Request") == "true":
        return FULL_PAGE

    target = _header(headers, "HX-Target")
    if target is not None:
        name = parse_fragment_name(target)
        return FragmentDecision(name) if name is not None else FULL_PAGE

    default = parse_fragment_name(default_fragment)
    if default is not None:
        return FragmentDecision(default)
    return FULL_PAGE
