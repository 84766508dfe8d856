"""Outgoing responses.

``Response`` is immutable; every ``with_*`` call returns a changed
copy, so a handler, the negotiator and middleware can each add to a
response without affecting the others::

    Response("Saved").with_status(201).with_htmx(trigger="contactAdded")
"""

import json
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, replace
from typing import Any, Literal

type RenderIntent = Literal["full_page", "fragment", "unknown"]
type HeaderPairs = tuple[tuple[str, str], ...]


@dataclass(frozen=True, slots=True)
class Response:
    """Body, status and headers of one HTTP response.

    ``headers`` keeps insertion order and repeats; the sender lowercases
    names on the way out. ``render_intent`` says whether the negotiator
    produced a whole document or one fragment, so middleware and tests
    need not sniff the HTML.
    """

    body: str | bytes = ""
    status: int = 200
    content_type: str = "text/html; charset=utf-8"
    headers: HeaderPairs = ()
    render_intent: RenderIntent = "unknown"

    def with_status(self, status: int) -> "Response":
        return replace(self, status=status)

    def with_header(self, name: str, value: str) -> "Response":
        return replace(self, headers=self.headers + ((name, value),))

    def with_headers(self, headers: Mapping[str, str] | Iterable[tuple[str, str]]) -> "Response":
        """Append every header in *headers*, a mapping or (name, value) pairs."""
        pairs = headers.items() if isinstance(headers, Mapping) else headers
        return replace(self, headers=self.headers + tuple(pairs))

    def with_render_intent(self, intent: RenderIntent) -> "Response":
        return replace(self, render_intent=intent)

    def with_htmx(
        self,
        *,
        retarget: str | None = None,
        reswap: str | None = None,
        trigger: str | dict[str, Any] | None = None,
    ) -> "Response":
        """Steer the htmx swap from the server side.

        ``trigger`` is an event name, or a dict of event names to payloads
        which is sent as JSON (``{"showToast": {"message": "Saved"}}``).
        """
        extra: list[tuple[str, str]] = []
        if retarget is not None:
            extra.append(("HX-Retarget", retarget))
        if reswap is not None:
            extra.append(("HX-Reswap", reswap))
        if trigger is not None:
            value = trigger if isinstance(trigger, str) else json.dumps(trigger)
            extra.append(("HX-Trigger", value))
        return self.with_headers(extra)

    def header(self, name: str) -> str | None:
        """First value sent under *name*, compared case-insensitively."""
        wanted = name.lower()
        return next((value for key, value in self.headers if key.lower() == wanted), None)

    @property
    def body_bytes(self) -> bytes:
        return self.body.encode("utf-8") if isinstance(self.body, str) else self.body

    @property
    def text(self) -> str:
        return self.body if isinstance(self.body, str) else self.body.decode("utf-8")


@dataclass(frozen=True, slots=True)
class Redirect:
    """Send the browser to *url*; 303 so a POST is followed by a GET."""

    url: str
    status: int = 303
    headers: HeaderPairs = ()
