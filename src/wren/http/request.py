"""The request a handler receives.

Everything but the body is fixed when the request arrives. The body is
read from ASGI on first use and kept, so ``body()``, ``text()`` and
``form()`` can be called in any order and any number of times.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any

from wren._internal.asgi import Receive
from wren.errors import HTTPError
from wren.http.forms import FormData, parse_urlencoded
from wren.http.headers import Headers

_URLENCODED = "application/x-www-form-urlencoded"


@dataclass(frozen=True, slots=True)
class Request:
    method: str
    path: str
    headers: Headers
    path_params: dict[str, str] = field(default_factory=dict)
    client: tuple[str, int] | None = None

    _receive: Receive | None = field(default=None, repr=False, compare=False)
    _max_body: int = field(default=16 * 1024 * 1024, repr=False)
    # Shared with copies made by with_path_params
    _cache: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @property
    def is_fragment(self) -> bool:
        """True when htmx sent the request (``HX-Request: true``)."""
        return self.headers.get("hx-request") == "true"

    @property
    def htmx_target(self) -> str | None:
        return self.headers.get("hx-target")

    async def body(self) -> bytes:
        """The raw body; ``HTTPError(413)`` past the configured limit."""
        if "body" not in self._cache:
            received = bytearray()
            more = self._receive is not None
            while more:
                message = await self._receive()  # type: ignore[misc]
                received += message.get("body", b"")
                if len(received) > self._max_body:
                    raise HTTPError(status=413, detail="Request body too large")
                more = message.get("more_body", False)
            self._cache["body"] = bytes(received)
        return self._cache["body"]

    async def text(self) -> str:
        """The body decoded as UTF-8; ``HTTPError(400)`` if it is not."""
        try:
            return (await self.body()).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise HTTPError(status=400, detail=f"Request body is not UTF-8: {exc.reason}") from exc

    async def form(self) -> FormData:
        """Fields of an urlencoded body; ``HTTPError(415)`` for other encodings."""
        if "form" not in self._cache:
            media_type = (self.headers.get("content-type") or _URLENCODED).partition(";")[0]
            if media_type.strip().lower() != _URLENCODED:
                raise HTTPError(status=415, detail=f"Unsupported form encoding: {media_type}")
            self._cache["form"] = parse_urlencoded(await self.body())
        return self._cache["form"]

    def with_path_params(self, path_params: dict[str, str]) -> Request:
        return replace(self, path_params=path_params, _cache=self._cache)

    @classmethod
    def from_asgi(
        cls,
        scope: dict[str, Any],
        receive: Receive,
        *,
        max_body: int = 16 * 1024 * 1024,
    ) -> Request:
        client = scope.get("client")
        return cls(
            method=scope["method"].upper(),
            path=scope["path"],
            headers=Headers(scope.get("headers", ())),
            client=tuple(client) if client else None,
            _receive=receive,
            _max_body=max_body,
        )
