"""Writes a ``Response`` to an ASGI ``send`` callable."""

from wren._internal.asgi import Send
from wren.http.response import Response

# Set from the response itself; copies in Response.headers are dropped
_DERIVED = frozenset({"content-type", "content-length"})


def _may_carry_body(status: int) -> bool:
    return status >= 200 and status not in (204, 304)


def asgi_headers(response: Response, content_length: int) -> list[tuple[bytes, bytes]]:
    """Lower-cased header pairs for ``http.response.start``."""
    pairs = [("content-type", response.content_type)]
    pairs.extend(
        (name.lower(), value) for name, value in response.headers if name.lower() not in _DERIVED
    )
    pairs.append(("content-length", str(content_length)))
    return [(name.encode("latin-1"), value.encode("latin-1")) for name, value in pairs]


async def send_response(response: Response, send: Send, *, head: bool = False) -> None:
    """Send *response* as one start message and one body message.

    A HEAD response keeps the Content-Length of the body it would have
    sent. 1xx, 204 and 304 responses never carry a body.
    """
    body = response.body_bytes if _may_carry_body(response.status) else b""
    await send(
        {
            "type": "http.response.start",
            "status": response.status,
            "headers": asgi_headers(response, len(body)),
        }
    )
    await send({"type": "http.response.body", "body": b"" if head else body})
