"""Tests for wren.server.errors — exceptions turned into responses."""

from wren.errors import HTTPError, NotFound
from wren.http.headers import Headers
from wren.http.request import Request
from wren.http.response import Response
from wren.server.errors import ERROR_TARGET, handle_http_error, handle_internal_error


def _request(fragment: bool = False) -> Request:
    headers = Headers({"HX-Request": "true"} if fragment else {})
    return Request(method="GET", path="/todos/9", headers=headers)


class TestHttpError:
    async def test_builtin_plain_text(self) -> None:
        response = await handle_http_error(NotFound("no todo 9"), _request(), {}, None, False)
        assert response.status == 404
        assert response.text == "Not Found"
        assert response.content_type.startswith("text/plain")

    async def test_debug_shows_detail(self) -> None:
        response = await handle_http_error(NotFound("no todo 9"), _request(), {}, None, True)
        assert response.text == "no todo 9"

    async def test_builtin_fragment_snippet(self) -> None:
        response = await handle_http_error(NotFound(), _request(fragment=True), {}, None, False)
        assert 'data-status="404"' in response.text
        assert response.header("HX-Retarget") == ERROR_TARGET
        assert response.header("HX-Reswap") == "innerHTML"
        assert response.header("HX-Trigger") == "wrenError"
        assert response.render_intent == "fragment"

    async def test_exception_headers_kept(self) -> None:
        exc = HTTPError(status=405, headers=(("Allow", "GET"),))
        response = await handle_http_error(exc, _request(), {}, None, False)
        assert response.header("Allow") == "GET"

    async def test_type_handler_beats_status_handler(self) -> None:
        handlers = {404: lambda: "by status", HTTPError: lambda: "by type"}
        response = await handle_http_error(NotFound(), _request(), handlers, None, False)
        assert response.text == "by type"
        assert response.status == 404

    async def test_handler_status_kept(self) -> None:
        handlers = {404: lambda request, exc: Response("gone", status=410)}
        response = await handle_http_error(NotFound(), _request(), handlers, None, False)
        assert response.status == 410


class TestInternalError:
    async def test_hidden_outside_debug(self) -> None:
        response = await handle_internal_error(KeyError("secret"), _request(), {}, None, False)
        assert response.status == 500
        assert "secret" not in response.text

    async def test_handler_for_exception_type(self) -> None:
        async def on_key_error(request: Request, exc: Exception) -> str:
            return f"missing {exc}"

        response = await handle_internal_error(
            KeyError("x"), _request(), {KeyError: on_key_error}, None, False
        )
        assert response.status == 500
        assert response.text == "missing 'x'"
