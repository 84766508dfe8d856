"""Serving files from disk ahead of the router.

A directory is exposed under a URL prefix, and single files can be
mounted at fixed URLs (the demo's stylesheet at ``/assets/main.css``).
Requests that match neither pass through to the next layer.
"""

import logging
import mimetypes
from collections.abc import Mapping
from pathlib import Path

from wren.http.request import Request
from wren.http.response import Response
from wren.middleware.protocol import Next

logger = logging.getLogger("wren.server")


def _content_type(path: Path) -> str:
    guessed, _ = mimetypes.guess_type(path.name)
    if guessed is None:
        return "application/octet-stream"
    return f"{guessed}; charset=utf-8" if guessed.startswith("text/") else guessed


class StaticFiles:
    """Middleware answering GET and HEAD for files on disk.

    ::

        app.add_middleware(StaticFiles("static", prefix="/static"))
        app.add_middleware(StaticFiles(files={"/assets/main.css": "build/main.css"}))

    Paths under the prefix are resolved, symlinks included, and refused
    with 403 when they land outside the directory.
    """

    __slots__ = ("cache_control", "directory", "mounts", "prefix")

    def __init__(
        self,
        directory: str | Path | None = None,
        prefix: str = "/static",
        *,
        files: Mapping[str, str | Path] | None = None,
        cache_control: str = "public, max-age=3600",
    ) -> None:
        self.directory = None if directory is None else Path(directory).resolve()
        self.prefix = f"/{prefix.strip('/')}/".replace("//", "/")
        self.mounts = {url: Path(path) for url, path in (files or {}).items()}
        self.cache_control = cache_control

    async def __call__(self, request: Request, next: Next) -> Response:
        if request.method in ("GET", "HEAD"):
            response = self._lookup(request.path)
            if response is not None:
                return response
        return await next(request)

    def _lookup(self, path: str) -> Response | None:
        if path in self.mounts:
            mounted = self.mounts[path]
            if mounted.is_file():
                return self._file(mounted)
            logger.warning("Static mount %s points at missing file %s", path, mounted)
            return None
        if self.directory is None or not path.startswith(self.prefix):
            return None
        candidate = (self.directory / path.removeprefix(self.prefix)).resolve()
        if not candidate.is_relative_to(self.directory):
            return Response("Forbidden", status=403, content_type="text/plain; charset=utf-8")
        return self._file(candidate) if candidate.is_file() else None

    def _file(self, path: Path) -> Response:
        return Response(path.read_bytes(), content_type=_content_type(path)).with_header(
            "Cache-Control", self.cache_control
        )
