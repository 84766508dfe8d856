"""Template store — named kida templates loaded once and cached.

Logical template names are paths relative to the template root with
the extension stripped: ``todos/list.html`` is loaded as ``todos/list``.
Names that already carry a configured suffix are accepted unchanged.

Thread safety:
    Reads of cached templates take no lock. A cache miss takes
    ``_lock`` and checks the cache again before loading, so concurrent
    first requests for the same template parse it exactly once.
"""

from __future__ import annotations

import logging
import re
import threading
from collections.abc import Callable, Mapping
from pathlib import Path, PurePosixPath
from typing import TYPE_CHECKING, Any

from kida import Environment, FileSystemLoader
from kida.exceptions import (
    TemplateNotFoundError,
    TemplateRuntimeError,
    TemplateSyntaxError,
    UndefinedError,
)

from wren.errors import FragmentNotFound, RenderError, TemplateNotFound

if TYPE_CHECKING:
    from kida.template.core import Template

logger = logging.getLogger("wren.templating")

_OUTPUT = re.compile(r"\{\{(.*?)\}\}")


class TemplateStore:
    """Loads, caches, and renders templates from one directory.

    Usage::

        store = TemplateStore("templates")
        html = store.render("todos/list", {"items": []})
        row = store.render_block("todos/list", "todos_list", {"items": []})
    """

    __slots__ = ("_cache", "_env", "_lock", "_root", "_suffixes")

    def __init__(
        self,
        root: str | Path,
        *,
        suffixes: tuple[str, ...] = (".html",),
        autoescape: bool = True,
        trim_blocks: bool = True,
        lstrip_blocks: bool = True,
        filters: Mapping[str, Callable[..., Any]] | None = None,
        globals_: Mapping[str, Any] | None = None,
    ) -> None:
        self._root = Path(root)
        self._suffixes = suffixes
        # auto_reload lets reload() pick up edited files; kida only checks
        # mtimes inside get_template(), which runs on cache misses alone.
        self._env = Environment(
            loader=FileSystemLoader(str(self._root)),
            autoescape=autoescape,
            auto_reload=True,
            trim_blocks=trim_blocks,
            lstrip_blocks=lstrip_blocks,
        )
        if filters:
            self._env.update_filters(dict(filters))
        for name, value in (globals_ or {}).items():
            self._env.add_global(name, value)
        self._cache: dict[str, Template] = {}
        self._lock = threading.Lock()

    @property
    def root(self) -> Path:
        return self._root

    @property
    def environment(self) -> Environment:
        """The underlying kida environment."""
        return self._env

    # -- Loading --

    def load(self, name: str) -> Template:
        """Return the parsed template for *name*, loading it on first use.

        Raises ``TemplateNotFound`` if no file backs the name, and
        ``RenderError`` if the file does not parse.
        """
        template = self._cache.get(name)
        if template is not None:
            return template

        with self._lock:
            template = self._cache.get(name)
            if template is not None:
                return template
            template = self._load_uncached(name)
            self._cache[name] = template
            return template

    def _load_uncached(self, name: str) -> Template:
        for candidate in self._candidates(name):
            try:
                template = self._env.get_template(candidate)
            except TemplateNotFoundError:
                continue
            except TemplateSyntaxError as exc:
                raise RenderError(
                    name,
                    getattr(exc, "message", None) or str(exc),
                    lineno=getattr(exc, "lineno", None),
                ) from exc
            logger.debug("Loaded template %s from %s", name, candidate)
            return template
        raise TemplateNotFound(name)

    def _candidates(self, name: str) -> list[str]:
        path = PurePosixPath(name)
        if not name or path.is_absolute() or ".." in path.parts or "\\" in name:
            return []
        if path.suffix in self._suffixes:
            return [str(path)]
        return [f"{path}{suffix}" for suffix in self._suffixes]

    def is_cached(self, name: str) -> bool:
        return name in self._cache

    def cached_names(self) -> list[str]:
        """Names currently held in the cache, sorted."""
        return sorted(self._cache)

    def reload(self, name: str | None = None) -> None:
        """Drop *name* (or every template) from the cache.

        The next ``load()`` reads the file again. Meant for development;
        production processes load each template once.
        """
        with self._lock:
            if name is None:
                self._cache.clear()
            else:
                self._cache.pop(name, None)
        logger.debug("Reloaded templates: %s", name or "<all>")

    def names(self) -> list[str]:
        """Every logical template name under the root, sorted."""
        if not self._root.is_dir():
            return []
        found: set[str] = set()
        for path in self._root.rglob("*"):
            if path.is_file() and path.suffix in self._suffixes:
                relative = path.relative_to(self._root).with_suffix("")
                found.add(relative.as_posix())
        return sorted(found)

    # -- Rendering --

    def render(self, name: str, context: Mapping[str, Any] | None = None) -> str:
        """Render the whole template *name* with *context*."""
        template = self.load(name)
        try:
            return template.render(dict(context or {}))
        except (UndefinedError, TemplateRuntimeError, TemplateNotFoundError) as exc:
            raise _render_error(name, exc) from exc

    def render_block(
        self,
        name: str,
        block: str,
        context: Mapping[str, Any] | None = None,
    ) -> str:
        """Render only *block* of template *name*.

        Raises ``FragmentNotFound`` if the template defines no such block.
        """
        template = self.load(name)
        blocks = template.list_blocks()
        if block not in blocks:
            raise FragmentNotFound(name, block, blocks)
        try:
            return template.render_block(block, dict(context or {}))
        except (UndefinedError, TemplateRuntimeError, TemplateNotFoundError) as exc:
            raise _render_error(name, exc) from exc

    def has_block(self, name: str, block: str) -> bool:
        return block in self.load(name).list_blocks()


def _render_error(name: str, exc: Exception) -> RenderError:
    """Translate a kida render exception into a RenderError."""
    lineno = getattr(exc, "lineno", None)
    if isinstance(exc, UndefinedError):
        if getattr(exc, "kind", "variable") == "attribute/key":
            field = _attribute_path(exc.name, _error_line(exc))
            message = f"undefined field {field!r}"
        else:
            field = exc.name
            message = f"undefined variable {field!r}"
        return RenderError(name, message, field=field, lineno=lineno)
    if isinstance(exc, TemplateNotFoundError):
        return RenderError(name, f"included template missing: {exc}", lineno=lineno)
    expression = getattr(exc, "expression", None)
    if expression is None:
        expression = _sole_expression(_error_line(exc))
    return RenderError(
        name,
        getattr(exc, "message", None) or str(exc),
        field=_field_path(expression),
        lineno=lineno,
    )


def _error_line(exc: Exception) -> str | None:
    snippet = getattr(exc, "source_snippet", None)
    if snippet is None:
        return None
    for number, text in snippet.lines:
        if number == snippet.error_line:
            return text
    return None


def _attribute_path(qualified: str, line: str | None) -> str:
    """Rebuild ``item.txt`` from kida's ``dict.txt`` and the failing line.

    kida names the receiver by its type; the template names it by the
    expression that produced it. Without the line, only the attribute
    is known.
    """
    attr = qualified.rsplit(".", 1)[-1]
    if line is None:
        return attr
    access = re.escape(attr)
    found = re.search(
        r"(?<![\w.])([A-Za-z_]\w*(?:\??\.[A-Za-z_]\w*|\??\[[^\]]*\])*?)"
        rf"(?:\??\.{access}\b|\??\[[\"']{access}[\"']\])",
        line,
    )
    if found is None:
        return attr
    return f"{found.group(1)}.{attr}"


def _sole_expression(line: str | None) -> str | None:
    """The ``{{ ... }}`` on *line*, when there is exactly one."""
    if line is None:
        return None
    outputs = _OUTPUT.findall(line)
    return outputs[0] if len(outputs) == 1 else None


def _field_path(expression: str | None) -> str | None:
    """``"{{ post.title | upper }}"`` -> ``"post.title"``."""
    if not expression or expression.startswith("<"):
        return None
    inner = expression.strip().removeprefix("{{").removesuffix("}}")
    inner = inner.split("|", 1)[0].strip()
    return inner or None
