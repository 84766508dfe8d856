"""Application settings.

One frozen ``AppConfig`` per app. Values are checked when the config is
built, so a typo in ``log_level`` or a suffix without its dot fails at
import time instead of on the first request.
"""

from dataclasses import dataclass
from pathlib import Path

from wren.errors import ConfigurationError

_LOG_LEVELS = frozenset({"debug", "info", "warning", "error", "critical"})


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Settings for an ``App``.

    ``template_dir`` and ``static_dir`` may point at directories that do
    not exist; the app then runs without templates or without static
    files respectively::

        AppConfig(template_dir="views", debug=True)
    """

    host: str = "0.0.0.0"
    port: int = 1337
    # Detailed error bodies and dev-server reloading
    debug: bool = False

    template_dir: str | Path = "templates"
    template_suffixes: tuple[str, ...] = (".html",)
    autoescape: bool = True
    trim_blocks: bool = True
    lstrip_blocks: bool = True

    static_dir: str | Path | None = "static"
    static_url: str = "/static"

    log_level: str = "info"
    # Request bodies above this many bytes are rejected with 413
    max_content_length: int = 16 * 1024 * 1024

    def __post_init__(self) -> None:
        if not 0 <= self.port <= 65535:
            raise ConfigurationError(f"port must be within 0-65535, got {self.port}")
        if self.log_level.lower() not in _LOG_LEVELS:
            msg = f"log_level {self.log_level!r} is not one of {', '.join(sorted(_LOG_LEVELS))}"
            raise ConfigurationError(msg)
        if not self.template_suffixes:
            raise ConfigurationError("template_suffixes must name at least one suffix")
        bad = [s for s in self.template_suffixes if not s.startswith(".")]
        if bad:
            raise ConfigurationError(f"template suffixes must start with '.', got {bad!r}")
        if not self.static_url.startswith("/"):
            raise ConfigurationError(f"static_url must start with '/', got {self.static_url!r}")
        if self.max_content_length <= 0:
            raise ConfigurationError("max_content_length must be positive")

    @property
    def template_path(self) -> Path | None:
        """``template_dir`` as a Path, or None when it is not a directory."""
        path = Path(self.template_dir)
        return path if path.is_dir() else None

    @property
    def static_path(self) -> Path | None:
        """``static_dir`` as a Path, or None when unset or not a directory."""
        if self.static_dir is None:
            return None
        path = Path(self.static_dir)
        return path if path.is_dir() else None
