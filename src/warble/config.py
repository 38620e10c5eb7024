"""Warble configuration.

WarbleConfig is the central configuration object, frozen after creation.
"""

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True, slots=True)
class WarbleConfig:
    """Configuration for a Warble application.

    Attributes:
        root: Path to the application root directory (contains controllers/,
              templates/, etc.).  Always resolved to an absolute path on
              construction.
        host: Bind address for ``serve``.
        port: Bind port for ``serve``.
        workers: Number of Pounce workers (0 = auto-detect).
        debug: Run Chirp in debug mode (single worker, auto-reload).
        controllers_dir: Directory containing controller modules.
        templates_dir: Directory containing Kida templates.
        template_suffix: Appended to ``<view_base>/<view>`` when the default
            renderer builds a ``chirp.Template``.
        session_secret: Secret key for signed cookie sessions.  Sessions are
            disabled (``session`` is ``None`` in view data) when unset.

    """

    root: Path = field(default_factory=Path.cwd)
    host: str = "127.0.0.1"
    port: int = 8000
    workers: int = 0
    debug: bool = False
    controllers_dir: str = "controllers"
    templates_dir: str = "templates"
    template_suffix: str = ".html"
    session_secret: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.root, Path):
            object.__setattr__(self, "root", Path(self.root))
        if not self.root.is_absolute():
            object.__setattr__(self, "root", self.root.resolve())

    @property
    def controllers_path(self) -> Path:
        """Absolute path to the controllers directory."""
        path = Path(self.controllers_dir)
        if path.is_absolute():
            return path
        return self.root / path

    @property
    def templates_path(self) -> Path:
        """Absolute path to templates directory."""
        return self.root / self.templates_dir
