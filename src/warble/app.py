"""Warble application: convention-routed controllers on a Chirp app.

``load()`` is the library entry point: it discovers controllers and returns
the populated Chirp app.  ``create_app()`` and ``serve()`` build a complete
application from a ``WarbleConfig`` for the CLI.
"""

import inspect
import time
from pathlib import Path
from typing import TYPE_CHECKING

from warble._errors import ConfigError
from warble.config import WarbleConfig
from warble.config_loader import load_config

if TYPE_CHECKING:
    from chirp import App

    from warble._types import FlashReader, Renderer
    from warble.observability.log import EventLog
    from warble.routes.router import ControllerRouter

# Controller directory used by load() when none is given
DEFAULT_CONTROLLER_PATH = "./controllers"


def _caller_dir(frame_depth: int) -> Path:
    """Directory of the module *frame_depth* frames above the caller.

    Falls back to the working directory for interactive sessions, where
    there is no module file.
    """
    frame = inspect.currentframe()
    try:
        for _ in range(frame_depth + 1):
            if frame is None:
                break
            frame = frame.f_back
        filename = frame.f_globals.get("__file__") if frame is not None else None
    finally:
        del frame
    if not filename:
        return Path.cwd()
    return Path(filename).resolve().parent


def _create_chirp_app(config: WarbleConfig) -> App:
    """Create a Chirp App configured from *config*."""
    from chirp import App, AppConfig

    app_config = AppConfig(
        template_dir=config.templates_path,
        debug=config.debug,
        host=config.host,
        port=config.port,
    )
    return App(config=app_config)


def _wire_sessions(app: App, config: WarbleConfig) -> None:
    """Add signed-cookie sessions when ``session_secret`` is configured.

    ``render()`` passes the session dict to views as ``session``.
    """
    if not config.session_secret:
        return
    from chirp.middleware.sessions import SessionConfig, SessionMiddleware

    app.add_middleware(SessionMiddleware(SessionConfig(secret_key=config.session_secret)))


def wire_controllers(
    app: App,
    controllers_path: Path,
    *,
    renderer: Renderer | None = None,
    flash: FlashReader | None = None,
    event_log: EventLog | None = None,
) -> ControllerRouter:
    """Discover controllers under *controllers_path* and register their routes.

    Returns the frozen ``ControllerRouter`` so callers can inspect the routes.

    Raises:
        ConfigError: If the directory is missing or routes collide.
        ControllerError: If a controller module is invalid.

    """
    from warble.routes.router import ControllerRouter

    router = ControllerRouter(app, renderer=renderer, flash=flash, event_log=event_log)
    router.load_directory(controllers_path)
    router.freeze()
    return router


def load(
    app: App | None = None,
    *,
    controller_path: str | Path = DEFAULT_CONTROLLER_PATH,
    renderer: Renderer | None = None,
    flash: FlashReader | None = None,
    event_log: EventLog | None = None,
) -> App:
    """Register every controller under *controller_path* on a Chirp app.

    A relative *controller_path* is resolved against the directory of the
    module calling ``load()``, not the working directory.  All routes are
    registered before this returns.

    Args:
        app: App to register on; a new ``chirp.App`` when omitted.
        controller_path: Controller directory.
        renderer: View renderer for ``render()``; ``chirp.Template`` with
            an ``.html`` suffix by default.
        flash: Optional flash-message reader, called with a category name.
        event_log: Optional log receiving routing events.

    Returns:
        The populated app.

    """
    path = Path(controller_path)
    if not path.is_absolute():
        path = (_caller_dir(1) / path).resolve()

    if app is None:
        from chirp import App

        app = App()

    wire_controllers(app, path, renderer=renderer, flash=flash, event_log=event_log)
    return app


def create_app(
    config: WarbleConfig,
    *,
    flash: FlashReader | None = None,
    event_log: EventLog | None = None,
) -> tuple[App, ControllerRouter]:
    """Build a Chirp app with sessions and all controllers wired from *config*."""
    from warble.routes.context import template_renderer

    app = _create_chirp_app(config)
    _wire_sessions(app, config)
    router = wire_controllers(
        app,
        config.controllers_path,
        renderer=template_renderer(config.template_suffix),
        flash=flash,
        event_log=event_log,
    )
    return app, router


def serve(root: str | Path = ".", **kwargs: object) -> None:
    """Run the application as a live Pounce server.

    Multiple Pounce workers share the frozen Chirp app and the controller
    instances loaded at startup.

    Args:
        root: Path to the application root directory.
        **kwargs: Override WarbleConfig fields.

    """
    from warble.banner import print_banner
    from warble.observability import EventLog

    config = load_config(Path(root), **kwargs)
    if not config.controllers_path.is_dir():
        msg = f"No controllers directory at {config.controllers_path}"
        raise ConfigError(msg)

    t0 = time.perf_counter()
    event_log = EventLog()
    app, router = create_app(config, event_log=event_log)
    load_ms = (time.perf_counter() - t0) * 1000

    warnings: list[str] = []
    if not config.templates_path.is_dir():
        warnings.append(f"No templates directory at {config.templates_path}")

    print_banner(
        config,
        controller_count=len(router.registry),
        route_count=len(router.routes),
        load_ms=load_ms,
        routes=router.routes,
        warnings=warnings,
    )

    if config.debug:
        app.run(host=config.host, port=config.port)
        return

    from pounce.config import ServerConfig
    from pounce.server import Server

    server_config = ServerConfig(
        host=config.host,
        port=config.port,
        workers=config.workers,  # 0 = auto-detect via Pounce
    )
    server = Server(server_config, app)
    server.run()
