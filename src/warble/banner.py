"""Startup banner: status output for ``warble serve``.

Shows the controller and route counts, where controllers and views are read
from, and the bound URL.  Plain text when ``NO_COLOR`` is set, ``TERM`` is
``dumb``, or stderr is not a terminal.
"""

from __future__ import annotations

import os
import sys
from collections import Counter
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from warble.config import WarbleConfig
    from warble.routes.synth import RouteDescriptor


def _color_enabled() -> bool:
    if os.environ.get("NO_COLOR") or os.environ.get("TERM") == "dumb":
        return False
    isatty = getattr(sys.stderr, "isatty", None)
    return bool(isatty and isatty())


_COLOR = _color_enabled()


def _sgr(code: str) -> str:
    return f"\033[{code}m" if _COLOR else ""


_RESET, _BOLD, _DIM = _sgr("0"), _sgr("1"), _sgr("2")
_CYAN, _GREEN, _YELLOW = _sgr("36"), _sgr("32"), _sgr("33")


def _plural(count: int, word: str) -> str:
    return f"{count} {word}" if count == 1 else f"{count} {word}s"


def _per_controller(routes: Iterable[RouteDescriptor]) -> list[str]:
    counts = Counter(route.controller.name for route in routes)
    return [
        f"  {_DIM}│{_RESET}   {name}: {_plural(n, 'route')}"
        for name, n in sorted(counts.items())
    ]


def format_banner(
    config: WarbleConfig,
    *,
    controller_count: int,
    route_count: int,
    load_ms: float = 0.0,
    routes: Iterable[RouteDescriptor] = (),
    warnings: list[str] | None = None,
) -> str:
    """Build the banner text without printing it.

    Pass *routes* to list a route count under each controller.
    """
    from warble import __version__

    mode, mode_color = ("debug", _GREEN) if config.debug else ("serve", _CYAN)
    took = f" {_DIM}in {load_ms:.0f}ms{_RESET}" if load_ms > 0 else ""

    lines = [
        "",
        f"  {_BOLD}warble{_RESET} {_DIM}v{__version__}{_RESET}  {mode_color}[{mode}]{_RESET}",
        f"  {_DIM}{'─' * 43}{_RESET}",
        f"  {_DIM}├─{_RESET} {_plural(controller_count, 'controller')} loaded{took}",
        f"  {_DIM}├─{_RESET} {_plural(route_count, 'route')}",
        *_per_controller(routes),
        f"  {_DIM}├─{_RESET} controllers: {_DIM}{config.controllers_path}{_RESET}",
        f"  {_DIM}└─{_RESET} templates: {_DIM}{config.templates_path}{_RESET}",
        "",
        f"  {_BOLD}{_CYAN}http://{config.host}:{config.port}{_RESET}",
    ]
    for warning in warnings or ():
        lines.append(f"  {_YELLOW}!{_RESET} {warning}")
    lines.append("")
    return "\n".join(lines)


def print_banner(config: WarbleConfig, **counts: object) -> None:
    """Write ``format_banner(config, **counts)`` to stderr."""
    print(format_banner(config, **counts), file=sys.stderr)  # type: ignore[arg-type]
