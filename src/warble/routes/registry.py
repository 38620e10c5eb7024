"""Controller registry and route registration.

The registry maps each controller's stable name to its shared instance and
the context type built for it.  It is filled once at startup and frozen
before the app serves requests::

    registry = ControllerRegistry()
    for controller in discover_controllers(root):
        registry.register(controller)
        register_routes(app, synthesize_routes(controller), registry)
    registry.freeze()

Each route is registered with Chirp as an ``async def handler(request)``
wrapper that binds the captured path values, builds a fresh
``DispatchContext``, and calls the action with the values positionally.
Errors raised by actions are not intercepted.
"""

import inspect
import logging
import re
import threading
import time
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
from typing import Any

from chirp import App, Request

from warble._errors import ConfigError
from warble._types import FlashReader, Renderer
from warble.controllers.loader import ClassActions, LoadedController
from warble.observability.events import ActionDispatched, ControllerLoaded, RouteRegistered, now_ns
from warble.observability.log import EventLog
from warble.routes.context import DispatchContext, build_context_type, template_renderer
from warble.routes.synth import RouteDescriptor

logger = logging.getLogger("warble.routes")

_CAPTURE = re.compile(r":[A-Za-z_][A-Za-z0-9_]*")


@dataclass(frozen=True, slots=True)
class RegisteredController:
    """A controller with the context type its requests run against."""

    controller: LoadedController
    context_type: type[DispatchContext]


class ControllerRegistry:
    """Startup-time registry of controllers, immutable once frozen.

    Registering the same controller again returns the existing entry, so each
    controller gets exactly one context type.

    Thread Safety:
        Registration is serialized by a lock; lookups after ``freeze()``
        read an immutable snapshot.

    """

    __slots__ = ("_entries", "_frozen", "_lock")

    def __init__(self) -> None:
        self._entries: dict[str, RegisteredController] = {}
        self._frozen = False
        self._lock = threading.Lock()

    def register(self, controller: LoadedController) -> RegisteredController:
        """Add *controller*, building its context type on first registration.

        Raises:
            ConfigError: If the registry is frozen, or another controller is
                already registered under the same name.

        """
        with self._lock:
            existing = self._entries.get(controller.name)
            if existing is not None:
                if existing.controller.instance is controller.instance:
                    return existing
                msg = (
                    f"Controller name {controller.name!r} is used by both "
                    f"{existing.controller.source or existing.controller.instance!r} "
                    f"and {controller.source or controller.instance!r}"
                )
                raise ConfigError(msg)

            if self._frozen:
                msg = f"Cannot register controller {controller.name!r}: registry is frozen"
                raise ConfigError(msg)

            entry = RegisteredController(
                controller=controller,
                context_type=build_context_type(controller),
            )
            self._entries[controller.name] = entry
            return entry

    def get(self, name: str) -> RegisteredController:
        """Return the entry for controller *name*.

        Raises:
            KeyError: If no controller has that name.

        """
        return self._entries[name]

    def freeze(self) -> None:
        """Reject further registrations."""
        with self._lock:
            self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __iter__(self) -> Iterator[RegisteredController]:
        return iter(tuple(self._entries.values()))

    def __len__(self) -> int:
        return len(self._entries)


class RouteTable:
    """Routes accepted so far, checked for collisions Chirp would hide.

    Chirp keeps one capture name per trie position, so ``/user/:id`` and
    ``/user/:name`` would silently share the first name.  Both that and an
    exact duplicate are rejected here.
    """

    __slots__ = ("_captures", "_routes")

    def __init__(self) -> None:
        self._routes: dict[tuple[str, str], RouteDescriptor] = {}
        self._captures: dict[tuple[str, ...], tuple[str, RouteDescriptor]] = {}

    def add(self, route: RouteDescriptor) -> None:
        key = (route.verb, _CAPTURE.sub(":", route.path))
        previous = self._routes.get(key)
        if previous is not None:
            msg = (
                f"Duplicate route {route.verb.upper()} {route.path!r}: "
                f"{previous.name} and {route.name}"
            )
            raise ConfigError(msg)

        prefix: list[str] = []
        for segment in route.path.strip("/").split("/"):
            if segment.startswith(":"):
                name = segment[1:]
                other_name, other = self._captures.setdefault(tuple(prefix), (name, route))
                if other_name != name:
                    msg = (
                        f"Route {route.path!r} ({route.name}) captures {name!r} where "
                        f"{other.path!r} ({other.name}) captures {other_name!r}"
                    )
                    raise ConfigError(msg)
                prefix.append(":")
            else:
                prefix.append(segment)

        self._routes[key] = route

    def __iter__(self) -> Iterator[RouteDescriptor]:
        return iter(tuple(self._routes.values()))

    def __len__(self) -> int:
        return len(self._routes)


def register_routes(
    app: App,
    routes: Iterable[RouteDescriptor],
    registry: ControllerRegistry,
    *,
    renderer: Renderer | None = None,
    flash: FlashReader | None = None,
    event_log: EventLog | None = None,
    table: RouteTable | None = None,
) -> tuple[RouteDescriptor, ...]:
    """Register each route with *app* through a dispatch wrapper.

    Pass the same *table* across calls to detect collisions between
    controllers.

    Raises:
        ConfigError: If two actions resolve to the same verb and path shape,
            or name the same capture position differently.

    """
    if renderer is None:
        renderer = template_renderer()
    if table is None:
        table = RouteTable()

    registered: list[RouteDescriptor] = []
    for route in routes:
        table.add(route)

        entry = registry.register(route.controller)
        handler = make_handler(
            route,
            entry.context_type,
            renderer=renderer,
            flash=flash,
            event_log=event_log,
        )
        app.route(route.router_path, methods=[route.verb.upper()], name=route.name)(handler)
        registered.append(route)

        logger.debug("%s %s -> %s", route.verb.upper(), route.path, route.name)
        if event_log is not None:
            event_log.append(RouteRegistered(
                verb=route.verb.upper(),
                path=route.path,
                controller=route.controller.name,
                action=route.action.raw_name,
                timestamp_ns=now_ns(),
            ))

    return tuple(registered)


def make_handler(
    route: RouteDescriptor,
    context_type: type[DispatchContext],
    *,
    renderer: Renderer,
    flash: FlashReader | None = None,
    event_log: EventLog | None = None,
) -> Callable[..., Any]:
    """Build the per-request wrapper Chirp calls for *route*."""
    action = route.action
    names = action.params.names

    async def handler(request: Request) -> Any:
        args = action.params.bind(request.path_params)
        ctx = context_type(
            request,
            route,
            dict(zip(names, args, strict=True)),
            renderer=renderer,
            flash=flash,
        )

        t0 = time.perf_counter()
        result = action.func(ctx, *args)
        if inspect.isawaitable(result):
            result = await result

        if event_log is not None:
            event_log.append(ActionDispatched(
                verb=route.verb.upper(),
                path=request.path,
                controller=route.controller.name,
                action=action.raw_name,
                duration_ms=(time.perf_counter() - t0) * 1000,
                timestamp_ns=now_ns(),
            ))
        return result

    handler.__name__ = action.raw_name
    handler.__qualname__ = f"{context_type.__name__}.{action.raw_name}"
    handler.__doc__ = action.func.__doc__
    return handler


def record_loaded(event_log: EventLog | None, controller: LoadedController) -> None:
    """Record a ``ControllerLoaded`` event when a log is attached."""
    kind = "class" if isinstance(controller.definition, ClassActions) else "flat"
    logger.debug("Loaded %s controller %r from %s", kind, controller.name, controller.source)
    if event_log is None:
        return
    event_log.append(ControllerLoaded(
        controller=controller.name,
        source=str(controller.source or ""),
        kind=kind,
        timestamp_ns=now_ns(),
    ))
