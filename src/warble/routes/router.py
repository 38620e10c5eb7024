"""Controller router: serves convention-routed controllers as Chirp routes.

Owns the controller registry and route table for one Chirp app.  Controllers
come from a directory scan or are added directly::

    router = ControllerRouter(app)
    router.load_directory(Path("controllers"))
    router.add_controller(HealthController, name="health")
    router.freeze()
"""

from __future__ import annotations

import inspect
from collections.abc import Mapping
from typing import TYPE_CHECKING

from warble.controllers.loader import (
    ClassActions,
    FlatActions,
    LoadedController,
    definition_from_object,
    discover_controllers,
    load_controller,
)
from warble.controllers.naming import ControllerMetadata, derive_metadata
from warble.routes.context import template_renderer
from warble.routes.registry import ControllerRegistry, RouteTable, record_loaded, register_routes
from warble.routes.synth import RouteDescriptor, synthesize_routes

if TYPE_CHECKING:
    from pathlib import Path

    from chirp import App

    from warble._types import FlashReader, Renderer
    from warble.observability.log import EventLog


class ControllerRouter:
    """Registers controllers' implicit routes on a Chirp app.

    Args:
        app: Chirp App to register routes on (must not yet be frozen).
        renderer: View renderer; defaults to ``chirp.Template`` with ``.html``.
        flash: Optional flash-message reader used by ``render()``.
        event_log: Optional log receiving load, registration, and dispatch events.

    """

    def __init__(
        self,
        app: App,
        *,
        renderer: Renderer | None = None,
        flash: FlashReader | None = None,
        event_log: EventLog | None = None,
    ) -> None:
        self._app = app
        self._renderer = renderer or template_renderer()
        self._flash = flash
        self._event_log = event_log
        self._registry = ControllerRegistry()
        self._table = RouteTable()
        self._routes: dict[str, tuple[RouteDescriptor, ...]] = {}

    @property
    def app(self) -> App:
        return self._app

    @property
    def registry(self) -> ControllerRegistry:
        return self._registry

    @property
    def routes(self) -> tuple[RouteDescriptor, ...]:
        """Every registered route, in registration order."""
        return tuple(route for routes in self._routes.values() for route in routes)

    def load_directory(self, root: Path) -> tuple[RouteDescriptor, ...]:
        """Discover controllers under *root* and register all their routes.

        Discovery completes before anything is registered, so a failing
        import leaves the app untouched.
        """
        registered: list[RouteDescriptor] = []
        for controller in discover_controllers(root):
            registered.extend(self.add(controller))
        return tuple(registered)

    def add_controller(
        self,
        obj: object,
        *,
        name: str,
        view_base: str | None = None,
    ) -> tuple[RouteDescriptor, ...]:
        """Register a class, mapping, or controller instance under *name*.

        ``name="default"`` mounts the controller at the root path.
        """
        meta = derive_metadata(name, name=name)
        if view_base is not None:
            meta = ControllerMetadata(controller_name=meta.controller_name, view_base=view_base)

        label = f"<{name}>"
        if inspect.ismodule(obj):
            controller = load_controller(FlatActions(members=vars(obj), label=label), meta)
        elif inspect.isclass(obj) or isinstance(obj, Mapping):
            controller = load_controller(definition_from_object(obj, label), meta)
        else:
            # Already constructed: share this exact instance
            controller = LoadedController(
                definition=ClassActions(cls=type(obj)),
                meta=meta,
                instance=obj,
            )
        return self.add(controller)

    def add(self, controller: LoadedController) -> tuple[RouteDescriptor, ...]:
        """Register *controller*'s routes; adding the same instance again is a no-op."""
        if controller.name in self._registry:
            existing = self._registry.get(controller.name).controller
            if existing.instance is controller.instance:
                return self._routes[controller.name]

        self._registry.register(controller)
        record_loaded(self._event_log, controller)
        routes = register_routes(
            self._app,
            synthesize_routes(controller),
            self._registry,
            renderer=self._renderer,
            flash=self._flash,
            event_log=self._event_log,
            table=self._table,
        )
        self._routes[controller.name] = routes
        return routes

    def freeze(self) -> None:
        """Reject further controllers."""
        self._registry.freeze()
