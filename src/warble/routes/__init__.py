"""Route synthesis, registration, and per-request dispatch.

Turns loaded controllers into Chirp routes: one route per public action,
with verb, path, and parameters inferred from the action's name and signature.

Public API::

    from warble.routes import ControllerRouter, synthesize_routes

    router = ControllerRouter(app)
    routes = router.load_directory(Path("controllers"))
"""

from warble.routes.context import DispatchContext, build_context_type, template_renderer
from warble.routes.registry import (
    ControllerRegistry,
    RegisteredController,
    RouteTable,
    make_handler,
    register_routes,
)
from warble.routes.router import ControllerRouter
from warble.routes.synth import (
    ActionDescriptor,
    RouteDescriptor,
    build_path,
    describe_action,
    describe_routes,
    enumerate_actions,
    synthesize_routes,
)

__all__ = [
    "ActionDescriptor",
    "ControllerRegistry",
    "ControllerRouter",
    "DispatchContext",
    "RegisteredController",
    "RouteDescriptor",
    "RouteTable",
    "build_context_type",
    "build_path",
    "describe_action",
    "describe_routes",
    "enumerate_actions",
    "make_handler",
    "register_routes",
    "synthesize_routes",
    "template_renderer",
]
