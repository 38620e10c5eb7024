"""Route synthesis: one route per public controller action.

Verb, path, and parameters are inferred from the action alone::

    controllers/userController.py
        def get_user(self, user_id)   -> GET    /user/user/:user_id
        def post(self)                -> POST   /user
        def index(self)               -> GET    /user
        def _audit(self)              -> (hidden, no route)

    controllers/default.py
        def index(ctx)                -> GET    /
"""

import inspect
import re
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any

from warble._types import ActionFunc, RoutePath, Verb
from warble.controllers.loader import ClassActions, ControllerDefinition, FlatActions, LoadedController
from warble.controllers.naming import is_hidden, resolve_action_name
from warble.controllers.params import ActionParams, extract_params

_CONSTRUCTOR = "__init__"
_CAPTURE = re.compile(r":([A-Za-z_][A-Za-z0-9_]*)")


@dataclass(frozen=True, slots=True)
class ActionDescriptor:
    """An action as seen by the router.

    Attributes:
        raw_name: Name as defined on the controller (``getUser``).
        verb: Inferred HTTP verb, lower-case.
        bare_name: Name with the verb prefix removed; empty for ``index`` and
            verb-only names.
        params: Ordered path parameters and their converters.
        hidden: True when the name carries the hidden marker.
        func: The underlying function; called with the dispatch context first.

    """

    raw_name: str
    verb: Verb
    bare_name: str
    params: ActionParams
    hidden: bool
    func: ActionFunc

    @property
    def view_name(self) -> str:
        """Default view for ``render()``: the bare name, or the raw name when empty."""
        return self.bare_name or self.raw_name


@dataclass(frozen=True, slots=True)
class RouteDescriptor:
    """A synthesized route, immutable once registered.

    Attributes:
        verb: HTTP verb, lower-case.
        path: Route path with ``:name`` captures (``/user/user/:user_id``).
        view_base: Template directory for ``render()``.
        action: The action this route invokes.
        controller: The controller owning the shared instance.

    """

    verb: Verb
    path: RoutePath
    view_base: str
    action: ActionDescriptor
    controller: LoadedController

    @property
    def router_path(self) -> str:
        """The path in Chirp's ``{name}`` capture syntax."""
        return _CAPTURE.sub(r"{\1}", self.path)

    @property
    def name(self) -> str:
        """Route name for URL generation (``user.getUser``)."""
        if not self.controller.name:
            return self.action.raw_name
        return f"{self.controller.name}.{self.action.raw_name}"


def enumerate_actions(definition: ControllerDefinition) -> Iterator[tuple[str, ActionFunc]]:
    """Yield ``(raw_name, function)`` for every candidate action, hidden ones included.

    Flat controllers contribute the functions defined in their own namespace
    (imported helpers are not actions).  Class controllers contribute the
    plain functions defined on the class itself, not inherited ones.
    """
    match definition:
        case FlatActions(members=members):
            module_name = members.get("__name__")
            for name, value in list(members.items()):
                if name == _CONSTRUCTOR or name.startswith("__"):
                    continue
                if not inspect.isfunction(value):
                    continue
                if module_name is not None and value.__module__ != module_name:
                    continue
                yield name, value
        case ClassActions(cls=cls):
            for name, value in vars(cls).items():
                if name == _CONSTRUCTOR or name.startswith("__"):
                    continue
                if inspect.isfunction(value):
                    yield name, value


def describe_action(raw_name: str, func: ActionFunc) -> ActionDescriptor:
    """Resolve verb, bare name, and parameters for one action.

    Parameters of hidden actions are not inspected.
    """
    hidden = is_hidden(raw_name)
    verb, bare_name = resolve_action_name(raw_name)
    action_params = ActionParams() if hidden else extract_params(func)
    return ActionDescriptor(
        raw_name=raw_name,
        verb=verb,
        bare_name=bare_name,
        params=action_params,
        hidden=hidden,
        func=func,
    )


def build_path(route_segment: str, bare_name: str, param_names: tuple[str, ...] = ()) -> RoutePath:
    """Join controller segment, action name, and one capture per parameter.

    ``build_path("", "search", ("a", "b"))`` -> ``/search/:a/:b``
    ``build_path("", "", ())``               -> ``/``
    """
    parts = [part for part in (route_segment, bare_name) if part]
    parts.extend(f":{name}" for name in param_names)
    return "/" + "/".join(part.strip("/") for part in parts)


def synthesize_routes(controller: LoadedController) -> tuple[RouteDescriptor, ...]:
    """Produce one route per non-hidden action of *controller*."""
    routes: list[RouteDescriptor] = []
    for raw_name, func in enumerate_actions(controller.definition):
        action = describe_action(raw_name, func)
        if action.hidden:
            continue
        routes.append(RouteDescriptor(
            verb=action.verb,
            path=build_path(controller.meta.route_segment, action.bare_name, action.params.names),
            view_base=controller.meta.view_base,
            action=action,
            controller=controller,
        ))
    return tuple(routes)


def describe_routes(routes: tuple[RouteDescriptor, ...]) -> list[dict[str, Any]]:
    """Plain-data view of a route table, for the CLI and debugging."""
    return [
        {
            "verb": route.verb.upper(),
            "path": route.path,
            "name": route.name,
            "controller": route.controller.name,
            "action": route.action.raw_name,
            "params": list(route.action.params.names),
        }
        for route in routes
    ]
