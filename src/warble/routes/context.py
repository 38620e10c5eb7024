"""Dispatch context: the per-request object an action runs against.

Each request gets a fresh context holding the request, the bound path
values, and a ``render`` helper.  The controller itself is shared by every
request; its members are forwarded explicitly through a context type built
once per controller::

    class UserController:
        def __init__(self):
            self.users = {"1": "ada"}

        def _lookup(self, user_id):
            return self.users.get(user_id)      # forwarded to the shared instance

        def get_user(self, user_id):
            name = self._lookup(user_id)         # runs against the context
            return self.render({"name": name})   # -> Template("user/user.html", ...)

Functions reached through the context receive the context as ``self``; a
class controller's context type subclasses the controller class, so
``super()`` and ``isinstance`` work as usual.  Data members read from and
write to the shared instance, and names the context does not know are looked
up on the shared instance.  Any other attribute set on the context lives for
the request only.
"""

from __future__ import annotations

import inspect
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from chirp import Redirect, Template

from warble._errors import ConfigError
from warble._types import FlashReader, Renderer
from warble.controllers.loader import ClassActions, FlatActions, LoadedController

if TYPE_CHECKING:
    from chirp import Request

    from warble.routes.synth import RouteDescriptor

# Flash categories copied into view data when a flash reader is available
FLASH_CATEGORIES: tuple[str, ...] = ("success", "error", "info")

# Names the context owns; controllers may not define members with these names
RESERVED_NAMES: frozenset[str] = frozenset({
    "request",
    "params",
    "render",
    "redirect",
    "controller",
    "action_name",
    "controller_name",
    "_route",
    "_renderer",
    "_flash",
})


class DispatchContext:
    """Request-scoped execution context for one action invocation.

    Attributes:
        request: The Chirp request being handled.
        params: Bound path values by parameter name, already converted.

    """

    def __init__(
        self,
        request: Request,
        route: RouteDescriptor,
        params: dict[str, Any],
        *,
        renderer: Renderer,
        flash: FlashReader | None = None,
    ) -> None:
        self.request = request
        self.params = params
        self._route = route
        self._renderer = renderer
        self._flash = flash

    @property
    def controller(self) -> object:
        """The shared controller instance (borrowed, never owned)."""
        return self._route.controller.instance

    @property
    def action_name(self) -> str:
        return self._route.action.raw_name

    @property
    def controller_name(self) -> str:
        return self._route.controller.name

    def render(self, view_or_data: str | Mapping[str, Any] | None = None, data: Mapping[str, Any] | None = None) -> Any:
        """Render a view under this controller's view base.

        ``render({"x": 1})`` renders the current action's view;
        ``render("custom", {"x": 1})`` renders ``<view_base>/custom``.
        Views outside the view base must be rendered directly with
        ``chirp.Template``.
        """
        view_name = self._route.action.view_name
        if isinstance(view_or_data, str):
            view_name = view_or_data or view_name
        else:
            data = view_or_data
        if data is not None and not isinstance(data, Mapping):
            msg = f"render() data must be a mapping, got {type(data).__name__}"
            raise TypeError(msg)

        view_data = dict(data or {})
        view_data.setdefault("controllerName", self.controller_name)
        view_data.setdefault("actionName", self.action_name)
        if "session" not in view_data:
            view_data["session"] = _current_session()

        flash = self._flash_reader()
        if flash is not None:
            for category in FLASH_CATEGORIES:
                view_data[category] = flash(category)

        base = self._route.view_base
        return self._renderer(f"{base}/{view_name}" if base else view_name, view_data)

    def redirect(self, url: str, status: int = 302) -> Redirect:
        return Redirect(url, status=status)

    def _flash_reader(self) -> FlashReader | None:
        if self._flash is not None:
            return self._flash
        reader = getattr(self.request, "flash", None)
        return reader if callable(reader) else None

    def __repr__(self) -> str:
        route = self._route
        return f"<{type(self).__name__} {route.verb.upper()} {route.path} -> {self.action_name}>"


def template_renderer(suffix: str = ".html") -> Renderer:
    """Default renderer: a ``chirp.Template`` for ``<view path><suffix>``."""

    def render(view_path: str, data: dict[str, Any]) -> Template:
        return Template(view_path + suffix, **data)

    return render


def build_context_type(controller: LoadedController) -> type[DispatchContext]:
    """Create the context type for *controller*'s requests.

    For class controllers the type subclasses both ``DispatchContext`` and
    the controller class, so methods, ``super()`` and ``isinstance`` behave
    as they would on the instance.  ``__init__`` is never run on a context.

    Raises:
        ConfigError: If a controller member collides with a context name, or
            the controller class cannot be combined with ``DispatchContext``.

    """
    namespace: dict[str, object] = {"__module__": __name__}
    for name, value in _forwarded_members(controller):
        if name in RESERVED_NAMES:
            label = controller.source or controller.name
            msg = (
                f"Controller {label} defines {name!r}, which is reserved "
                f"for the dispatch context."
            )
            raise ConfigError(msg)
        namespace[name] = value if inspect.isfunction(value) else _forward(controller, name)

    namespace["__getattr__"] = _fallback(controller)
    # Request-scoped attributes bypass any controller __setattr__
    namespace["__setattr__"] = object.__setattr__
    type_name = _type_name(controller)
    namespace["__qualname__"] = type_name

    match controller.definition:
        case ClassActions(cls=cls):
            try:
                return type(cls)(type_name, (DispatchContext, cls), namespace)
            except TypeError as exc:
                label = controller.source or cls.__qualname__
                msg = f"Controller {label} cannot be used as a dispatch context: {exc}"
                raise ConfigError(msg) from exc
        case FlatActions():
            return type(type_name, (DispatchContext,), namespace)


def _forwarded_members(controller: LoadedController) -> list[tuple[str, object]]:
    """Members the context type defines itself.

    Flat controllers contribute their own functions (bound to the context)
    and their data.  Class controllers contribute data only: class-level
    values that are not descriptors, slot members, and everything in the
    instance ``__dict__``, callables included.  Their methods, properties
    and other descriptors are inherited.
    """
    members: dict[str, object] = {}
    match controller.definition:
        case FlatActions(members=namespace):
            module_name = namespace.get("__name__")
            for name, value in namespace.items():
                if name.startswith("__"):
                    continue
                if inspect.isfunction(value):
                    if module_name is None or value.__module__ == module_name:
                        members[name] = value
                elif not callable(value) and not inspect.ismodule(value):
                    members[name] = value
        case ClassActions(cls=cls):
            for klass in reversed(cls.__mro__[:-1]):
                for name, value in vars(klass).items():
                    if name.startswith("__"):
                        continue
                    if inspect.ismemberdescriptor(value) or not hasattr(type(value), "__get__"):
                        members[name] = _DATA
                    elif name in RESERVED_NAMES:
                        members[name] = value
                    else:
                        members.pop(name, None)
            for name in getattr(controller.instance, "__dict__", {}):
                if not name.startswith("__"):
                    members[name] = _DATA
    return list(members.items())


# Placeholder for class-controller data members; always forwarded
_DATA = object()


def _forward(controller: LoadedController, name: str) -> property:
    match controller.definition:
        case FlatActions(members=namespace):

            def fget(self: DispatchContext) -> Any:
                return namespace[name]

            def fset(self: DispatchContext, value: Any) -> None:
                namespace[name] = value  # type: ignore[index]

        case ClassActions():
            instance = controller.instance

            def fget(self: DispatchContext) -> Any:
                return getattr(instance, name)

            def fset(self: DispatchContext, value: Any) -> None:
                setattr(instance, name, value)

    return property(fget, fset, doc=f"Forwarded to the shared controller's {name!r}.")


def _fallback(controller: LoadedController) -> Any:
    """``__getattr__`` resolving unknown names against the shared controller."""
    match controller.definition:
        case FlatActions(members=namespace):

            def __getattr__(self: DispatchContext, name: str) -> Any:
                try:
                    return namespace[name]
                except KeyError:
                    msg = f"{type(self).__name__!r} object has no attribute {name!r}"
                    raise AttributeError(msg) from None

        case ClassActions():
            instance = controller.instance

            def __getattr__(self: DispatchContext, name: str) -> Any:
                return getattr(instance, name)

    return __getattr__


def _type_name(controller: LoadedController) -> str:
    match controller.definition:
        case ClassActions(cls=cls):
            base = cls.__name__
        case FlatActions():
            base = "".join(
                part[:1].upper() + part[1:]
                for part in controller.name.replace("-", "_").replace("/", "_").split("_")
            )
    return f"{base or 'Default'}Context"


def _current_session() -> dict[str, Any] | None:
    """The Chirp session dict, or *None* when SessionMiddleware is not active."""
    from chirp.middleware.sessions import get_session

    try:
        return get_session()
    except LookupError:
        return None
