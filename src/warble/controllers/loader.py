"""Controller loader: discover and import controller modules.

Scans a ``controllers/`` directory for Python modules.  Each module defines
exactly one controller, in one of two forms:

Flat actions (the module's own functions)::

    # controllers/homeController.py
    def index(ctx):
        return ctx.render()

    def get_something(ctx):
        return "something"

Class actions (a class exported as ``controller``)::

    # controllers/userController.py
    class UserController:
        def __init__(self):
            self.users = {}

        def get_user(self, user_id):
            return self.render({"user": self.users.get(user_id)})

    controller = UserController

A mapping exported as ``controller`` is also a flat controller.  Class
controllers are instantiated once, here, and the instance is shared by every
request.
"""

import importlib.util
import inspect
import logging
import sys
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from types import ModuleType

from warble._errors import ConfigError, ControllerError
from warble.controllers.naming import ControllerMetadata, derive_metadata, is_hidden

logger = logging.getLogger("warble.controllers")

# Module attribute that selects the controller definition explicitly
EXPORT_NAME = "controller"

# Prefix for the dotted names controller modules are registered under
MODULE_PREFIX = "warble_controllers"


@dataclass(frozen=True, slots=True)
class FlatActions:
    """A controller whose actions are plain functions in a namespace.

    Attributes:
        members: The module namespace (or exported mapping).  Shared and
            mutable; every request sees the same members.
        label: Human-readable origin, used in error messages.

    """

    members: Mapping[str, object]
    label: str


@dataclass(frozen=True, slots=True)
class ClassActions:
    """A controller whose actions are instance methods of a class."""

    cls: type


type ControllerDefinition = FlatActions | ClassActions


@dataclass(frozen=True, slots=True)
class LoadedController:
    """A controller definition with its shared instance and derived names.

    Attributes:
        definition: Which of the two controller forms this is.
        meta: Controller name and view base.
        instance: The object requests delegate to: the members mapping for
            flat controllers, the single constructed instance for classes.
        source: Originating ``.py`` file, or *None* when registered directly.

    """

    definition: ControllerDefinition
    meta: ControllerMetadata
    instance: object
    source: Path | None = None

    @property
    def name(self) -> str:
        return self.meta.controller_name


def discover_controllers(root: Path) -> tuple[LoadedController, ...]:
    """Scan *root* for controller modules and load each one.

    Skips ``__pycache__`` directories and files whose names start with ``_``
    (including ``__init__.py``).  Modules that define no routable actions are
    skipped with a warning.

    Raises:
        ConfigError: If *root* is not a directory.  Nothing is loaded.
        ControllerError: If a module fails to import or exports an invalid
            ``controller``.

    """
    if not root.is_dir():
        msg = f"Controller directory {root} does not exist"
        raise ConfigError(msg)

    try:
        files = sorted(root.rglob("*.py"))
    except OSError as exc:
        msg = f"Failed to scan controller directory {root}: {exc}"
        raise ConfigError(msg) from exc

    controllers: list[LoadedController] = []
    for py_file in files:
        if py_file.name.startswith("_"):
            continue
        if "__pycache__" in py_file.parts:
            continue

        relative = py_file.relative_to(root)
        module = _load_module(py_file, relative)
        definition = definition_from_module(module, py_file)
        if not has_actions(definition):
            logger.warning("Controller %s defines no routable actions; skipped", py_file)
            continue

        controllers.append(load_controller(definition, derive_metadata(relative), source=py_file))

    return tuple(controllers)


def load_controller(
    definition: ControllerDefinition,
    meta: ControllerMetadata,
    *,
    source: Path | None = None,
) -> LoadedController:
    """Build the shared instance for *definition*.

    Raises:
        ControllerError: If a class controller cannot be constructed without
            arguments.

    """
    match definition:
        case FlatActions(members=members):
            instance: object = members
        case ClassActions(cls=cls):
            try:
                instance = cls()
            except Exception as exc:
                msg = f"Failed to instantiate controller {cls.__qualname__}: {exc}"
                raise ControllerError(msg) from exc
    return LoadedController(definition=definition, meta=meta, instance=instance, source=source)


def definition_from_module(module: ModuleType, source: Path) -> ControllerDefinition:
    """Select the controller definition a module provides.

    Raises:
        ControllerError: If ``controller`` is present but is neither a class
            nor a mapping.

    """
    if not hasattr(module, EXPORT_NAME):
        return FlatActions(members=vars(module), label=str(source))
    return definition_from_object(getattr(module, EXPORT_NAME), str(source))


def definition_from_object(obj: object, label: str) -> ControllerDefinition:
    """Wrap a class or mapping as a controller definition."""
    if inspect.isclass(obj):
        return ClassActions(cls=obj)
    if isinstance(obj, Mapping):
        return FlatActions(members=obj, label=label)
    msg = (
        f"Controller {label}: '{EXPORT_NAME}' must be a class or a mapping "
        f"of actions, got {type(obj).__name__}"
    )
    raise ControllerError(msg)


def has_actions(definition: ControllerDefinition) -> bool:
    """Return True if *definition* has at least one non-hidden action."""
    from warble.routes.synth import enumerate_actions

    return any(not is_hidden(name) for name, _ in enumerate_actions(definition))


def _load_module(py_file: Path, relative: Path) -> ModuleType:
    """Import a Python file as a module without touching ``sys.path``.

    Each file is imported exactly once per discovery pass.
    """
    # controllers/admin/reports.py -> warble_controllers.admin.reports
    parts = list(relative.with_suffix("").parts)
    module_name = MODULE_PREFIX + "." + ".".join(parts)

    spec = importlib.util.spec_from_file_location(module_name, py_file)
    if spec is None or spec.loader is None:
        msg = f"Cannot import controller module {py_file}"
        raise ControllerError(msg)

    module = importlib.util.module_from_spec(spec)
    # Register in sys.modules so dataclasses and pickling inside controllers work
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except Exception as exc:
        sys.modules.pop(module_name, None)
        msg = f"Failed to load controller module {py_file}: {exc}"
        raise ControllerError(msg) from exc

    return module
