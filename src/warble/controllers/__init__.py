"""Controller discovery, naming conventions, and parameter extraction.

Public API::

    from warble.controllers import discover_controllers, resolve_action_name

    controllers = discover_controllers(Path("controllers"))
    resolve_action_name("getUser")  # ("get", "user")
"""

from warble.controllers.loader import (
    ClassActions,
    ControllerDefinition,
    FlatActions,
    LoadedController,
    definition_from_object,
    discover_controllers,
    load_controller,
)
from warble.controllers.naming import (
    ControllerMetadata,
    derive_metadata,
    is_hidden,
    resolve_action_name,
)
from warble.controllers.params import ActionParams, extract_params, params

__all__ = [
    "ActionParams",
    "ClassActions",
    "ControllerDefinition",
    "ControllerMetadata",
    "FlatActions",
    "LoadedController",
    "definition_from_object",
    "derive_metadata",
    "discover_controllers",
    "extract_params",
    "is_hidden",
    "load_controller",
    "params",
    "resolve_action_name",
]
