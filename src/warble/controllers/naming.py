"""Naming conventions: action names to verbs, file paths to controller names.

Action names carry their HTTP verb as a prefix::

    index          -> GET    ""            (controller root)
    getUser        -> GET    "user"
    get_user       -> GET    "user"
    postComment    -> POST   "comment"
    post           -> POST   ""            (REST collection action)
    search         -> GET    "search"
    _helper        -> hidden, never routed

Controller names come from the file's path relative to the controller root::

    userController.py         -> "user"
    user_controller.py        -> "user"
    admin/ReportsCtrl.py      -> "admin/Reports"
    default.py                -> "default"  (mounted at the root path)
    controller.py             -> ""         (also mounted at the root path)
"""

import re
from dataclasses import dataclass
from pathlib import PurePath

from warble._types import Verb

_VERB_PREFIX = re.compile(r"^(get|post|put|patch|delete)", re.IGNORECASE)
_CONTROLLER_SUFFIX = re.compile(r"_?(controller|ctrl)$", re.IGNORECASE)

# Prefix that removes an action from implicit routing
HIDDEN_MARKER = "_"

# Controller name that maps to the empty path segment
DEFAULT_CONTROLLER = "default"

INDEX_ACTION = "index"


@dataclass(frozen=True, slots=True)
class ControllerMetadata:
    """Names derived from a controller's location.

    Attributes:
        controller_name: Relative path without extension and without a
            trailing ``controller`` / ``ctrl`` suffix.  Exposed raw to views.
        view_base: Template directory used by ``render()``.

    """

    controller_name: str
    view_base: str

    @property
    def route_segment(self) -> str:
        """Leading path segment for this controller's routes."""
        if self.controller_name == DEFAULT_CONTROLLER:
            return ""
        return self.controller_name


def is_hidden(raw_name: str) -> bool:
    """Return True if *raw_name* is excluded from implicit routing."""
    return raw_name.strip().startswith(HIDDEN_MARKER)


def resolve_action_name(raw_name: str) -> tuple[Verb, str]:
    """Split an action name into ``(verb, bare_name)``.

    ``index`` maps to the controller root.  A name that is exactly a verb
    (``post``) maps to the root as well, under that verb.
    """
    name = raw_name.strip()
    if name == INDEX_ACTION:
        return "get", ""

    match = _VERB_PREFIX.match(name)
    if match is None:
        return "get", name

    verb: Verb = match.group(1).lower()  # type: ignore[assignment]
    rest = name[match.end():]
    if rest.startswith("_"):
        rest = rest[1:]
    if rest:
        rest = rest[0].lower() + rest[1:]
    if rest == INDEX_ACTION:
        rest = ""
    return verb, rest


def derive_metadata(relative_path: PurePath | str, *, name: str | None = None) -> ControllerMetadata:
    """Derive controller metadata from a path relative to the controller root.

    *name*, when given, replaces the path-derived controller name (used for
    controllers registered without a file).
    """
    if name is None:
        stem = PurePath(relative_path).with_suffix("").as_posix()
        name = _CONTROLLER_SUFFIX.sub("", stem).rstrip("/")
    return ControllerMetadata(controller_name=name, view_base=name)
