"""Routing event model.

Defines event types for controller loading, route registration, and
per-request dispatch.

All events are frozen dataclasses with:
- ``timestamp_ns``: Monotonic nanosecond timestamp
- Descriptive fields for the specific event type

Thread Safety:
    All events are frozen (immutable) and safe to share across threads.

"""

import time
from dataclasses import dataclass


# ---------------------------------------------------------------------------
# Startup events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ControllerLoaded:
    """A controller module was imported and its instance created.

    Attributes:
        controller: Controller name (``user``, ``admin/reports``).
        source: Originating file, or empty when registered directly.
        kind: ``"flat"`` or ``"class"``.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    controller: str
    source: str
    kind: str
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class RouteRegistered:
    """A synthesized route was registered with the Chirp app.

    Attributes:
        verb: Upper-case HTTP verb.
        path: Route path with ``:name`` captures.
        controller: Controller name.
        action: Raw action name.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    verb: str
    path: str
    controller: str
    action: str
    timestamp_ns: int


# ---------------------------------------------------------------------------
# Request events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ActionDispatched:
    """An action ran to completion for one request.

    Attributes:
        verb: Upper-case HTTP verb.
        path: Concrete request path.
        controller: Controller name.
        action: Raw action name.
        duration_ms: Time spent in the action, awaiting included.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    verb: str
    path: str
    controller: str
    action: str
    duration_ms: float
    timestamp_ns: int


# ---------------------------------------------------------------------------
# Union type
# ---------------------------------------------------------------------------

type RoutingEvent = ControllerLoaded | RouteRegistered | ActionDispatched


def now_ns() -> int:
    """Return the current monotonic clock value in nanoseconds."""
    return time.monotonic_ns()
