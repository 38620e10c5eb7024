"""Routing observability: startup and per-request events.

Records:
- **Loader**: controllers imported and instantiated
- **Registrar**: routes registered with the Chirp app
- **Dispatch**: actions invoked, with timing

All events are frozen dataclasses with nanosecond timestamps, safe for
concurrent production from multiple worker threads.

Quick Start:
    >>> from warble.observability import EventLog, RouteRegistered
    >>> log = EventLog()
    >>> # Pass the log to warble.load(..., event_log=log)
    >>> routes = log.query(event_type=RouteRegistered)

"""

from warble.observability.events import (
    ActionDispatched,
    ControllerLoaded,
    RouteRegistered,
    RoutingEvent,
    now_ns,
)
from warble.observability.log import DispatchSummary, EventLog

__all__ = [
    "ActionDispatched",
    "ControllerLoaded",
    "DispatchSummary",
    "EventLog",
    "RouteRegistered",
    "RoutingEvent",
    "now_ns",
]
