"""Event log: a bounded, thread-safe store of routing events.

Startup events describe what was wired; dispatch events describe traffic.
``dispatch_summary()`` folds the latter into per-action timings::

    log = EventLog()
    app = warble.load(event_log=log)
    ...
    log.dispatch_summary()
    # {("user", "get_user"): DispatchSummary(count=12, total_ms=3.1, max_ms=0.9)}

Thread Safety:
    Every method takes the same ``threading.Lock``; Pounce worker threads
    may append while another thread queries.

"""

import threading
from collections import deque
from dataclasses import dataclass
from typing import Any

from warble.observability.events import ActionDispatched, RouteRegistered, RoutingEvent


@dataclass(frozen=True, slots=True)
class DispatchSummary:
    """Aggregated dispatch timings for one action."""

    count: int
    total_ms: float
    max_ms: float

    @property
    def mean_ms(self) -> float:
        return self.total_ms / self.count if self.count else 0.0


class EventLog:
    """Ring buffer of routing events; the oldest are dropped once full.

    Args:
        max_events: Capacity of the buffer.

    """

    __slots__ = ("_events", "_lock", "_max_events")

    def __init__(self, max_events: int = 10_000) -> None:
        self._max_events = max_events
        self._events: deque[RoutingEvent] = deque(maxlen=max_events)
        self._lock = threading.Lock()

    def append(self, event: RoutingEvent) -> None:
        with self._lock:
            self._events.append(event)

    def query(
        self,
        *,
        event_type: type | None = None,
        since_ns: int = 0,
        controller: str | None = None,
        path: str | None = None,
        limit: int = 100,
    ) -> list[RoutingEvent]:
        """Return matching events, newest first.

        Args:
            event_type: Keep only instances of this event class.
            since_ns: Keep only events stamped at or after this time.
            controller: Keep only events for this controller name.
            path: Keep only events whose path (or source file, for
                ``ControllerLoaded``) contains this substring.
            limit: Stop after this many matches.

        """
        with self._lock:
            snapshot = list(self._events)

        matches: list[RoutingEvent] = []
        for event in reversed(snapshot):
            if len(matches) >= limit:
                break
            if _matches(event, event_type, since_ns, controller, path):
                matches.append(event)
        return matches

    def recent(self, n: int = 20) -> list[RoutingEvent]:
        """The *n* most recent events, oldest first."""
        with self._lock:
            snapshot = list(self._events)
        return snapshot[-n:]

    def registered_routes(self) -> list[tuple[str, str]]:
        """``(verb, path)`` of every recorded route registration, in order."""
        with self._lock:
            return [
                (event.verb, event.path)
                for event in self._events
                if isinstance(event, RouteRegistered)
            ]

    def dispatch_summary(self) -> dict[tuple[str, str], DispatchSummary]:
        """Per ``(controller, action)`` dispatch count and timings."""
        with self._lock:
            dispatched = [e for e in self._events if isinstance(e, ActionDispatched)]

        totals: dict[tuple[str, str], tuple[int, float, float]] = {}
        for event in dispatched:
            key = (event.controller, event.action)
            count, total, peak = totals.get(key, (0, 0.0, 0.0))
            totals[key] = (count + 1, total + event.duration_ms, max(peak, event.duration_ms))

        return {
            key: DispatchSummary(count=count, total_ms=total, max_ms=peak)
            for key, (count, total, peak) in totals.items()
        }

    def clear(self) -> int:
        """Drop every event; returns how many were dropped."""
        with self._lock:
            dropped = len(self._events)
            self._events.clear()
            return dropped

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)

    def stats(self) -> dict[str, Any]:
        """Event counts by type, plus buffer size and capacity."""
        with self._lock:
            by_type: dict[str, int] = {}
            for event in self._events:
                name = type(event).__name__
                by_type[name] = by_type.get(name, 0) + 1
            total = len(self._events)

        return {
            "total": total,
            "max_events": self._max_events,
            "by_type": by_type,
        }


def _matches(
    event: RoutingEvent,
    event_type: type | None,
    since_ns: int,
    controller: str | None,
    path: str | None,
) -> bool:
    if event_type is not None and not isinstance(event, event_type):
        return False
    if since_ns and event.timestamp_ns < since_ns:
        return False
    if controller is not None and event.controller != controller:
        return False
    if path is not None:
        haystack = getattr(event, "path", None) or getattr(event, "source", "")
        if path not in haystack:
            return False
    return True
