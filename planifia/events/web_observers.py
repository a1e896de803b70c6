"""Web-facing observer for planner events.

Subscribes to an EventBus and keeps a bounded in-memory buffer of recent events
that the HTTP layer serves to the client (GET /api/events?since=<cursor>), so
non-fatal failures (resolver down, a cascade delete that did not go through)
can be shown without blocking the action that caused them.

Each event gets an auto-increment integer id used as cursor; clients poll with
the last id they saw and only receive newer events.
"""
from __future__ import annotations
from typing import List, Dict, Any, Optional
from threading import Lock
from datetime import datetime, timezone

from .Event_Bus import EventBus, ALL_EVENTS

MAX_EVENTS = 300


def _summarize(payload: Any) -> Dict[str, Any]:
    if not isinstance(payload, dict):
        return {}
    evt: Dict[str, Any] = {}
    meal = payload.get('meal')
    if meal is not None and hasattr(meal, 'to_dict'):
        evt['meal'] = meal.to_dict()
    for k in ('meal_id', 'dish_name', 'step', 'error', 'action', 'generated', 'eligible', 'retracted'):
        if k in payload:
            evt[k] = payload[k]
    if 'item_ids' in payload:
        evt['item_ids'] = list(payload['item_ids'])
    return evt


class EventFeed:
    """Ring buffer of events recorded from a bus."""

    def __init__(self, max_events: int = MAX_EVENTS):
        self._lock = Lock()
        self._events: List[Dict[str, Any]] = []
        self._next_id = 1
        self.max_events = max_events
        self._bus: Optional[EventBus] = None

    def record(self, event_name: str, payload: Any):  # signature expected by EventBus
        with self._lock:
            evt = {
                'id': self._next_id,
                'type': event_name,
                'ts': datetime.now(timezone.utc).isoformat(),
                **_summarize(payload),
            }
            self._events.append(evt)
            self._next_id += 1
            if len(self._events) > self.max_events:
                del self._events[: len(self._events) - self.max_events]

    def start(self, bus: EventBus) -> "EventFeed":
        """Idempotent: subscribe to every known event of the bus once."""
        if self._bus is bus:
            return self
        for name in ALL_EVENTS:
            bus.subscribe(name, self.record)
        self._bus = bus
        return self

    def stop(self):
        if self._bus is None:
            return
        for name in ALL_EVENTS:
            self._bus.unsubscribe(name, self.record)
        self._bus = None

    def get_events(self, since: int | None = None) -> Dict[str, Any]:
        """Return events newer than 'since' (exclusive) plus the cursor to poll with next."""
        with self._lock:
            if since is None:
                data = list(self._events)
            else:
                data = [e for e in self._events if e['id'] > since]
            next_cursor = self._events[-1]['id'] if self._events else since or 0
        return {'events': data, 'next_cursor': next_cursor}


__all__ = ['EventFeed', 'MAX_EVENTS']
