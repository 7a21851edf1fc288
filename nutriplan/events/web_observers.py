"""Web-facing observers for notification events.

Subscribes to the GLOBAL_EVENT_BUS for every notification event and keeps a
lightweight in-memory ring buffer that the pages poll through
/api/notifications?since=<cursor> to show toasts without a reload.

  * Each event gets an auto-increment integer id (cursor); clients request
    only newer events with since=<last_id_seen>.
  * A Lock guards the buffer; with several worker processes each keeps its own.
  * MAX_EVENTS caps memory use.
"""
from __future__ import annotations
import logging
from typing import List, Dict, Any
from threading import Lock
from datetime import datetime, timezone

from .Event_Bus import GLOBAL_EVENT_BUS, ALL_EVENTS, EXPORT_FAILED

logger = logging.getLogger(__name__)

_lock = Lock()
_events: List[Dict[str, Any]] = []
_next_id = 1
MAX_EVENTS = 300
_started = False

_PAYLOAD_FIELDS = ('kind', 'plan_id', 'customer_id', 'filename', 'name', 'action', 'message')


def _record(event_name: str, payload: Any):
    global _next_id
    with _lock:
        evt = {
            'id': _next_id,
            'type': event_name,
            'level': 'error' if event_name == EXPORT_FAILED else 'success',
            'ts': datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
        }
        if isinstance(payload, dict):
            for k in _PAYLOAD_FIELDS:
                if k in payload:
                    evt[k] = payload[k]
        _events.append(evt)
        _next_id += 1
        if len(_events) > MAX_EVENTS:
            del _events[: len(_events) - MAX_EVENTS]


def start():
    """Idempotent start: subscribe observers once."""
    global _started
    if _started:
        return
    for name in ALL_EVENTS:
        GLOBAL_EVENT_BUS.subscribe(name, _record)
    _started = True
    logger.debug("Notification observers subscribed to %s", ", ".join(ALL_EVENTS))


def get_events(since: int | None = None) -> Dict[str, Any]:
    """Return events newer than 'since' (exclusive).

    If since is None, returns the buffered events (up to MAX_EVENTS).
    next_cursor is the largest id so the client can poll with since=next_cursor.
    """
    with _lock:
        if since is None:
            data = list(_events)
        else:
            data = [e for e in _events if e['id'] > since]
        next_cursor = _events[-1]['id'] if _events else since or 0
    return {'events': data, 'next_cursor': next_cursor}


__all__ = ['start', 'get_events', 'MAX_EVENTS']
