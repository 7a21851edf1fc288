"""Simple Event Bus / Observer implementation for user-facing notifications.

Event names:
  export.succeeded -> payload {"kind": str, "plan_id": str, "filename": str, "message": str}
  export.failed    -> payload {"kind": str, "plan_id": str, "message": str}
  plan.saved       -> payload {"plan_id": str, "name": str, "action": str}
  customer.saved   -> payload {"customer_id": str, "name": str, "action": str}

Subscribers are callables taking (event_name, payload).
"""
from __future__ import annotations
import logging
from collections import defaultdict
from typing import Callable, Any, Dict, List

logger = logging.getLogger(__name__)

# --- Event name constants (used across modules) ---
EXPORT_SUCCEEDED = "export.succeeded"
EXPORT_FAILED = "export.failed"
PLAN_SAVED = "plan.saved"
CUSTOMER_SAVED = "customer.saved"

ALL_EVENTS = (EXPORT_SUCCEEDED, EXPORT_FAILED, PLAN_SAVED, CUSTOMER_SAVED)


class EventBus:
	def __init__(self):
		self._subscribers: Dict[str, List[Callable[[str, Any], None]]] = defaultdict(list)

	def subscribe(self, event_name: str, callback: Callable[[str, Any], None]):
		if callback not in self._subscribers[event_name]:
			self._subscribers[event_name].append(callback)

	def unsubscribe(self, event_name: str, callback: Callable[[str, Any], None]):
		try:
			self._subscribers[event_name].remove(callback)
		except (ValueError, KeyError):
			pass

	def publish(self, event_name: str, payload: Any):
		for cb in list(self._subscribers.get(event_name, [])):
			try:
				cb(event_name, payload)
			except Exception:
				logger.exception("Error delivering %s to %r", event_name, cb)


# A singleton-like instance (can be imported)
GLOBAL_EVENT_BUS = EventBus()


def publish(event_name: str, payload: Any = None) -> None:
	"""Publish an event on the global bus."""
	GLOBAL_EVENT_BUS.publish(event_name, payload)


__all__ = [
	'EventBus', 'GLOBAL_EVENT_BUS', 'publish', 'ALL_EVENTS',
	'EXPORT_SUCCEEDED', 'EXPORT_FAILED', 'PLAN_SAVED', 'CUSTOMER_SAVED'
]
