"""Simple Event Bus / Observer implementation for planner and shopping list notifications.

Event names:
  plan.meal_saved -> payload {"meal": Meal, "generated": int, "eligible": bool}
  plan.meal_deleted -> payload {"meal_id": str, "retracted": int}
  ingredients.resolver_failure -> payload {"dish_name": str, "error": str}
  store.cascade_failure -> payload {"meal_id": str, "step": str, "error": str}
  shopping.update_failure -> payload {"item_ids": [str], "action": str, "error": str}

Subscribers are callables taking (event_name, payload).
"""
from __future__ import annotations
import logging
from collections import defaultdict
from typing import Callable, Any, Dict, List

logger = logging.getLogger(__name__)

# --- Event name constants (used across modules) ---
MEAL_SAVED = "plan.meal_saved"
MEAL_DELETED = "plan.meal_deleted"
RESOLVER_FAILURE = "ingredients.resolver_failure"
CASCADE_FAILURE = "store.cascade_failure"
SHOPPING_UPDATE_FAILURE = "shopping.update_failure"

FAILURE_EVENTS = (RESOLVER_FAILURE, CASCADE_FAILURE, SHOPPING_UPDATE_FAILURE)
ALL_EVENTS = (MEAL_SAVED, MEAL_DELETED) + FAILURE_EVENTS


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

	def publish(self, event_name: str, payload: Any = None):
		for cb in list(self._subscribers.get(event_name, [])):
			try:
				cb(event_name, payload)
			except Exception:
				# A broken listener must never break the operation that published
				logger.exception("Error delivering %s to %r", event_name, cb)


__all__ = [
	'EventBus', 'MEAL_SAVED', 'MEAL_DELETED', 'RESOLVER_FAILURE', 'CASCADE_FAILURE',
	'SHOPPING_UPDATE_FAILURE', 'FAILURE_EVENTS', 'ALL_EVENTS'
]
