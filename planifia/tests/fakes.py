"""Test doubles shared by the planner, shopping and API tests."""
from datetime import datetime

from planifia.events.Event_Bus import EventBus

# Wednesday; the current week runs Monday 2026-10-12 .. Sunday 2026-10-18
FIXED_NOW = datetime(2026, 10, 14, 12, 0)


def fixed_clock():
    return FIXED_NOW


class FakeResolver:
    """Dictionary-backed resolver that records which dishes it was asked about."""

    def __init__(self, mapping=None):
        self.mapping = mapping or {
            "tortilla de patata": ["Huevos", "Patatas", "Cebolla"],
            "ensalada": ["Lechuga", "Tomate"],
            "pasta": ["Pasta", "Tomate"],
        }
        self.calls = []

    async def resolve(self, dish_name):
        self.calls.append(dish_name)
        return list(self.mapping.get(dish_name.strip().lower(), []))


class FailingResolver:
    async def resolve(self, dish_name):
        raise RuntimeError("resolver unavailable")


class RecordingBus(EventBus):
    def __init__(self):
        super().__init__()
        self.published = []

    def publish(self, event_name, payload=None):
        self.published.append((event_name, payload))
        super().publish(event_name, payload)

    def names(self):
        return [name for name, _ in self.published]
