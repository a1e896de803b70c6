"""Meal planning engine.

Owns the eligibility rule (ingredients are generated only for meals in the week
in progress) and the ownership cascade: a meal's generated shopping items are
always deleted before the meal itself, whether the meal is deleted or replaced.
"""
import asyncio
import logging
from datetime import date, datetime
from typing import Callable, List, Optional

from planifia.domain.Meal import Meal, MealType
from planifia.domain.ShoppingItem import ShoppingItem
from planifia.events.Event_Bus import (
    EventBus, MEAL_SAVED, MEAL_DELETED, RESOLVER_FAILURE, CASCADE_FAILURE
)
from planifia.infra.Record_Store import RecordStore
from planifia.logic.planning.weeks import is_ingredient_week, week_days
from planifia.utilities.constants import DAY_NAMES, GENERATED_CATEGORY, STORE_DATE_FORMAT
from planifia.utilities.exceptions import RecordStoreError

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


class SaveResult:
    """Outcome of a successful save: the new meal and the items generated for it."""

    def __init__(self, meal: Meal, items: List[ShoppingItem], eligible: bool, replaced_ids: List[str]):
        self.meal = meal
        self.items = items
        self.eligible = eligible
        self.replaced_ids = replaced_ids

    def to_dict(self):
        return {
            "saved": True,
            "meal": self.meal.to_dict(),
            "ingredients_eligible": self.eligible,
            "generated": [i.to_dict() for i in self.items],
            "replaced_meal_ids": self.replaced_ids,
        }


class MealPlanner:
    def __init__(self, store: RecordStore, resolver, user_id: str,
                 bus: Optional[EventBus] = None, clock: Clock = datetime.now):
        """
        Args:
            store: record store holding meals and shopping items.
            resolver: any object exposing ``async resolve(dish_name) -> list[str]``.
            user_id: owner of every record this planner reads or writes.
            bus: optional event bus for saved/deleted/failure notifications.
            clock: returns "now"; sampled on every call, never cached.
        """
        self.store = store
        self.resolver = resolver
        self.user_id = user_id
        self.bus = bus or EventBus()
        self.clock = clock

    # --- Queries -----------------------------------------------------------
    async def list_meals(self) -> List[Meal]:
        return await self.store.meals.list(self.user_id)

    def is_eligible(self, day: date) -> bool:
        return is_ingredient_week(day, self.clock())

    async def week_view(self, week_offset: int = 0) -> dict:
        """Calendar payload for the visible week (0 = current, 1 = next)."""
        now = self.clock()
        today = now.date()
        days = week_days(now, week_offset)
        by_slot = {}
        for meal in await self.list_meals():
            # First meal wins if a slot was ever doubled by an older version of the data
            by_slot.setdefault((meal.date, meal.meal_type), meal)

        payload_days = []
        for d in days:
            lunch = by_slot.get((d, MealType.LUNCH))
            dinner = by_slot.get((d, MealType.DINNER))
            payload_days.append({
                "date": d.strftime(STORE_DATE_FORMAT),
                "weekday": DAY_NAMES[d.weekday()],
                "is_today": d == today,
                "ingredients_eligible": is_ingredient_week(d, now),
                "lunch": lunch.to_dict() if lunch else None,
                "dinner": dinner.to_dict() if dinner else None,
            })
        return {
            "week_offset": week_offset,
            "start": days[0].strftime(STORE_DATE_FORMAT),
            "end": days[-1].strftime(STORE_DATE_FORMAT),
            "days": payload_days,
        }

    # --- Ownership cascade ---------------------------------------------------
    async def _retract_items(self, meal_id: str) -> int:
        """Delete the items owned by meal_id. A failure is reported, never raised."""
        try:
            return await self.store.items.delete_by_meal_id(meal_id)
        except RecordStoreError as e:
            logger.exception("Could not retract shopping items of meal %s", meal_id)
            self.bus.publish(CASCADE_FAILURE, {"meal_id": meal_id, "step": "retract_items", "error": str(e)})
            return 0

    async def _remove_meal(self, meal_id: str) -> int:
        retracted = await self._retract_items(meal_id)
        await self.store.meals.delete(meal_id)
        return retracted

    async def delete_meal(self, meal_id: str) -> int:
        """Retract the meal's items, then delete the meal. Unknown ids are a no-op.

        Returns the number of shopping items retracted.
        """
        retracted = await self._remove_meal(meal_id)
        logger.info("Deleted meal %s (%d items retracted)", meal_id, retracted)
        self.bus.publish(MEAL_DELETED, {"meal_id": meal_id, "retracted": retracted})
        return retracted

    # --- Save ------------------------------------------------------------------
    async def _resolve_ingredients(self, dish_name: str) -> List[str]:
        try:
            names = await self.resolver.resolve(dish_name)
        except Exception as e:
            # Resolver is an external collaborator; any failure means "no ingredients"
            logger.exception("Ingredient resolver failed for %r", dish_name)
            self.bus.publish(RESOLVER_FAILURE, {"dish_name": dish_name, "error": str(e)})
            return []
        return [n.strip() for n in names or [] if isinstance(n, str) and n.strip()]

    async def _generate_items(self, meal: Meal) -> List[ShoppingItem]:
        names = await self._resolve_ingredients(meal.dish_name)
        if not names:
            logger.info("No ingredients generated for %r", meal.dish_name)
            return []
        new_items = [
            ShoppingItem(
                user_id=self.user_id,
                ingredient_name=name,
                category=GENERATED_CATEGORY,
                purchased=False,
                manual=False,
                meal_id=meal.id,
            )
            for name in names
        ]
        results = await asyncio.gather(*(self.store.items.add(i) for i in new_items), return_exceptions=True)
        created = []
        for name, res in zip(names, results):
            if isinstance(res, BaseException):
                logger.error("Could not add ingredient %r for meal %s: %s", name, meal.id, res)
                self.bus.publish(CASCADE_FAILURE, {"meal_id": meal.id, "step": "add_item", "error": str(res)})
            else:
                created.append(res)
        return created

    async def save_meal(self, day: date, meal_type: MealType, dish_name: str,
                        editing_meal_id: Optional[str] = None) -> Optional[SaveResult]:
        """Create (or replace) the meal in a slot and derive its shopping items.

        Returns None when the trimmed dish name is empty; nothing is written then.
        When editing, the old meal and its items are removed before the new meal is
        created. Any other meal already in the same (day, meal_type) slot is
        replaced the same way, so a slot never holds two meals.
        """
        dish = (dish_name or "").strip()
        if not dish:
            return None
        now = self.clock()
        meal_type = MealType(meal_type)

        replaced: List[str] = []
        if editing_meal_id:
            await self._remove_meal(editing_meal_id)
            replaced.append(editing_meal_id)
        slot = Meal(user_id=self.user_id, date=day, meal_type=meal_type).slot
        for existing in await self.list_meals():
            if existing.slot == slot and existing.id not in replaced:
                await self._remove_meal(existing.id)
                replaced.append(existing.id)

        meal = await self.store.meals.add(Meal(user_id=self.user_id, date=day, meal_type=meal_type, dish_name=dish))

        eligible = is_ingredient_week(day, now)
        if eligible:
            items = await self._generate_items(meal)
        else:
            logger.info("Meal %s is outside the current week; skipping ingredient generation", meal)
            items = []

        self.bus.publish(MEAL_SAVED, {"meal": meal, "generated": len(items), "eligible": eligible})
        return SaveResult(meal, items, eligible, replaced)
