"""Meal domain entity: one planned dish for a calendar day and a meal slot (lunch or dinner)."""
import enum
from datetime import date, datetime
from typing import Optional

from planifia.utilities.constants import STORE_DATE_FORMAT
from planifia.utilities.exceptions import RecordStoreError


class MealType(str, enum.Enum):
    """Meal slots available on each calendar day."""

    LUNCH = "LUNCH"
    DINNER = "DINNER"


class Meal:
    def __init__(self, id: str = "", user_id: str = "", date: Optional[date] = None,
                 meal_type: MealType = MealType.LUNCH, dish_name: str = ""):
        self.id = id
        self.user_id = user_id
        self.date = date
        self.meal_type = MealType(meal_type)
        self.dish_name = dish_name

    @property
    def slot(self) -> tuple:
        '''The (user, day, meal type) triple that at most one meal may occupy.'''
        return (self.user_id, self.date, self.meal_type)

    def __str__(self) -> str:
        day = self.date.strftime(STORE_DATE_FORMAT) if self.date else "?"
        return f"{day} {self.meal_type.value}: {self.dish_name}"

    __repr__ = __str__

    def __eq__(self, other) -> bool:
        if not isinstance(other, Meal):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    @staticmethod
    def from_dict(data):
        '''Creates a Meal from a persisted record. The date is stored as YYYY-MM-DD.'''
        d = dict(data) if isinstance(data, dict) else {}
        raw_date = d.get("date")
        try:
            if isinstance(raw_date, datetime):
                raw_date = raw_date.date()
            elif isinstance(raw_date, str):
                raw_date = datetime.strptime(raw_date, STORE_DATE_FORMAT).date()
            meal_type = MealType(d.get("meal_type", MealType.LUNCH))
        except ValueError as e:
            raise RecordStoreError(f"Corrupt meal record {d.get('id', '?')}: {e}", {"record": d}) from e
        return Meal(
            id=str(d.get("id", "")),
            user_id=str(d.get("user_id", "")),
            date=raw_date,
            meal_type=meal_type,
            dish_name=d.get("dish_name", ""),
        )

    def to_dict(self):
        '''Converts the Meal to its persisted record shape.'''
        return {
            "id": self.id,
            "user_id": self.user_id,
            "date": self.date.strftime(STORE_DATE_FORMAT) if self.date else "",
            "meal_type": self.meal_type.value,
            "dish_name": self.dish_name,
        }
