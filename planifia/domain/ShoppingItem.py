"""ShoppingItem domain entity: one raw shopping list line, either owned by a meal or entered manually."""
from typing import Optional


class ShoppingItem:
    def __init__(self, id: str = "", user_id: str = "", ingredient_name: str = "",
                 category: str = "", purchased: bool = False, manual: bool = False,
                 meal_id: Optional[str] = None, created_at: int = 0):
        self.id = id
        self.user_id = user_id
        self.ingredient_name = ingredient_name
        self.category = category
        self.purchased = purchased
        self.manual = manual
        self.meal_id = meal_id
        self.created_at = created_at

    @property
    def owned(self) -> bool:
        '''True when the item was generated for a meal and dies with it.'''
        return self.meal_id is not None

    def __str__(self) -> str:
        flags = []
        if self.purchased:
            flags.append("purchased")
        if self.manual:
            flags.append("manual")
        owner = f" (meal {self.meal_id})" if self.owned else ""
        suffix = f" [{', '.join(flags)}]" if flags else ""
        return f"{self.ingredient_name}{owner}{suffix}"

    __repr__ = __str__

    def __eq__(self, other) -> bool:
        if not isinstance(other, ShoppingItem):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def copy(self, **changes) -> "ShoppingItem":
        '''Returns a new item with the given fields replaced.'''
        data = self.to_dict()
        data.update(changes)
        return ShoppingItem.from_dict(data)

    @staticmethod
    def from_dict(data):
        '''Creates a ShoppingItem from a persisted record. Ignores unknown keys.'''
        d = dict(data) if isinstance(data, dict) else {}
        meal_id = d.get("meal_id")
        return ShoppingItem(
            id=str(d.get("id", "")),
            user_id=str(d.get("user_id", "")),
            ingredient_name=d.get("ingredient_name", "") or "",
            category=d.get("category", "") or "",
            purchased=bool(d.get("purchased", False)),
            manual=bool(d.get("manual", False)),
            meal_id=str(meal_id) if meal_id else None,
            created_at=int(d.get("created_at") or 0),
        )

    def to_dict(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "ingredient_name": self.ingredient_name,
            "category": self.category,
            "purchased": self.purchased,
            "manual": self.manual,
            "meal_id": self.meal_id,
            "created_at": self.created_at,
        }
