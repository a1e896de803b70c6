"""GroupedItem: derived, never-persisted aggregation of shopping items sharing a normalized name."""
from typing import List


class GroupedItem:
    def __init__(self, key: str, display_name: str, member_ids: List[str],
                 purchased: bool, manual: bool):
        self.key = key
        self.display_name = display_name
        self.member_ids = member_ids[:]
        self.purchased = purchased
        self.manual = manual

    def __str__(self) -> str:
        state = "x" if self.purchased else " "
        tag = " (manual)" if self.manual else ""
        return f"[{state}] {self.display_name}{tag} x{len(self.member_ids)}"

    __repr__ = __str__

    def __eq__(self, other) -> bool:
        if not isinstance(other, GroupedItem):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def to_dict(self):
        return {
            "key": self.key,
            "name": self.display_name,
            "ids": self.member_ids[:],
            "count": len(self.member_ids),
            "purchased": self.purchased,
            "manual": self.manual,
        }
