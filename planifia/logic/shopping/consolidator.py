"""Shopping list operations over the record store.

Each mutation is a two-phase update: the tentative grouping (raw snapshot with
the change applied locally) is published first through ``on_tentative``, then
the store round-trip runs and the list is reloaded. The reloaded, authoritative
grouping always replaces the tentative one; if the reload itself fails the
last authoritative snapshot is restored before the error propagates.
"""
import asyncio
import logging
import time
from typing import Callable, Iterable, List, Optional

from planifia.domain.GroupedItem import GroupedItem
from planifia.domain.ShoppingItem import ShoppingItem
from planifia.events.Event_Bus import EventBus, SHOPPING_UPDATE_FAILURE
from planifia.infra.Record_Store import RecordStore
from planifia.logic.shopping.list_builder import (
    apply_manual_addition, apply_purchased, apply_removal, group_items, normalize_key
)
from planifia.utilities.constants import MANUAL_CATEGORY

logger = logging.getLogger(__name__)

TentativeCallback = Callable[[List[GroupedItem]], None]


class ShoppingListConsolidator:
    def __init__(self, store: RecordStore, user_id: str, bus: Optional[EventBus] = None):
        self.store = store
        self.user_id = user_id
        self.bus = bus or EventBus()
        self._raw: List[ShoppingItem] = []
        self.snapshot: List[GroupedItem] = []

    async def reload(self) -> List[GroupedItem]:
        """Re-read the raw items and recompute the grouped view from scratch."""
        self._raw = await self.store.items.list(self.user_id)
        self.snapshot = group_items(self._raw)
        return self.snapshot

    async def raw_items(self) -> List[ShoppingItem]:
        await self.reload()
        return list(self._raw)

    async def find_group(self, key: str) -> Optional[GroupedItem]:
        wanted = normalize_key(key)
        for group in await self.reload():
            if group.key == wanted:
                return group
        return None

    def _show_tentative(self, raw: List[ShoppingItem], on_tentative: Optional[TentativeCallback]):
        self.snapshot = group_items(raw)
        if on_tentative is not None:
            on_tentative(self.snapshot)

    async def _reconcile(self, previous: List[GroupedItem]) -> List[GroupedItem]:
        try:
            return await self.reload()
        except Exception:
            self.snapshot = previous
            raise

    def _report_failures(self, action: str, ids: List[str], results: Iterable) -> None:
        failed = [(i, r) for i, r in zip(ids, results) if isinstance(r, BaseException)]
        for item_id, err in failed:
            logger.error("Could not %s shopping item %s: %s", action, item_id, err)
        if failed:
            self.bus.publish(SHOPPING_UPDATE_FAILURE, {
                "item_ids": [i for i, _ in failed],
                "action": action,
                "error": str(failed[0][1]),
            })

    async def toggle_purchased(self, group: GroupedItem,
                               on_tentative: Optional[TentativeCallback] = None) -> List[GroupedItem]:
        """Set every member to the opposite of the group's merged state.

        A partially purchased group (merged False) becomes fully purchased.
        """
        new_state = not group.purchased
        previous = self.snapshot
        self._show_tentative(apply_purchased(self._raw, group.member_ids, new_state), on_tentative)

        ids = list(group.member_ids)
        results = await asyncio.gather(
            *(self.store.items.update(i, purchased=new_state) for i in ids), return_exceptions=True
        )
        self._report_failures("update", ids, results)
        return await self._reconcile(previous)

    async def add_manual_item(self, name: str,
                              on_tentative: Optional[TentativeCallback] = None) -> Optional[ShoppingItem]:
        """Add a user-entered item. Empty names (after trimming) are ignored and return None."""
        clean = (name or "").strip()
        if not clean:
            return None
        item = ShoppingItem(
            user_id=self.user_id,
            ingredient_name=clean,
            category=MANUAL_CATEGORY,
            purchased=False,
            manual=True,
            meal_id=None,
        )
        previous = self.snapshot
        placeholder = item.copy(id=f"tmp-{time.time_ns()}", created_at=int(time.time() * 1000))
        self._show_tentative(apply_manual_addition(self._raw, placeholder), on_tentative)

        try:
            created = await self.store.items.add(item)
        except Exception:
            self.snapshot = previous
            raise
        await self._reconcile(previous)
        return created

    async def delete_group(self, group: GroupedItem,
                           on_tentative: Optional[TentativeCallback] = None) -> List[GroupedItem]:
        """Delete every member of the group, whatever its origin."""
        previous = self.snapshot
        self._show_tentative(apply_removal(self._raw, group.member_ids), on_tentative)

        ids = list(group.member_ids)
        results = await asyncio.gather(*(self.store.items.delete(i) for i in ids), return_exceptions=True)
        self._report_failures("delete", ids, results)
        return await self._reconcile(previous)
