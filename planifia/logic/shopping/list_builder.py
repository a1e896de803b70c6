"""Shopping list builder.

Collapses raw shopping items into purchasable groups. Everything here is pure:
the grouped view is recomputed from a raw snapshot on every read and never
patched incrementally.

Provides group_items(raw_items) plus the tentative-snapshot helpers used for
optimistic updates (apply_purchased, apply_removal, apply_manual_addition).
"""
import unicodedata
from typing import Dict, Iterable, List, Sequence, Tuple

from planifia.domain.GroupedItem import GroupedItem
from planifia.domain.ShoppingItem import ShoppingItem


def normalize_key(name: str) -> str:
    return (name or '').strip().lower()


def display_name(name: str) -> str:
    """Trimmed name with only its first character upper-cased ('aceite de oliva' -> 'Aceite de oliva')."""
    trimmed = (name or '').strip()
    return trimmed[:1].upper() + trimmed[1:]


def collation_key(name: str) -> Tuple[str, str]:
    # Primary: accent- and case-insensitive; secondary: the raw text, so ties stay deterministic
    decomposed = unicodedata.normalize('NFKD', name)
    base = ''.join(ch for ch in decomposed if not unicodedata.combining(ch))
    return (base.casefold(), name)


def sort_groups(groups: Iterable[GroupedItem]) -> List[GroupedItem]:
    """Unpurchased before purchased; alphabetical (locale-style collation) within each part."""
    return sorted(groups, key=lambda g: (g.purchased, collation_key(g.display_name)))


def group_items(raw_items: Iterable[ShoppingItem]) -> List[GroupedItem]:
    """Group raw items by normalized ingredient name.

    - display name comes from the first item seen for the key;
    - purchased is True only if every member is purchased;
    - manual is True if any member was entered manually.

    Returns unpurchased groups first, then purchased ones, each sorted by name.
    """
    groups: Dict[str, GroupedItem] = {}
    for item in raw_items:
        k = normalize_key(item.ingredient_name)
        group = groups.get(k)
        if group is None:
            groups[k] = GroupedItem(
                key=k,
                display_name=display_name(item.ingredient_name),
                member_ids=[item.id],
                purchased=item.purchased,
                manual=item.manual,
            )
            continue
        group.member_ids.append(item.id)
        group.purchased = group.purchased and item.purchased
        group.manual = group.manual or item.manual

    return sort_groups(groups.values())


def summarize(groups: Sequence[GroupedItem]) -> dict:
    purchased = sum(1 for g in groups if g.purchased)
    return {"purchased_count": purchased, "total_count": len(groups)}


# --- Tentative snapshots (optimistic updates) --------------------------------
def apply_purchased(raw_items: Iterable[ShoppingItem], ids: Iterable[str], purchased: bool) -> List[ShoppingItem]:
    targets = set(ids)
    return [i.copy(purchased=purchased) if i.id in targets else i for i in raw_items]


def apply_removal(raw_items: Iterable[ShoppingItem], ids: Iterable[str]) -> List[ShoppingItem]:
    targets = set(ids)
    return [i for i in raw_items if i.id not in targets]


def apply_manual_addition(raw_items: Iterable[ShoppingItem], item: ShoppingItem) -> List[ShoppingItem]:
    return [item] + list(raw_items)


__all__ = [
    'normalize_key', 'display_name', 'collation_key', 'sort_groups', 'group_items', 'summarize',
    'apply_purchased', 'apply_removal', 'apply_manual_addition',
]
