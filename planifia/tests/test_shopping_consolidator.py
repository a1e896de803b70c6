import pytest

from planifia.domain.ShoppingItem import ShoppingItem
from planifia.events.Event_Bus import SHOPPING_UPDATE_FAILURE
from planifia.logic.shopping.consolidator import ShoppingListConsolidator
from planifia.utilities.constants import MANUAL_CATEGORY
from planifia.utilities.exceptions import RecordStoreError


@pytest.fixture
def shopping(store, user, bus):
    return ShoppingListConsolidator(store, user.id, bus=bus)


async def _seed(store, user_id, *rows):
    """rows: (name, purchased, meal_id); a None meal_id makes a manual item."""
    created = []
    for name, purchased, meal_id in rows:
        created.append(await store.items.add(ShoppingItem(
            user_id=user_id, ingredient_name=name, category="Ingredientes",
            purchased=purchased, manual=meal_id is None, meal_id=meal_id,
        )))
    return created


@pytest.mark.asyncio
async def test_reload_groups_raw_items(shopping, store, user):
    await _seed(store, user.id, ("Tomate", True, "m1"), ("tomate", False, "m2"),
                (" TOMATE ", False, None), ("Pan", False, "m1"))
    groups = await shopping.reload()
    assert [g.display_name for g in groups] == ["Pan", "Tomate"]
    tomato = groups[1]
    assert len(tomato.member_ids) == 3
    assert tomato.purchased is False
    assert tomato.manual is True


@pytest.mark.asyncio
async def test_toggle_twice_restores_every_member(shopping, store, user):
    await _seed(store, user.id, ("Huevos", True, "m1"), ("huevos", False, "m2"))
    [group] = await shopping.reload()

    # Partially purchased counts as unpurchased, so the first toggle buys everything
    [group] = await shopping.toggle_purchased(group)
    assert group.purchased is True
    assert all(i.purchased for i in await store.items.list(user.id))

    [group] = await shopping.toggle_purchased(group)
    assert group.purchased is False
    assert not any(i.purchased for i in await store.items.list(user.id))


@pytest.mark.asyncio
async def test_toggle_moves_the_group_to_the_purchased_part(shopping, store, user):
    await _seed(store, user.id, ("Arroz", False, "m1"), ("Sal", False, "m1"))
    groups = await shopping.reload()
    groups = await shopping.toggle_purchased(groups[0])
    assert [(g.display_name, g.purchased) for g in groups] == [("Sal", False), ("Arroz", True)]


@pytest.mark.asyncio
async def test_tentative_state_is_published_before_the_store_round_trip(shopping, store, user):
    await _seed(store, user.id, ("Leche", False, "m1"))
    [group] = await shopping.reload()
    seen = []

    def on_tentative(groups):
        seen.append([(g.display_name, g.purchased) for g in groups])

    await shopping.toggle_purchased(group, on_tentative=on_tentative)
    assert seen == [[("Leche", True)]]


@pytest.mark.asyncio
async def test_add_manual_item_trims_the_name(shopping, store, user):
    created = await shopping.add_manual_item("  milk ")
    assert created.ingredient_name == "milk"
    assert created.manual is True
    assert created.meal_id is None
    assert created.category == MANUAL_CATEGORY
    assert created.purchased is False

    [group] = shopping.snapshot
    assert group.display_name == "Milk"
    assert group.member_ids == [created.id]


@pytest.mark.asyncio
async def test_add_manual_item_merges_with_generated_items(shopping, store, user):
    await _seed(store, user.id, ("Tomate", False, "m1"))
    await shopping.reload()
    seen = []
    await shopping.add_manual_item("tomate", on_tentative=lambda groups: seen.append(groups))

    assert seen[0][0].member_ids[0].startswith("tmp-")
    [group] = shopping.snapshot
    assert group.manual is True
    assert len(group.member_ids) == 2
    assert not any(i.startswith("tmp-") for i in group.member_ids)


@pytest.mark.asyncio
async def test_blank_manual_item_is_ignored(shopping, store, user):
    assert await shopping.add_manual_item("   ") is None
    assert await shopping.add_manual_item("") is None
    assert await store.items.list(user.id) == []


@pytest.mark.asyncio
async def test_delete_group_removes_every_member(shopping, store, user):
    await _seed(store, user.id, ("Tomate", False, "m1"), ("tomate", True, None), ("Pan", False, "m1"))
    groups = await shopping.reload()
    tomato = next(g for g in groups if g.key == "tomate")

    groups = await shopping.delete_group(tomato)
    assert [g.key for g in groups] == ["pan"]
    assert [i.ingredient_name for i in await store.items.list(user.id)] == ["Pan"]
    assert await shopping.find_group("Tomate") is None
    assert (await shopping.find_group(" PAN ")).key == "pan"


@pytest.mark.asyncio
async def test_failed_reload_restores_the_last_authoritative_list(shopping, store, user, monkeypatch):
    await _seed(store, user.id, ("Sal", False, "m1"))
    before = await shopping.reload()

    async def broken(user_id):
        raise RecordStoreError("disk gone")

    monkeypatch.setattr(store.items, "list", broken)
    with pytest.raises(RecordStoreError):
        await shopping.toggle_purchased(before[0])
    assert shopping.snapshot is before


@pytest.mark.asyncio
async def test_failed_member_update_is_reported(shopping, store, user, bus, monkeypatch):
    await _seed(store, user.id, ("Sal", False, "m1"))
    [group] = await shopping.reload()

    async def broken(item_id, **changes):
        raise RecordStoreError("read only")

    monkeypatch.setattr(store.items, "update", broken)
    [group] = await shopping.toggle_purchased(group)
    # The authoritative reload wins over the tentative state
    assert group.purchased is False
    failures = [p for name, p in bus.published if name == SHOPPING_UPDATE_FAILURE]
    assert failures[0]["action"] == "update"
    assert failures[0]["item_ids"] == group.member_ids
