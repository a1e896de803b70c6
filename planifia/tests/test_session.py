from datetime import date

import pytest

from planifia.domain.Meal import MealType
from planifia.logic.session import SessionContext
from planifia.tests.fakes import fixed_clock
from planifia.utilities.exceptions import NotSignedInError


@pytest.fixture
def ctx(store, resolver, bus):
    return SessionContext(store, resolver, bus=bus, clock=fixed_clock)


def test_nothing_available_before_sign_in(ctx):
    assert not ctx.active
    with pytest.raises(NotSignedInError):
        ctx.user
    with pytest.raises(NotSignedInError):
        ctx.planner
    with pytest.raises(NotSignedInError):
        ctx.shopping


@pytest.mark.asyncio
async def test_sign_in_binds_services_to_the_user(ctx):
    user = await ctx.sign_in("ana@example.com")
    assert ctx.active
    assert ctx.user == user
    assert ctx.planner.user_id == user.id
    assert ctx.shopping.user_id == user.id


@pytest.mark.asyncio
async def test_session_survives_a_restart(ctx, store, resolver):
    user = await ctx.sign_in("ana@example.com")
    restarted = SessionContext(store, resolver, clock=fixed_clock)
    assert await restarted.restore() == user
    assert restarted.active


@pytest.mark.asyncio
async def test_sign_out_tears_down(ctx, store, resolver):
    await ctx.sign_in("ana@example.com")
    await ctx.sign_out()
    assert not ctx.active
    with pytest.raises(NotSignedInError):
        ctx.planner
    assert await SessionContext(store, resolver).restore() is None


@pytest.mark.asyncio
async def test_switching_users_isolates_their_data(ctx):
    await ctx.sign_in("ana@example.com")
    async with ctx.mutation():
        await ctx.planner.save_meal(date(2026, 10, 15), MealType.LUNCH, "Pasta")
    assert len(await ctx.shopping.reload()) == 2

    await ctx.sign_in("luis@example.com")
    assert await ctx.planner.list_meals() == []
    assert await ctx.shopping.reload() == []

    await ctx.sign_in("ANA@example.com")
    assert [m.dish_name for m in await ctx.planner.list_meals()] == ["Pasta"]
