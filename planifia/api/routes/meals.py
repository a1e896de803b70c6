from fastapi import APIRouter, Depends, Query

from planifia.api.dependencies import require_session
from planifia.logic.session import SessionContext
from planifia.utilities.validators import MealInput

router = APIRouter(prefix="/api/meals")


@router.get("")
async def week_meals(week_offset: int = Query(default=0, ge=0, le=1),
                     ctx: SessionContext = Depends(require_session)):
    """Calendar for the current (0) or next (1) week."""
    return await ctx.planner.week_view(week_offset)


@router.post("")
async def save_meal(payload: MealInput, ctx: SessionContext = Depends(require_session)):
    async with ctx.mutation():
        result = await ctx.planner.save_meal(
            payload.date, payload.meal_type, payload.dish_name, payload.editing_meal_id
        )
    if result is None:
        return {"saved": False, "reason": "nothing to save"}
    return result.to_dict()


@router.delete("/{meal_id}")
async def delete_meal(meal_id: str, ctx: SessionContext = Depends(require_session)):
    async with ctx.mutation():
        retracted = await ctx.planner.delete_meal(meal_id)
    return {"deleted": True, "meal_id": meal_id, "retracted": retracted}
