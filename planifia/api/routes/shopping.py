from typing import List

from fastapi import APIRouter, Depends, HTTPException

from planifia.api.dependencies import require_session
from planifia.domain.GroupedItem import GroupedItem
from planifia.logic.session import SessionContext
from planifia.logic.shopping.list_builder import summarize
from planifia.utilities.validators import ManualItemInput

router = APIRouter(prefix="/api/shopping-list")


def _list_payload(groups: List[GroupedItem]) -> dict:
    return {"items": [g.to_dict() for g in groups], **summarize(groups)}


@router.get("")
async def shopping_list(ctx: SessionContext = Depends(require_session)):
    return _list_payload(await ctx.shopping.reload())


@router.post("/items")
async def add_manual_item(payload: ManualItemInput, ctx: SessionContext = Depends(require_session)):
    async with ctx.mutation():
        created = await ctx.shopping.add_manual_item(payload.name)
    if created is None:
        return {"added": False, **_list_payload(await ctx.shopping.reload())}
    return {"added": True, "item": created.to_dict(), **_list_payload(ctx.shopping.snapshot)}


@router.post("/groups/{key:path}/toggle")
async def toggle_group(key: str, ctx: SessionContext = Depends(require_session)):
    async with ctx.mutation():
        group = await ctx.shopping.find_group(key)
        if group is None:
            raise HTTPException(status_code=404, detail="Item not found in shopping list")
        groups = await ctx.shopping.toggle_purchased(group)
    return _list_payload(groups)


@router.delete("/groups/{key:path}")
async def delete_group(key: str, ctx: SessionContext = Depends(require_session)):
    async with ctx.mutation():
        group = await ctx.shopping.find_group(key)
        if group is None:
            # Already gone: deleting is idempotent
            return {"deleted": False, **_list_payload(ctx.shopping.snapshot)}
        groups = await ctx.shopping.delete_group(group)
    return {"deleted": True, **_list_payload(groups)}
