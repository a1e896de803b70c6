from fastapi import APIRouter, Depends

from planifia.api.dependencies import get_session_context
from planifia.logic.session import SessionContext
from planifia.utilities.validators import SignInInput

router = APIRouter(prefix="/api/session")


@router.get("")
def current_session(ctx: SessionContext = Depends(get_session_context)):
    return {"user": ctx.user.to_dict() if ctx.active else None}


@router.post("")
async def sign_in(payload: SignInInput, ctx: SessionContext = Depends(get_session_context)):
    async with ctx.mutation():
        user = await ctx.sign_in(payload.email)
    return {"user": user.to_dict()}


@router.delete("")
async def sign_out(ctx: SessionContext = Depends(get_session_context)):
    async with ctx.mutation():
        await ctx.sign_out()
    return {"signed_out": True}
