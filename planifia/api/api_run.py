from contextlib import asynccontextmanager
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional
import logging

from fastapi import FastAPI, Query, Request, Depends, Response
from fastapi.responses import JSONResponse

from planifia.api.dependencies import get_event_feed, require_session
from planifia.api.api_ai import IngredientResolver, router as ai_router
from planifia.api.routes import meals, session, shopping
from planifia.events.Event_Bus import EventBus
from planifia.events.web_observers import EventFeed
from planifia.infra.Record_Store import RecordStore
from planifia.infra.pdf_utils import generate_pdf_for_shopping_list, generate_pdf_for_week
from planifia.logic.session import SessionContext
from planifia.utilities.config import DATA_DIR, DEBUG
from planifia.utilities.exceptions import PlanifiaError

# Logging
logger = logging.getLogger("planifia_app")


# -------------------- Exception handlers --------------------
async def planifia_error_handler(request: Request, exc: PlanifiaError):
    if exc.http_status >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=exc.http_status, content={"error": exc.to_dict()})


async def general_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": {"message": "Internal server error"}})


# -------------------- App factory --------------------
def create_app(data_dir: Optional[Path] = None, resolver=None,
               clock: Callable[[], datetime] = datetime.now) -> FastAPI:
    """Build the application around one data directory.

    Args:
        data_dir: directory holding the JSON collections (defaults to PLANIFIA_DATA_DIR).
        resolver: ingredient resolver; defaults to the OpenAI/dictionary resolver.
        clock: source of "now" for week computations.
    """
    store = RecordStore(data_dir or DATA_DIR)
    bus = EventBus()
    resolver = resolver or IngredientResolver()
    ctx = SessionContext(store, resolver, bus=bus, clock=clock)
    feed = EventFeed().start(bus)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        user = await ctx.restore()
        if user:
            logger.info("Restored session for %s", user.email)
        logger.info("Planifia data directory: %s", store.data_dir)
        try:
            yield
        finally:
            ctx.teardown()
            feed.stop()

    app = FastAPI(title="Planifia Meal Planner & Shopping List API", debug=DEBUG, lifespan=lifespan)
    app.state.store = store
    app.state.bus = bus
    app.state.resolver = resolver
    app.state.session = ctx
    app.state.event_feed = feed

    app.add_exception_handler(PlanifiaError, planifia_error_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    app.include_router(session.router)
    app.include_router(meals.router)
    app.include_router(shopping.router)
    app.include_router(ai_router)

    # -------------------- API: Events (polled by frontend) --------------------
    @app.get('/api/events')
    def api_events(
        since: Optional[int] = Query(default=None, description="Return events with id greater than this value"),
        feed: EventFeed = Depends(get_event_feed),
    ):
        """
        Return recent planner events (meal saved/deleted, resolver and store failures).

        Client polling strategy:
            1. First call without 'since' to load the current backlog.
            2. Store 'next_cursor' from the response.
            3. Subsequent polls: /api/events?since=<next_cursor>
        """
        return feed.get_events(since)

    # -------------------- PDF exports --------------------
    @app.get("/export_pdf")
    async def export_pdf(week_offset: int = Query(default=0, ge=0, le=1),
                         ctx: SessionContext = Depends(require_session)):
        view = await ctx.planner.week_view(week_offset)
        pdf_bytes = generate_pdf_for_week(view)
        return Response(
            content=pdf_bytes,
            media_type="application/pdf",
            headers={"Content-Disposition": f"attachment; filename=meal_plan_{view['start']}.pdf"},
        )

    @app.get("/export_pdf/shopping-list")
    async def export_shopping_pdf(ctx: SessionContext = Depends(require_session)):
        groups = await ctx.shopping.reload()
        pdf_bytes = generate_pdf_for_shopping_list(groups)
        return Response(
            content=pdf_bytes,
            media_type="application/pdf",
            headers={"Content-Disposition": "attachment; filename=shopping_list.pdf"},
        )

    return app


app = create_app()
