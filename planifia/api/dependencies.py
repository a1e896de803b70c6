"""FastAPI dependencies: access to the objects create_app() stores on app.state."""
from fastapi import Request

from planifia.events.web_observers import EventFeed
from planifia.logic.session import SessionContext
from planifia.utilities.exceptions import NotSignedInError


def get_session_context(request: Request) -> SessionContext:
    return request.app.state.session


def require_session(request: Request) -> SessionContext:
    """Session context of the signed-in user; raises NotSignedInError (401) otherwise."""
    ctx: SessionContext = request.app.state.session
    if not ctx.active:
        raise NotSignedInError()
    return ctx


def get_resolver(request: Request):
    return request.app.state.resolver


def get_event_feed(request: Request) -> EventFeed:
    return request.app.state.event_feed
