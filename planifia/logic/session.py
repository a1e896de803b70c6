"""Session context: the signed-in user and the services bound to them.

``init`` runs on sign-in (or when a persisted session is restored at startup) and
``teardown`` on sign-out. Mutations of the user's data go through ``mutation()``,
which serializes them so one action finishes, store I/O included, before the next
one starts.
"""
import asyncio
import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Optional

from planifia.domain.User import User
from planifia.events.Event_Bus import EventBus
from planifia.infra.Record_Store import RecordStore
from planifia.logic.planning.meal_planner import Clock, MealPlanner
from planifia.logic.shopping.consolidator import ShoppingListConsolidator
from planifia.utilities.exceptions import NotSignedInError

logger = logging.getLogger(__name__)


class SessionContext:
    def __init__(self, store: RecordStore, resolver, bus: Optional[EventBus] = None,
                 clock: Clock = datetime.now):
        self.store = store
        self.resolver = resolver
        self.bus = bus or EventBus()
        self.clock = clock
        self._user: Optional[User] = None
        self._planner: Optional[MealPlanner] = None
        self._shopping: Optional[ShoppingListConsolidator] = None
        self._mutation_lock = asyncio.Lock()

    # --- lifecycle -------------------------------------------------------
    def init(self, user: User) -> None:
        if self._user is not None:
            self.teardown()
        self._user = user
        self._planner = MealPlanner(self.store, self.resolver, user.id, bus=self.bus, clock=self.clock)
        self._shopping = ShoppingListConsolidator(self.store, user.id, bus=self.bus)
        logger.info("Session started for %s", user.email)

    def teardown(self) -> None:
        if self._user is not None:
            logger.info("Session ended for %s", self._user.email)
        self._user = None
        self._planner = None
        self._shopping = None

    async def restore(self) -> Optional[User]:
        """Pick up a session persisted by a previous run, if any."""
        user = await self.store.session.get_current_session()
        if user is not None:
            self.init(user)
        return user

    async def sign_in(self, email: str) -> User:
        user = await self.store.session.sign_in(email)
        self.init(user)
        return user

    async def sign_out(self) -> None:
        self.teardown()
        await self.store.session.sign_out()

    # --- accessors ---------------------------------------------------------
    @property
    def active(self) -> bool:
        return self._user is not None

    @property
    def user(self) -> User:
        if self._user is None:
            raise NotSignedInError()
        return self._user

    @property
    def planner(self) -> MealPlanner:
        if self._planner is None:
            raise NotSignedInError()
        return self._planner

    @property
    def shopping(self) -> ShoppingListConsolidator:
        if self._shopping is None:
            raise NotSignedInError()
        return self._shopping

    @asynccontextmanager
    async def mutation(self):
        async with self._mutation_lock:
            yield self
