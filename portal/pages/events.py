# portal/pages/events.py
import logging
from typing import List, Optional

from portal.errors import PortalException, UnAuthenticated
from portal.pages.base import Page, PageContext
from portal.schemas.auth import User
from portal.schemas.content import Event

logger = logging.getLogger(__name__)


class EventsPage(Page):
    """Community events with attendee registration."""

    def __init__(self, ctx: PageContext):
        super().__init__(ctx)
        self.events: List[Event] = []
        self.registered_users: List[User] = []
        self.selected_event: Optional[Event] = None

    async def fetch(self) -> List[Event]:
        return await self.api.get_events()

    def apply(self, data: List[Event]) -> None:
        self.events = sorted(data or [], key=lambda e: e.event_date)

    async def register(self, event_id: str) -> bool:
        if self.user is None:
            raise UnAuthenticated()
        event = next((e for e in self.events if e.id == event_id), None)
        if event is not None and (event.is_registered or event.is_full):
            self.toasts.info("Registration", "You cannot register for this event")
            return False
        return await self.run_action(
            lambda: self.api.register_for_event(event_id, self.user.id),
            success=("Registered", "You are registered for this event"),
            failure_message="Failed to register for event",
        )

    async def view_registered(self, event: Event) -> List[User]:
        """Attendee list for one event; empty when it cannot be loaded."""
        self.selected_event = event
        try:
            self.registered_users = await self.api.get_event_registered_users(event.id)
        except PortalException as e:
            logger.error(f"Failed to fetch registered users: {e.message}")
            self.registered_users = []
        return self.registered_users
