# portal/pages/notifications.py
import logging
from typing import List, Optional

from portal.errors import PortalException, UnAuthenticated
from portal.pages.base import Page, PageContext
from portal.schemas.notifications import Notification
from portal.services.notification_service import NotificationService

logger = logging.getLogger(__name__)


class NotificationsPage(Page):
    """Notification bell: polls while mounted, stops on unmount."""

    def __init__(self, ctx: PageContext, poller: Optional[NotificationService] = None):
        super().__init__(ctx)
        self.poller = poller or NotificationService(ctx.api, ctx.toasts)

    @property
    def notifications(self) -> List[Notification]:
        return self.poller.notifications

    @property
    def recent(self) -> List[Notification]:
        return self.poller.recent

    @property
    def unread_count(self) -> int:
        return self.poller.unread_count

    async def mount(self) -> None:
        if self.user is None:
            raise UnAuthenticated()
        self.mounted = True
        self.error = not await self.poller.start(self.user.id)

    async def unmount(self) -> None:
        await self.poller.stop()
        await super().unmount()

    async def retry(self) -> None:
        self.error = not await self.poller.refresh()

    async def set_visibility(self, visible: bool) -> None:
        await self.poller.set_visibility(visible)

    async def mark_all_read(self) -> bool:
        try:
            await self.poller.mark_all_read(self.user.id if self.user else None)
        except PortalException as e:
            logger.error(f"Failed to mark notifications read: {e.message}")
            self.toasts.error("Error", "Failed to mark notifications as read")
            return False
        return True
