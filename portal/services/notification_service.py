# portal/services/notification_service.py
import asyncio
import logging
from typing import List, Optional, Set

from portal.api.service import ApiService
from portal.core.config import settings
from portal.schemas.notifications import Notification
from portal.services.toast_service import ToastService, ToastType

logger = logging.getLogger(__name__)

RECENT_LIMIT = 5


class NotificationService:
    """Polls the signed-in user's notifications on a fixed interval.

    While hidden (and PAUSE_POLLING_WHEN_HIDDEN is set) ticks are skipped;
    becoming visible again refreshes at once.
    """

    def __init__(
        self,
        api: ApiService,
        toasts: Optional[ToastService] = None,
        interval: float = settings.NOTIFICATION_POLL_INTERVAL_SECONDS,
        pause_when_hidden: bool = settings.PAUSE_POLLING_WHEN_HIDDEN,
    ):
        self.api = api
        self.toasts = toasts
        self.interval = interval
        self.pause_when_hidden = pause_when_hidden
        self.notifications: List[Notification] = []
        self.visible = True
        self.user_id: Optional[str] = None
        self._seen: Set[str] = set()
        self._loaded = False
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def recent(self) -> List[Notification]:
        return self.notifications[:RECENT_LIMIT]

    @property
    def unread_count(self) -> int:
        return sum(1 for n in self.notifications if not n.is_read)

    async def start(self, user_id: str) -> bool:
        """Load once, then keep polling in the background until `stop`.

        Returns whether the first load succeeded; polling starts either way.
        """
        await self.stop()
        self.user_id = user_id
        self._seen = set()
        self._loaded = False
        loaded = await self.refresh()
        self._task = asyncio.create_task(self._poll())
        logger.info(f"Notification polling started for user {user_id} every {self.interval}s")
        return loaded

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.info(f"Notification polling stopped for user {self.user_id}")

    async def set_visibility(self, visible: bool) -> None:
        was_hidden = not self.visible
        self.visible = visible
        if visible and was_hidden and self.running:
            await self.refresh()

    async def _poll(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            if self.pause_when_hidden and not self.visible:
                logger.debug("Page hidden; skipping notification poll")
                continue
            await self.refresh()

    async def refresh(self) -> bool:
        """Fetch once; a failure is logged and leaves the current list in place."""
        if self.user_id is None:
            return False
        try:
            notifications = await self.api.get_notifications(self.user_id)
        except Exception as e:
            logger.error(f"Failed to fetch notifications for user {self.user_id}: {e}")
            return False

        fresh = [n for n in notifications if n.id not in self._seen]
        if self._loaded and self.toasts is not None:
            for notification in fresh:
                if not notification.is_read:
                    self.toasts.show_toast(notification.title, notification.message, ToastType.INFO)
        self._seen.update(n.id for n in notifications)
        self._loaded = True
        self.notifications = sorted(notifications, key=lambda n: n.created_at, reverse=True)
        return True

    async def mark_all_read(self, user_id: Optional[str] = None) -> None:
        user_id = user_id or self.user_id
        if user_id is None:
            return
        await self.api.mark_all_notifications_read(user_id)
        await self.refresh()
