# portal/pages/dashboard.py
import logging
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional

from portal.errors import PortalException
from portal.pages.base import Page, PageContext
from portal.schemas.auth import UserRole
from portal.schemas.content import Announcement

logger = logging.getLogger(__name__)


def featured_announcement(announcements: List[Announcement]) -> Optional[Announcement]:
    """The pinned, published announcement if any, else the first one."""
    for announcement in announcements:
        if announcement.is_pinned and announcement.is_published:
            return announcement
    return announcements[0] if announcements else None


class DashboardPage(Page):
    def __init__(self, ctx: PageContext):
        super().__init__(ctx)
        self.stats: Dict[str, Any] = {}
        self.latest_announcement: Optional[Announcement] = None

    async def fetch(self):
        stats = await self.api.get_stats(self.user)
        announcement = None
        if self.user is not None and self.user.role == UserRole.RESIDENT:
            announcement = featured_announcement(await self.api.get_announcements())
        return stats, announcement

    def apply(self, data) -> None:
        self.stats, self.latest_announcement = data
        self.stats = self.stats or {}

    async def download_report(self, directory: Optional[str] = None, today: Optional[date] = None) -> Optional[Path]:
        """Save the server-rendered report as barangay-report-<date>.pdf."""
        try:
            content = await self.api.generate_report()
        except PortalException as e:
            logger.error(f"Failed to generate report: {e.message}")
            self.toasts.error("Error", "Failed to generate report. Please try again.")
            return None
        path = Path(directory or self.ctx.settings.EXPORT_DIR) / f"barangay-report-{(today or date.today()).isoformat()}.pdf"
        path.write_bytes(content)
        logger.info(f"Report saved to {path}")
        return path
