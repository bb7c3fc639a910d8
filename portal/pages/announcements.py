# portal/pages/announcements.py
import logging
from typing import Dict, List

from portal.core.auth import require_staff
from portal.errors import PortalException
from portal.pages.base import ListPage, PageContext, contains, filter_matches
from portal.schemas.complaints import Priority
from portal.schemas.content import Announcement, AnnouncementCategory, AnnouncementCreate
from portal.services.validation import AnnouncementForm, AnnouncementValidator

logger = logging.getLogger(__name__)


def pinned_then_newest(announcements: List[Announcement]) -> List[Announcement]:
    by_date = sorted(announcements, key=lambda a: a.created_at, reverse=True)
    return sorted(by_date, key=lambda a: not a.is_pinned)


class AnnouncementsPage(ListPage[Announcement]):
    filter_names = ("category",)

    def __init__(self, ctx: PageContext):
        super().__init__(ctx)
        self.validator = AnnouncementValidator()
        self.form = AnnouncementForm()
        self.form_errors: Dict[str, str] = {}

    async def fetch(self) -> List[Announcement]:
        return await self.api.get_announcements()

    def matches_search(self, item: Announcement, term: str) -> bool:
        return contains(term, item.title, item.content)

    def matches_filters(self, item: Announcement) -> bool:
        return filter_matches(item.category, self.filters["category"])

    def order(self, items: List[Announcement]) -> List[Announcement]:
        return pinned_then_newest(items)

    def blur(self, field_name: str) -> None:
        self.form_errors = self.validator.validate_field(field_name, self.form, self.form_errors)

    async def submit(self) -> bool:
        author = require_staff(self.user)
        self.form_errors = self.validator.validate(self.form)
        if self.form_errors:
            self.toasts.error("Validation Error", "Please fix the errors in the form")
            return False
        announcement_in = AnnouncementCreate(
            title=self.form.title,
            content=self.form.content,
            category=AnnouncementCategory(self.form.category),
            priority=Priority(self.form.priority),
            author=author.full_name,
        )
        created = await self.run_action(
            lambda: self.api.create_announcement(announcement_in),
            success=("Success", "Announcement posted successfully"),
            failure_message="Failed to post announcement",
        )
        if created:
            self.form = AnnouncementForm()
            self.form_errors = {}
        return created

    async def toggle_pin(self, id: str) -> bool:
        require_staff(self.user)
        try:
            await self.api.toggle_announcement_pin(id)
        except PortalException as e:
            logger.error(f"Failed to toggle pin on announcement {id}: {e.message}")
            self.toasts.error("Error", "Failed to update announcement")
            return False
        await self.load()
        updated = next((a for a in self.items if a.id == id), None)
        message = "Announcement pinned" if updated and updated.is_pinned else "Announcement unpinned"
        self.toasts.success("Success", message)
        return True
