# portal/pages/admin.py
"""
Administration pages. Every one of them requires an admin, or staff where the
backend lets staff manage the same records (news and the events calendar).
"""
import logging
from pathlib import Path
from typing import Dict, List, Optional

from portal.core.auth import require_admin, require_staff
from portal.pages.base import ALL, ListPage, Page, PageContext, contains, filter_matches
from portal.schemas.auth import User, UserRole, UserUpdateModel
from portal.schemas.content import (
    FAQ,
    Event,
    EventCreate,
    FAQCreate,
    Hotline,
    HotlineCreate,
    NewsCreate,
    NewsItem,
    Official,
    OfficialCreate,
    SiteSettings,
)
from portal.schemas.notifications import AuditLog
from portal.services.validation import NewsForm, NewsValidator
from portal.utils.export import export_audit_logs, export_users
from portal.utils.uploads import encode_data_url

logger = logging.getLogger(__name__)

USER_TABS = (ALL, "pending", "staff", "admin")


class AdminUsersPage(ListPage[User]):
    filter_names = ("tab",)

    async def mount(self) -> None:
        require_admin(self.user)
        await super().mount()

    async def fetch(self) -> List[User]:
        return await self.api.get_users()

    def matches_search(self, item: User, term: str) -> bool:
        return contains(term, item.first_name, item.last_name, item.email)

    def matches_filters(self, item: User) -> bool:
        tab = self.filters["tab"]
        if tab == "pending":
            return not item.is_verified
        if tab == "staff":
            return item.role == UserRole.STAFF
        if tab == "admin":
            return item.role == UserRole.ADMIN
        return True

    def set_tab(self, tab: str) -> None:
        if tab not in USER_TABS:
            raise ValueError(f"Unknown tab: {tab}")
        self.set_filter("tab", tab)

    async def update_user(self, id: str, patch: UserUpdateModel) -> bool:
        return await self.run_action(
            lambda: self.api.update_user(id, patch),
            success=("User Updated", "User details have been saved"),
            failure_message="Failed to update user",
        )

    async def verify(self, id: str, verified: bool = True) -> bool:
        return await self.update_user(id, UserUpdateModel(is_verified=verified))

    async def delete_user(self, id: str) -> bool:
        if self.user is not None and self.user.id == id:
            self.toasts.error("Error", "You cannot delete your own account")
            return False
        return await self.run_action(
            lambda: self.api.delete_user(id),
            success=("User Deleted", "The account has been removed"),
            failure_message="Failed to delete user",
        )

    def export_csv(self, directory: Optional[str] = None) -> Path:
        return export_users(self.export_rows()).to_csv(directory or self.ctx.settings.EXPORT_DIR)

    def export_pdf(self, directory: Optional[str] = None) -> Path:
        return export_users(self.export_rows()).to_pdf(directory or self.ctx.settings.EXPORT_DIR)


class AdminAuditLogsPage(ListPage[AuditLog]):
    filter_names = ("status",)
    page_size_options = (20, 50, 100)

    def __init__(self, ctx: PageContext):
        super().__init__(ctx, page_size=20)

    async def mount(self) -> None:
        require_admin(self.user)
        await super().mount()

    async def fetch(self) -> List[AuditLog]:
        return await self.api.get_audit_logs()

    def matches_search(self, item: AuditLog, term: str) -> bool:
        email = item.user.email if item.user else None
        return contains(term, item.action, email, item.resource)

    def matches_filters(self, item: AuditLog) -> bool:
        return filter_matches(item.status, self.filters["status"])

    def order(self, items: List[AuditLog]) -> List[AuditLog]:
        return sorted(items, key=lambda log: log.timestamp, reverse=True)

    def export_csv(self, directory: Optional[str] = None) -> Path:
        return export_audit_logs(self.filtered).to_csv(directory or self.ctx.settings.EXPORT_DIR)

    def export_pdf(self, directory: Optional[str] = None) -> Path:
        return export_audit_logs(self.filtered).to_pdf(directory or self.ctx.settings.EXPORT_DIR)


CONTENT_TABS = ("hotlines", "faqs", "officials")


class AdminContentPage(Page):
    """Hotlines, FAQs and barangay officials, one tab at a time."""

    def __init__(self, ctx: PageContext):
        super().__init__(ctx)
        self.active_tab = "hotlines"
        self.hotlines: List[Hotline] = []
        self.faqs: List[FAQ] = []
        self.officials: List[Official] = []

    async def mount(self) -> None:
        require_admin(self.user)
        await super().mount()

    async def set_tab(self, tab: str) -> None:
        if tab not in CONTENT_TABS:
            raise ValueError(f"Unknown tab: {tab}")
        self.active_tab = tab
        await self.load()

    async def fetch(self):
        if self.active_tab == "hotlines":
            return await self.api.get_hotlines()
        if self.active_tab == "faqs":
            return await self.api.get_faqs()
        return await self.api.get_officials()

    def apply(self, data) -> None:
        setattr(self, self.active_tab, list(data or []))

    async def create(self, obj_in) -> bool:
        creators = {
            HotlineCreate: self.api.create_hotline,
            FAQCreate: self.api.create_faq,
            OfficialCreate: self.api.create_official,
        }
        return await self.run_action(
            lambda: creators[type(obj_in)](obj_in),
            success=("Success", "Item added successfully"),
            failure_message="Failed to add item",
        )

    async def delete(self, id: str) -> bool:
        deleters = {
            "hotlines": self.api.delete_hotline,
            "faqs": self.api.delete_faq,
            "officials": self.api.delete_official,
        }
        return await self.run_action(
            lambda: deleters[self.active_tab](id),
            success=("Deleted", "Item removed"),
            failure_message="Failed to delete item",
        )


class AdminNewsPage(ListPage[NewsItem]):
    def __init__(self, ctx: PageContext):
        super().__init__(ctx)
        self.validator = NewsValidator()
        self.form = NewsForm()
        self.form_errors: Dict[str, str] = {}

    async def mount(self) -> None:
        require_staff(self.user)
        await super().mount()

    async def fetch(self) -> List[NewsItem]:
        return await self.api.get_news()

    def matches_search(self, item: NewsItem, term: str) -> bool:
        return contains(term, item.title, item.summary)

    def order(self, items: List[NewsItem]) -> List[NewsItem]:
        return sorted(items, key=lambda n: n.published_at, reverse=True)

    def set_image(self, source, mime_type: Optional[str] = None) -> None:
        self.form.image_url = encode_data_url(source, mime_type)

    def blur(self, field_name: str) -> None:
        self.form_errors = self.validator.validate_field(field_name, self.form, self.form_errors)

    async def submit(self) -> bool:
        self.form_errors = self.validator.validate(self.form)
        if self.form_errors:
            self.toasts.error("Validation Error", "Please fix the errors in the form")
            return False
        news_in = NewsCreate(
            title=self.form.title,
            summary=self.form.summary,
            content=self.form.content,
            image_url=self.form.image_url,
            author=self.form.author,
        )
        created = await self.run_action(
            lambda: self.api.create_news(news_in),
            success=("Success", "News article published successfully"),
            failure_message="Failed to publish article",
        )
        if created:
            self.form = NewsForm()
            self.form_errors = {}
        return created

    async def delete(self, id: str) -> bool:
        return await self.run_action(
            lambda: self.api.delete_news(id),
            success=("Success", "Article deleted successfully"),
            failure_message="Failed to delete article",
        )


class AdminCalendarPage(Page):
    def __init__(self, ctx: PageContext):
        super().__init__(ctx)
        self.events: List[Event] = []

    async def mount(self) -> None:
        require_staff(self.user)
        await super().mount()

    async def fetch(self) -> List[Event]:
        return await self.api.get_events()

    def apply(self, data: List[Event]) -> None:
        self.events = sorted(data or [], key=lambda e: e.event_date)

    async def create(self, event_in: EventCreate) -> bool:
        return await self.run_action(
            lambda: self.api.create_event(event_in),
            success=("Success", "Event created successfully"),
            failure_message="Failed to create event",
        )

    async def delete(self, id: str) -> bool:
        return await self.run_action(
            lambda: self.api.delete_event(id),
            success=("Success", "Event deleted"),
            failure_message="Failed to delete event",
        )


class AdminConfigPage(Page):
    def __init__(self, ctx: PageContext):
        super().__init__(ctx)
        self.site_settings: Optional[SiteSettings] = None

    async def mount(self) -> None:
        require_admin(self.user)
        await super().mount()

    async def fetch(self) -> SiteSettings:
        return await self.api.get_site_settings()

    def apply(self, data: SiteSettings) -> None:
        self.site_settings = data

    async def save(self, **changes) -> bool:
        if self.site_settings is None:
            return False
        updated = self.site_settings.model_copy(update=changes)
        saved = await self.run_action(
            lambda: self.api.update_site_settings(updated),
            success=("Settings Saved", "Site settings have been updated"),
            failure_message="Failed to save settings",
            refresh=False,
        )
        if saved:
            self.site_settings = updated
        return saved
