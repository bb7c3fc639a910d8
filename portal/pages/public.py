# portal/pages/public.py
"""
Pages reachable without signing in: the landing view, the public news feed,
the emergency hotline directory and the help center.
"""
import asyncio
import logging
from typing import List, Optional, Set

from portal.errors import ApiError
from portal.pages.base import ListPage, Page, PageContext, contains, filter_matches
from portal.schemas.content import FAQ, Announcement, Event, Hotline, NewsItem, Official, SiteSettings

logger = logging.getLogger(__name__)

LANDING_LIMIT = 3

DEFAULT_CONTACT = {
    "contact_phone": "(02) 8123-4567",
    "contact_email": "help@ibarangay.com",
    "address": "123 Rizal St, Quezon City",
}


class LandingPage(Page):
    def __init__(self, ctx: PageContext):
        super().__init__(ctx)
        self.site_settings: Optional[SiteSettings] = None
        self.announcements: List[Announcement] = []
        self.news: List[NewsItem] = []
        self.officials: List[Official] = []
        self.events: List[Event] = []
        self.requires_sign_in = False

    @property
    def barangay_name(self) -> str:
        if self.site_settings and self.site_settings.barangay_name:
            return self.site_settings.barangay_name
        return self.ctx.settings.FALLBACK_BARANGAY_NAME

    async def fetch(self):
        # Each section degrades on its own; one failing endpoint never blanks the page.
        return await asyncio.gather(
            self.api.get_public_site_settings(),
            self.api.get_public_announcements(),
            self.api.get_public_news(),
            self.api.get_public_officials(),
            self.api.get_public_events(),
            return_exceptions=True,
        )

    def apply(self, results) -> None:
        failures = [r for r in results if isinstance(r, BaseException)]
        if failures:
            logger.warning(f"Some landing fetches failed: {[str(f) for f in failures]}")
        self.requires_sign_in = any(isinstance(f, ApiError) and f.status_code == 401 for f in failures)
        if self.requires_sign_in:
            logger.info("A landing endpoint is returning 401: it may require authentication.")

        settings_res, announcements_res, news_res, officials_res, events_res = [
            None if isinstance(r, BaseException) else r for r in results
        ]
        self.site_settings = settings_res
        self.announcements = [a for a in announcements_res or [] if a.is_published][:LANDING_LIMIT]
        self.news = list(news_res or [])[:LANDING_LIMIT]
        self.officials = list(officials_res or [])
        self.events = list(events_res or [])[:LANDING_LIMIT]


class NewsPage(ListPage[NewsItem]):
    async def fetch(self) -> List[NewsItem]:
        return await self.api.get_public_news()

    def matches_search(self, item: NewsItem, term: str) -> bool:
        return contains(term, item.title, item.summary, item.content)

    def order(self, items: List[NewsItem]) -> List[NewsItem]:
        return sorted(items, key=lambda n: n.published_at, reverse=True)


class HotlinesPage(ListPage[Hotline]):
    filter_names = ("category",)

    async def fetch(self) -> List[Hotline]:
        return await self.api.get_hotlines()

    def matches_search(self, item: Hotline, term: str) -> bool:
        return contains(term, item.name, item.number)

    def matches_filters(self, item: Hotline) -> bool:
        return filter_matches(item.category, self.filters["category"])


class HelpPage(Page):
    """FAQs next to the barangay's support contacts."""

    def __init__(self, ctx: PageContext):
        super().__init__(ctx)
        self.faqs: List[FAQ] = []
        self.site_settings: Optional[SiteSettings] = None
        self.expanded: Set[str] = set()

    async def fetch(self):
        return await asyncio.gather(
            self.api.get_faqs(),
            self.api.get_public_site_settings(),
            return_exceptions=True,
        )

    def apply(self, results) -> None:
        faqs_res, settings_res = results
        if isinstance(faqs_res, BaseException):
            logger.warning(f"Could not load FAQs: {faqs_res}")
            faqs_res = []
        if isinstance(settings_res, BaseException):
            logger.warning(f"Could not load site settings: {settings_res}")
            settings_res = None
        self.faqs = list(faqs_res)
        self.site_settings = settings_res

    def contact(self, name: str) -> str:
        value = getattr(self.site_settings, name, "") if self.site_settings else ""
        return value or DEFAULT_CONTACT[name]

    def toggle_faq(self, id: str) -> None:
        if id in self.expanded:
            self.expanded.discard(id)
        else:
            self.expanded.add(id)
