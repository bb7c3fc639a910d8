# portal/pages/base.py
"""
Shared page-controller machinery.

A page fetches on `mount`, flags `error` when the fetch fails, re-fetches on
`retry`, and tears everything down on `unmount`. Results that come back after
unmount are dropped. List pages add debounced search, named filters, bulk
selection and pagination over the filtered list.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Generic, List, Optional, Sequence, TypeVar

from portal.api.service import ApiService
from portal.core.auth import AuthSession
from portal.core.config import Settings, settings as default_settings
from portal.errors import PortalException, describe_error
from portal.schemas.auth import User
from portal.services.toast_service import ToastService
from portal.utils.debounce import Debouncer
from portal.utils.pagination import Paginator
from portal.utils.selection import BulkSelection

logger = logging.getLogger(__name__)

T = TypeVar("T")

ALL = "all"


@dataclass
class PageContext:
    """Collaborators every page needs; built once by the portal app."""

    api: ApiService
    toasts: ToastService
    session: AuthSession = field(default_factory=AuthSession)
    settings: Settings = field(default_factory=lambda: default_settings)

    @property
    def user(self) -> Optional[User]:
        return self.session.user


class Page:
    def __init__(self, ctx: PageContext):
        self.ctx = ctx
        self.loading = False
        self.error = False
        self.mounted = False

    @property
    def api(self) -> ApiService:
        return self.ctx.api

    @property
    def toasts(self) -> ToastService:
        return self.ctx.toasts

    @property
    def user(self) -> Optional[User]:
        return self.ctx.user

    async def fetch(self) -> Any:
        """Load the page's data; subclasses override."""
        return None

    def apply(self, data: Any) -> None:
        """Install fetched data; subclasses override."""

    async def mount(self) -> None:
        self.mounted = True
        await self.load()

    async def unmount(self) -> None:
        self.mounted = False

    async def retry(self) -> None:
        await self.load()

    async def load(self) -> bool:
        self.loading = True
        self.error = False
        try:
            data = await self.fetch()
        except PortalException as e:
            logger.error(f"{type(self).__name__} failed to load: {e.message}")
            if self.mounted:
                self.error = True
            return False
        finally:
            self.loading = False
        if not self.mounted:
            logger.debug(f"{type(self).__name__} unmounted; discarding fetched data")
            return False
        self.apply(data)
        return True

    async def run_action(
        self,
        action: Callable[[], Awaitable[Any]],
        success: Optional[tuple] = None,
        failure_title: str = "Error",
        failure_message: str = "Something went wrong",
        refresh: bool = True,
    ) -> bool:
        """Run a mutation, toast its outcome, and re-fetch on success."""
        try:
            await action()
        except PortalException as e:
            logger.error(f"{type(self).__name__} action failed: {e.message}")
            self.toasts.error(failure_title, describe_error(e, failure_message))
            return False
        if success:
            self.toasts.success(*success)
        if refresh and self.mounted:
            await self.load()
        return True


class ListPage(Page, Generic[T]):
    """A page over a fetched list with search, filters, selection and paging."""

    filter_names: Sequence[str] = ()
    page_size_options: Optional[Sequence[int]] = None

    def __init__(self, ctx: PageContext, page_size: Optional[int] = None):
        super().__init__(ctx)
        self.items: List[T] = []
        self.filtered: List[T] = []
        self.filters: Dict[str, str] = {name: ALL for name in self.filter_names}
        self.search_term = ""
        self.search = Debouncer(self._on_search, ctx.settings.SEARCH_DEBOUNCE_MS, initial="")
        self.selection: BulkSelection[T] = BulkSelection()
        self.paginator: Paginator[T] = Paginator(page_size=page_size or ctx.settings.DEFAULT_PAGE_SIZE)

    def apply(self, data: Sequence[T]) -> None:
        self.items = list(data or [])
        self.refilter()

    async def unmount(self) -> None:
        self.search.cancel()
        await super().unmount()

    # Search and filters
    def set_search(self, term: str) -> None:
        """Called on every keystroke; the list updates once typing settles."""
        self.search.push(term)

    def _on_search(self, term: str) -> None:
        self.search_term = term
        self.refilter()

    def set_filter(self, name: str, value: str) -> None:
        if name not in self.filters:
            raise KeyError(name)
        self.filters[name] = value
        self.refilter()

    def matches_search(self, item: T, term: str) -> bool:
        return True

    def matches_filters(self, item: T) -> bool:
        return True

    def order(self, items: List[T]) -> List[T]:
        return items

    def visible(self, items: List[T]) -> List[T]:
        """Scope the fetched list before filtering (e.g. residents see only their own)."""
        return items

    def refilter(self) -> None:
        term = self.search_term.strip().lower()
        result = [
            item
            for item in self.visible(self.items)
            if (not term or self.matches_search(item, term)) and self.matches_filters(item)
        ]
        result = self.order(result)
        self.filtered = result
        self.selection.set_items(result)
        self.paginator.set_items(result)

    def set_page_size(self, size: int) -> None:
        options = self.page_size_options or self.ctx.settings.PAGE_SIZE_OPTIONS
        if size not in options:
            raise ValueError(f"Page size must be one of {list(options)}")
        self.paginator.set_page_size(size)

    @property
    def page_items(self) -> List[T]:
        return self.paginator.items

    def export_rows(self) -> List[T]:
        """The selected items, or every filtered item when nothing is selected."""
        return self.selection.selected_items() or list(self.filtered)


def filter_matches(value: Any, wanted: str) -> bool:
    if wanted == ALL:
        return True
    return getattr(value, "value", value) == wanted


def contains(term: str, *fields: Optional[str]) -> bool:
    return any(term in (value or "").lower() for value in fields)
