import math
from typing import Generic, List, Sequence, TypeVar, Union

T = TypeVar("T")

ELLIPSIS = "ellipsis"


def total_pages_for(total_items: int, page_size: int) -> int:
    return max(1, math.ceil(total_items / page_size))


def paginate(items: Sequence[T], page_size: int, page: int) -> List[T]:
    """The slice of `items` shown on 1-based `page`; out-of-range pages are clamped."""
    if page_size < 1:
        raise ValueError("page_size must be at least 1")
    page = max(1, min(page, total_pages_for(len(items), page_size)))
    start = (page - 1) * page_size
    return list(items[start:start + page_size])


class Paginator(Generic[T]):
    """Client-side paging over an in-memory list."""

    def __init__(self, items: Sequence[T] = (), page_size: int = 10, initial_page: int = 1):
        if page_size < 1:
            raise ValueError("page_size must be at least 1")
        self._items: List[T] = list(items)
        self._page_size = page_size
        self._current_page = 1
        self.set_page(initial_page)

    @property
    def total_items(self) -> int:
        return len(self._items)

    @property
    def page_size(self) -> int:
        return self._page_size

    @property
    def current_page(self) -> int:
        return self._current_page

    @property
    def total_pages(self) -> int:
        return total_pages_for(self.total_items, self._page_size)

    @property
    def items(self) -> List[T]:
        return paginate(self._items, self._page_size, self._current_page)

    @property
    def start_item(self) -> int:
        if self.total_items == 0:
            return 0
        return (self._current_page - 1) * self._page_size + 1

    @property
    def end_item(self) -> int:
        return min(self._current_page * self._page_size, self.total_items)

    @property
    def has_next_page(self) -> bool:
        return self._current_page < self.total_pages

    @property
    def has_prev_page(self) -> bool:
        return self._current_page > 1

    def set_items(self, items: Sequence[T]) -> None:
        self._items = list(items)
        # A shrunken list starts over rather than showing an empty page.
        if self._current_page > self.total_pages:
            self._current_page = 1

    def set_page(self, page: int) -> None:
        self._current_page = max(1, min(page, self.total_pages))

    def next_page(self) -> None:
        self.set_page(self._current_page + 1)

    def prev_page(self) -> None:
        self.set_page(self._current_page - 1)

    def set_page_size(self, size: int) -> None:
        if size < 1:
            raise ValueError("page_size must be at least 1")
        self._page_size = size
        self._current_page = 1

    def page_numbers(self, max_visible: int = 5) -> List[Union[int, str]]:
        """Page buttons to render: first, last, a window around the current page, ellipses between."""
        if max_visible < 3:
            raise ValueError("max_visible must be at least 3")
        total = self.total_pages
        current = self._current_page
        if total <= max_visible:
            return list(range(1, total + 1))

        # First and last are always shown; the window fills the remaining slots.
        width = max_visible - 2
        start = current - (width - 1) // 2
        end = start + width - 1
        if start < 2:
            start, end = 2, width + 1
        if end > total - 1:
            start, end = total - width, total - 1

        pages: List[Union[int, str]] = [1]

        if start > 2:
            pages.append(ELLIPSIS)
        pages.extend(range(start, end + 1))
        if end < total - 1:
            pages.append(ELLIPSIS)
        pages.append(total)
        return pages
