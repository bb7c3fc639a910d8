from operator import attrgetter
from typing import Callable, FrozenSet, Generic, Hashable, List, Sequence, TypeVar

T = TypeVar("T")


class BulkSelection(Generic[T]):
    """Checkbox selection over the currently visible items.

    The selected ids are always a subset of the visible ids: replacing the
    list through `set_items` drops selections that are no longer visible.
    """

    def __init__(self, items: Sequence[T] = (), key: Callable[[T], Hashable] = attrgetter("id")):
        self._key = key
        self._items: List[T] = list(items)
        self._selected: set = set()

    @property
    def items(self) -> List[T]:
        return list(self._items)

    @property
    def visible_ids(self) -> List[Hashable]:
        return [self._key(item) for item in self._items]

    @property
    def selected_ids(self) -> FrozenSet[Hashable]:
        return frozenset(self._selected)

    @property
    def selected_count(self) -> int:
        return len(self._selected)

    @property
    def is_all_selected(self) -> bool:
        return len(self._items) > 0 and len(self._selected) == len(self._items)

    @property
    def is_some_selected(self) -> bool:
        return 0 < len(self._selected) < len(self._items)

    def set_items(self, items: Sequence[T]) -> None:
        self._items = list(items)
        self._selected &= set(self.visible_ids)

    def is_selected(self, id: Hashable) -> bool:
        return id in self._selected

    def toggle_selection(self, id: Hashable) -> bool:
        """Flip membership of `id`; returns whether it is now selected."""
        if id in self._selected:
            self._selected.discard(id)
            return False
        if id not in set(self.visible_ids):
            raise KeyError(id)
        self._selected.add(id)
        return True

    def toggle_all(self) -> None:
        if self.is_all_selected:
            self.clear_selection()
        else:
            self.select_all()

    def select_all(self) -> None:
        self._selected = set(self.visible_ids)

    def clear_selection(self) -> None:
        self._selected = set()

    def selected_items(self) -> List[T]:
        return [item for item in self._items if self._key(item) in self._selected]
