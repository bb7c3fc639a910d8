import asyncio
import logging
from typing import Callable, Generic, Optional, TypeVar

T = TypeVar("T")

logger = logging.getLogger(__name__)

_MISSING = object()


class Debouncer(Generic[T]):
    """Deliver a value to `callback` only after it has been stable for `delay_ms`.

    Each `push` cancels the pending timer and starts a new one, so only the
    latest value of a burst survives. Must be used from a running event loop.
    """

    def __init__(self, callback: Callable[[T], None], delay_ms: int = 300, initial: Optional[T] = None):
        self.callback = callback
        self.delay_ms = delay_ms
        self.value: Optional[T] = initial
        self._pending = _MISSING
        self._handle: Optional[asyncio.TimerHandle] = None

    @property
    def pending(self) -> bool:
        return self._pending is not _MISSING

    def push(self, value: T) -> None:
        self._cancel_timer()
        self._pending = value
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self.delay_ms / 1000, self._commit)

    def flush(self) -> None:
        """Deliver the pending value now instead of waiting out the delay."""
        self._cancel_timer()
        if self.pending:
            self._commit()

    def cancel(self) -> None:
        self._cancel_timer()
        self._pending = _MISSING

    def _cancel_timer(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _commit(self) -> None:
        self._handle = None
        value, self._pending = self._pending, _MISSING
        if value is _MISSING:
            return
        self.value = value
        logger.debug(f"Debounced value committed: {value!r}")
        self.callback(value)
