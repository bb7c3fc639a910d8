# portal/services/toast_service.py
import asyncio
import enum
import logging
import time
import uuid
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from portal.core.config import settings

logger = logging.getLogger(__name__)


class ToastType(str, enum.Enum):
    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"
    WARNING = "warning"


@dataclass
class Toast:
    id: str
    title: str
    message: str
    type: ToastType = ToastType.INFO
    duration: int = 4000
    created_at: float = field(default_factory=time.time)


def generate_toast_id() -> str:
    return f"toast-{int(time.time() * 1000)}-{uuid.uuid4().hex[:9]}"


class ToastService:
    """Bounded queue of transient messages that dismiss themselves.

    Each toast is removed exactly once: manual dismissal cancels its timer
    and the timer ignores toasts that are already gone.
    """

    def __init__(
        self,
        max_toasts: int = settings.TOAST_MAX_VISIBLE,
        default_duration: int = settings.TOAST_DEFAULT_DURATION_MS,
        placement: str = settings.TOAST_PLACEMENT,
    ):
        self.max_toasts = max_toasts
        self.default_duration = default_duration
        self.placement = placement
        self._toasts: List[Toast] = []
        self._timers: Dict[str, asyncio.TimerHandle] = {}
        self._listeners: List[Callable[[List[Toast]], None]] = []

    @property
    def toasts(self) -> List[Toast]:
        """Toasts in render order: newest first at the top, insertion order at the bottom."""
        if self.placement == "top":
            return list(reversed(self._toasts))
        return list(self._toasts)

    def __len__(self) -> int:
        return len(self._toasts)

    def subscribe(self, listener: Callable[[List[Toast]], None]) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        snapshot = self.toasts
        for listener in list(self._listeners):
            listener(snapshot)

    def show_toast(
        self,
        title: str,
        message: str,
        type: ToastType = ToastType.INFO,
        duration: Optional[int] = None,
    ) -> str:
        toast = Toast(
            id=generate_toast_id(),
            title=title,
            message=message,
            type=ToastType(type),
            duration=self.default_duration if duration is None else duration,
        )
        self._toasts.append(toast)

        # Limit the number of toasts on screen; the oldest go first.
        while len(self._toasts) > self.max_toasts:
            evicted = self._toasts.pop(0)
            self._cancel_timer(evicted.id)

        if toast.duration > 0:
            self._schedule_removal(toast)

        logger.debug(f"Toast {toast.id} shown: [{toast.type.value}] {title}")
        self._notify()
        return toast.id

    def success(self, title: str, message: str, duration: Optional[int] = None) -> str:
        return self.show_toast(title, message, ToastType.SUCCESS, duration)

    def error(self, title: str, message: str, duration: Optional[int] = None) -> str:
        return self.show_toast(title, message, ToastType.ERROR, duration)

    def info(self, title: str, message: str, duration: Optional[int] = None) -> str:
        return self.show_toast(title, message, ToastType.INFO, duration)

    def remove_toast(self, id: str) -> bool:
        """Dismiss a toast; returns False when it was already gone."""
        self._cancel_timer(id)
        for index, toast in enumerate(self._toasts):
            if toast.id == id:
                del self._toasts[index]
                self._notify()
                return True
        return False

    def clear(self) -> None:
        for id in list(self._timers):
            self._cancel_timer(id)
        self._toasts.clear()
        self._notify()

    def _schedule_removal(self, toast: Toast) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning(f"No running event loop; toast {toast.id} will stay until dismissed")
            return
        self._timers[toast.id] = loop.call_later(toast.duration / 1000, self._expire, toast.id)

    def _expire(self, id: str) -> None:
        self._timers.pop(id, None)
        self.remove_toast(id)

    def _cancel_timer(self, id: str) -> None:
        handle = self._timers.pop(id, None)
        if handle is not None:
            handle.cancel()
