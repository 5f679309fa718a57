"""
Application-wide toast channel.

The bus is created when the application starts (see ``main.lifespan``) and
closed at shutdown. Producers ``publish`` short-lived messages, the API
exposes the currently visible ones, and every toast disappears on its own
once its duration has elapsed or when a client dismisses it.
"""
import logging
import threading
import time
import uuid
from dataclasses import dataclass
from typing import Callable, List, Optional

from config import TOAST_DURATION_SECONDS

logger = logging.getLogger("toast_bus")

PUBLISHED = "published"
DISMISSED = "dismissed"
EXPIRED = "expired"


@dataclass
class Toast:
    id: str
    message: str
    type: str
    expires_at: float


ToastListener = Callable[[str, Toast], None]


class ToastBus:
    def __init__(self, default_duration: float = TOAST_DURATION_SECONDS, clock: Callable[[], float] = time.monotonic):
        self.default_duration = default_duration
        self._clock = clock
        self._toasts: List[Toast] = []
        self._listeners: List[ToastListener] = []
        # The scheduled stock sweep publishes from a background thread
        self._lock = threading.RLock()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def publish(self, message: str, type: str = "info", duration: Optional[float] = None) -> Optional[Toast]:
        """
        Show a toast unless an identical message is already visible.

        Returns the new toast, or None when it was suppressed as a duplicate.
        """
        events = []
        with self._lock:
            if self._closed:
                raise RuntimeError("Toast bus is closed")
            events.extend(self._prune())
            if any(t.message == message for t in self._toasts):
                logger.debug(f"Suppressed duplicate toast: {message}")
                toast = None
            else:
                ttl = self.default_duration if duration is None else duration
                toast = Toast(id=uuid.uuid4().hex, message=message, type=type, expires_at=self._clock() + ttl)
                self._toasts.append(toast)
                events.append((PUBLISHED, toast))
        self._notify(events)
        return toast

    def dismiss(self, toast_id: str) -> bool:
        events = []
        with self._lock:
            for toast in self._toasts:
                if toast.id == toast_id:
                    self._toasts.remove(toast)
                    events.append((DISMISSED, toast))
                    break
        self._notify(events)
        return bool(events)

    def active(self) -> List[Toast]:
        with self._lock:
            events = self._prune()
            visible = list(self._toasts)
        self._notify(events)
        return visible

    def subscribe(self, listener: ToastListener) -> Callable[[], None]:
        """Register a listener; the returned callable unsubscribes it."""
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe():
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def close(self):
        with self._lock:
            self._toasts.clear()
            self._listeners.clear()
            self._closed = True
        logger.info("Toast bus closed")

    def _prune(self):
        now = self._clock()
        expired = [t for t in self._toasts if t.expires_at <= now]
        for toast in expired:
            self._toasts.remove(toast)
        return [(EXPIRED, t) for t in expired]

    def _notify(self, events):
        if not events:
            return
        with self._lock:
            listeners = list(self._listeners)
        for event, toast in events:
            for listener in listeners:
                try:
                    listener(event, toast)
                except Exception:
                    logger.exception(f"Toast listener failed on '{event}' for toast {toast.id}")
