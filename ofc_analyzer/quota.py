import threading
from datetime import date
from typing import Any, Callable, Dict

from .errors import QuotaExceededError


class RequestQuota:
    """In-memory daily counter of provider requests, reset when the date changes."""

    def __init__(self, limit: int, today_fn: Callable[[], date] = date.today) -> None:
        self.limit = limit
        self._today = today_fn
        self._lock = threading.Lock()
        self._day = today_fn()
        self._used = 0

    def _roll_over_locked(self) -> None:
        today = self._today()
        if today != self._day:
            self._day = today
            self._used = 0

    def snapshot(self) -> Dict[str, Any]:
        with self._lock:
            self._roll_over_locked()
            return {
                "used": self._used,
                "limit": self.limit,
                "remaining": max(0, self.limit - self._used),
                "day": self._day.isoformat(),
            }

    def consume(self, count: int) -> Dict[str, Any]:
        with self._lock:
            self._roll_over_locked()
            remaining = max(0, self.limit - self._used)
            if count > remaining:
                raise QuotaExceededError(count, remaining)
            self._used += count
        return self.snapshot()
