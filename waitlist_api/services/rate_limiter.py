"""Fixed-window rate limiting for the join endpoint.

Each client key gets a window that opens on its first request and lasts
``window_seconds``. Within a window at most ``max_requests`` requests are
admitted; the next one after the window closes opens a new window.

The counters live in a ``RateLimitStore``. ``InMemoryRateLimitStore`` keeps
them in a dict guarded by a lock so that check-and-increment is one atomic
step per key, and purges expired windows lazily so the key set stays bounded
by the number of clients seen within one window.
"""

import logging
import math
import threading
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Optional

logger = logging.getLogger(__name__)


@dataclass
class RateLimitEntry:
    """Request count and window end (epoch seconds) for one client key."""

    count: int
    reset_time: float


@dataclass(frozen=True)
class RateLimitDecision:
    """Outcome of ``FixedWindowRateLimiter.admit``."""

    allowed: bool
    retry_after: Optional[int] = None


class RateLimitStore(ABC):
    """Key-value store of rate limit windows with expiry semantics."""

    @abstractmethod
    def hit(self, key: str, now: float, window_seconds: float) -> RateLimitEntry:
        """
        Record one request for ``key`` and return the updated window.

        Must be atomic per key: concurrent hits for the same key each see a
        distinct count.

        Args:
            key: Client key (IP address)
            now: Current time in epoch seconds
            window_seconds: Length of a new window

        Returns:
            A copy of the window after this request was counted
        """

    @abstractmethod
    def evict_expired(self, now: float) -> int:
        """Drop windows whose reset time has passed. Returns how many were dropped."""

    @abstractmethod
    def reset(self) -> None:
        """Forget every window."""


class InMemoryRateLimitStore(RateLimitStore):
    """Process-local store. Windows are lost on restart."""

    def __init__(self):
        self._entries: dict[str, RateLimitEntry] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def hit(self, key: str, now: float, window_seconds: float) -> RateLimitEntry:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None or now > entry.reset_time:
                entry = RateLimitEntry(count=1, reset_time=now + window_seconds)
                self._entries[key] = entry
            else:
                entry.count += 1
            return RateLimitEntry(count=entry.count, reset_time=entry.reset_time)

    def evict_expired(self, now: float) -> int:
        with self._lock:
            expired = [k for k, e in self._entries.items() if now > e.reset_time]
            for key in expired:
                del self._entries[key]
            return len(expired)

    def reset(self) -> None:
        with self._lock:
            self._entries.clear()


class FixedWindowRateLimiter:
    """Admission control: ``max_requests`` per ``window_seconds`` per key."""

    def __init__(
        self,
        store: RateLimitStore,
        max_requests: int = 5,
        window_seconds: float = 15 * 60,
        cleanup_interval_seconds: float = 60,
        clock: Callable[[], float] = time.time,
    ):
        self.store = store
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.cleanup_interval_seconds = cleanup_interval_seconds
        self.clock = clock
        self._next_cleanup = clock() + cleanup_interval_seconds
        self._cleanup_lock = threading.Lock()

    def admit(self, client_key: str) -> RateLimitDecision:
        """
        Count a request from ``client_key`` and decide whether to let it through.

        Args:
            client_key: Usually the client IP address

        Returns:
            RateLimitDecision; when denied, ``retry_after`` is the number of
            whole seconds until the current window closes (at least 1).
        """
        now = self.clock()
        self._maybe_cleanup(now)

        entry = self.store.hit(client_key, now, self.window_seconds)
        if entry.count <= self.max_requests:
            return RateLimitDecision(allowed=True)

        retry_after = max(1, math.ceil(entry.reset_time - now))
        logger.warning(
            "Rate limit exceeded",
            extra={
                "event": "rate_limit.denied",
                "client_ip": client_key,
                "retry_after": retry_after,
            },
        )
        return RateLimitDecision(allowed=False, retry_after=retry_after)

    def _maybe_cleanup(self, now: float) -> None:
        # Only one caller sweeps per interval
        if now < self._next_cleanup or not self._cleanup_lock.acquire(blocking=False):
            return
        try:
            self._next_cleanup = now + self.cleanup_interval_seconds
            evicted = self.store.evict_expired(now)
            if evicted:
                logger.debug(f"Evicted {evicted} expired rate limit windows")
        finally:
            self._cleanup_lock.release()
