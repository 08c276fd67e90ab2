"""Simple in-memory rate limiter for protecting LLM endpoints.

Fixed window per client IP: the first request opens a window, later requests
count against it until it expires. State is per process and resets on
restart; with several workers the effective limit is roughly N per worker.
"""

import time
from collections.abc import Callable
from dataclasses import dataclass
from threading import Lock

from fastapi import Request

DEFAULT_SWEEP_INTERVAL = 300.0  # seconds between expired-entry sweeps


@dataclass
class RateLimitRecord:
    count: int
    reset_time: float


@dataclass
class RateLimitResult:
    allowed: bool
    remaining: int
    retry_after: int = 0


def client_ip(request: Request) -> str:
    """Extract client IP, respecting CDN and proxy headers."""
    cf_ip = request.headers.get("cf-connecting-ip")
    if cf_ip:
        return cf_ip.strip()
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    return request.client.host if request.client else "unknown"


class RateLimiter:
    """Fixed-window request counter keyed by client identifier.

    Once a client is over the cap, further requests in the same window are
    rejected without touching the stored count.

    The store is bounded: expired records are swept every ``sweep_interval``
    seconds, and a new identifier arriving at ``max_entries`` evicts the
    record whose window opened first. Records are kept in window-start
    order, so eviction never scans the store.
    """

    def __init__(
        self,
        max_requests: int = 10,
        window_seconds: float = 60,
        max_entries: int = 10_000,
        sweep_interval: float = DEFAULT_SWEEP_INTERVAL,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_requests = max_requests
        self.window = window_seconds
        self.max_entries = max_entries
        self.sweep_interval = sweep_interval
        self._clock = clock
        self._records: dict[str, RateLimitRecord] = {}
        self._lock = Lock()
        self._last_sweep = clock()

    def __len__(self) -> int:
        return len(self._records)

    def get_record(self, identifier: str) -> RateLimitRecord | None:
        return self._records.get(identifier)

    def check_rate_limit(
        self,
        identifier: str,
        window_seconds: float | None = None,
        max_requests: int | None = None,
    ) -> RateLimitResult:
        """Count one request for ``identifier`` and say whether it may proceed."""
        window = self.window if window_seconds is None else window_seconds
        limit = self.max_requests if max_requests is None else max_requests

        with self._lock:
            now = self._clock()
            self._sweep(now)

            record = self._records.get(identifier)
            if record is None or now > record.reset_time:
                if record is None:
                    self._make_room()
                else:
                    # reinsert so the dict stays ordered by window start
                    del self._records[identifier]
                self._records[identifier] = RateLimitRecord(count=1, reset_time=now + window)
                return RateLimitResult(allowed=True, remaining=limit - 1)

            if record.count >= limit:
                retry_after = max(int(record.reset_time - now) + 1, 1)
                return RateLimitResult(allowed=False, remaining=0, retry_after=retry_after)

            record.count += 1
            return RateLimitResult(allowed=True, remaining=limit - record.count)

    def check(self, request: Request) -> RateLimitResult:
        """Rate-limit an incoming request by its client IP."""
        return self.check_rate_limit(client_ip(request))

    def reset(self) -> None:
        with self._lock:
            self._records.clear()
            self._last_sweep = self._clock()

    # Both helpers below expect the caller to hold the lock.

    def _sweep(self, now: float) -> None:
        if now - self._last_sweep < self.sweep_interval:
            return
        self._last_sweep = now
        expired = [k for k, r in self._records.items() if now > r.reset_time]
        for key in expired:
            del self._records[key]

    def _make_room(self) -> None:
        while self._records and len(self._records) >= self.max_entries:
            del self._records[next(iter(self._records))]
