import math
from collections import deque
from datetime import UTC, datetime, timedelta
from threading import Lock
from typing import Protocol

from src.rules.models import RateLimitRules, RateLimitWindow

DEFAULT_LOGIN_ATTEMPTS = 5
DEFAULT_STAR_REQUESTS = 20


class TimePort(Protocol):
    def now(self) -> datetime:
        ...


class SystemTimeAdapter:
    def now(self) -> datetime:
        return datetime.now(UTC)


class RateLimiter:
    """
    Sliding-window limiter keyed by action and client address.

    Login attempts and profile stars are counted in separate buckets, each
    with the window and ceiling from the rules file.
    """

    def __init__(
        self,
        rules: RateLimitRules,
        time_port: TimePort | None = None,
    ):
        self.rules = rules
        self._time = time_port if time_port is not None else SystemTimeAdapter()
        self._hits: dict[str, deque[datetime]] = {}
        self._lock = Lock()
        self._last_sweep = self._time.now()

    def _prune(self, key: str, window: int, now: datetime) -> deque[datetime]:
        hits = self._hits.get(key)
        if hits is None:
            return deque()
        cutoff = now - timedelta(seconds=window)
        while hits and hits[0] <= cutoff:
            hits.popleft()
        if not hits:
            del self._hits[key]
        return hits

    def _sweep(self, now: datetime) -> None:
        # Drop clients whose newest hit is older than every window
        longest = max(self.rules.login.window_seconds, self.rules.star.window_seconds)
        horizon = timedelta(seconds=longest)
        if now - self._last_sweep < horizon:
            return
        self._last_sweep = now
        stale = [key for key, hits in self._hits.items() if hits[-1] <= now - horizon]
        for key in stale:
            del self._hits[key]

    def allow_request(self, key: str, window: int, limit: int) -> bool:
        """Record a hit for `key` and report whether it fits in the window."""
        if limit <= 0:
            return False

        with self._lock:
            now = self._time.now()
            self._sweep(now)
            hits = self._prune(key, window, now)
            if len(hits) >= limit:
                return False
            hits.append(now)
            self._hits[key] = hits
            return True

    def retry_after(self, key: str, window: int) -> int:
        """Whole seconds until the oldest hit for `key` leaves the window."""
        with self._lock:
            now = self._time.now()
            hits = self._prune(key, window, now)
            if not hits:
                return 0
            remaining = (hits[0] + timedelta(seconds=window) - now).total_seconds()
            return max(math.ceil(remaining), 1)

    # --- Named buckets ---

    @staticmethod
    def _login_limit(cfg: RateLimitWindow) -> int:
        return cfg.max_attempts if cfg.max_attempts is not None else DEFAULT_LOGIN_ATTEMPTS

    @staticmethod
    def _star_limit(cfg: RateLimitWindow) -> int:
        return cfg.max_requests if cfg.max_requests is not None else DEFAULT_STAR_REQUESTS

    def check_login(self, client: str) -> bool:
        cfg = self.rules.login
        return self.allow_request(f"login:{client}", cfg.window_seconds, self._login_limit(cfg))

    def login_retry_after(self, client: str) -> int:
        return self.retry_after(f"login:{client}", self.rules.login.window_seconds)

    def check_star(self, client: str) -> bool:
        cfg = self.rules.star
        return self.allow_request(f"star:{client}", cfg.window_seconds, self._star_limit(cfg))

    def star_retry_after(self, client: str) -> int:
        return self.retry_after(f"star:{client}", self.rules.star.window_seconds)

    def reset(self) -> None:
        with self._lock:
            self._hits.clear()
