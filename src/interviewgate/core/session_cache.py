"""Bounded, expiring in-memory store keyed by interview session id."""

from __future__ import annotations

import threading
from collections import OrderedDict
from typing import Any, Callable, Generic, TypeVar

import pendulum
import structlog

T = TypeVar("T")


class SessionCache(Generic[T]):
    """Thread-safe TTL cache with a capacity bound.

    Entries expire ``ttl_seconds`` after their last write. When full, the
    oldest written entry is evicted.
    """

    DEFAULT_TTL_SECONDS = 3600.0
    DEFAULT_MAX_ENTRIES = 1024

    def __init__(
        self,
        *,
        name: str = "session",
        ttl_seconds: float | None = None,
        max_entries: int | None = None,
        now_provider: Callable[[], Any] | None = None,
    ) -> None:
        self._name = name
        self._ttl = float(self.DEFAULT_TTL_SECONDS if ttl_seconds is None else ttl_seconds)
        self._max_entries = int(self.DEFAULT_MAX_ENTRIES if max_entries is None else max_entries)
        if self._ttl <= 0:
            raise ValueError("ttl_seconds must be positive")
        if self._max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self._now_provider = now_provider or pendulum.now
        self._entries: OrderedDict[str, tuple[pendulum.DateTime, T]] = OrderedDict()
        self._lock = threading.Lock()
        self._logger = structlog.get_logger(__name__)

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    @property
    def max_entries(self) -> int:
        return self._max_entries

    def set(self, key: str, value: T) -> None:
        expires_at = self._now_provider() + pendulum.duration(seconds=self._ttl)
        with self._lock:
            self._entries.pop(key, None)
            self._entries[key] = (expires_at, value)
            while len(self._entries) > self._max_entries:
                evicted, _ = self._entries.popitem(last=False)
                self._logger.debug("cache.evicted", cache=self._name, key=evicted)

    def get(self, key: str) -> T | None:
        now = self._now_provider()
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            expires_at, value = entry
            if now >= expires_at:
                del self._entries[key]
                self._logger.debug("cache.expired", cache=self._name, key=key)
                return None
            return value

    def pop(self, key: str) -> T | None:
        value = self.get(key)
        with self._lock:
            self._entries.pop(key, None)
        return value

    def purge_expired(self) -> int:
        now = self._now_provider()
        with self._lock:
            stale = [key for key, (expires_at, _) in self._entries.items() if now >= expires_at]
            for key in stale:
                del self._entries[key]
        return len(stale)

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
