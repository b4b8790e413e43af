"""Bounded id -> key cache backing reference resolution.

One instance is shared by every batch of a sync session. Entries are treated
as facts: a resource's key is assumed not to change while it is cached, so a
renamed key can be served stale until the entry is evicted or expires.
"""

from __future__ import annotations

import threading
import time
from collections import OrderedDict
from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

log = getLogger(__name__)

DEFAULT_MAX_SIZE = 100_000


class ReferenceIdToKeyCache:
    """Thread-safe LRU mapping of store ids to resource keys."""

    def __init__(
        self,
        *,
        max_size: int = DEFAULT_MAX_SIZE,
        ttl_seconds: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_size <= 0:
            raise ValueError(f"Cache size must be positive, got {max_size}")
        self.max_size = max_size
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: OrderedDict[str, tuple[str, float | None]] = OrderedDict()
        self._lock = threading.Lock()

    def get(self, id_: str) -> str | None:
        with self._lock:
            entry = self._entries.get(id_)
            if entry is None:
                return None
            key, expires_at = entry
            if expires_at is not None and expires_at <= self._clock():
                del self._entries[id_]
                return None
            self._entries.move_to_end(id_)
            return key

    def put(self, id_: str, key: str) -> None:
        with self._lock:
            self._store(id_, key)

    def put_all(self, mapping: Mapping[str, str]) -> None:
        with self._lock:
            for id_, key in mapping.items():
                self._store(id_, key)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __contains__(self, id_: object) -> bool:
        return isinstance(id_, str) and self.get(id_) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _store(self, id_: str, key: str) -> None:
        expires_at = self._clock() + self.ttl_seconds if self.ttl_seconds is not None else None
        self._entries[id_] = (key, expires_at)
        self._entries.move_to_end(id_)
        while len(self._entries) > self.max_size:
            evicted, _ = self._entries.popitem(last=False)
            log.debug("Evicted reference %s from id-to-key cache", evicted)
