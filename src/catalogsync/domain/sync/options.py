"""Options controlling one sync run.

=====================  ===========  ==============================================
option                 default      effect
=====================  ===========  ==============================================
batch_size             50           drafts resolved and matched per round trip
cache_size             100_000      max entries of the id -> key cache
cache_ttl_seconds      None         expire cache entries after this many seconds
lookup_page_size       500          max ids per batched reference lookup
parallelism            5            create/update calls in flight per batch
absent_value_policy    SKIP         SKIP or WARN when a draft omits a set field
error_callback         None         ``(error, draft, existing, actions)`` on failure
warning_callback       None         ``(warning, draft, existing)`` on warnings
before_create          None         ``draft -> draft | None``; ``None`` skips create
before_update          None         ``(actions, draft, existing) -> actions``;
                                    an empty list skips the update
=====================  ===========  ==============================================

Build options either with keyword arguments or with ``SyncOptionsBuilder``::

    options = (
        SyncOptionsBuilder()
        .batch_size(20)
        .error_callback(lambda error, draft, existing, actions: ...)
        .build()
    )
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from catalogsync.domain.cache import DEFAULT_MAX_SIZE
from catalogsync.domain.diff import AbsentValuePolicy
from catalogsync.domain.resolution import DEFAULT_PAGE_SIZE

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from catalogsync.config import SyncConfig
    from catalogsync.domain.errors import SyncError, SyncWarning
    from catalogsync.domain.model import Draft, Entity, UpdateAction

    type ErrorCallback = Callable[
        [SyncError, Draft | None, Entity | None, Sequence[UpdateAction]], None
    ]
    type WarningCallback = Callable[[SyncWarning, Draft | None, Entity | None], None]
    type BeforeCreateCallback = Callable[[Draft], Draft | None]
    type BeforeUpdateCallback = Callable[
        [Sequence[UpdateAction], Draft, Entity], Sequence[UpdateAction]
    ]

DEFAULT_BATCH_SIZE = 50
DEFAULT_PARALLELISM = 5


@dataclass(frozen=True, slots=True)
class SyncOptions:
    batch_size: int = DEFAULT_BATCH_SIZE
    cache_size: int = DEFAULT_MAX_SIZE
    cache_ttl_seconds: float | None = None
    lookup_page_size: int = DEFAULT_PAGE_SIZE
    parallelism: int = DEFAULT_PARALLELISM
    absent_value_policy: AbsentValuePolicy = AbsentValuePolicy.SKIP
    error_callback: ErrorCallback | None = None
    warning_callback: WarningCallback | None = None
    before_create: BeforeCreateCallback | None = None
    before_update: BeforeUpdateCallback | None = None

    def __post_init__(self) -> None:
        for name in ("batch_size", "cache_size", "lookup_page_size", "parallelism"):
            value = getattr(self, name)
            if value <= 0:
                raise ValueError(f"{name} must be positive, got {value}")
        if self.cache_ttl_seconds is not None and self.cache_ttl_seconds <= 0:
            raise ValueError(f"cache_ttl_seconds must be positive, got {self.cache_ttl_seconds}")

    @classmethod
    def from_config(cls, config: SyncConfig) -> SyncOptions:
        return cls(
            batch_size=config.batch_size,
            cache_size=config.cache_size,
            cache_ttl_seconds=config.cache_ttl_seconds,
            lookup_page_size=config.lookup_page_size,
            parallelism=config.parallelism,
        )


class SyncOptionsBuilder:
    """Fluent builder for ``SyncOptions``; validation happens in ``build``."""

    def __init__(self, base: SyncOptions | None = None) -> None:
        self._values: dict[str, object] = {}
        self._base = base or SyncOptions()

    def batch_size(self, value: int) -> SyncOptionsBuilder:
        return self._set("batch_size", value)

    def cache_size(self, value: int) -> SyncOptionsBuilder:
        return self._set("cache_size", value)

    def cache_ttl_seconds(self, value: float | None) -> SyncOptionsBuilder:
        return self._set("cache_ttl_seconds", value)

    def lookup_page_size(self, value: int) -> SyncOptionsBuilder:
        return self._set("lookup_page_size", value)

    def parallelism(self, value: int) -> SyncOptionsBuilder:
        return self._set("parallelism", value)

    def absent_value_policy(self, value: AbsentValuePolicy) -> SyncOptionsBuilder:
        return self._set("absent_value_policy", value)

    def error_callback(self, callback: ErrorCallback) -> SyncOptionsBuilder:
        return self._set("error_callback", callback)

    def warning_callback(self, callback: WarningCallback) -> SyncOptionsBuilder:
        return self._set("warning_callback", callback)

    def before_create(self, callback: BeforeCreateCallback) -> SyncOptionsBuilder:
        return self._set("before_create", callback)

    def before_update(self, callback: BeforeUpdateCallback) -> SyncOptionsBuilder:
        return self._set("before_update", callback)

    def build(self) -> SyncOptions:
        return replace(self._base, **self._values)  # pyright: ignore[reportArgumentType]

    def _set(self, name: str, value: object) -> SyncOptionsBuilder:
        self._values[name] = value
        return self
