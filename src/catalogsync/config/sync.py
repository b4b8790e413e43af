"""Synchronization defaults for the sync engine."""

from __future__ import annotations

from dataclasses import dataclass

from .env import optional_env_int

DEFAULT_BATCH_SIZE = 50
DEFAULT_CACHE_SIZE = 100_000
DEFAULT_LOOKUP_PAGE_SIZE = 500
DEFAULT_PARALLELISM = 5


@dataclass(frozen=True, slots=True)
class SyncConfig:
    batch_size: int = DEFAULT_BATCH_SIZE
    cache_size: int = DEFAULT_CACHE_SIZE
    lookup_page_size: int = DEFAULT_LOOKUP_PAGE_SIZE
    parallelism: int = DEFAULT_PARALLELISM
    cache_ttl_seconds: int | None = None


def get_sync_config() -> SyncConfig:
    return SyncConfig(
        batch_size=optional_env_int("SYNC_BATCH_SIZE", DEFAULT_BATCH_SIZE) or DEFAULT_BATCH_SIZE,
        cache_size=optional_env_int("SYNC_CACHE_SIZE", DEFAULT_CACHE_SIZE) or DEFAULT_CACHE_SIZE,
        lookup_page_size=optional_env_int("SYNC_LOOKUP_PAGE_SIZE", DEFAULT_LOOKUP_PAGE_SIZE)
        or DEFAULT_LOOKUP_PAGE_SIZE,
        parallelism=optional_env_int("SYNC_PARALLELISM", DEFAULT_PARALLELISM)
        or DEFAULT_PARALLELISM,
        cache_ttl_seconds=optional_env_int("SYNC_CACHE_TTL_SECONDS", None),
    )
