from __future__ import annotations

import pytest

from catalogsync.domain.cache import ReferenceIdToKeyCache
from tests.helpers.store import FakeResourceStore


@pytest.fixture
def cache() -> ReferenceIdToKeyCache:
    return ReferenceIdToKeyCache(max_size=1_000)


@pytest.fixture
def store() -> FakeResourceStore:
    return FakeResourceStore()


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "STORE_API_URL",
        "STORE_PROJECT_KEY",
        "STORE_ACCESS_TOKEN",
        "SYNC_BATCH_SIZE",
        "SYNC_CACHE_SIZE",
        "SYNC_LOOKUP_PAGE_SIZE",
        "SYNC_PARALLELISM",
        "SYNC_CACHE_TTL_SECONDS",
    ):
        monkeypatch.delenv(name, raising=False)
