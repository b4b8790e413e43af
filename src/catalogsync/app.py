"""Application orchestration entry points."""

from __future__ import annotations

import asyncio
import json
from logging import getLogger
from typing import TYPE_CHECKING

from catalogsync.adapters.store import HttpResourceStore, TranslationError, parse_draft
from catalogsync.config import get_store_config, get_sync_config
from catalogsync.domain.resources import get_strategy
from catalogsync.domain.sync import SyncOptions, SyncOrchestrator

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Sequence
    from contextlib import AbstractAsyncContextManager
    from pathlib import Path

    from catalogsync.domain.model import Draft
    from catalogsync.domain.ports import ResourceStore
    from catalogsync.domain.sync import ResourceSyncStrategy, SyncStatistics

    type StoreFactory = Callable[[], AbstractAsyncContextManager[ResourceStore]]

log = getLogger(__name__)


def build_orchestrator(
    strategy: ResourceSyncStrategy,
    store: ResourceStore,
    *,
    options: SyncOptions | None = None,
) -> SyncOrchestrator:
    effective_options = options or SyncOptions.from_config(get_sync_config())
    return SyncOrchestrator(strategy, store, effective_options)


def read_drafts(lines: Iterable[str]) -> list[Draft | None]:
    """Parse JSON-lines drafts; ``null`` lines stay ``None`` so validation reports them."""

    drafts: list[Draft | None] = []
    for number, line in enumerate(lines, start=1):
        text = line.strip()
        if not text:
            continue
        try:
            payload = json.loads(text)
        except json.JSONDecodeError as exc:
            raise TranslationError(f"Line {number} is not valid JSON: {exc.msg}") from exc
        if payload is None:
            drafts.append(None)
        elif isinstance(payload, dict):
            drafts.append(parse_draft(payload))  # pyright: ignore[reportUnknownArgumentType]
        else:
            raise TranslationError(f"Line {number} must hold a JSON object")
    return drafts


def load_drafts(path: Path) -> list[Draft | None]:
    with path.open(encoding="utf-8") as handle:
        return read_drafts(handle)


def sync_resources(
    resource: str,
    drafts: Sequence[Draft | None],
    *,
    options: SyncOptions | None = None,
    store_factory: StoreFactory | None = None,
) -> SyncStatistics:
    """Synchronise ``drafts`` of the named resource into the configured store."""

    strategy = get_strategy(resource)
    effective_options = options or SyncOptions.from_config(get_sync_config())
    factory = store_factory or (lambda: HttpResourceStore(config=get_store_config()))
    log.info(
        f"Starting {strategy.name} sync: drafts={len(drafts)}, "
        f"batch_size={effective_options.batch_size}, "
        f"parallelism={effective_options.parallelism}"
    )

    async def run() -> SyncStatistics:
        async with factory() as store:
            orchestrator = build_orchestrator(strategy, store, options=effective_options)
            return await orchestrator.sync_async(drafts)

    statistics = asyncio.run(run())
    log.info(f"Finished {strategy.name} sync in {statistics.latency_seconds:.2f}s")
    return statistics
