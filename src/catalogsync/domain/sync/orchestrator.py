"""Generic batch sync pipeline: resolve, match, diff, apply, report."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

from catalogsync.domain.cache import ReferenceIdToKeyCache
from catalogsync.domain.errors import (
    ApplyError,
    DiffError,
    MalformedEntityError,
    MissingDependencyError,
    PartialResultError,
    StoreError,
    SyncError,
    SyncWarning,
    VersionConflictError,
)
from catalogsync.domain.resolution import BatchTransformService, ReferenceResolver, chunked

from .options import SyncOptions
from .statistics import SyncStatistics
from .validation import validate_batch

if TYPE_CHECKING:
    from collections.abc import Sequence

    from catalogsync.domain.model import Draft, Entity, UpdateAction
    from catalogsync.domain.ports import ResourceStore
    from catalogsync.domain.resolution import ResolvedDraft

    from .strategy import ResourceSyncStrategy

log = getLogger(__name__)


class BatchState(StrEnum):
    RESOLVING = "resolving"
    MATCHING = "matching"
    DIFFING = "diffing"
    APPLYING = "applying"
    REPORTED = "reported"


@dataclass(slots=True)
class _BatchMatch:
    """Existing entities of one batch by key, plus the keys known to exist.

    ``unreadable`` holds the keys that exist in the store but could not be
    read; their drafts fail individually.
    """

    existing: dict[str, Entity]
    unreadable: dict[str, DiffError]
    known_keys: set[str] = field(init=False)

    def __post_init__(self) -> None:
        self.known_keys = set(self.existing) | set(self.unreadable)


class SyncOrchestrator:
    """Synchronize drafts of one resource type into the target store.

    One instance is one sync session: the id -> key cache and the statistics
    live as long as the orchestrator, and successive ``sync`` calls accumulate
    into the same statistics. Batches run one after the other in submission
    order; within a batch at most ``options.parallelism`` create/update calls
    are in flight.

    Item-level failures are reported through ``options.error_callback`` and
    counted, they never abort the batch. A ``StoreUnavailableError`` raised
    while resolving references makes the batch inoperable and propagates.
    """

    def __init__(
        self,
        strategy: ResourceSyncStrategy,
        store: ResourceStore,
        options: SyncOptions | None = None,
        *,
        cache: ReferenceIdToKeyCache | None = None,
        reference_store: ResourceStore | None = None,
    ) -> None:
        self.strategy = strategy
        self.store = store
        self.options = options or SyncOptions()
        self.cache = cache or ReferenceIdToKeyCache(
            max_size=self.options.cache_size, ttl_seconds=self.options.cache_ttl_seconds
        )
        self.statistics = SyncStatistics(resource_name=strategy.name)
        self.state = BatchState.REPORTED
        self._engine = strategy.diff_engine(self.options.absent_value_policy)
        self._draft_transform = BatchTransformService(
            ReferenceResolver(
                reference_store or store, self.cache, page_size=self.options.lookup_page_size
            )
        )
        self._existing_transform = BatchTransformService(
            ReferenceResolver(store, self.cache, page_size=self.options.lookup_page_size)
        )
        self._processed_keys: set[str] = set()

    def sync(self, drafts: Sequence[Draft | None]) -> SyncStatistics:
        """Blocking variant of ``sync_async``."""

        return asyncio.run(self.sync_async(drafts))

    async def sync_async(self, drafts: Sequence[Draft | None]) -> SyncStatistics:
        self.statistics.start_timer()
        try:
            batches = list(chunked(list(drafts), self.options.batch_size))
            for index, batch in enumerate(batches, start=1):
                log.info(
                    f"Syncing {self.strategy.name} batch {index}/{len(batches)} "
                    f"({len(batch)} drafts)"
                )
                await self._process_batch(batch)
        finally:
            self.statistics.stop_timer()
        log.info(self.statistics.report_message())
        return self.statistics

    async def _process_batch(self, batch: Sequence[Draft | None]) -> None:
        validated = validate_batch(batch, self.strategy)
        for draft, error in validated.invalid:
            self.statistics.processed += 1
            self._fail(error, draft)
        if not validated.valid:
            self.state = BatchState.REPORTED
            return

        self.state = BatchState.RESOLVING
        transformed = await self._draft_transform.transform(validated.valid)
        for draft, error in transformed.failures:
            self._count_processed(draft)
            self._fail(error, draft)
        resolved = transformed.resolved
        for item in resolved:
            self._count_processed(item.draft)
            for warning in item.warnings:
                self._warn(warning, item.draft)
        if not resolved:
            self.state = BatchState.REPORTED
            return

        self.state = BatchState.MATCHING
        try:
            match = await self._fetch_existing(resolved)
        except Exception as exc:  # noqa: BLE001
            error = _as_sync_error(
                exc, f"Failed to fetch existing {self.strategy.name}", StoreError
            )
            for item in resolved:
                self._fail(error, item.draft)
            self.state = BatchState.REPORTED
            return

        self.state = BatchState.DIFFING
        ready: list[ResolvedDraft] = []
        deferred: list[ResolvedDraft] = []
        for item in resolved:
            if self._blocked_on(item.draft, match) is None:
                ready.append(item)
            else:
                deferred.append(item)

        self.state = BatchState.APPLYING
        semaphore = asyncio.Semaphore(self.options.parallelism)

        async def apply_bounded(item: ResolvedDraft) -> None:
            async with semaphore:
                await self._apply(item.draft, match)

        await asyncio.gather(*(apply_bounded(item) for item in ready))

        # retry until a round unblocks nothing, so parents may follow their children
        while deferred:
            blocked: list[ResolvedDraft] = []
            for item in deferred:
                if self._blocked_on(item.draft, match) is None:
                    await self._apply(item.draft, match)
                else:
                    blocked.append(item)
            if len(blocked) == len(deferred):
                break
            deferred = blocked

        for item in deferred:
            dependency = self._blocked_on(item.draft, match)
            if dependency is not None:
                self._missing_dependency(item.draft, dependency)

        self.state = BatchState.REPORTED

    def _blocked_on(self, draft: Draft, match: _BatchMatch) -> str | None:
        dependency = self.strategy.dependency_key(draft)
        if dependency is None or dependency in match.known_keys:
            return None
        return dependency

    async def _fetch_existing(self, resolved: Sequence[ResolvedDraft]) -> _BatchMatch:
        """Load the batch's existing entities and their dependencies."""

        keys = {item.draft.key for item in resolved if item.draft.key}
        keys.update(
            dependency
            for item in resolved
            if (dependency := self.strategy.dependency_key(item.draft)) is not None
        )
        unreadable: dict[str, DiffError] = {}
        try:
            entities = await self.store.query_by_keys(self.strategy.resource_type, sorted(keys))
        except PartialResultError as exc:
            entities = exc.entities
            for failure in exc.failures:
                if failure.key:
                    unreadable[failure.key] = DiffError(
                        f"Existing {self.strategy.resource_type} with key '{failure.key}' "
                        f"cannot be compared: {failure}"
                    )
        return _BatchMatch(await self._resolve_existing(entities), unreadable)

    async def _resolve_existing(self, entities: Sequence[Entity]) -> dict[str, Entity]:
        if not entities:
            return {}
        transformed = await self._existing_transform.transform(entities)
        resolved: dict[str, Entity] = {}
        for entity, error in transformed.failures:
            log.warning(
                f"References of existing {self.strategy.resource_type} '{entity.key}' "
                f"could not be resolved: {error}"
            )
            if entity.key:
                resolved[entity.key] = entity  # pyright: ignore[reportArgumentType]
        for item in transformed.resolved:
            current: Entity = item.draft  # pyright: ignore[reportAssignmentType]
            if current.key:
                resolved[current.key] = current
        return resolved

    async def _apply(self, draft: Draft, match: _BatchMatch) -> None:
        key = self.strategy.key_of(draft)
        if key and key in match.unreadable:
            self._fail(match.unreadable[key], draft)
            return
        current = match.existing.get(key) if key else None
        if current is None:
            created = await self._create(draft)
            if created is not None and created.key:
                match.known_keys.add(created.key)
                if created.id:
                    self.cache.put(created.id, created.key)
        else:
            await self._update(draft, current)

    async def _create(self, draft: Draft) -> Entity | None:
        try:
            candidate: Draft | None = self.strategy.build_create(draft)
            if self.options.before_create is not None and candidate is not None:
                candidate = self.options.before_create(candidate)
        except Exception as exc:  # noqa: BLE001
            self._fail(
                _as_sync_error(
                    exc,
                    f"Failed to prepare {self.strategy.resource_type} with key '{draft.key}' "
                    "for creation",
                    SyncError,
                ),
                draft,
            )
            return None
        if candidate is None:
            log.debug(f"Skipped creating {self.strategy.resource_type} '{draft.key}'")
            return None
        try:
            created = await self.store.create(self.strategy.resource_type, candidate)
        except MalformedEntityError as exc:
            if exc.entity is None:
                self._fail(exc, draft)
                return None
            self._warn(SyncWarning(str(exc)), draft)
            created = exc.entity
        except Exception as exc:  # noqa: BLE001
            self._fail(
                _as_sync_error(
                    exc, f"Failed to create {self.strategy.resource_type} with key '{draft.key}'"
                ),
                draft,
            )
            return None
        self.statistics.created += 1
        log.debug(f"Created {self.strategy.resource_type} '{created.key}'")
        return created

    async def _update(self, draft: Draft, current: Entity, *, retried: bool = False) -> None:
        actions = self._compute_actions(draft, current)
        if not actions:
            return
        try:
            await self.store.update(self.strategy.resource_type, current, actions)
        except VersionConflictError as exc:
            if retried:
                self._fail(exc, draft, current, actions)
                return
            log.info(
                f"Version conflict updating {self.strategy.resource_type} '{draft.key}', "
                "refetching and retrying once"
            )
            refreshed = await self._refetch(draft, exc, actions)
            if refreshed is not None:
                await self._update(draft, refreshed, retried=True)
            return
        except MalformedEntityError as exc:
            if exc.entity is None:
                self._fail(exc, draft, current, actions)
                return
            self._warn(SyncWarning(str(exc)), draft, current)
        except Exception as exc:  # noqa: BLE001
            self._fail(
                _as_sync_error(
                    exc, f"Failed to update {self.strategy.resource_type} with key '{draft.key}'"
                ),
                draft,
                current,
                actions,
            )
            return
        self.statistics.updated += 1
        log.debug(
            f"Updated {self.strategy.resource_type} '{draft.key}' with {len(actions)} actions"
        )

    def _compute_actions(self, draft: Draft, current: Entity) -> list[UpdateAction] | None:
        try:
            result = self._engine.diff(current, draft)
        except Exception as exc:  # noqa: BLE001
            self._fail(
                _as_sync_error(
                    exc,
                    f"Failed to compare {self.strategy.resource_type} with key '{draft.key}'",
                    DiffError,
                ),
                draft,
                current,
            )
            return None
        for warning in result.warnings:
            self._warn(warning, draft, current)

        actions = result.actions
        if actions and self.options.before_update is not None:
            try:
                actions = list(self.options.before_update(actions, draft, current))
            except Exception as exc:  # noqa: BLE001
                self._fail(
                    _as_sync_error(
                        exc,
                        f"Failed to prepare the update of {self.strategy.resource_type} "
                        f"with key '{draft.key}'",
                        SyncError,
                    ),
                    draft,
                    current,
                    result.actions,
                )
                return None
            if not actions:
                log.debug(f"Skipped updating {self.strategy.resource_type} '{draft.key}'")
        return actions

    async def _refetch(
        self, draft: Draft, conflict: VersionConflictError, actions: Sequence[UpdateAction]
    ) -> Entity | None:
        key = self.strategy.key_of(draft)
        try:
            entities = await self.store.query_by_keys(
                self.strategy.resource_type, [key] if key else []
            )
            refreshed = (await self._resolve_existing(entities)).get(key or "")
        except Exception as exc:  # noqa: BLE001
            self._fail(
                _as_sync_error(
                    exc,
                    f"Failed to refetch {self.strategy.resource_type} with key '{key}' "
                    "after a version conflict",
                    StoreError,
                ),
                draft,
                None,
                actions,
            )
            return None
        if refreshed is None:
            self._fail(conflict, draft, None, actions)
        return refreshed

    def _count_processed(self, draft: Draft | None) -> None:
        key = self.strategy.key_of(draft) if draft is not None else None
        if key:
            if key in self._processed_keys:
                return
            self._processed_keys.add(key)
        self.statistics.processed += 1

    def _fail(
        self,
        error: SyncError,
        draft: Draft | None,
        existing: Entity | None = None,
        actions: Sequence[UpdateAction] = (),
    ) -> None:
        self.statistics.failed += 1
        log.error(str(error))
        if self.options.error_callback is not None:
            self.options.error_callback(error, draft, existing, actions)

    def _warn(
        self, warning: SyncWarning, draft: Draft | None, existing: Entity | None = None
    ) -> None:
        log.warning(str(warning))
        if self.options.warning_callback is not None:
            self.options.warning_callback(warning, draft, existing)

    def _missing_dependency(self, draft: Draft, dependency: str) -> None:
        key = self.strategy.key_of(draft) or ""
        self.statistics.missing_dependency += 1
        self.statistics.record_missing_dependency(dependency, key)
        error = MissingDependencyError(
            f"{self.strategy.resource_type} with key '{key}' depends on '{dependency}' "
            "which does not exist yet; sync it again once the dependency is created.",
            dependency_keys=(dependency,),
        )
        log.warning(str(error))
        if self.options.error_callback is not None:
            self.options.error_callback(error, draft, None, ())


def _as_sync_error(
    exc: Exception, message: str, error_type: type[SyncError] = ApplyError
) -> SyncError:
    if isinstance(exc, SyncError):
        return exc
    error = error_type(f"{message}. Reason: {exc}")
    error.__cause__ = exc
    return error

