"""Two-phase batch transformation: parallel lookups, then pure mapping."""

from __future__ import annotations

import asyncio
from collections import defaultdict
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from catalogsync.domain.errors import ReferenceResolutionError, StoreUnavailableError
from catalogsync.domain.model import Entity

from .mapping import ResolvedDraft, resolve_draft

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from catalogsync.domain.model import Draft, ResourceType

    from .resolver import ReferenceResolver

log = getLogger(__name__)


@dataclass(slots=True)
class TransformResult:
    """Outcome of transforming one batch, in input order."""

    resolved: list[ResolvedDraft] = field(default_factory=list[ResolvedDraft])
    failures: list[tuple[Draft, ReferenceResolutionError]] = field(
        default_factory=list[tuple["Draft", ReferenceResolutionError]]
    )


def collect_unresolved_ids(drafts: Iterable[Draft]) -> dict[ResourceType, set[str]]:
    """Group the ids of every reference still lacking a key by referenced type."""

    ids_by_kind: defaultdict[ResourceType, set[str]] = defaultdict(set)
    for draft in drafts:
        for _name, reference in draft.iter_references():
            if not reference.is_resolved and reference.id:
                ids_by_kind[reference.type_id].add(reference.id)
    return dict(ids_by_kind)


class BatchTransformService:
    """Resolve every relationship kind of a batch concurrently, then map drafts."""

    def __init__(self, resolver: ReferenceResolver) -> None:
        self.resolver = resolver

    async def transform(self, drafts: Sequence[Draft]) -> TransformResult:
        """Return resolved drafts for ``drafts``.

        A failing lookup only fails the drafts holding an unresolved reference
        of that kind. ``StoreUnavailableError`` makes the whole batch
        inoperable and is re-raised.
        """

        self.prefill_self_keys(drafts)
        ids_by_kind = collect_unresolved_ids(drafts)
        failed_kinds = await self._resolve_kinds(ids_by_kind)

        result = TransformResult()
        for draft in drafts:
            failure = _first_failed_kind(draft, failed_kinds)
            if failure is not None:
                result.failures.append((draft, failure))
                continue
            result.resolved.append(resolve_draft(draft, self.resolver.cache))
        return result

    def prefill_self_keys(self, drafts: Iterable[Draft]) -> None:
        """Cache the id -> key pair of drafts that already carry both.

        Children and parents often arrive in the same batch; caching the
        parents' own pairs first saves the lookups for the child references.
        """

        pairs = {
            draft.id: draft.key
            for draft in drafts
            if isinstance(draft, Entity) and draft.id and draft.key
        }
        if pairs:
            self.resolver.cache.put_all(pairs)

    async def _resolve_kinds(
        self, ids_by_kind: dict[ResourceType, set[str]]
    ) -> dict[ResourceType, ReferenceResolutionError]:
        kinds = list(ids_by_kind)
        outcomes = await asyncio.gather(
            *(self.resolver.resolve(kind, ids_by_kind[kind]) for kind in kinds),
            return_exceptions=True,
        )

        failed: dict[ResourceType, ReferenceResolutionError] = {}
        for kind, outcome in zip(kinds, outcomes, strict=True):
            if isinstance(outcome, StoreUnavailableError):
                raise outcome
            if isinstance(outcome, Exception):
                log.error(f"Failed to resolve {kind} references: {outcome}")
                error = ReferenceResolutionError(
                    f"Failed to resolve references to {kind}. Reason: {outcome}", kind=kind
                )
                error.__cause__ = outcome
                failed[kind] = error
            elif isinstance(outcome, BaseException):
                raise outcome
        return failed


def _first_failed_kind(
    draft: Draft, failed_kinds: dict[ResourceType, ReferenceResolutionError]
) -> ReferenceResolutionError | None:
    if not failed_kinds:
        return None
    for _name, reference in draft.iter_references():
        if not reference.is_resolved and reference.type_id in failed_kinds:
            return failed_kinds[reference.type_id]
    return None
