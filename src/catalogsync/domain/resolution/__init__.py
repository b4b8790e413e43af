"""Reference resolution: cache-backed batched lookups and draft mapping."""

from __future__ import annotations

from .mapping import ResolvedDraft, resolve_draft
from .resolver import DEFAULT_PAGE_SIZE, ReferenceResolver, chunked
from .transform import BatchTransformService, TransformResult, collect_unresolved_ids

__all__ = [
    "DEFAULT_PAGE_SIZE",
    "BatchTransformService",
    "ReferenceResolver",
    "ResolvedDraft",
    "TransformResult",
    "chunked",
    "collect_unresolved_ids",
    "resolve_draft",
]
