"""Generic sync engine parameterized by per-resource strategies."""

from __future__ import annotations

from .options import SyncOptions, SyncOptionsBuilder
from .orchestrator import BatchState, SyncOrchestrator
from .statistics import SyncStatistics
from .strategy import ResourceSyncStrategy
from .validation import ValidatedBatch, validate_batch

__all__ = [
    "BatchState",
    "ResourceSyncStrategy",
    "SyncOptions",
    "SyncOptionsBuilder",
    "SyncOrchestrator",
    "SyncStatistics",
    "ValidatedBatch",
    "validate_batch",
]
