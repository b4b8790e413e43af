"""Counters and summary of a sync run."""

from __future__ import annotations

import time
from dataclasses import dataclass, field


@dataclass(slots=True)
class SyncStatistics:
    """Per-run counters; they accumulate across the batches of one orchestrator.

    ``missing_dependencies`` maps each missing dependency key to the keys of
    the drafts waiting for it, so callers can re-run those drafts once the
    dependency exists.
    """

    resource_name: str = "resources"
    processed: int = 0
    created: int = 0
    updated: int = 0
    failed: int = 0
    missing_dependency: int = 0
    missing_dependencies: dict[str, set[str]] = field(
        default_factory=dict[str, set[str]]
    )
    latency_seconds: float = 0.0
    _started_at: float | None = field(default=None, repr=False)

    @property
    def unchanged(self) -> int:
        touched = self.created + self.updated + self.failed + self.missing_dependency
        return max(self.processed - touched, 0)

    def start_timer(self) -> None:
        self._started_at = time.perf_counter()

    def stop_timer(self) -> None:
        if self._started_at is None:
            return
        self.latency_seconds += time.perf_counter() - self._started_at
        self._started_at = None

    def record_missing_dependency(self, dependency_key: str, dependent_key: str) -> None:
        self.missing_dependencies.setdefault(dependency_key, set()).add(dependent_key)

    def report_message(self) -> str:
        return (
            f"Summary: {self.processed} {self.resource_name} were processed in total "
            f"({self.created} created, {self.updated} updated, {self.failed} failed to sync "
            f"and {self.missing_dependency} with missing dependencies)."
        )

    def as_dict(self) -> dict[str, int]:
        return {
            "processed": self.processed,
            "created": self.created,
            "updated": self.updated,
            "failed": self.failed,
            "missing_dependency": self.missing_dependency,
        }
