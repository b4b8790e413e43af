"""Error taxonomy of the sync engine.

Every item-level error is delivered to the caller's error callback and
counted in the statistics; only ``StoreUnavailableError`` raised while
resolving references aborts a whole batch.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from .model import Entity, ResourceType


class SyncError(RuntimeError):
    """Base class for errors reported by the sync engine."""


class BatchValidationError(SyncError):
    """Raised for drafts rejected before any remote call (missing key, duplicates)."""


class ReferenceResolutionError(SyncError):
    """A batched reference lookup for one relationship kind failed."""

    def __init__(self, message: str, *, kind: ResourceType) -> None:
        super().__init__(message)
        self.kind = kind


class SyncWarning(SyncError):
    """Non-fatal condition reported through the warning callback."""


class UnresolvableReferenceWarning(SyncWarning):
    """A single referenced id was not found; the field is left absent."""

    def __init__(self, message: str, *, field_name: str, reference_id: str | None) -> None:
        super().__init__(message)
        self.field_name = field_name
        self.reference_id = reference_id


class DiffError(SyncError):
    """The existing entity has an unexpected shape that cannot be diffed."""


class StoreError(SyncError):
    """The remote store rejected or failed a request."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class StoreUnavailableError(StoreError):
    """The remote store cannot be reached at all."""


class ApplyError(StoreError):
    """A create or update call was rejected."""


class MalformedEntityError(StoreError):
    """A resource returned by the store does not fit the domain model.

    ``entity`` is set when the resource was written successfully and only its
    response could not be read; it then carries the id, key and version.
    """

    def __init__(
        self, message: str, *, key: str | None, entity: Entity | None = None
    ) -> None:
        super().__init__(message)
        self.key = key
        self.entity = entity


class PartialResultError(StoreError):
    """A key query succeeded but some of the returned resources are malformed."""

    def __init__(
        self,
        message: str,
        *,
        entities: Sequence[Entity],
        failures: Sequence[MalformedEntityError],
    ) -> None:
        super().__init__(message)
        self.entities = tuple(entities)
        self.failures = tuple(failures)


class VersionConflictError(ApplyError):
    """An update carried a stale version token."""

    def __init__(self, message: str, *, current_version: int | None = None) -> None:
        super().__init__(message, status_code=409)
        self.current_version = current_version


class MissingDependencyError(SyncError):
    """A structural dependency is still absent after the retry pass."""

    def __init__(self, message: str, *, dependency_keys: Iterable[str]) -> None:
        super().__init__(message)
        self.dependency_keys = tuple(dependency_keys)
