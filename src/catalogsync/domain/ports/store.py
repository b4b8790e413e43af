"""Port for the remote store that holds the authoritative state."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Collection, Sequence

    from catalogsync.domain.model import Draft, Entity, ResourceType, UpdateAction


@runtime_checkable
class ResourceStore(Protocol):
    """The four operation shapes the engine needs from the remote store.

    Implementations raise ``StoreError`` subclasses from
    ``catalogsync.domain.errors``. ``update`` raises ``VersionConflictError``
    when ``version`` is stale. ``create`` and ``update`` raise
    ``MalformedEntityError`` with ``entity`` set when the write succeeded but
    its response cannot be read.
    """

    async def query_by_ids(
        self, resource_type: ResourceType, ids: Collection[str]
    ) -> dict[str, str]:
        """Return the ``id -> key`` pairs found for ``ids`` (one page)."""
        ...

    async def query_by_keys(
        self, resource_type: ResourceType, keys: Collection[str]
    ) -> Sequence[Entity]:
        """Return the entities whose key is in ``keys``.

        Raises ``PartialResultError`` carrying the readable entities when some
        of the returned resources are malformed.
        """
        ...

    async def create(self, resource_type: ResourceType, draft: Draft) -> Entity: ...

    async def update(
        self,
        resource_type: ResourceType,
        entity: Entity,
        actions: Sequence[UpdateAction],
    ) -> Entity: ...
