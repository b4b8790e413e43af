"""Batched id -> key resolution for one relationship kind at a time."""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Sequence

    from catalogsync.domain.cache import ReferenceIdToKeyCache
    from catalogsync.domain.model import ResourceType
    from catalogsync.domain.ports import ResourceStore

log = getLogger(__name__)

DEFAULT_PAGE_SIZE = 500


def chunked[T](items: Sequence[T], size: int) -> Iterator[Sequence[T]]:
    """Yield consecutive slices of ``items`` holding at most ``size`` elements."""

    if size <= 0:
        raise ValueError(f"Chunk size must be positive, got {size}")
    for start in range(0, len(items), size):
        yield items[start : start + size]


class ReferenceResolver:
    """Resolve store ids to keys through the shared cache and batched lookups.

    Ids are de-duplicated across the whole batch before anything else, so one
    lookup page serves every draft that points at the same resources.
    """

    def __init__(
        self,
        store: ResourceStore,
        cache: ReferenceIdToKeyCache,
        *,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> None:
        self.store = store
        self.cache = cache
        self.page_size = page_size

    async def resolve(self, kind: ResourceType, ids: Iterable[str]) -> dict[str, str]:
        """Return the ``id -> key`` pairs known for ``ids``.

        Ids missing from the result are unresolvable; that is not an error at
        this level. Lookup failures propagate to the caller.
        """

        distinct = list(dict.fromkeys(id_ for id_ in ids if id_))
        found: dict[str, str] = {}
        missing: list[str] = []
        for id_ in distinct:
            key = self.cache.get(id_)
            if key is None:
                missing.append(id_)
            else:
                found[id_] = key

        if not missing:
            return found

        log.debug(
            "Resolving %s %s ids remotely (%s cache hits)", len(missing), kind, len(found)
        )
        pages = await asyncio.gather(
            *(self._fetch_page(kind, page) for page in chunked(missing, self.page_size))
        )
        for page in pages:
            found.update(page)

        unresolved = len(missing) - sum(len(page) for page in pages)
        if unresolved:
            log.debug("%s %s ids could not be resolved", unresolved, kind)
        return found

    async def _fetch_page(self, kind: ResourceType, ids: Sequence[str]) -> dict[str, str]:
        fetched = await self.store.query_by_ids(kind, ids)
        # the store may echo extra ids; only keep what was asked for
        requested = set(ids)
        page = {id_: key for id_, key in fetched.items() if id_ in requested and key}
        self.cache.put_all(page)
        return page
