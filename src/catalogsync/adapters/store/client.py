"""HTTP implementation of the resource store port."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, Any

import httpx
from pydantic import ValidationError

from catalogsync.adapters.http_resilience import ResilientClient
from catalogsync.config import get_store_config
from catalogsync.domain.errors import (
    ApplyError,
    MalformedEntityError,
    PartialResultError,
    StoreError,
    StoreUnavailableError,
    VersionConflictError,
)
from catalogsync.domain.model import Entity
from catalogsync.domain.ports import ResourceStore
from catalogsync.domain.resolution import DEFAULT_PAGE_SIZE, chunked

from .schema import ErrorResponse, PagedQueryResponse, ResourcePayload, UpdateRequest
from .translator import (
    TranslationError,
    action_to_payload,
    draft_to_payload,
    parse_entity,
    resource_path,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Collection, Sequence
    from types import TracebackType

    from catalogsync.config import ResilienceConfig, StoreConfig
    from catalogsync.domain.model import Draft, ResourceType, UpdateAction

log = getLogger(__name__)


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


def where_in(field_name: str, values: Collection[str]) -> str:
    """Return a ``where`` predicate matching ``field_name`` against ``values``."""

    quoted = ", ".join(json.dumps(value) for value in values)
    return f"{field_name} in ({quoted})"


@dataclass(slots=True)
class HttpResourceStore:
    """Store port backed by the REST API of the target project.

    Use as an async context manager; the underlying HTTP client lives as
    long as the context.
    """

    config: StoreConfig = field(default_factory=get_store_config)
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )
    page_size: int = DEFAULT_PAGE_SIZE
    _client: ResilientClient | None = field(default=None, init=False, repr=False)

    async def __aenter__(self) -> HttpResourceStore:
        self._client = self.client_factory(self.config.resilience)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def query_by_ids(
        self, resource_type: ResourceType, ids: Collection[str]
    ) -> dict[str, str]:
        if not ids:
            return {}
        page = await self._query(resource_type, where_in("id", ids), limit=len(ids))
        return {result.id: result.key for result in page.results if result.key}

    async def query_by_keys(
        self, resource_type: ResourceType, keys: Collection[str]
    ) -> Sequence[Entity]:
        entities: list[Entity] = []
        failures: list[MalformedEntityError] = []
        for chunk in chunked(list(keys), self.page_size):
            page = await self._query(resource_type, where_in("key", chunk), limit=len(chunk))
            for result in page.results:
                try:
                    entities.append(parse_entity(result))
                except TranslationError as exc:
                    failures.append(
                        MalformedEntityError(
                            f"{resource_type} '{result.key}' is malformed: {exc}",
                            key=result.key,
                        )
                    )
        if failures:
            raise PartialResultError(
                f"{len(failures)} {resource_type} resources could not be read",
                entities=entities,
                failures=failures,
            )
        return entities

    async def create(self, resource_type: ResourceType, draft: Draft) -> Entity:
        payload = await self._request_json(
            "POST",
            self._path(resource_type),
            json=draft_to_payload(draft),
            write=True,
        )
        return _read_written(resource_type, payload)

    async def update(
        self,
        resource_type: ResourceType,
        entity: Entity,
        actions: Sequence[UpdateAction],
    ) -> Entity:
        body = UpdateRequest(
            version=entity.version,
            actions=[action_to_payload(action) for action in actions],
        )
        payload = await self._request_json(
            "POST",
            f"{self._path(resource_type)}/{entity.id}",
            json=body.model_dump(),
            write=True,
        )
        return _read_written(resource_type, payload)

    async def _query(
        self, resource_type: ResourceType, where: str, *, limit: int
    ) -> PagedQueryResponse:
        payload = await self._request_json(
            "GET",
            self._path(resource_type),
            params={"where": where, "limit": limit},
        )
        return _validate(PagedQueryResponse, payload)

    async def _request_json(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, str | int] | None = None,
        json: object = None,
        write: bool = False,
    ) -> Any:
        client = self._require_client()
        try:
            if json is None:
                response = await client.request(method, path, params=params)
            else:
                response = await client.request(method, path, params=params, json=json)
        except httpx.ConnectError as exc:
            raise StoreUnavailableError(f"Store at {self.config.base_url} is unreachable") from exc
        except httpx.HTTPError as exc:
            error_type = ApplyError if write else StoreError
            raise error_type(f"{method} {path} failed: {exc}") from exc

        if response.is_error:
            raise self._error_for(response, method=method, path=path, write=write)
        return response.json()

    def _error_for(
        self, response: httpx.Response, *, method: str, path: str, write: bool
    ) -> StoreError:
        try:
            error = ErrorResponse.model_validate(response.json())
            message = error.message
            current_version = error.current_version
        except (ValueError, ValidationError):
            message = response.text or response.reason_phrase
            current_version = None

        log.error(f"Store API error {response.status_code} on {method} {path}: {message}")
        if response.status_code == httpx.codes.CONFLICT:
            return VersionConflictError(message, current_version=current_version)
        if response.status_code == httpx.codes.SERVICE_UNAVAILABLE:
            return StoreUnavailableError(message, status_code=response.status_code)
        error_type = ApplyError if write else StoreError
        return error_type(message, status_code=response.status_code)

    def _path(self, resource_type: ResourceType) -> str:
        return f"/{self.config.project_key}/{resource_path(resource_type)}"

    def _require_client(self) -> ResilientClient:
        if self._client is None:
            raise RuntimeError("HttpResourceStore must be used as an async context manager")
        return self._client


def _read_written(resource_type: ResourceType, payload: object) -> Entity:
    result = _validate(ResourcePayload, payload)
    try:
        return parse_entity(result)
    except TranslationError as exc:
        raise MalformedEntityError(
            f"{resource_type} '{result.key}' was written but the response could not be read: "
            f"{exc}",
            key=result.key,
            entity=Entity(key=result.key, id=result.id, version=result.version),
        ) from exc


def _validate[M: (PagedQueryResponse, ResourcePayload)](model: type[M], payload: object) -> M:
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise StoreError(f"Unexpected store response payload: {exc}") from exc


if TYPE_CHECKING:
    _store_check: ResourceStore = HttpResourceStore()
