"""Pydantic models describing the store API payloads."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class StoreBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class ResourcePayload(BaseModel):
    """Any resource as returned by the API; business fields stay as extras."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str
    version: int
    key: str | None = None


class PagedQueryResponse(StoreBaseModel):
    limit: int | None = None
    offset: int = 0
    count: int = 0
    total: int | None = None
    results: list[ResourcePayload] = Field(default_factory=list[ResourcePayload])


class ErrorItem(StoreBaseModel):
    code: str
    message: str = ""
    current_version: int | None = Field(default=None, alias="currentVersion")


class ErrorResponse(StoreBaseModel):
    status_code: int = Field(alias="statusCode")
    message: str
    errors: list[ErrorItem] = Field(default_factory=list[ErrorItem])

    @property
    def current_version(self) -> int | None:
        for error in self.errors:
            if error.current_version is not None:
                return error.current_version
        return None


class UpdateRequest(StoreBaseModel):
    version: int
    actions: list[dict[str, Any]]
