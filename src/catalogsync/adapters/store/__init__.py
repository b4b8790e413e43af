"""Public interface for the remote store adapter."""

from __future__ import annotations

from .client import HttpResourceStore, where_in
from .schema import ErrorResponse, PagedQueryResponse, ResourcePayload, UpdateRequest
from .translator import (
    TranslationError,
    action_to_payload,
    draft_to_payload,
    parse_draft,
    parse_entity,
    resource_path,
)

__all__ = [
    "ErrorResponse",
    "HttpResourceStore",
    "PagedQueryResponse",
    "ResourcePayload",
    "TranslationError",
    "UpdateRequest",
    "action_to_payload",
    "draft_to_payload",
    "parse_draft",
    "parse_entity",
    "resource_path",
    "where_in",
]
