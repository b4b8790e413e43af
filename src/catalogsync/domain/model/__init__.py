"""Domain model for the sync engine."""

from __future__ import annotations

from .actions import REMOVE_CUSTOM_TYPE, SET_CUSTOM_FIELD, SET_CUSTOM_TYPE, UpdateAction
from .enums import FieldKind, ResourceType
from .references import Reference, ReferenceValue
from .resources import CollectionItem, CustomFields, Draft, Entity, JsonValue, LocalizedString

__all__ = [
    "REMOVE_CUSTOM_TYPE",
    "SET_CUSTOM_FIELD",
    "SET_CUSTOM_TYPE",
    "CollectionItem",
    "CustomFields",
    "Draft",
    "Entity",
    "FieldKind",
    "JsonValue",
    "LocalizedString",
    "Reference",
    "ReferenceValue",
    "ResourceType",
    "UpdateAction",
]
