"""Translate between store JSON payloads and domain drafts/entities."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any, cast

from catalogsync.domain.model import (
    REMOVE_CUSTOM_TYPE,
    SET_CUSTOM_TYPE,
    CollectionItem,
    CustomFields,
    Draft,
    Entity,
    Reference,
    ResourceType,
)

if TYPE_CHECKING:
    from catalogsync.domain.model import ReferenceValue, UpdateAction

    from .schema import ResourcePayload

# attribute that identifies an element of each ordered collection; the element
# id stands in when it is missing
COLLECTION_IDENTITY: dict[str, str] = {
    "assets": "key",
    "addresses": "key",
    "attributes": "name",
    "lineItems": "sku",
}

# multi-valued reference fields, recognised even when empty
REFERENCE_LISTS = frozenset({"categories", "stores"})

RESOURCE_PATHS: dict[ResourceType, str] = {
    ResourceType.CATEGORY: "categories",
    ResourceType.PRODUCT: "products",
    ResourceType.PRODUCT_TYPE: "product-types",
    ResourceType.CUSTOMER: "customers",
    ResourceType.CUSTOMER_GROUP: "customer-groups",
    ResourceType.CART_DISCOUNT: "cart-discounts",
    ResourceType.INVENTORY_ENTRY: "inventory",
    ResourceType.SHOPPING_LIST: "shopping-lists",
    ResourceType.CHANNEL: "channels",
    ResourceType.TYPE: "types",
    ResourceType.TAX_CATEGORY: "tax-categories",
    ResourceType.STATE: "states",
}

_SYSTEM_FIELDS = frozenset(
    {
        "id",
        "key",
        "version",
        "createdAt",
        "createdBy",
        "lastModifiedAt",
        "lastModifiedBy",
        "versionModifiedAt",
        "lastMessageSequenceNumber",
    }
)


class TranslationError(ValueError):
    """Raised when a payload cannot be mapped onto the domain model."""


def parse_draft(payload: Mapping[str, Any]) -> Draft:
    """Build a draft from its JSON form, classifying each top-level value.

    Objects carrying a ``typeId`` become references, lists of them become
    multi-valued references, lists under a known collection name become
    ordered collections and ``custom`` becomes custom fields. Everything else
    is a plain field value.
    """

    key = payload.get("key")
    if key is not None and not isinstance(key, str):
        raise TranslationError(f"Resource key must be a string, got {key!r}")
    fields, references, custom, collections = _split(payload)
    return Draft(
        key=key,
        fields=fields,
        references=references,
        custom=custom,
        collections=collections,
    )


def parse_entity(payload: ResourcePayload) -> Entity:
    data = payload.model_dump()
    fields, references, custom, collections = _split(data)
    return Entity(
        key=payload.key,
        fields=fields,
        references=references,
        custom=custom,
        collections=collections,
        id=payload.id,
        version=payload.version,
    )


def draft_to_payload(draft: Draft) -> dict[str, Any]:
    """Return the create body for ``draft``."""

    body: dict[str, Any] = {}
    if draft.key is not None:
        body["key"] = draft.key
    body.update({name: value for name, value in draft.fields.items() if value is not None})
    for name, value in draft.references.items():
        if value is None:
            continue
        if isinstance(value, tuple):
            body[name] = [reference.to_identifier() for reference in value]
        else:
            body[name] = value.to_identifier()
    if draft.custom is not None:
        custom: dict[str, Any] = {"type": draft.custom.type.to_identifier()}
        if draft.custom.fields is not None:
            custom["fields"] = dict(draft.custom.fields)
        body["custom"] = custom
    for name, items in draft.collections.items():
        body[name] = [dict(item.values) for item in items]
    return body


def action_to_payload(action: UpdateAction) -> dict[str, Any]:
    # the API removes a custom type by setting none
    if action.action == REMOVE_CUSTOM_TYPE:
        return {"action": SET_CUSTOM_TYPE}
    return action.to_payload()


def resource_path(resource_type: ResourceType) -> str:
    return RESOURCE_PATHS[resource_type]


def _split(
    data: Mapping[str, Any],
) -> tuple[
    dict[str, Any],
    dict[str, ReferenceValue],
    CustomFields | None,
    dict[str, tuple[CollectionItem, ...]],
]:
    fields: dict[str, Any] = {}
    references: dict[str, ReferenceValue] = {}
    collections: dict[str, tuple[CollectionItem, ...]] = {}
    custom: CustomFields | None = None

    for name, value in data.items():
        if name in _SYSTEM_FIELDS:
            continue
        if name == "custom":
            custom = _parse_custom(value)
        elif _is_reference(value):
            references[name] = _parse_reference(value)
        elif name in COLLECTION_IDENTITY and isinstance(value, list):
            collections[name] = _parse_collection(name, cast("list[Any]", value))
        elif isinstance(value, list) and (
            name in REFERENCE_LISTS or (value and all(_is_reference(item) for item in value))
        ):
            references[name] = tuple(_parse_reference(item) for item in value)
        else:
            fields[name] = value
    return fields, references, custom, collections


def _is_reference(value: object) -> bool:
    return isinstance(value, Mapping) and "typeId" in value


def _parse_reference(value: Mapping[str, Any]) -> Reference:
    try:
        type_id = ResourceType(value["typeId"])
    except ValueError as exc:
        raise TranslationError(f"Unknown reference type {value['typeId']!r}") from exc
    id_ = value.get("id")
    key = value.get("key")
    if id_ is None and key is None:
        raise TranslationError(f"Reference to {type_id} has neither id nor key")
    return Reference(type_id=type_id, id=id_, key=key)


def _parse_custom(value: object) -> CustomFields | None:
    if value is None:
        return None
    if not isinstance(value, Mapping) or not _is_reference(value.get("type")):
        raise TranslationError(f"Custom block needs a type reference, got {value!r}")
    custom = cast("Mapping[str, Any]", value)
    fields = custom.get("fields")
    return CustomFields(
        type=_parse_reference(custom["type"]),
        fields=dict(fields) if isinstance(fields, Mapping) else None,
    )


def _parse_collection(name: str, items: Sequence[Any]) -> tuple[CollectionItem, ...]:
    identity_key = COLLECTION_IDENTITY[name]
    parsed: list[CollectionItem] = []
    for item in items:
        if not isinstance(item, Mapping):
            raise TranslationError(f"Elements of '{name}' must be objects, got {item!r}")
        values = {k: v for k, v in cast("Mapping[str, Any]", item).items() if k != "id"}
        identity = values.get(identity_key) or item.get("id")
        if not isinstance(identity, str):
            raise TranslationError(
                f"Element of '{name}' has neither '{identity_key}' nor an id"
            )
        parsed.append(CollectionItem(identity=identity, values=values, id=item.get("id")))
    return tuple(parsed)
