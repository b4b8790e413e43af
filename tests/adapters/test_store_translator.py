from __future__ import annotations

import pytest

from catalogsync.adapters.store import (
    ResourcePayload,
    TranslationError,
    action_to_payload,
    draft_to_payload,
    parse_draft,
    parse_entity,
)
from catalogsync.domain.model import (
    CollectionItem,
    CustomFields,
    Reference,
    ResourceType,
    UpdateAction,
)


@pytest.fixture
def category_payload() -> dict[str, object]:
    return {
        "id": "cat-id",
        "version": 3,
        "key": "shoes",
        "createdAt": "2024-01-01T00:00:00Z",
        "name": {"en": "Shoes"},
        "slug": {"en": "shoes"},
        "orderHint": "0.2",
        "parent": {"typeId": "category", "id": "root-id"},
        "custom": {"type": {"typeId": "type", "id": "type-id"}, "fields": {"color": "red"}},
        "assets": [{"id": "asset-id", "key": "img", "name": {"en": "Image"}}],
    }


def test_parse_entity_splits_fields_references_custom_and_collections(
    category_payload: dict[str, object],
) -> None:
    entity = parse_entity(ResourcePayload.model_validate(category_payload))

    assert entity.id == "cat-id"
    assert entity.version == 3
    assert entity.key == "shoes"
    assert entity.fields == {"name": {"en": "Shoes"}, "slug": {"en": "shoes"}, "orderHint": "0.2"}
    assert entity.references == {"parent": Reference.by_id(ResourceType.CATEGORY, "root-id")}
    assert entity.custom == CustomFields(
        type=Reference.by_id(ResourceType.TYPE, "type-id"), fields={"color": "red"}
    )
    assert entity.collections == {
        "assets": (
            CollectionItem("img", {"key": "img", "name": {"en": "Image"}}, id="asset-id"),
        )
    }



def test_parse_entity_pairs_keyless_assets_by_id(category_payload: dict[str, object]) -> None:
    category_payload["assets"] = [{"id": "asset-id", "name": {"en": "Image"}}]

    entity = parse_entity(ResourcePayload.model_validate(category_payload))

    assert entity.collections == {
        "assets": (CollectionItem("asset-id", {"name": {"en": "Image"}}, id="asset-id"),)
    }


def test_parse_draft_reads_reference_lists() -> None:
    draft = parse_draft(
        {
            "key": "p1",
            "productType": {"typeId": "product-type", "key": "shoe"},
            "categories": [{"typeId": "category", "id": "c1"}],
            "stores": [],
        }
    )

    assert draft.references["categories"] == (Reference.by_id(ResourceType.CATEGORY, "c1"),)
    assert draft.references["stores"] == ()
    assert draft.fields == {}


@pytest.mark.parametrize(
    "payload",
    [
        {"key": 1},
        {"key": "k", "parent": {"typeId": "unknown", "id": "x"}},
        {"key": "k", "parent": {"typeId": "category"}},
        {"key": "k", "custom": {"fields": {}}},
        {"key": "k", "assets": [{"name": {"en": "no key"}}]},
    ],
)
def test_parse_draft_rejects_malformed_payloads(payload: dict[str, object]) -> None:
    with pytest.raises(TranslationError):
        parse_draft(payload)


def test_draft_to_payload_uses_keys_for_references() -> None:
    draft = parse_draft(
        {
            "key": "child",
            "name": {"en": "Child"},
            "description": None,
            "parent": {"typeId": "category", "key": "root"},
            "custom": {"type": {"typeId": "type", "key": "t"}, "fields": {"a": 1}},
            "assets": [{"key": "img"}],
        }
    )

    assert draft_to_payload(draft) == {
        "key": "child",
        "name": {"en": "Child"},
        "parent": {"typeId": "category", "key": "root"},
        "custom": {"type": {"typeId": "type", "key": "t"}, "fields": {"a": 1}},
        "assets": [{"key": "img"}],
    }


def test_remove_custom_type_maps_to_empty_set_custom_type() -> None:
    assert action_to_payload(UpdateAction("removeCustomType")) == {"action": "setCustomType"}
    assert action_to_payload(UpdateAction("changeName", {"name": {"en": "x"}})) == {
        "action": "changeName",
        "name": {"en": "x"},
    }
