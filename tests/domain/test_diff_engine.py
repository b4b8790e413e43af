from __future__ import annotations

import pytest

from catalogsync.domain.diff import AbsentValuePolicy, UpdateActionDiffEngine, scalar
from catalogsync.domain.model import CollectionItem, Draft, Reference, ResourceType
from catalogsync.domain.resources import CATEGORIES, CUSTOMERS, PRODUCTS, SHOPPING_LISTS
from tests.helpers.drafts import as_entity, category_draft, custom


def _category_engine() -> UpdateActionDiffEngine:
    return CATEGORIES.diff_engine()


@pytest.mark.parametrize(
    "draft",
    [
        category_draft(
            "full",
            parent=Reference.by_key(ResourceType.CATEGORY, "root"),
            custom=custom("t", a=1),
            orderHint="0.5",
            description={"en": "text", "de": "Text"},
        ),
        Draft(
            key="product",
            fields={"name": {"en": "Shoe"}, "slug": {"en": "shoe"}},
            references={
                "productType": Reference.by_key(ResourceType.PRODUCT_TYPE, "footwear"),
                "categories": (Reference.by_key(ResourceType.CATEGORY, "shoes"),),
            },
            collections={"attributes": (CollectionItem("size", {"name": "size", "value": 42}),)},
        ),
    ],
)
def test_identical_entity_and_draft_produce_no_actions(draft: Draft) -> None:
    engine = PRODUCTS.diff_engine() if draft.key == "product" else _category_engine()

    result = engine.diff(as_entity(draft), draft)

    assert result.is_empty
    assert result.warnings == []


def test_action_order_is_structural_content_custom_collections() -> None:
    existing = as_entity(
        category_draft(
            "c",
            name="Old",
            parent=Reference.by_key(ResourceType.CATEGORY, "p1"),
            custom=custom("old-type", a=1),
        )
    )
    draft = category_draft(
        "c",
        name="New",
        parent=Reference.by_key(ResourceType.CATEGORY, "p2"),
        custom=custom("new-type", a=1),
    )
    draft = Draft(
        key=draft.key,
        fields=draft.fields,
        references=draft.references,
        custom=draft.custom,
        collections={"assets": (CollectionItem("img", {"key": "img"}),)},
    )

    result = _category_engine().diff(existing, draft)

    assert [action.action for action in result.actions] == [
        "changeParent",
        "changeName",
        "removeCustomType",
        "setCustomType",
        "addAsset",
    ]


def test_single_custom_field_change_yields_one_action() -> None:
    existing = as_entity(category_draft("c", custom=custom("t", a=1, b="x")))
    draft = category_draft("c", custom=custom("t", a=2, b="x"))

    result = _category_engine().diff(existing, draft)

    assert [action.to_payload() for action in result.actions] == [
        {"action": "setCustomField", "name": "a", "value": 2}
    ]


def test_warn_policy_reports_unspecified_fields() -> None:
    existing = as_entity(category_draft("c", description={"en": "keep me"}))
    draft = category_draft("c")

    skip = CATEGORIES.diff_engine().diff(existing, draft)
    warn = CATEGORIES.diff_engine(AbsentValuePolicy.WARN).diff(existing, draft)

    assert skip.is_empty
    assert skip.warnings == []
    assert warn.is_empty
    assert len(warn.warnings) == 1


def test_immutable_field_change_is_reported_not_applied() -> None:
    old_type = Reference.by_key(ResourceType.PRODUCT_TYPE, "old")
    new_type = Reference.by_key(ResourceType.PRODUCT_TYPE, "new")
    existing = as_entity(Draft(key="p", references={"productType": old_type}))
    draft = Draft(key="p", references={"productType": new_type})

    result = PRODUCTS.diff_engine().diff(existing, draft)

    assert result.is_empty
    assert len(result.warnings) == 1


def test_customer_and_shopping_list_specs_diff() -> None:
    customer = Draft(
        key="cust",
        fields={"email": "a@example.com", "firstName": "Ann"},
        collections={"addresses": (CollectionItem("home", {"key": "home", "city": "Berlin"}),)},
    )
    changed = Draft(
        key="cust",
        fields={"email": "b@example.com", "firstName": "Ann"},
        collections={"addresses": (CollectionItem("home", {"key": "home", "city": "Paris"}),)},
    )

    actions = CUSTOMERS.diff_engine().diff(as_entity(customer), changed).actions

    assert [action.action for action in actions] == ["changeEmail", "changeAddress"]
    assert SHOPPING_LISTS.diff_engine().diff(as_entity(customer), customer).is_empty


def test_duplicate_specs_are_rejected() -> None:
    with pytest.raises(ValueError, match="twice"):
        UpdateActionDiffEngine([scalar("a", "setA"), scalar("a", "setA")])
