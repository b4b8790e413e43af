from __future__ import annotations

import pytest

from catalogsync.domain.diff import DiffContext
from catalogsync.domain.diff.ordered import diff_collection
from catalogsync.domain.errors import DiffError
from catalogsync.domain.model import CollectionItem, Draft, Entity, UpdateAction
from catalogsync.domain.resources.categories import CATEGORY_FIELDS
from catalogsync.domain.resources.products import PRODUCT_FIELDS
from catalogsync.domain.resources.shopping_lists import SHOPPING_LIST_FIELDS

ASSETS = next(spec for spec in CATEGORY_FIELDS if spec.name == "assets")
LINE_ITEMS = next(spec for spec in SHOPPING_LIST_FIELDS if spec.name == "lineItems")
ATTRIBUTES = next(spec for spec in PRODUCT_FIELDS if spec.name == "attributes")


def _asset(key: str, name: str, *, id_: str | None = None) -> CollectionItem:
    return CollectionItem(identity=key, values={"key": key, "name": {"en": name}}, id=id_)


def _line_item(sku: str, quantity: int, *, id_: str | None = None) -> CollectionItem:
    return CollectionItem(identity=sku, values={"sku": sku, "quantity": quantity}, id=id_)


def _attribute(name: str, value: object) -> CollectionItem:
    return CollectionItem(identity=name, values={"name": name, "value": value})


def _entity(name: str, items: tuple[CollectionItem, ...]) -> Entity:
    return Entity(key="k", collections={name: items}, id="e", version=1)


def test_reorderable_collection_edit_script() -> None:
    existing = _entity(
        "assets",
        (_asset("a", "A", id_="a1"), _asset("b", "B", id_="b1"), _asset("c", "C", id_="c1")),
    )
    draft = Draft(
        key="k", collections={"assets": (_asset("c", "C"), _asset("a", "A2"), _asset("d", "D"))}
    )

    actions = diff_collection(ASSETS, existing, draft, DiffContext(key="k"))

    assert actions == [
        UpdateAction("removeAsset", {"assetId": "b1"}),
        UpdateAction(
            "changeAssetName", {"assetId": "a1", "asset": {"key": "a", "name": {"en": "A2"}}}
        ),
        UpdateAction("changeAssetOrder", {"order": ["c1", "a1"]}),
        UpdateAction("addAsset", {"asset": {"key": "d", "name": {"en": "D"}}, "position": 2}),
    ]


def test_single_changed_element_only_touches_that_element() -> None:
    items = tuple(_asset(key, key.upper(), id_=f"{key}1") for key in "abcde")
    existing = _entity("assets", items)
    changed = (*items[:2], _asset("c", "changed"), *items[3:])

    actions = diff_collection(
        ASSETS, existing, Draft(key="k", collections={"assets": changed}), DiffContext(key="k")
    )

    assert [action.action for action in actions] == ["changeAssetName"]


def test_unspecified_collection_is_left_alone() -> None:
    existing = _entity("assets", (_asset("a", "A", id_="a1"),))

    assert diff_collection(ASSETS, existing, Draft(key="k"), DiffContext(key="k")) == []


def test_positional_collection_re_adds_from_first_difference() -> None:
    existing = _entity(
        "lineItems",
        (_line_item("x", 1, id_="l1"), _line_item("y", 1, id_="l2"), _line_item("z", 1, id_="l3")),
    )
    draft = Draft(key="k", collections={"lineItems": (_line_item("x", 2), _line_item("z", 1))})

    actions = diff_collection(LINE_ITEMS, existing, draft, DiffContext(key="k"))

    assert actions == [
        UpdateAction("changeLineItemQuantity", {"lineItemId": "l1", "sku": "x", "quantity": 2}),
        UpdateAction("removeLineItem", {"lineItemId": "l2"}),
        UpdateAction("removeLineItem", {"lineItemId": "l3"}),
        UpdateAction("addLineItem", {"sku": "z", "quantity": 1}),
    ]


def test_positional_collection_appends_new_tail() -> None:
    existing = _entity("lineItems", (_line_item("x", 1, id_="l1"),))
    draft = Draft(key="k", collections={"lineItems": (_line_item("x", 1), _line_item("y", 3))})

    assert diff_collection(LINE_ITEMS, existing, draft, DiffContext(key="k")) == [
        UpdateAction("addLineItem", {"sku": "y", "quantity": 3})
    ]


def test_duplicate_identities_raise() -> None:
    existing = _entity("lineItems", (_line_item("x", 1, id_="l1"), _line_item("x", 2, id_="l2")))
    draft = Draft(key="k", collections={"lineItems": (_line_item("x", 1),)})

    with pytest.raises(DiffError, match="twice"):
        diff_collection(LINE_ITEMS, existing, draft, DiffContext(key="k"))


def test_attribute_order_is_irrelevant() -> None:
    existing = _entity("attributes", (_attribute("color", "red"), _attribute("size", "M")))
    draft = Draft(
        key="k",
        collections={"attributes": (_attribute("size", "M"), _attribute("color", "red"))},
    )

    assert diff_collection(ATTRIBUTES, existing, draft, DiffContext(key="k")) == []


def test_attributes_set_only_changed_added_and_removed_names() -> None:
    existing = _entity(
        "attributes",
        (_attribute("color", "red"), _attribute("size", "M"), _attribute("fit", "slim")),
    )
    draft = Draft(
        key="k",
        collections={
            "attributes": (
                _attribute("material", "wool"),
                _attribute("size", "L"),
                _attribute("color", "red"),
            )
        },
    )

    actions = diff_collection(ATTRIBUTES, existing, draft, DiffContext(key="k"))

    assert actions == [
        UpdateAction("setAttributeInAllVariants", {"name": "fit"}),
        UpdateAction("setAttributeInAllVariants", {"name": "size", "value": "L"}),
        UpdateAction("setAttributeInAllVariants", {"name": "material", "value": "wool"}),
    ]
