"""Product sync: texts, product type, tax category, state, categories, attributes."""

from __future__ import annotations

from typing import TYPE_CHECKING

from catalogsync.domain.diff import collection, localized, reference, reference_set
from catalogsync.domain.model import Reference, ResourceType
from catalogsync.domain.sync import ResourceSyncStrategy

if TYPE_CHECKING:
    from collections.abc import Iterator

    from catalogsync.domain.model import Draft

PRODUCT_FIELDS = (
    reference("productType", "changeProductType", ResourceType.PRODUCT_TYPE, immutable=True),
    localized("name", "changeName", required=True),
    localized("slug", "changeSlug", required=True),
    localized("description", "setDescription"),
    localized("metaTitle", "setMetaTitle"),
    localized("metaDescription", "setMetaDescription"),
    reference("taxCategory", "setTaxCategory", ResourceType.TAX_CATEGORY),
    reference("state", "transitionState", ResourceType.STATE),
    reference_set(
        "categories",
        "addToCategory",
        "removeFromCategory",
        ResourceType.CATEGORY,
        payload_key="category",
    ),
    collection(
        "attributes",
        add_action="setAttributeInAllVariants",
        remove_action="setAttributeInAllVariants",
        change_action="setAttributeInAllVariants",
        item_id_key="name",
        ordered=False,
    ),
)


def validate_product(draft: Draft) -> Iterator[str]:
    product_type = draft.references.get("productType")
    if not isinstance(product_type, Reference):
        yield "a product type reference is required"


PRODUCTS = ResourceSyncStrategy(
    resource_type=ResourceType.PRODUCT,
    name="products",
    field_specs=PRODUCT_FIELDS,
    custom_fields=False,
    validator=validate_product,
)
