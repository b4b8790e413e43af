"""Enumerations shared across the domain model."""

from __future__ import annotations

from enum import StrEnum


class ResourceType(StrEnum):
    """Resource types addressable in the target store.

    Values double as reference ``typeId`` values and as URL path segments.
    """

    CATEGORY = "category"
    PRODUCT = "product"
    PRODUCT_TYPE = "product-type"
    CUSTOMER = "customer"
    CUSTOMER_GROUP = "customer-group"
    CART_DISCOUNT = "cart-discount"
    INVENTORY_ENTRY = "inventory-entry"
    SHOPPING_LIST = "shopping-list"
    CHANNEL = "channel"
    TYPE = "type"
    TAX_CATEGORY = "tax-category"
    STATE = "state"


class FieldKind(StrEnum):
    """Comparable field groups understood by the diff engine."""

    SCALAR = "scalar"
    LOCALIZED = "localized"
    REFERENCE = "reference"
    REFERENCE_SET = "reference-set"
    COLLECTION = "collection"
