"""Shipped resource strategies, addressable by name."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .cart_discounts import CART_DISCOUNTS
from .categories import CATEGORIES
from .customers import CUSTOMERS
from .inventory import INVENTORY_ENTRIES
from .products import PRODUCTS
from .shopping_lists import SHOPPING_LISTS

if TYPE_CHECKING:
    from catalogsync.domain.sync import ResourceSyncStrategy

STRATEGIES: dict[str, ResourceSyncStrategy] = {
    "categories": CATEGORIES,
    "products": PRODUCTS,
    "customers": CUSTOMERS,
    "cart-discounts": CART_DISCOUNTS,
    "inventory-entries": INVENTORY_ENTRIES,
    "shopping-lists": SHOPPING_LISTS,
}


def get_strategy(name: str) -> ResourceSyncStrategy:
    try:
        return STRATEGIES[name]
    except KeyError:
        raise ValueError(
            f"Unknown resource '{name}', expected one of: {', '.join(sorted(STRATEGIES))}"
        ) from None


__all__ = [
    "CART_DISCOUNTS",
    "CATEGORIES",
    "CUSTOMERS",
    "INVENTORY_ENTRIES",
    "PRODUCTS",
    "SHOPPING_LISTS",
    "STRATEGIES",
    "get_strategy",
]
