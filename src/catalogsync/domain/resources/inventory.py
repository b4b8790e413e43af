"""Inventory entry sync."""

from __future__ import annotations

from typing import TYPE_CHECKING

from catalogsync.domain.diff import reference, scalar
from catalogsync.domain.model import ResourceType
from catalogsync.domain.sync import ResourceSyncStrategy

if TYPE_CHECKING:
    from collections.abc import Iterator

    from catalogsync.domain.model import Draft

INVENTORY_FIELDS = (
    scalar("sku", "changeSku", required=True, immutable=True),
    reference("supplyChannel", "setSupplyChannel", ResourceType.CHANNEL),
    scalar("quantityOnStock", "changeQuantity", payload_key="quantity", required=True),
    scalar("restockableInDays", "setRestockableInDays"),
    scalar("expectedDelivery", "setExpectedDelivery"),
)


def validate_inventory_entry(draft: Draft) -> Iterator[str]:
    sku = draft.fields.get("sku")
    if not isinstance(sku, str) or not sku.strip():
        yield "sku is required"
    quantity = draft.fields.get("quantityOnStock")
    if quantity is not None and (not isinstance(quantity, int) or quantity < 0):
        yield f"quantityOnStock must be a non-negative integer, got {quantity!r}"


INVENTORY_ENTRIES = ResourceSyncStrategy(
    resource_type=ResourceType.INVENTORY_ENTRY,
    name="inventory entries",
    field_specs=INVENTORY_FIELDS,
    validator=validate_inventory_entry,
)
