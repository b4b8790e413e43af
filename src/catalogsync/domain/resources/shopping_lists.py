"""Shopping list sync; line items are matched by SKU."""

from __future__ import annotations

from catalogsync.domain.diff import collection, localized, reference, scalar
from catalogsync.domain.model import ResourceType
from catalogsync.domain.sync import ResourceSyncStrategy

SHOPPING_LIST_FIELDS = (
    localized("name", "changeName", required=True),
    localized("slug", "setSlug"),
    localized("description", "setDescription"),
    scalar("anonymousId", "setAnonymousId"),
    scalar("deleteDaysAfterLastModification", "setDeleteDaysAfterLastModification"),
    reference("customer", "setCustomer", ResourceType.CUSTOMER),
    # the store has no reorder action for line items
    collection(
        "lineItems",
        add_action="addLineItem",
        remove_action="removeLineItem",
        change_action="changeLineItemQuantity",
        item_id_key="lineItemId",
    ),
)

SHOPPING_LISTS = ResourceSyncStrategy(
    resource_type=ResourceType.SHOPPING_LIST,
    name="shopping lists",
    field_specs=SHOPPING_LIST_FIELDS,
)
