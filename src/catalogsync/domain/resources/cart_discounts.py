"""Cart discount sync."""

from __future__ import annotations

from catalogsync.domain.diff import localized, scalar
from catalogsync.domain.model import ResourceType
from catalogsync.domain.sync import ResourceSyncStrategy

CART_DISCOUNT_FIELDS = (
    localized("name", "changeName", required=True),
    localized("description", "setDescription"),
    scalar("cartPredicate", "changeCartPredicate", required=True),
    scalar("value", "changeValue", required=True),
    scalar("target", "changeTarget"),
    scalar("sortOrder", "changeSortOrder", required=True),
    scalar("isActive", "changeIsActive"),
    scalar("requiresDiscountCode", "changeRequiresDiscountCode"),
    scalar("stackingMode", "changeStackingMode"),
    scalar("validFrom", "setValidFrom"),
    scalar("validUntil", "setValidUntil"),
)

CART_DISCOUNTS = ResourceSyncStrategy(
    resource_type=ResourceType.CART_DISCOUNT,
    name="cart discounts",
    field_specs=CART_DISCOUNT_FIELDS,
)
