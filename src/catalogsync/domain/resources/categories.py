"""Category sync: localized texts, parent link, assets."""

from __future__ import annotations

from catalogsync.domain.diff import collection, localized, reference, scalar
from catalogsync.domain.model import ResourceType
from catalogsync.domain.sync import ResourceSyncStrategy

PARENT = "parent"

CATEGORY_FIELDS = (
    reference(PARENT, "changeParent", ResourceType.CATEGORY, structural=True),
    localized("name", "changeName", required=True),
    localized("slug", "changeSlug", required=True),
    localized("description", "setDescription"),
    scalar("orderHint", "changeOrderHint"),
    scalar("externalId", "setExternalId"),
    localized("metaTitle", "setMetaTitle"),
    localized("metaDescription", "setMetaDescription"),
    localized("metaKeywords", "setMetaKeywords"),
    collection(
        "assets",
        add_action="addAsset",
        remove_action="removeAsset",
        change_action="changeAssetName",
        order_action="changeAssetOrder",
        item_id_key="assetId",
        payload_key="asset",
    ),
)

CATEGORIES = ResourceSyncStrategy(
    resource_type=ResourceType.CATEGORY,
    name="categories",
    field_specs=CATEGORY_FIELDS,
    dependency_field=PARENT,
)
