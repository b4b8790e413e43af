"""Custom type and custom field diffing shared by every resource type."""

from __future__ import annotations

from typing import TYPE_CHECKING

from catalogsync.domain.model import (
    REMOVE_CUSTOM_TYPE,
    SET_CUSTOM_FIELD,
    SET_CUSTOM_TYPE,
    UpdateAction,
)

from .comparators import values_equal

if TYPE_CHECKING:
    from collections.abc import Mapping

    from catalogsync.domain.model import CustomFields, JsonValue

    from .specs import DiffContext


def build_custom_update_actions(
    old: CustomFields | None,
    new: CustomFields | None,
    ctx: DiffContext,
) -> list[UpdateAction]:
    """Return the custom-type and custom-field actions turning ``old`` into ``new``.

    - no custom on either side: nothing
    - custom only on the draft: set type with fields
    - custom only on the entity: remove type
    - different type keys: remove type, then set type with the new fields
    - same type: one ``setCustomField`` per changed, added or removed field
    """

    if old is None and new is None:
        return []
    if new is None:
        return [UpdateAction(REMOVE_CUSTOM_TYPE)]
    if not new.type.is_resolved:
        ctx.warn(
            f"Custom type of draft with key '{ctx.key}' is not resolved to a key; "
            "leaving custom fields unchanged."
        )
        return []
    if old is None:
        return [set_custom_type_action(new)]
    if not old.type.is_resolved:
        ctx.warn(
            f"Custom type '{old.type.id}' of existing resource with key '{ctx.key}' "
            "could not be resolved; leaving custom fields unchanged."
        )
        return []

    if old.type.key != new.type.key:
        return [UpdateAction(REMOVE_CUSTOM_TYPE), set_custom_type_action(new)]

    if new.fields is None:
        # same type but no fields in the draft: reset every field of the type
        if old.fields:
            return [set_custom_type_action(new)]
        return []

    return build_set_custom_field_actions(old.fields or {}, new.fields)


def build_set_custom_field_actions(
    old_fields: Mapping[str, JsonValue],
    new_fields: Mapping[str, JsonValue],
) -> list[UpdateAction]:
    """Set semantics: new or changed values are set, dropped values are unset."""

    actions = [
        _set_field(name, value)
        for name, value in new_fields.items()
        if value is not None and not values_equal(old_fields.get(name), value)
    ]
    actions.extend(
        _set_field(name, None)
        for name, value in old_fields.items()
        if value is not None and new_fields.get(name) is None
    )
    return actions


def set_custom_type_action(custom: CustomFields) -> UpdateAction:
    payload: dict[str, object] = {"type": custom.type.to_identifier()}
    if custom.fields is not None:
        payload["fields"] = dict(custom.fields)
    return UpdateAction(SET_CUSTOM_TYPE, payload)


def _set_field(name: str, value: JsonValue) -> UpdateAction:
    return UpdateAction(SET_CUSTOM_FIELD, {"name": name, "value": value})
