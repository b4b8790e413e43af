"""Edit scripts for ordered collections (assets, addresses, line items, attributes).

Items are paired by ``identity``. Actions target the store-assigned item ``id``
when the existing item has one and fall back to the identity otherwise.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from catalogsync.domain.errors import DiffError
from catalogsync.domain.model import UpdateAction

from .comparators import values_equal

if TYPE_CHECKING:
    from collections.abc import Sequence

    from catalogsync.domain.model import CollectionItem, Draft, Entity

    from .specs import DiffContext, FieldSpec


def diff_collection(
    spec: FieldSpec, existing: Entity, draft: Draft, ctx: DiffContext
) -> list[UpdateAction]:
    """Compare a collection field, by position or as a set keyed by identity."""

    if spec.name not in draft.collections:
        return []

    old_items = tuple(existing.collections.get(spec.name, ()))
    new_items = tuple(draft.collections[spec.name])
    _ensure_unique(spec, old_items, owner="existing resource", key=ctx.key)
    _ensure_unique(spec, new_items, owner="draft", key=ctx.key)

    if not spec.ordered:
        return _matching_edit_script(spec, old_items, new_items)
    if spec.order_action is None:
        return _positional_edit_script(spec, old_items, new_items)
    return _reordering_edit_script(spec, old_items, new_items)


def _reordering_edit_script(
    spec: FieldSpec,
    old_items: Sequence[CollectionItem],
    new_items: Sequence[CollectionItem],
) -> list[UpdateAction]:
    """Removes, per-item changes, one change-order, then adds at their position."""

    old_by_identity = {item.identity: item for item in old_items}
    new_identities = {item.identity for item in new_items}
    removals, changes = _removals_and_changes(spec, old_items, new_items)

    kept_old_order = [item.identity for item in old_items if item.identity in new_identities]
    kept_new_order = [item.identity for item in new_items if item.identity in old_by_identity]
    reorder: list[UpdateAction] = []
    if kept_old_order != kept_new_order and spec.order_action is not None:
        reorder.append(
            UpdateAction(
                spec.order_action,
                {"order": [_handle(old_by_identity[identity]) for identity in kept_new_order]},
            )
        )

    additions = [
        _add(spec, item, position=position)
        for position, item in enumerate(new_items)
        if item.identity not in old_by_identity
    ]
    return [*removals, *changes, *reorder, *additions]


def _matching_edit_script(
    spec: FieldSpec,
    old_items: Sequence[CollectionItem],
    new_items: Sequence[CollectionItem],
) -> list[UpdateAction]:
    """Position is irrelevant: removes, per-item changes, then adds."""

    old_identities = {item.identity for item in old_items}
    removals, changes = _removals_and_changes(spec, old_items, new_items)
    additions = [_add(spec, item) for item in new_items if item.identity not in old_identities]
    return [*removals, *changes, *additions]


def _removals_and_changes(
    spec: FieldSpec,
    old_items: Sequence[CollectionItem],
    new_items: Sequence[CollectionItem],
) -> tuple[list[UpdateAction], list[UpdateAction]]:
    old_by_identity = {item.identity: item for item in old_items}
    new_identities = {item.identity for item in new_items}
    removals = [_remove(spec, item) for item in old_items if item.identity not in new_identities]
    changes = [
        _change(spec, old_by_identity[item.identity], item)
        for item in new_items
        if item.identity in old_by_identity
        and not values_equal(old_by_identity[item.identity].values, item.values)
    ]
    return removals, changes


def _positional_edit_script(
    spec: FieldSpec,
    old_items: Sequence[CollectionItem],
    new_items: Sequence[CollectionItem],
) -> list[UpdateAction]:
    """For stores without a reorder operation.

    Items are compared position by position; from the first position whose
    identity differs every remaining old item is removed and every remaining
    new item added, which restores the draft order.
    """

    actions: list[UpdateAction] = []
    first_difference = min(len(old_items), len(new_items))
    for index in range(first_difference):
        old, new = old_items[index], new_items[index]
        if old.identity != new.identity:
            first_difference = index
            break
        if not values_equal(old.values, new.values):
            actions.append(_change(spec, old, new))

    actions.extend(_remove(spec, item) for item in old_items[first_difference:])
    actions.extend(_add(spec, item) for item in new_items[first_difference:])
    return actions


def _ensure_unique(
    spec: FieldSpec, items: Sequence[CollectionItem], *, owner: str, key: str | None
) -> None:
    seen: set[str] = set()
    for item in items:
        if item.identity in seen:
            raise DiffError(
                f"'{spec.name}' of {owner} with key '{key}' contains '{item.identity}' twice"
            )
        seen.add(item.identity)


def _handle(item: CollectionItem) -> str:
    return item.id or item.identity


def _add(spec: FieldSpec, item: CollectionItem, *, position: int | None = None) -> UpdateAction:
    payload: dict[str, object] = (
        {spec.payload_key: dict(item.values)} if spec.payload_key else dict(item.values)
    )
    if position is not None:
        payload["position"] = position
    return UpdateAction(spec.action, payload)


def _remove(spec: FieldSpec, item: CollectionItem) -> UpdateAction:
    return UpdateAction(spec.remove_action or spec.action, {spec.item_id_key: _handle(item)})


def _change(spec: FieldSpec, old: CollectionItem, new: CollectionItem) -> UpdateAction:
    values = {spec.payload_key: dict(new.values)} if spec.payload_key else dict(new.values)
    return UpdateAction(
        spec.change_action or spec.action,
        {spec.item_id_key: _handle(old), **values},
    )
