"""Per-field comparators for plain values and references.

Values compare by exact equality: no float tolerance, localized strings as
plain mappings. References compare by key since ids differ per environment.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING

from catalogsync.domain.errors import DiffError
from catalogsync.domain.model import Reference, UpdateAction

if TYPE_CHECKING:
    from catalogsync.domain.model import Draft, Entity, ReferenceValue

    from .specs import DiffContext, FieldSpec


def values_equal(old: object, new: object) -> bool:
    if isinstance(old, Mapping) and isinstance(new, Mapping):
        return dict(old) == dict(new)  # pyright: ignore[reportUnknownArgumentType]
    return old == new


def diff_value(
    spec: FieldSpec, existing: Entity, draft: Draft, ctx: DiffContext
) -> list[UpdateAction]:
    """Compare a scalar or localized field."""

    old = existing.fields.get(spec.name)
    if spec.name not in draft.fields:
        ctx.unspecified(spec, old)
        return []

    new = draft.fields[spec.name]
    if values_equal(old, new):
        return []
    if spec.immutable:
        ctx.warn(
            f"'{spec.name}' of resource with key '{ctx.key}' cannot be changed "
            f"from {old!r} to {new!r}; ignoring."
        )
        return []
    if new is None:
        return _clear(spec, ctx)
    return [UpdateAction(spec.action, {spec.wire_name: new})]


def diff_reference(
    spec: FieldSpec, existing: Entity, draft: Draft, ctx: DiffContext
) -> list[UpdateAction]:
    """Compare a single-valued reference field by resolved key."""

    old = _single(spec, existing.references.get(spec.name))
    if spec.name not in draft.references:
        ctx.unspecified(spec, old.key if old is not None else None)
        return []

    new = _single(spec, draft.references[spec.name])
    if new is None:
        if old is None:
            return []
        return _clear(spec, ctx)
    if not new.is_resolved:
        ctx.warn(
            f"'{spec.name}' of draft with key '{ctx.key}' is not resolved to a key; "
            "treating it as unchanged."
        )
        return []
    if old is not None and not old.is_resolved:
        ctx.warn(
            f"'{spec.name}' of existing resource with key '{ctx.key}' points to "
            f"{old.type_id} '{old.id}' whose key is unknown; treating it as unchanged."
        )
        return []
    if old is not None and old.key == new.key:
        return []
    if spec.immutable:
        ctx.warn(
            f"'{spec.name}' of resource with key '{ctx.key}' cannot be changed "
            f"to '{new.key}'; ignoring."
        )
        return []
    return [UpdateAction(spec.action, {spec.wire_name: new.to_identifier()})]


def diff_reference_set(
    spec: FieldSpec, existing: Entity, draft: Draft, ctx: DiffContext
) -> list[UpdateAction]:
    """Compare a multi-valued reference field; removals precede additions."""

    if spec.name not in draft.references:
        return []

    old_refs = _many(spec, existing.references.get(spec.name))
    new_refs = _many(spec, draft.references[spec.name])
    if any(not ref.is_resolved for ref in (*old_refs, *new_refs)):
        ctx.warn(
            f"'{spec.name}' of resource with key '{ctx.key}' holds unresolved references; "
            "treating it as unchanged."
        )
        return []

    old_keys = {ref.key for ref in old_refs}
    new_keys = {ref.key for ref in new_refs}
    remove_action = spec.remove_action or spec.action
    removals = [
        UpdateAction(remove_action, {spec.wire_name: ref.to_identifier()})
        for ref in old_refs
        if ref.key not in new_keys
    ]
    additions = [
        UpdateAction(spec.action, {spec.wire_name: ref.to_identifier()})
        for ref in new_refs
        if ref.key not in old_keys
    ]
    return [*removals, *additions]


def _clear(spec: FieldSpec, ctx: DiffContext) -> list[UpdateAction]:
    if spec.required:
        ctx.warn(
            f"'{spec.name}' of resource with key '{ctx.key}' is required and cannot be unset; "
            "keeping the existing value."
        )
        return []
    return [UpdateAction(spec.action)]


def _single(spec: FieldSpec, value: ReferenceValue) -> Reference | None:
    if value is None or isinstance(value, Reference):
        return value
    raise DiffError(f"'{spec.name}' should hold a single reference, got {len(value)}")


def _many(spec: FieldSpec, value: ReferenceValue) -> tuple[Reference, ...]:
    if value is None:
        return ()
    if isinstance(value, Reference):
        raise DiffError(f"'{spec.name}' should hold a set of references, got a single one")
    return value
