"""Compute the ordered update actions that turn an entity into its draft."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from catalogsync.domain.errors import SyncWarning
from catalogsync.domain.model import FieldKind, UpdateAction

from .comparators import diff_reference, diff_reference_set, diff_value
from .custom_fields import build_custom_update_actions
from .ordered import diff_collection
from .specs import AbsentValuePolicy, DiffContext

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from catalogsync.domain.model import Draft, Entity

    from .specs import FieldSpec

    type FieldComparator = Callable[[FieldSpec, Entity, Draft, DiffContext], list[UpdateAction]]

log = getLogger(__name__)


@dataclass(slots=True)
class DiffResult:
    actions: list[UpdateAction] = field(default_factory=list[UpdateAction])
    warnings: list[SyncWarning] = field(default_factory=list[SyncWarning])

    @property
    def is_empty(self) -> bool:
        return not self.actions


_COMPARATORS: dict[FieldKind, FieldComparator] = {
    FieldKind.SCALAR: diff_value,
    FieldKind.LOCALIZED: diff_value,
    FieldKind.REFERENCE: diff_reference,
    FieldKind.REFERENCE_SET: diff_reference_set,
    FieldKind.COLLECTION: diff_collection,
}


class UpdateActionDiffEngine:
    """Diff one resource type according to its field specs.

    Action order is deterministic: structural changes first (for example a
    category's parent), then plain and reference fields in declaration order,
    then custom type and custom field actions, then collection edits. Two
    equal inputs always produce an empty list.
    """

    def __init__(
        self,
        specs: Sequence[FieldSpec],
        *,
        absent_policy: AbsentValuePolicy = AbsentValuePolicy.SKIP,
        custom_fields: bool = True,
    ) -> None:
        names = [spec.name for spec in specs]
        duplicates = {name for name in names if names.count(name) > 1}
        if duplicates:
            raise ValueError(f"Field specs declared twice: {sorted(duplicates)}")
        self.specs = tuple(specs)
        self.absent_policy = absent_policy
        self.custom_fields = custom_fields

    def diff(self, existing: Entity, draft: Draft) -> DiffResult:
        ctx = DiffContext(key=draft.key, absent_policy=self.absent_policy)
        collections = [spec for spec in self.specs if spec.kind is FieldKind.COLLECTION]
        plain = [spec for spec in self.specs if spec.kind is not FieldKind.COLLECTION]
        structural = [spec for spec in plain if spec.structural]
        content = [spec for spec in plain if not spec.structural]

        actions: list[UpdateAction] = []
        for spec in (*structural, *content):
            actions.extend(_COMPARATORS[spec.kind](spec, existing, draft, ctx))
        if self.custom_fields:
            actions.extend(build_custom_update_actions(existing.custom, draft.custom, ctx))
        for spec in collections:
            actions.extend(diff_collection(spec, existing, draft, ctx))

        if actions:
            log.debug("%d update actions for resource with key '%s'", len(actions), draft.key)
        return DiffResult(actions=actions, warnings=ctx.warnings)
