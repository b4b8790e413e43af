"""Per-resource capability set consumed by the generic orchestrator."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from catalogsync.domain.diff import AbsentValuePolicy, UpdateActionDiffEngine
from catalogsync.domain.model import Reference

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Iterator

    from catalogsync.domain.diff import FieldSpec
    from catalogsync.domain.model import Draft, ResourceType

    type DraftValidator = Callable[[Draft], Iterable[str]]


@dataclass(frozen=True, slots=True)
class ResourceSyncStrategy:
    """Everything the orchestrator needs to know about one resource type.

    ``dependency_field`` names a reference field pointing at another resource
    of the same type (a category's parent). Drafts whose dependency does not
    exist yet are deferred to a second pass. ``validator`` returns error
    messages for a draft; an empty result means the draft is valid.
    """

    resource_type: ResourceType
    name: str
    field_specs: tuple[FieldSpec, ...]
    custom_fields: bool = True
    dependency_field: str | None = None
    validator: DraftValidator | None = field(default=None, repr=False)

    def extract_references(self, draft: Draft) -> Iterator[tuple[str, Reference]]:
        return draft.iter_references()

    def key_of(self, draft: Draft) -> str | None:
        return draft.key

    def diff_engine(
        self, absent_policy: AbsentValuePolicy = AbsentValuePolicy.SKIP
    ) -> UpdateActionDiffEngine:
        return UpdateActionDiffEngine(
            self.field_specs, absent_policy=absent_policy, custom_fields=self.custom_fields
        )

    def validate(self, draft: Draft) -> list[str]:
        if self.validator is None:
            return []
        return list(self.validator(draft))

    def dependency_key(self, draft: Draft) -> str | None:
        """Key of the same-type resource ``draft`` depends on, if any."""

        if self.dependency_field is None:
            return None
        value = draft.references.get(self.dependency_field)
        if isinstance(value, Reference) and value.type_id == self.resource_type:
            return value.key
        return None

    def build_create(self, draft: Draft) -> Draft:
        """Return the draft to send for a create, without unresolved references."""

        references = {
            name: _resolved_only(value) for name, value in draft.references.items()
        }
        cleaned = draft.with_references(
            {name: value for name, value in references.items() if value is not None}
        )
        if draft.custom is not None and not draft.custom.type.is_resolved:
            cleaned = cleaned.with_custom(None)
        return cleaned


def _resolved_only(
    value: Reference | tuple[Reference, ...] | None,
) -> Reference | tuple[Reference, ...] | None:
    if value is None:
        return None
    if isinstance(value, tuple):
        return tuple(reference for reference in value if reference.is_resolved)
    return value if value.is_resolved else None
