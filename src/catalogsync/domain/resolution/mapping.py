"""Pure mapping step: rewrite draft references using the populated cache.

Nothing here performs I/O. Tests only need to pre-populate a cache.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING

from catalogsync.domain.errors import UnresolvableReferenceWarning

if TYPE_CHECKING:
    from catalogsync.domain.cache import ReferenceIdToKeyCache
    from catalogsync.domain.model import Draft, Reference, ReferenceValue


@dataclass(slots=True)
class ResolvedDraft:
    """Draft with every reference addressed by key, plus what could not be resolved."""

    draft: Draft
    source: Draft
    warnings: list[UnresolvableReferenceWarning] = field(
        default_factory=list[UnresolvableReferenceWarning]
    )


def resolve_draft(draft: Draft, cache: ReferenceIdToKeyCache) -> ResolvedDraft:
    """Return ``draft`` with reference ids replaced by keys read from ``cache``.

    An unresolvable single reference is dropped from ``references`` (the field
    becomes unspecified); unresolvable members of a multi-valued field are
    dropped from the tuple. An unresolvable custom type is kept as-is and left
    for the diff and create steps to skip.
    """

    warnings: list[UnresolvableReferenceWarning] = []
    references: dict[str, ReferenceValue] = {}

    for name, value in draft.references.items():
        if value is None:
            references[name] = None
        elif isinstance(value, tuple):
            resolved_items: list[Reference] = []
            for reference in value:
                resolved = _resolve_one(reference, cache)
                if resolved is None:
                    warnings.append(_warning(draft, name, reference))
                else:
                    resolved_items.append(resolved)
            references[name] = tuple(resolved_items)
        else:
            resolved = _resolve_one(value, cache)
            if resolved is None:
                warnings.append(_warning(draft, name, value))
            else:
                references[name] = resolved

    result = draft.with_references(references)
    if draft.custom is not None:
        custom_type = _resolve_one(draft.custom.type, cache)
        if custom_type is None:
            warnings.append(_warning(draft, "custom.type", draft.custom.type))
        else:
            result = result.with_custom(replace(draft.custom, type=custom_type))

    return ResolvedDraft(draft=result, source=draft, warnings=warnings)


def _resolve_one(reference: Reference, cache: ReferenceIdToKeyCache) -> Reference | None:
    if reference.is_resolved:
        return reference
    if reference.id is None:
        return None
    key = cache.get(reference.id)
    if key is None:
        return None
    return reference.with_key(key)


def _warning(draft: Draft, field_name: str, reference: Reference) -> UnresolvableReferenceWarning:
    return UnresolvableReferenceWarning(
        f"Reference '{field_name}' of resource with key '{draft.key}' points to "
        f"{reference.type_id} with id '{reference.id}' which could not be resolved to a key.",
        field_name=field_name,
        reference_id=reference.id,
    )
