"""Batch checks run before any remote call."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from catalogsync.domain.errors import BatchValidationError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from catalogsync.domain.model import Draft

    from .strategy import ResourceSyncStrategy


@dataclass(slots=True)
class ValidatedBatch:
    valid: list[Draft] = field(default_factory=list["Draft"])
    invalid: list[tuple[Draft | None, BatchValidationError]] = field(
        default_factory=list[tuple["Draft | None", BatchValidationError]]
    )


def validate_batch(
    drafts: Sequence[Draft | None], strategy: ResourceSyncStrategy
) -> ValidatedBatch:
    """Split ``drafts`` into valid drafts and rejected ones with their error.

    Rejected: ``None`` entries, drafts without a non-blank key, later
    occurrences of a key already seen in the batch, and drafts failing the
    strategy's own validator.
    """

    result = ValidatedBatch()
    seen: set[str] = set()
    for draft in drafts:
        if draft is None:
            result.invalid.append((None, BatchValidationError(f"{strategy.name} draft is null.")))
            continue

        key = strategy.key_of(draft)
        if key is None or not key.strip():
            result.invalid.append(
                (draft, BatchValidationError(f"{strategy.name} draft has no key."))
            )
            continue
        if key in seen:
            result.invalid.append(
                (
                    draft,
                    BatchValidationError(
                        f"{strategy.name} draft with key '{key}' appears more than once "
                        "in the batch."
                    ),
                )
            )
            continue

        problems = strategy.validate(draft)
        if problems:
            result.invalid.append(
                (
                    draft,
                    BatchValidationError(
                        f"{strategy.name} draft with key '{key}' is invalid: "
                        + "; ".join(problems)
                    ),
                )
            )
            continue

        seen.add(key)
        result.valid.append(draft)
    return result
