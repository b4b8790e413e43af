"""Field-by-field comparison of existing resources against drafts."""

from __future__ import annotations

from .custom_fields import build_custom_update_actions, build_set_custom_field_actions
from .engine import DiffResult, UpdateActionDiffEngine
from .specs import (
    AbsentValuePolicy,
    DiffContext,
    FieldSpec,
    collection,
    localized,
    reference,
    reference_set,
    scalar,
)

__all__ = [
    "AbsentValuePolicy",
    "DiffContext",
    "DiffResult",
    "FieldSpec",
    "UpdateActionDiffEngine",
    "build_custom_update_actions",
    "build_set_custom_field_actions",
    "collection",
    "localized",
    "reference",
    "reference_set",
    "scalar",
]
