"""Field descriptions and shared state for one diff run."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

from catalogsync.domain.errors import SyncWarning
from catalogsync.domain.model import FieldKind

if TYPE_CHECKING:
    from catalogsync.domain.model import ResourceType

log = getLogger(__name__)


class AbsentValuePolicy(StrEnum):
    """What to do when a draft leaves a field unspecified but the entity has a value."""

    SKIP = "skip"
    WARN = "warn"


@dataclass(frozen=True, slots=True)
class FieldSpec:
    """How one comparable field maps to update actions.

    ``action`` is the change/set action for plain and reference fields and
    the add action for reference sets and collections. ``payload_key``
    defaults to ``name``.
    """

    name: str
    kind: FieldKind
    action: str
    payload_key: str | None = None
    required: bool = False
    structural: bool = False
    immutable: bool = False
    reference_type: ResourceType | None = None
    remove_action: str | None = None
    change_action: str | None = None
    order_action: str | None = None
    item_id_key: str = "id"
    ordered: bool = True

    @property
    def wire_name(self) -> str:
        return self.payload_key or self.name


def scalar(
    name: str,
    action: str,
    *,
    payload_key: str | None = None,
    required: bool = False,
    immutable: bool = False,
) -> FieldSpec:
    return FieldSpec(
        name=name,
        kind=FieldKind.SCALAR,
        action=action,
        payload_key=payload_key,
        required=required,
        immutable=immutable,
    )


def localized(
    name: str,
    action: str,
    *,
    payload_key: str | None = None,
    required: bool = False,
) -> FieldSpec:
    return FieldSpec(
        name=name,
        kind=FieldKind.LOCALIZED,
        action=action,
        payload_key=payload_key,
        required=required,
    )


def reference(
    name: str,
    action: str,
    reference_type: ResourceType,
    *,
    payload_key: str | None = None,
    required: bool = False,
    structural: bool = False,
    immutable: bool = False,
) -> FieldSpec:
    return FieldSpec(
        name=name,
        kind=FieldKind.REFERENCE,
        action=action,
        reference_type=reference_type,
        payload_key=payload_key,
        required=required,
        structural=structural,
        immutable=immutable,
    )


def reference_set(
    name: str,
    add_action: str,
    remove_action: str,
    reference_type: ResourceType,
    *,
    payload_key: str | None = None,
) -> FieldSpec:
    return FieldSpec(
        name=name,
        kind=FieldKind.REFERENCE_SET,
        action=add_action,
        remove_action=remove_action,
        reference_type=reference_type,
        payload_key=payload_key,
    )


def collection(
    name: str,
    *,
    add_action: str,
    remove_action: str,
    change_action: str,
    order_action: str | None = None,
    item_id_key: str = "id",
    payload_key: str | None = None,
    ordered: bool = True,
) -> FieldSpec:
    """Ordered collection by default; ``ordered=False`` treats it as a set by identity."""

    return FieldSpec(
        name=name,
        kind=FieldKind.COLLECTION,
        action=add_action,
        remove_action=remove_action,
        change_action=change_action,
        order_action=order_action,
        item_id_key=item_id_key,
        payload_key=payload_key,
        ordered=ordered,
    )


@dataclass(slots=True)
class DiffContext:
    """Per-entity state collected while comparing fields."""

    key: str | None
    absent_policy: AbsentValuePolicy = AbsentValuePolicy.SKIP
    warnings: list[SyncWarning] = field(default_factory=list[SyncWarning])

    def warn(self, message: str) -> None:
        log.debug(message)
        self.warnings.append(SyncWarning(message))

    def unspecified(self, spec: FieldSpec, existing_value: object) -> None:
        if existing_value is None or self.absent_policy is AbsentValuePolicy.SKIP:
            return
        self.warn(
            f"Draft with key '{self.key}' does not specify '{spec.name}'; "
            f"keeping the existing value {existing_value!r}."
        )
