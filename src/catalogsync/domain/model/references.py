"""Typed pointers between resources."""

from __future__ import annotations

from dataclasses import dataclass, replace

from .enums import ResourceType


@dataclass(frozen=True, slots=True)
class Reference:
    """Pointer from one resource to another, addressed by ``id`` or ``key``.

    A reference coming from a source system usually carries only the opaque
    ``id``. Resolution fills in the stable ``key`` which is what gets compared
    and sent to the target store.
    """

    type_id: ResourceType
    id: str | None = None
    key: str | None = None

    def __post_init__(self) -> None:
        if self.id is None and self.key is None:
            raise ValueError(f"Reference to {self.type_id} needs an id or a key")

    @property
    def is_resolved(self) -> bool:
        return self.key is not None

    def with_key(self, key: str) -> Reference:
        return replace(self, key=key)

    def to_identifier(self) -> dict[str, str]:
        """Return the wire form, preferring the key."""

        if self.key is not None:
            return {"typeId": str(self.type_id), "key": self.key}
        return {"typeId": str(self.type_id), "id": self.id or ""}

    @classmethod
    def by_key(cls, type_id: ResourceType, key: str) -> Reference:
        return cls(type_id=type_id, key=key)

    @classmethod
    def by_id(cls, type_id: ResourceType, id_: str) -> Reference:
        return cls(type_id=type_id, id=id_)


type ReferenceValue = Reference | tuple[Reference, ...] | None
