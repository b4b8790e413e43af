"""Drafts and entities handled by the sync engine.

Per-resource business values are kept opaque: a draft is a bag of plain field
values, reference fields, optional custom fields and ordered collections. The
resource strategies decide which of those entries are meaningful.
"""

# pyright: reportUnknownVariableType=false

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping

    from .references import Reference, ReferenceValue

type JsonValue = Any
type LocalizedString = Mapping[str, str]


@dataclass(frozen=True, slots=True)
class CustomFields:
    """Custom type reference plus its field values."""

    type: Reference
    fields: Mapping[str, JsonValue] | None = None


@dataclass(frozen=True, slots=True)
class CollectionItem:
    """One element of an ordered collection.

    ``identity`` is the caller-stable handle used to pair old and new items
    (SKU, address key, attribute name). ``id`` is the store-assigned handle
    that remove/change actions must target; drafts leave it unset.
    """

    identity: str
    values: Mapping[str, JsonValue] = field(default_factory=dict)
    id: str | None = None


@dataclass(frozen=True, slots=True)
class Draft:
    """Desired state of a resource as supplied by the caller.

    A field name missing from ``fields`` means "unspecified"; a field present
    with value ``None`` means the caller explicitly cleared it.
    """

    key: str | None
    fields: Mapping[str, JsonValue] = field(default_factory=dict)
    references: Mapping[str, ReferenceValue] = field(default_factory=dict)
    custom: CustomFields | None = None
    collections: Mapping[str, tuple[CollectionItem, ...]] = field(default_factory=dict)

    def iter_references(self) -> Iterator[tuple[str, Reference]]:
        """Yield ``(field_name, reference)`` pairs, flattening multi-valued fields."""

        for name, value in self.references.items():
            if value is None:
                continue
            if isinstance(value, tuple):
                for reference in value:
                    yield name, reference
            else:
                yield name, value
        if self.custom is not None:
            yield "custom.type", self.custom.type

    def with_references(self, references: Mapping[str, ReferenceValue]) -> Draft:
        return replace(self, references=dict(references))

    def with_custom(self, custom: CustomFields | None) -> Draft:
        return replace(self, custom=custom)

    def with_field(self, name: str, value: JsonValue) -> Draft:
        return replace(self, fields={**self.fields, name: value})


@dataclass(frozen=True, slots=True)
class Entity(Draft):
    """Resource as it currently exists in the target store."""

    id: str = ""
    version: int = 0

    def to_draft(self) -> Draft:
        return Draft(
            key=self.key,
            fields=self.fields,
            references=self.references,
            custom=self.custom,
            collections=self.collections,
        )
