from __future__ import annotations

import pytest

from catalogsync.domain.diff import (
    AbsentValuePolicy,
    DiffContext,
    localized,
    reference,
    reference_set,
    scalar,
)
from catalogsync.domain.diff.comparators import diff_reference, diff_reference_set, diff_value
from catalogsync.domain.errors import DiffError
from catalogsync.domain.model import Draft, Reference, ResourceType, UpdateAction
from tests.helpers.drafts import as_entity

NAME = localized("name", "changeName", required=True)
DESCRIPTION = localized("description", "setDescription")
ORDER_HINT = scalar("orderHint", "changeOrderHint")
PARENT = reference("parent", "changeParent", ResourceType.CATEGORY)
CATEGORIES = reference_set(
    "categories",
    "addToCategory",
    "removeFromCategory",
    ResourceType.CATEGORY,
    payload_key="category",
)


def _category(key: str) -> Reference:
    return Reference.by_key(ResourceType.CATEGORY, key)


def test_changed_value_emits_action() -> None:
    existing = as_entity(Draft(key="k", fields={"name": {"en": "Old"}}))
    draft = Draft(key="k", fields={"name": {"en": "New"}})

    assert diff_value(NAME, existing, draft, DiffContext(key="k")) == [
        UpdateAction("changeName", {"name": {"en": "New"}})
    ]


def test_order_hint_uses_exact_comparison() -> None:
    existing = as_entity(Draft(key="k", fields={"orderHint": "0.1"}))

    same = Draft(key="k", fields={"orderHint": "0.1"})
    padded = Draft(key="k", fields={"orderHint": "0.10"})

    assert diff_value(ORDER_HINT, existing, same, DiffContext(key="k")) == []
    assert diff_value(ORDER_HINT, existing, padded, DiffContext(key="k")) == [
        UpdateAction("changeOrderHint", {"orderHint": "0.10"})
    ]


def test_unspecified_field_is_skipped_or_warned() -> None:
    existing = as_entity(Draft(key="k", fields={"description": {"en": "keep"}}))
    draft = Draft(key="k")

    skip = DiffContext(key="k")
    warn = DiffContext(key="k", absent_policy=AbsentValuePolicy.WARN)

    assert diff_value(DESCRIPTION, existing, draft, skip) == []
    assert skip.warnings == []
    assert diff_value(DESCRIPTION, existing, draft, warn) == []
    assert len(warn.warnings) == 1


def test_explicitly_cleared_field() -> None:
    existing = as_entity(
        Draft(key="k", fields={"name": {"en": "n"}, "description": {"en": "d"}})
    )
    draft = Draft(key="k", fields={"name": None, "description": None})
    ctx = DiffContext(key="k")

    assert diff_value(DESCRIPTION, existing, draft, ctx) == [UpdateAction("setDescription")]
    assert diff_value(NAME, existing, draft, ctx) == []
    assert len(ctx.warnings) == 1


def test_reference_compares_by_key_not_id() -> None:
    existing = as_entity(
        Draft(key="k", references={"parent": Reference(ResourceType.CATEGORY, id="x", key="p")})
    )
    same = Draft(
        key="k", references={"parent": Reference(ResourceType.CATEGORY, id="y", key="p")}
    )
    moved = Draft(key="k", references={"parent": _category("q")})

    assert diff_reference(PARENT, existing, same, DiffContext(key="k")) == []
    assert diff_reference(PARENT, existing, moved, DiffContext(key="k")) == [
        UpdateAction("changeParent", {"parent": {"typeId": "category", "key": "q"}})
    ]


def test_unresolved_reference_is_no_change_with_warning() -> None:
    existing = as_entity(Draft(key="k", references={"parent": _category("p")}))
    draft = Draft(
        key="k", references={"parent": Reference.by_id(ResourceType.CATEGORY, "raw-id")}
    )
    ctx = DiffContext(key="k")

    assert diff_reference(PARENT, existing, draft, ctx) == []
    assert len(ctx.warnings) == 1


def test_reference_set_removes_before_adding() -> None:
    existing = as_entity(
        Draft(key="k", references={"categories": (_category("a"), _category("b"))})
    )
    draft = Draft(key="k", references={"categories": (_category("b"), _category("c"))})

    assert diff_reference_set(CATEGORIES, existing, draft, DiffContext(key="k")) == [
        UpdateAction("removeFromCategory", {"category": {"typeId": "category", "key": "a"}}),
        UpdateAction("addToCategory", {"category": {"typeId": "category", "key": "c"}}),
    ]


def test_malformed_existing_reference_raises_diff_error() -> None:
    existing = as_entity(
        Draft(key="k", references={"parent": (_category("a"), _category("b"))})
    )
    draft = Draft(key="k", references={"parent": _category("a")})

    with pytest.raises(DiffError):
        diff_reference(PARENT, existing, draft, DiffContext(key="k"))
