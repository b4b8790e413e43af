"""Update actions issued against existing resources."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

# action names shared by every resource type
SET_CUSTOM_TYPE = "setCustomType"
REMOVE_CUSTOM_TYPE = "removeCustomType"
SET_CUSTOM_FIELD = "setCustomField"


@dataclass(frozen=True, slots=True)
class UpdateAction:
    """A single named mutation with its payload."""

    action: str
    payload: dict[str, Any] = field(default_factory=dict[str, Any])

    def to_payload(self) -> dict[str, Any]:
        return {"action": self.action, **self.payload}

    def __repr__(self) -> str:
        return f"UpdateAction({self.action!r}, {self.payload!r})"
