"""Domain port definitions for adapters."""

from __future__ import annotations

from .store import ResourceStore

__all__ = ["ResourceStore"]
