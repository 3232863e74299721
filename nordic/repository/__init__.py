"""Repository layer - per-table query helpers."""

from __future__ import annotations

from nordic.repository.base import AsyncRepository, Repository

__all__ = [
    "Repository",
    "AsyncRepository",
]
