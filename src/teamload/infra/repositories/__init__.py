"""Concrete repository implementations using SQLModel."""

from .store import SQLModelAllocationStore

__all__ = ["SQLModelAllocationStore"]
