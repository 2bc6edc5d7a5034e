"""Repository protocol definitions for domain layer."""

from .store import AllocationStore

__all__ = ["AllocationStore"]
