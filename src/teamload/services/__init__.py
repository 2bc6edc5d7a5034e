"""Service module exports."""

from . import allocation_sync, loader, metrics, reconcile, snapshot, weeks

__all__ = [
    "allocation_sync",
    "loader",
    "metrics",
    "reconcile",
    "snapshot",
    "weeks",
]
