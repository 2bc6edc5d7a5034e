"""Exception types raised by the allocation core."""

from __future__ import annotations

from dataclasses import dataclass


class TeamloadError(Exception):
    """Base exception for allocation and sync failures."""


class ValidationError(TeamloadError):
    """Raised when input data is invalid or violates model rules."""


class StoreError(TeamloadError):
    """A single call against the row store failed."""

    def __init__(self, operation: str, cause: BaseException | None = None):
        self.operation = operation
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"store operation '{operation}' failed{detail}")


class DataLoadError(StoreError):
    """Initial snapshot could not be read from the store."""


@dataclass(frozen=True)
class SyncFailure:
    """One failed delete/upsert within a reconciliation pass."""

    action: str
    entity: str
    entity_id: str
    error: BaseException

    def describe(self) -> str:
        return f"{self.action} {self.entity} {self.entity_id}: {self.error}"


class ReconcileError(TeamloadError):
    """Aggregate failure of a bulk reconciliation pass."""

    def __init__(self, failures: list[SyncFailure]):
        self.failures = list(failures)
        lines = "; ".join(f.describe() for f in self.failures)
        super().__init__(f"{len(self.failures)} reconcile operation(s) failed: {lines}")
