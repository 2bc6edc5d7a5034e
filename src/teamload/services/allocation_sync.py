"""Optimistic allocation edits mirrored to the row store.

Cell edits return the new snapshot at once and queue the store write on a
``BackgroundWriter``; a failed write is logged and never rolls the snapshot
back. Row deletes are synchronous: the store delete must succeed before the
new snapshot is returned.
"""

from __future__ import annotations

import logging
import math
import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait
from datetime import date
from typing import Any, Callable, Optional

from ..domain.entities import Allocation, AppData
from ..domain.repositories.store import AllocationStore
from ..errors import StoreError, ValidationError
from .snapshot import apply_allocation, find_allocation, new_id, remove_assignment
from .weeks import parse_week

logger = logging.getLogger("teamload.sync")


class BackgroundWriter:
    """One-way outbound queue of store writes.

    With a single worker, writes reach the store in submission order. Failures
    are logged and counted; nothing is retried.
    """

    def __init__(self, max_workers: int = 1, *, thread_name_prefix: str = "teamload-sync"):
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix=thread_name_prefix
        )
        self._pending: set[Future] = set()
        self._lock = threading.Lock()
        self.failures = 0

    def submit(self, description: str, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Future:
        """Queue ``fn``; the caller never sees its outcome."""

        def run() -> None:
            try:
                fn(*args, **kwargs)
            except Exception:
                with self._lock:
                    self.failures += 1
                logger.exception("Background write failed: %s", description)
            else:
                logger.debug("Background write done: %s", description)

        try:
            future = self._executor.submit(run)
        except RuntimeError as exc:
            # Executor already shut down; count it like any failed write.
            with self._lock:
                self.failures += 1
            logger.error("Background write not queued: %s (%s)", description, exc)
            future = Future()
            future.set_exception(exc)
            return future
        with self._lock:
            self._pending.add(future)
        future.add_done_callback(self._discard)
        return future

    def _discard(self, future: Future) -> None:
        with self._lock:
            self._pending.discard(future)

    @property
    def pending(self) -> int:
        with self._lock:
            return len(self._pending)

    def flush(self, timeout: Optional[float] = None) -> bool:
        """Wait for writes queued so far; False if the timeout expired first."""
        with self._lock:
            outstanding = list(self._pending)
        if not outstanding:
            return True
        _, not_done = wait(outstanding, timeout=timeout)
        return not not_done

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)

    def __enter__(self) -> "BackgroundWriter":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown(wait=True)


def _validate_value(value: float) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"Allocation value must be a number, got {value!r}") from exc
    if math.isnan(number) or math.isinf(number):
        raise ValidationError(f"Allocation value must be finite, got {value!r}")
    if number < 0:
        raise ValidationError(f"Allocation value must be >= 0, got {number}")
    return number


class AllocationSynchronizer:
    """Apply cell and row edits to a snapshot and mirror them to the store."""

    def __init__(self, store: AllocationStore, writer: BackgroundWriter):
        self.store = store
        self.writer = writer

    def set_allocation(
        self,
        data: AppData,
        member_id: str,
        project_id: str,
        week: date | str,
        value: float,
    ) -> AppData:
        """Optimistically set one cell; the store write runs in the background."""

        week = parse_week(week)
        value = _validate_value(value)
        if data.get_member(member_id) is None or data.get_project(project_id) is None:
            # Referential integrity is the caller's job; the edit goes through.
            logger.debug(
                "Allocation %s/%s references an entity missing from the snapshot",
                member_id,
                project_id,
            )

        updated = apply_allocation(data, member_id, project_id, week, value)
        local = find_allocation(updated, member_id, project_id, week)

        self.writer.submit(
            f"allocation {member_id}/{project_id}/{week.isoformat()}={value}",
            self.write_cell,
            member_id,
            project_id,
            week,
            value,
            allocation_id=local.id if local else None,
        )
        return updated

    def write_cell(
        self,
        member_id: str,
        project_id: str,
        week: date,
        value: float,
        *,
        allocation_id: Optional[str] = None,
    ) -> None:
        """Bring the store's row for the composite key in line with ``value``.

        Re-reads the stored id first, so repeated delivery converges on the
        last value written for the key.
        """

        existing_id = self.store.find_allocation_id(member_id, project_id, week)
        if value <= 0:
            if existing_id is not None:
                self.store.delete_allocations(
                    member_id=member_id, project_id=project_id, week_date=week
                )
            return

        self.store.upsert_allocation(
            Allocation(
                id=existing_id or allocation_id or new_id(),
                member_id=member_id,
                project_id=project_id,
                week_date=week,
                value=value,
            )
        )

    def delete_assignment(self, data: AppData, member_id: str, project_id: str) -> AppData:
        """Remove a member/project row in every week, store first.

        Raises StoreError when the store delete fails; ``data`` is then still
        the caller's current state.
        """

        # Queued cell writes for this row must not land after the delete.
        self.writer.flush()
        try:
            deleted = self.store.delete_allocations(member_id=member_id, project_id=project_id)
        except StoreError:
            logger.error("Deleting assignment %s/%s failed", member_id, project_id)
            raise
        logger.info(
            "Deleted assignment %s/%s (%d stored row(s))", member_id, project_id, deleted
        )
        return remove_assignment(data, member_id, project_id)
