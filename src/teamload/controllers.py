"""Board controller: holds the current snapshot and routes view actions."""

from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from .domain.entities import AppData, ProjectStatus, ProjectVisibility
from .domain.repositories.store import AllocationStore
from .errors import DataLoadError, ReconcileError
from .services import snapshot
from .services.allocation_sync import AllocationSynchronizer, BackgroundWriter
from .services.loader import load_snapshot
from .services.reconcile import ReconcileSummary, reconcile

logger = logging.getLogger("teamload.controller")


class BoardController:
    """Entry point for the view layer.

    * cell edits are optimistic and never fail on store errors,
    * row deletes wait for the store and leave the snapshot alone on failure,
    * settings changes reconcile first and only then advance the snapshot.
    """

    def __init__(self, store: AllocationStore, writer: BackgroundWriter):
        self.store = store
        self.writer = writer
        self.synchronizer = AllocationSynchronizer(store, writer)
        self._data: Optional[AppData] = None

    @property
    def loaded(self) -> bool:
        return self._data is not None

    @property
    def data(self) -> AppData:
        if self._data is None:
            raise RuntimeError("Snapshot not loaded; call load() first")
        return self._data

    def load(self) -> AppData:
        """Initial load; on failure no snapshot is kept and load() may be retried."""
        try:
            self._data = load_snapshot(self.store)
        except DataLoadError:
            self._data = None
            logger.error("Cannot reach the store; nothing to display")
            raise
        return self._data

    # Matrix actions
    def update_allocation(
        self, member_id: str, project_id: str, week: date | str, value: float
    ) -> AppData:
        self._data = self.synchronizer.set_allocation(
            self.data, member_id, project_id, week, value
        )
        return self._data

    def delete_assignment(self, member_id: str, project_id: str) -> AppData:
        self._data = self.synchronizer.delete_assignment(self.data, member_id, project_id)
        return self._data

    # Settings actions
    def apply_settings(self, new_data: AppData) -> ReconcileSummary:
        """Reconcile ``new_data`` with the store, then make it current.

        On ``ReconcileError`` the previous snapshot stays current and the error
        propagates so the view can alert.
        """
        # Let queued cell writes land before members/projects disappear.
        self.writer.flush()
        try:
            summary = reconcile(self.store, new_data)
        except ReconcileError as exc:
            logger.error("Saving settings failed; keeping previous snapshot: %s", exc)
            raise
        self._data = new_data
        return summary

    def add_member(self, name: str, role: str = snapshot.DEFAULT_ROLE) -> ReconcileSummary:
        return self.apply_settings(snapshot.add_member(self.data, name=name, role=role))

    def update_member(
        self, member_id: str, *, name: Optional[str] = None, role: Optional[str] = None
    ) -> ReconcileSummary:
        return self.apply_settings(
            snapshot.update_member(self.data, member_id, name=name, role=role)
        )

    def remove_member(self, member_id: str) -> ReconcileSummary:
        return self.apply_settings(snapshot.remove_member(self.data, member_id))

    def add_project(
        self, name: str, project_status: ProjectStatus = ProjectStatus.ONGOING
    ) -> ReconcileSummary:
        return self.apply_settings(
            snapshot.add_project(self.data, name=name, project_status=project_status)
        )

    def update_project(
        self,
        project_id: str,
        *,
        name: Optional[str] = None,
        status: Optional[ProjectVisibility] = None,
        project_status: Optional[ProjectStatus] = None,
    ) -> ReconcileSummary:
        return self.apply_settings(
            snapshot.update_project(
                self.data, project_id, name=name, status=status, project_status=project_status
            )
        )

    def toggle_project_archived(self, project_id: str) -> ReconcileSummary:
        return self.apply_settings(snapshot.toggle_project_archived(self.data, project_id))

    def remove_project(self, project_id: str) -> ReconcileSummary:
        return self.apply_settings(snapshot.remove_project(self.data, project_id))


__all__ = ["BoardController"]
