"""Settings reconciliation: push whole member/project collections to the store.

Remote ids missing from the new snapshot are deleted first (the store drops
their allocations), then every member and project in the snapshot is upserted
whether or not it changed, so a partial pass can simply be retried in full.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from ..domain.entities import AppData, Member, Project
from ..domain.repositories.store import AllocationStore
from ..errors import ReconcileError, StoreError, SyncFailure

logger = logging.getLogger("teamload.reconcile")


@dataclass(frozen=True)
class ReconcilePlan:
    """Deletes and upserts needed to make the store match a snapshot."""

    delete_member_ids: tuple[str, ...]
    delete_project_ids: tuple[str, ...]
    upsert_members: tuple[Member, ...]
    upsert_projects: tuple[Project, ...]

    @property
    def operation_count(self) -> int:
        return (
            len(self.delete_member_ids)
            + len(self.delete_project_ids)
            + len(self.upsert_members)
            + len(self.upsert_projects)
        )


@dataclass(frozen=True)
class ReconcileSummary:
    members_deleted: int
    projects_deleted: int
    members_upserted: int
    projects_upserted: int


def plan_reconciliation(
    remote_member_ids: Iterable[str], remote_project_ids: Iterable[str], data: AppData
) -> ReconcilePlan:
    """Set difference between the store's ids and the snapshot's."""

    local_members = data.member_ids
    local_projects = data.project_ids
    return ReconcilePlan(
        delete_member_ids=tuple(sorted(set(remote_member_ids) - local_members)),
        delete_project_ids=tuple(sorted(set(remote_project_ids) - local_projects)),
        upsert_members=tuple(data.members),
        upsert_projects=tuple(data.projects),
    )


def reconcile(
    store: AllocationStore,
    data: AppData,
    *,
    remote_member_ids: Optional[Iterable[str]] = None,
    remote_project_ids: Optional[Iterable[str]] = None,
) -> ReconcileSummary:
    """Make the store's members and projects match ``data``.

    Each delete/upsert runs on its own; failures are collected and raised
    together as ``ReconcileError`` after the pass.
    """

    try:
        if remote_member_ids is None:
            remote_member_ids = store.member_ids()
        if remote_project_ids is None:
            remote_project_ids = store.project_ids()
    except StoreError as exc:
        raise ReconcileError([SyncFailure("select", "ids", "*", exc)]) from exc

    plan = plan_reconciliation(remote_member_ids, remote_project_ids, data)
    failures: list[SyncFailure] = []

    members_deleted = 0
    for member_id in plan.delete_member_ids:
        try:
            members_deleted += store.delete_members([member_id])
        except StoreError as exc:
            failures.append(SyncFailure("delete", "member", member_id, exc))

    projects_deleted = 0
    for project_id in plan.delete_project_ids:
        try:
            projects_deleted += store.delete_projects([project_id])
        except StoreError as exc:
            failures.append(SyncFailure("delete", "project", project_id, exc))

    members_upserted = 0
    for member in plan.upsert_members:
        try:
            store.upsert_member(member)
            members_upserted += 1
        except StoreError as exc:
            failures.append(SyncFailure("upsert", "member", member.id, exc))

    projects_upserted = 0
    for project in plan.upsert_projects:
        try:
            store.upsert_project(project)
            projects_upserted += 1
        except StoreError as exc:
            failures.append(SyncFailure("upsert", "project", project.id, exc))

    if failures:
        for failure in failures:
            logger.warning("Reconcile step failed: %s", failure.describe())
        raise ReconcileError(failures)

    summary = ReconcileSummary(
        members_deleted=members_deleted,
        projects_deleted=projects_deleted,
        members_upserted=members_upserted,
        projects_upserted=projects_upserted,
    )
    logger.info(
        "Reconciled settings",
        extra={
            "members_deleted": summary.members_deleted,
            "projects_deleted": summary.projects_deleted,
            "members_upserted": summary.members_upserted,
            "projects_upserted": summary.projects_upserted,
        },
    )
    return summary
