"""SQLModel implementation of the allocation row store."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import date
from typing import Callable, Iterable, Iterator, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from ...domain.entities import Allocation, Member, Project
from ...errors import StoreError
from ...models import AllocationRow, MemberRow, ProjectRow

logger = logging.getLogger("teamload.store")


class SQLModelAllocationStore:
    """Row store backed by SQLModel tables.

    Every public call opens its own session and commits on its own; driver
    errors surface as ``StoreError`` naming the operation.
    """

    def __init__(self, session_factory: Callable[[], Session]):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    @contextmanager
    def _call(self, operation: str) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as exc:
            raise StoreError(operation, exc) from exc

    # Selects
    def list_members(self) -> list[Member]:
        with self._call("list_members"), self.session_factory() as session:
            return [row.to_domain() for row in session.exec(select(MemberRow)).all()]

    def list_projects(self) -> list[Project]:
        with self._call("list_projects"), self.session_factory() as session:
            return [row.to_domain() for row in session.exec(select(ProjectRow)).all()]

    def list_allocations(self) -> list[Allocation]:
        with self._call("list_allocations"), self.session_factory() as session:
            return [row.to_domain() for row in session.exec(select(AllocationRow)).all()]

    def member_ids(self) -> set[str]:
        with self._call("member_ids"), self.session_factory() as session:
            return set(session.exec(select(MemberRow.id)).all())

    def project_ids(self) -> set[str]:
        with self._call("project_ids"), self.session_factory() as session:
            return set(session.exec(select(ProjectRow.id)).all())

    # Members / projects
    def upsert_member(self, member: Member) -> None:
        with self._call("upsert_member"), self.session_factory() as session:
            session.merge(MemberRow.from_domain(member))
        logger.debug("Upserted member %s", member.id)

    def upsert_project(self, project: Project) -> None:
        with self._call("upsert_project"), self.session_factory() as session:
            session.merge(ProjectRow.from_domain(project))
        logger.debug("Upserted project %s", project.id)

    def delete_members(self, member_ids: Iterable[str]) -> int:
        """Delete members and, in the same transaction, their allocations."""
        ids = sorted(set(member_ids))
        if not ids:
            return 0
        with self._call("delete_members"), self.session_factory() as session:
            for alloc in session.exec(
                select(AllocationRow).where(AllocationRow.member_id.in_(ids))  # type: ignore[attr-defined]
            ).all():
                session.delete(alloc)
            rows = session.exec(select(MemberRow).where(MemberRow.id.in_(ids))).all()  # type: ignore[attr-defined]
            for row in rows:
                session.delete(row)
            deleted = len(rows)
        logger.debug("Deleted %d member(s): %s", deleted, ids)
        return deleted

    def delete_projects(self, project_ids: Iterable[str]) -> int:
        """Delete projects and, in the same transaction, their allocations."""
        ids = sorted(set(project_ids))
        if not ids:
            return 0
        with self._call("delete_projects"), self.session_factory() as session:
            for alloc in session.exec(
                select(AllocationRow).where(AllocationRow.project_id.in_(ids))  # type: ignore[attr-defined]
            ).all():
                session.delete(alloc)
            rows = session.exec(select(ProjectRow).where(ProjectRow.id.in_(ids))).all()  # type: ignore[attr-defined]
            for row in rows:
                session.delete(row)
            deleted = len(rows)
        logger.debug("Deleted %d project(s): %s", deleted, ids)
        return deleted

    # Allocations
    def find_allocation_id(
        self, member_id: str, project_id: str, week_date: date
    ) -> Optional[str]:
        with self._call("find_allocation_id"), self.session_factory() as session:
            statement = (
                select(AllocationRow.id)
                .where(AllocationRow.member_id == member_id)
                .where(AllocationRow.project_id == project_id)
                .where(AllocationRow.week_date == week_date)
            )
            return session.exec(statement).first()

    def upsert_allocation(self, allocation: Allocation) -> None:
        with self._call("upsert_allocation"), self.session_factory() as session:
            session.merge(AllocationRow.from_domain(allocation))
        logger.debug(
            "Upserted allocation %s (%s/%s/%s = %s)",
            allocation.id,
            allocation.member_id,
            allocation.project_id,
            allocation.week_date.isoformat(),
            allocation.value,
        )

    def delete_allocations(
        self, *, member_id: str, project_id: str, week_date: Optional[date] = None
    ) -> int:
        with self._call("delete_allocations"), self.session_factory() as session:
            statement = (
                select(AllocationRow)
                .where(AllocationRow.member_id == member_id)
                .where(AllocationRow.project_id == project_id)
            )
            if week_date is not None:
                statement = statement.where(AllocationRow.week_date == week_date)
            rows = session.exec(statement).all()
            for row in rows:
                session.delete(row)
            deleted = len(rows)
        logger.debug(
            "Deleted %d allocation(s) for %s/%s week=%s",
            deleted,
            member_id,
            project_id,
            week_date.isoformat() if week_date else "*",
        )
        return deleted
