"""Row store protocol (system of record for members, projects and allocations)."""

from __future__ import annotations

from datetime import date
from typing import Iterable, Optional, Protocol

from ..entities import Allocation, Member, Project


class AllocationStore(Protocol):
    """Remote row store with per-call commits.

    Implementations raise ``teamload.errors.StoreError`` when a call fails.
    """

    def list_members(self) -> list[Member]:
        """Select all member rows."""
        ...

    def list_projects(self) -> list[Project]:
        """Select all project rows."""
        ...

    def list_allocations(self) -> list[Allocation]:
        """Select all allocation rows."""
        ...

    def member_ids(self) -> set[str]:
        """Return the ids of every stored member."""
        ...

    def project_ids(self) -> set[str]:
        """Return the ids of every stored project."""
        ...

    def upsert_member(self, member: Member) -> None:
        """Insert or replace a member by id."""
        ...

    def upsert_project(self, project: Project) -> None:
        """Insert or replace a project by id."""
        ...

    def delete_members(self, member_ids: Iterable[str]) -> int:
        """Delete members by id, cascading to their allocations."""
        ...

    def delete_projects(self, project_ids: Iterable[str]) -> int:
        """Delete projects by id, cascading to their allocations."""
        ...

    def find_allocation_id(
        self, member_id: str, project_id: str, week_date: date
    ) -> Optional[str]:
        """Look up the stored row id for a composite key."""
        ...

    def upsert_allocation(self, allocation: Allocation) -> None:
        """Insert or replace an allocation by id."""
        ...

    def delete_allocations(
        self, *, member_id: str, project_id: str, week_date: Optional[date] = None
    ) -> int:
        """Delete allocations matching the filter; all weeks when week_date is None."""
        ...
