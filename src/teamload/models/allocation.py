"""Weekly allocation rows."""

from __future__ import annotations

from datetime import date
from typing import ClassVar

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel

from ..domain.entities import Allocation


class AllocationRow(SQLModel, table=True):
    """FTE value for one (member, project, week) cell."""

    __tablename__: ClassVar[str] = "allocations"
    __table_args__ = (
        UniqueConstraint("member_id", "project_id", "week_date", name="uq_allocation_cell"),
    )

    id: str = Field(primary_key=True, max_length=64)
    member_id: str = Field(foreign_key="members.id", nullable=False, index=True, max_length=64)
    project_id: str = Field(foreign_key="projects.id", nullable=False, index=True, max_length=64)
    week_date: date = Field(nullable=False, index=True)
    value: float = Field(nullable=False)

    def to_domain(self) -> Allocation:
        return Allocation(
            id=self.id,
            member_id=self.member_id,
            project_id=self.project_id,
            week_date=self.week_date,
            value=float(self.value),
        )

    @classmethod
    def from_domain(cls, allocation: Allocation) -> "AllocationRow":
        return cls(
            id=allocation.id,
            member_id=allocation.member_id,
            project_id=allocation.project_id,
            week_date=allocation.week_date,
            value=float(allocation.value),
        )
