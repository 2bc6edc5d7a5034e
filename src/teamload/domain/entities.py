"""Immutable snapshot types for members, projects and weekly allocations."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Iterable, Optional


class ProjectVisibility(str, Enum):
    """Whether a project is offered in the assignment matrix."""

    ACTIVE = "active"
    ARCHIVED = "archived"


class ProjectStatus(str, Enum):
    """Informational delivery state of a project."""

    ONGOING = "ongoing"
    COMPLETED = "completed"


@dataclass(frozen=True, slots=True)
class Member:
    id: str
    name: str
    role: str


@dataclass(frozen=True, slots=True)
class Project:
    id: str
    name: str
    status: ProjectVisibility = ProjectVisibility.ACTIVE
    project_status: ProjectStatus = ProjectStatus.ONGOING

    @property
    def is_active(self) -> bool:
        return self.status == ProjectVisibility.ACTIVE


@dataclass(frozen=True, slots=True)
class Allocation:
    """FTE commitment of one member to one project for one week bucket."""

    id: str
    member_id: str
    project_id: str
    week_date: date
    value: float

    @property
    def key(self) -> tuple[str, str, date]:
        return (self.member_id, self.project_id, self.week_date)


@dataclass(frozen=True, slots=True)
class AppData:
    """Complete snapshot; mutators return a new instance instead of editing this one."""

    members: tuple[Member, ...] = field(default_factory=tuple)
    projects: tuple[Project, ...] = field(default_factory=tuple)
    allocations: tuple[Allocation, ...] = field(default_factory=tuple)

    @classmethod
    def empty(cls) -> "AppData":
        return cls()

    @classmethod
    def build(
        cls,
        *,
        members: Iterable[Member] = (),
        projects: Iterable[Project] = (),
        allocations: Iterable[Allocation] = (),
    ) -> "AppData":
        return cls(tuple(members), tuple(projects), tuple(allocations))

    def replace(
        self,
        *,
        members: Optional[Iterable[Member]] = None,
        projects: Optional[Iterable[Project]] = None,
        allocations: Optional[Iterable[Allocation]] = None,
    ) -> "AppData":
        return AppData(
            members=self.members if members is None else tuple(members),
            projects=self.projects if projects is None else tuple(projects),
            allocations=self.allocations if allocations is None else tuple(allocations),
        )

    def get_member(self, member_id: str) -> Optional[Member]:
        return next((m for m in self.members if m.id == member_id), None)

    def get_project(self, project_id: str) -> Optional[Project]:
        return next((p for p in self.projects if p.id == project_id), None)

    def active_projects(self) -> tuple[Project, ...]:
        return tuple(p for p in self.projects if p.is_active)

    @property
    def member_ids(self) -> set[str]:
        return {m.id for m in self.members}

    @property
    def project_ids(self) -> set[str]:
        return {p.id for p in self.projects}
