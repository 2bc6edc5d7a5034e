"""Pure snapshot mutations for members, projects and allocation cells.

Every function takes an ``AppData`` and returns a new one; inputs are never
modified. Removing a member or project drops its allocations in the same
returned snapshot.
"""

from __future__ import annotations

import uuid
from dataclasses import replace
from datetime import date
from typing import Optional

from ..domain.entities import (
    Allocation,
    AppData,
    Member,
    Project,
    ProjectStatus,
    ProjectVisibility,
)
from ..errors import ValidationError

DEFAULT_ROLE = "Member"


def new_id() -> str:
    """Generate an opaque unique id for a member, project or allocation."""

    return uuid.uuid4().hex[:12]


def _require_text(value: Optional[str], field_name: str) -> str:
    if value is None or not value.strip():
        raise ValidationError(f"{field_name} must not be blank")
    return value.strip()


# Members
def add_member(
    data: AppData, *, name: str, role: str = DEFAULT_ROLE, member_id: Optional[str] = None
) -> AppData:
    name = _require_text(name, "Member name")
    role = role.strip() if role and role.strip() else DEFAULT_ROLE
    member_id = member_id or new_id()
    if data.get_member(member_id) is not None:
        raise ValidationError(f"Member id already exists: {member_id}")
    return data.replace(members=(*data.members, Member(id=member_id, name=name, role=role)))


def update_member(
    data: AppData, member_id: str, *, name: Optional[str] = None, role: Optional[str] = None
) -> AppData:
    current = data.get_member(member_id)
    if current is None:
        raise ValidationError(f"Unknown member: {member_id}")
    updated = replace(
        current,
        name=current.name if name is None else _require_text(name, "Member name"),
        role=current.role if role is None else _require_text(role, "Member role"),
    )
    return data.replace(members=(updated if m.id == member_id else m for m in data.members))


def remove_member(data: AppData, member_id: str) -> AppData:
    return data.replace(
        members=(m for m in data.members if m.id != member_id),
        allocations=(a for a in data.allocations if a.member_id != member_id),
    )


# Projects
def add_project(
    data: AppData,
    *,
    name: str,
    project_status: ProjectStatus = ProjectStatus.ONGOING,
    project_id: Optional[str] = None,
) -> AppData:
    name = _require_text(name, "Project name")
    project_id = project_id or new_id()
    if data.get_project(project_id) is not None:
        raise ValidationError(f"Project id already exists: {project_id}")
    project = Project(
        id=project_id,
        name=name,
        status=ProjectVisibility.ACTIVE,
        project_status=ProjectStatus(project_status),
    )
    return data.replace(projects=(*data.projects, project))


def update_project(
    data: AppData,
    project_id: str,
    *,
    name: Optional[str] = None,
    status: Optional[ProjectVisibility] = None,
    project_status: Optional[ProjectStatus] = None,
) -> AppData:
    current = data.get_project(project_id)
    if current is None:
        raise ValidationError(f"Unknown project: {project_id}")
    updated = replace(
        current,
        name=current.name if name is None else _require_text(name, "Project name"),
        status=current.status if status is None else ProjectVisibility(status),
        project_status=(
            current.project_status if project_status is None else ProjectStatus(project_status)
        ),
    )
    return data.replace(projects=(updated if p.id == project_id else p for p in data.projects))


def toggle_project_archived(data: AppData, project_id: str) -> AppData:
    current = data.get_project(project_id)
    if current is None:
        raise ValidationError(f"Unknown project: {project_id}")
    flipped = ProjectVisibility.ARCHIVED if current.is_active else ProjectVisibility.ACTIVE
    return update_project(data, project_id, status=flipped)


def remove_project(data: AppData, project_id: str) -> AppData:
    return data.replace(
        projects=(p for p in data.projects if p.id != project_id),
        allocations=(a for a in data.allocations if a.project_id != project_id),
    )


# Allocation cells
def find_allocation(
    data: AppData, member_id: str, project_id: str, week: date
) -> Optional[Allocation]:
    key = (member_id, project_id, week)
    return next((a for a in data.allocations if a.key == key), None)


def apply_allocation(
    data: AppData,
    member_id: str,
    project_id: str,
    week: date,
    value: float,
    *,
    allocation_id: Optional[str] = None,
) -> AppData:
    """Set one cell locally.

    ``value <= 0`` removes the row (no-op when absent); a positive value
    replaces the existing row's value keeping its id, or appends a new row.
    """

    existing = find_allocation(data, member_id, project_id, week)

    if value <= 0:
        if existing is None:
            return data
        return data.replace(allocations=(a for a in data.allocations if a is not existing))

    if existing is not None:
        updated = replace(existing, value=float(value))
        return data.replace(
            allocations=(updated if a is existing else a for a in data.allocations)
        )

    created = Allocation(
        id=allocation_id or new_id(),
        member_id=member_id,
        project_id=project_id,
        week_date=week,
        value=float(value),
    )
    return data.replace(allocations=(*data.allocations, created))


def remove_assignment(data: AppData, member_id: str, project_id: str) -> AppData:
    """Drop every week of a member/project row."""

    return data.replace(
        allocations=(
            a
            for a in data.allocations
            if not (a.member_id == member_id and a.project_id == project_id)
        )
    )


def find_orphans(data: AppData) -> list[Allocation]:
    """Allocations whose member or project is not in the snapshot."""

    member_ids = data.member_ids
    project_ids = data.project_ids
    return [
        a
        for a in data.allocations
        if a.member_id not in member_ids or a.project_id not in project_ids
    ]


__all__ = [
    "add_member",
    "add_project",
    "apply_allocation",
    "find_allocation",
    "find_orphans",
    "new_id",
    "remove_assignment",
    "remove_member",
    "remove_project",
    "toggle_project_archived",
    "update_member",
    "update_project",
]
