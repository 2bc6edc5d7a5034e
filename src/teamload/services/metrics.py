"""Derived load metrics for the dashboard views."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Iterable, Optional, Sequence

from ..domain.entities import Allocation, AppData, Member, Project
from ..errors import ValidationError

UNDER_LOADED_BELOW = 0.8
OVER_LOADED_ABOVE = 1.0


class LoadLevel(str, Enum):
    """Heatmap band for a member's weekly load."""

    IDLE = "idle"
    UNDER = "under"
    HEALTHY = "healthy"
    OVER = "over"


def member_load(member_id: str, week: date, allocations: Iterable[Allocation]) -> float:
    """Total FTE a member carries in ``week`` across all projects."""

    return sum(
        (a.value for a in allocations if a.member_id == member_id and a.week_date == week),
        0.0,
    )


def project_load(project_id: str, week: date, allocations: Iterable[Allocation]) -> float:
    """Total FTE a project consumes in ``week`` across all members."""

    return sum(
        (a.value for a in allocations if a.project_id == project_id and a.week_date == week),
        0.0,
    )


def first_free_week(
    member_id: str, allocations: Sequence[Allocation], weeks: Sequence[date]
) -> Optional[date]:
    """First week, in the given order, where the member's load is exactly zero."""

    for week in weeks:
        if member_load(member_id, week, allocations) == 0:
            return week
    return None


def classify_load(load: float) -> LoadLevel:
    load = round(load, 2)
    if load <= 0:
        return LoadLevel.IDLE
    if load < UNDER_LOADED_BELOW:
        return LoadLevel.UNDER
    if load <= OVER_LOADED_ABOVE:
        return LoadLevel.HEALTHY
    return LoadLevel.OVER


@dataclass(frozen=True, slots=True)
class LoadCell:
    week: date
    load: float
    level: LoadLevel


@dataclass(frozen=True, slots=True)
class MemberLoadRow:
    """One heatmap row: a member's load per week of the window."""

    member: Member
    cells: tuple[LoadCell, ...]

    @property
    def loads(self) -> tuple[float, ...]:
        return tuple(c.load for c in self.cells)


def load_heatmap(data: AppData, weeks: Sequence[date]) -> list[MemberLoadRow]:
    rows: list[MemberLoadRow] = []
    for member in data.members:
        cells = []
        for week in weeks:
            load = member_load(member.id, week, data.allocations)
            cells.append(LoadCell(week=week, load=load, level=classify_load(load)))
        rows.append(MemberLoadRow(member=member, cells=tuple(cells)))
    return rows


def free_resources(data: AppData, weeks: Sequence[date]) -> list[tuple[Member, date]]:
    """Members with a free week in the window, earliest availability first."""

    found = []
    for member in data.members:
        week = first_free_week(member.id, data.allocations, weeks)
        if week is not None:
            found.append((member, week))
    found.sort(key=lambda item: item[1])
    return found


def project_consumption(
    data: AppData, weeks: Sequence[date], *, precision: int = 1
) -> list[tuple[date, dict[str, float]]]:
    """Per week, rounded FTE per active project name (zero totals omitted)."""

    series = []
    active = data.active_projects()
    for week in weeks:
        totals: dict[str, float] = {}
        for project in active:
            total = project_load(project.id, week, data.allocations)
            if total > 0:
                totals[project.name] = round(total, precision)
        series.append((week, totals))
    return series


@dataclass(frozen=True, slots=True)
class ProjectShare:
    """A member's commitment to one project over a window."""

    project: Project
    total: float
    avg_per_week: float
    share: float


@dataclass(frozen=True, slots=True)
class MemberSummary:
    member: Member
    total: float
    avg_weekly_load: float
    projects: tuple[ProjectShare, ...]

    @property
    def level(self) -> LoadLevel:
        return classify_load(self.avg_weekly_load)


def member_breakdown(data: AppData, member_id: str, weeks: Sequence[date]) -> list[ProjectShare]:
    """Active projects the member works on in the window, largest total first."""

    week_set = set(weeks)
    span = len(weeks) or 1
    totals: list[tuple[Project, float]] = []
    for project in data.active_projects():
        total = sum(
            (
                a.value
                for a in data.allocations
                if a.member_id == member_id
                and a.project_id == project.id
                and a.week_date in week_set
            ),
            0.0,
        )
        if total > 0:
            totals.append((project, total))

    grand_total = sum(t for _, t in totals)
    totals.sort(key=lambda item: item[1], reverse=True)
    return [
        ProjectShare(
            project=project,
            total=total,
            avg_per_week=total / span,
            share=total / grand_total if grand_total else 0.0,
        )
        for project, total in totals
    ]


def member_summary(data: AppData, member_id: str, weeks: Sequence[date]) -> MemberSummary:
    member = data.get_member(member_id)
    if member is None:
        raise ValidationError(f"Unknown member: {member_id}")
    shares = member_breakdown(data, member_id, weeks)
    total = sum(s.total for s in shares)
    return MemberSummary(
        member=member,
        total=total,
        avg_weekly_load=total / (len(weeks) or 1),
        projects=tuple(shares),
    )


def assigned_project_ids(data: AppData, member_id: str) -> list[str]:
    """Projects with any positive allocation for the member, first-seen order."""

    seen: list[str] = []
    for a in data.allocations:
        if a.member_id == member_id and a.value > 0 and a.project_id not in seen:
            seen.append(a.project_id)
    return seen


__all__ = [
    "LoadCell",
    "LoadLevel",
    "MemberLoadRow",
    "MemberSummary",
    "ProjectShare",
    "assigned_project_ids",
    "classify_load",
    "first_free_week",
    "free_resources",
    "load_heatmap",
    "member_breakdown",
    "member_load",
    "member_summary",
    "project_consumption",
    "project_load",
]
