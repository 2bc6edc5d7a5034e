"""Initial snapshot load and demo seeding."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from datetime import date
from typing import Optional, Sequence

from ..domain.entities import Allocation, AppData, Member, Project, ProjectStatus, ProjectVisibility
from ..domain.repositories.store import AllocationStore
from ..errors import DataLoadError, StoreError
from .snapshot import new_id
from .weeks import next_weeks

logger = logging.getLogger("teamload.loader")

DEMO_MEMBERS: tuple[Member, ...] = (
    Member(id="m1", name="Alice Chen", role="DB Architect"),
    Member(id="m2", name="Bob Smith", role="Data Engineer"),
    Member(id="m3", name="Charlie Kim", role="DBA"),
    Member(id="m4", name="Diana Prince", role="ETL Developer"),
    Member(id="m5", name="Ethan Hunt", role="Data Analyst"),
    Member(id="m6", name="Fiona Gallagher", role="Backend Dev"),
)

DEMO_PROJECTS: tuple[Project, ...] = (
    Project(id="p1", name="FinTech Migration", status=ProjectVisibility.ACTIVE, project_status=ProjectStatus.ONGOING),
    Project(id="p2", name="Real-time Ledger", status=ProjectVisibility.ACTIVE, project_status=ProjectStatus.ONGOING),
    Project(id="p3", name="Audit Logs 2.0", status=ProjectVisibility.ACTIVE, project_status=ProjectStatus.ONGOING),
)

# Chance a demo member is staffed on a given demo project.
DEMO_ASSIGNMENT_RATE = 0.3
DEMO_MAX_VALUE = 0.8


def load_snapshot(store: AllocationStore) -> AppData:
    """Read every collection from the store into a fresh snapshot.

    Rows that would break the model (non-positive values, orphans, repeated
    composite keys) are dropped with a warning. Any store failure is raised
    as ``DataLoadError``.
    """

    try:
        members = store.list_members()
        projects = store.list_projects()
        rows = store.list_allocations()
    except StoreError as exc:
        logger.error("Loading snapshot failed: %s", exc)
        raise DataLoadError(exc.operation, exc.cause or exc) from exc

    member_ids = {m.id for m in members}
    project_ids = {p.id for p in projects}
    by_key: dict[tuple[str, str, date], Allocation] = {}
    dropped = 0
    for alloc in rows:
        if alloc.value <= 0 or alloc.member_id not in member_ids or alloc.project_id not in project_ids:
            dropped += 1
            continue
        if alloc.key in by_key:
            dropped += 1
        by_key[alloc.key] = alloc

    if dropped:
        logger.warning("Dropped %d stored allocation row(s) that break the model", dropped)

    data = AppData.build(members=members, projects=projects, allocations=by_key.values())
    logger.info(
        "Loaded snapshot",
        extra={
            "members": len(data.members),
            "projects": len(data.projects),
            "allocations": len(data.allocations),
        },
    )
    return data


@dataclass(frozen=True)
class SeedSummary:
    """Counts written by a demo seed."""

    members: int
    projects: int
    allocations: int


def seed_demo_data(
    store: AllocationStore,
    *,
    with_allocations: bool = False,
    weeks: Optional[Sequence[date]] = None,
    rng: Optional[random.Random] = None,
) -> SeedSummary:
    """Upsert the demo team and projects, optionally with random allocations.

    Safe to re-run: members and projects are written by fixed id, and
    allocation cells reuse any stored id for the same key.
    """

    for member in DEMO_MEMBERS:
        store.upsert_member(member)
    for project in DEMO_PROJECTS:
        store.upsert_project(project)

    written = 0
    if with_allocations:
        rng = rng or random.Random()
        weeks = tuple(weeks) if weeks is not None else next_weeks()
        for member in DEMO_MEMBERS:
            for project in DEMO_PROJECTS:
                if rng.random() >= DEMO_ASSIGNMENT_RATE:
                    continue
                for week in weeks:
                    value = round(rng.random() * DEMO_MAX_VALUE, 1)
                    if value <= 0:
                        continue
                    existing_id = store.find_allocation_id(member.id, project.id, week)
                    store.upsert_allocation(
                        Allocation(
                            id=existing_id or new_id(),
                            member_id=member.id,
                            project_id=project.id,
                            week_date=week,
                            value=value,
                        )
                    )
                    written += 1

    summary = SeedSummary(
        members=len(DEMO_MEMBERS), projects=len(DEMO_PROJECTS), allocations=written
    )
    logger.info("Seeded demo data: %s", summary)
    return summary
