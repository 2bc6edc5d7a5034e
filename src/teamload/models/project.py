"""Project rows."""

from __future__ import annotations

import logging
from enum import Enum
from typing import ClassVar, Optional, TypeVar

from sqlmodel import Field, SQLModel

from ..domain.entities import Project, ProjectStatus, ProjectVisibility

logger = logging.getLogger("teamload.store")

E = TypeVar("E", bound=Enum)


def _coerce(enum_cls: type[E], raw: Optional[str], default: E) -> E:
    if not raw:
        return default
    try:
        return enum_cls(raw)
    except ValueError:
        logger.warning("Unknown %s %r in projects table; using %s", enum_cls.__name__, raw, default.value)
        return default


class ProjectRow(SQLModel, table=True):
    """A project members can be allocated to."""

    __tablename__: ClassVar[str] = "projects"

    id: str = Field(primary_key=True, max_length=64)
    name: str = Field(nullable=False, max_length=160, index=True)
    status: str = Field(default=ProjectVisibility.ACTIVE.value, max_length=16)
    project_status: str = Field(default=ProjectStatus.ONGOING.value, max_length=16)

    def to_domain(self) -> Project:
        # Blank or unknown stored values read as the defaults.
        return Project(
            id=self.id,
            name=self.name,
            status=_coerce(ProjectVisibility, self.status, ProjectVisibility.ACTIVE),
            project_status=_coerce(ProjectStatus, self.project_status, ProjectStatus.ONGOING),
        )

    @classmethod
    def from_domain(cls, project: Project) -> "ProjectRow":
        return cls(
            id=project.id,
            name=project.name,
            status=ProjectVisibility(project.status).value,
            project_status=ProjectStatus(project.project_status).value,
        )
