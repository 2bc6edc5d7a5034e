"""Domain layer: snapshot entities and repository protocols."""

from .entities import Allocation, AppData, Member, Project, ProjectStatus, ProjectVisibility

__all__ = [
    "Allocation",
    "AppData",
    "Member",
    "Project",
    "ProjectStatus",
    "ProjectVisibility",
]
