"""SQLModel table exports."""

from .allocation import AllocationRow
from .member import MemberRow
from .project import ProjectRow

__all__ = ["AllocationRow", "MemberRow", "ProjectRow"]
