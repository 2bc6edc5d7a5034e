"""Team member rows."""

from __future__ import annotations

from typing import ClassVar

from sqlmodel import Field, SQLModel

from ..domain.entities import Member


class MemberRow(SQLModel, table=True):
    """A person whose weekly capacity is planned."""

    __tablename__: ClassVar[str] = "members"

    id: str = Field(primary_key=True, max_length=64)
    name: str = Field(nullable=False, max_length=120, index=True)
    role: str = Field(default="Member", max_length=120)

    def to_domain(self) -> Member:
        return Member(id=self.id, name=self.name, role=self.role)

    @classmethod
    def from_domain(cls, member: Member) -> "MemberRow":
        return cls(id=member.id, name=member.name, role=member.role)
