"""
Team Models Module

This module defines the locally stored directory data: team members eligible
for allocation, requestors offered on the request form, and the configured
list of EDC systems.
"""
import uuid
from typing import Optional

from sqlmodel import SQLModel, Field


def _new_id() -> str:
    return uuid.uuid4().hex[:12]


class TeamMemberBase(SQLModel):
    name: str = Field(nullable=False, index=True)
    email: str = ""
    # Free-text role label; allocation matches it by exact string comparison
    role: str = Field(default="Builder")


class TeamMember(TeamMemberBase, table=True):
    """
    A person who can be allocated to tasks.

    Attributes:
        id: Short random identifier
        name: Display name, also the value stored in a task's lead/team cells
        email: Contact address
        role: Role label, e.g. "Builder", "Build Manager", "Director"
    """
    __tablename__ = "team_members"

    id: str = Field(default_factory=_new_id, primary_key=True)


class TeamMemberCreate(TeamMemberBase):
    pass


class RequestorBase(SQLModel):
    name: str = Field(nullable=False, index=True)
    email: str = ""


class Requestor(RequestorBase, table=True):
    """
    Someone who submits build requests.

    The identifier is what ends up in a task's requestor id cell. Selection
    lists deduplicate requestors by name, not by identifier.
    """
    __tablename__ = "requestors"

    # Auto-incrementing, so insertion order is recoverable
    id: Optional[int] = Field(default=None, primary_key=True)
    identifier: str = Field(default_factory=lambda: uuid.uuid4().hex)


class RequestorCreate(RequestorBase):
    identifier: Optional[str] = None


class EdcSystem(SQLModel, table=True):
    """An EDC system offered on the request form."""
    __tablename__ = "edc_systems"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(nullable=False, unique=True)
