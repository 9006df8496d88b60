"""
Task Model Module

This module defines the canonical Task entity tracked by the dashboard, the
status and priority enumerations, and the request schemas accepted by the task
endpoints.

Tasks are not stored locally. They live as rows of a remote sheet and are
mapped to and from those rows by ``build_tracker.sheets.codec.RecordCodec``.
"""
from datetime import date
from enum import Enum
from typing import List, Optional

from pydantic import field_validator
from sqlmodel import SQLModel, Field

TEAM_DELIMITER = ", "


class TaskStatus(str, Enum):
    """
    Task lifecycle status, listed in lifecycle order.

    Transitions are not enforced; any caller may set any status. Allocation
    always forces ASSIGNED.
    """
    PENDING_ALLOCATION = "Pending Allocation"
    ASSIGNED = "Assigned"
    IN_PROGRESS = "In Progress"
    IN_VALIDATION = "In Validation"
    COMPLETED = "Completed"
    ON_HOLD = "On Hold"
    CANCELLED = "Cancelled"


# Tasks in these statuses no longer occupy anyone's calendar
TERMINAL_STATUSES = frozenset({TaskStatus.COMPLETED, TaskStatus.CANCELLED})

# Statuses counted as "in progress" on the dashboard
WORKING_STATUSES = frozenset({
    TaskStatus.ASSIGNED, TaskStatus.IN_PROGRESS, TaskStatus.IN_VALIDATION,
})


class Priority(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"


def normalize_team(value) -> List[str]:
    """
    Coerce a supporting-team value of unknown shape into a list of names.

    Upstream data may deliver the team as a list, as a delimited string, or
    not at all. Duplicates are kept.
    """
    if value is None:
        return []
    if isinstance(value, str):
        return value.split(TEAM_DELIMITER) if value else []
    if isinstance(value, (list, tuple, set, frozenset)):
        return [str(name) for name in value if name is not None and str(name) != ""]
    raise ValueError(f"Unsupported team value: {type(value).__name__}")


class TaskBase(SQLModel):
    """
    Fields shared by the Task entity and its create schema.

    The primary discipline owns ``scoped_hours`` and ``lead``; the secondary
    discipline owns ``secondary_scoped_hours`` and ``secondary_lead``.
    """
    # Request details
    task_type: str = ""
    task_sub_type: str = ""
    sponsor: str = ""
    project_name: str = ""
    priority: Priority = Priority.MEDIUM
    edc_system: str = ""
    integrations: str = ""  # Integrations/modules, free text
    description: str = ""

    # Timeline - calendar dates, ISO 8601 on the wire
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    # Effort
    scoped_hours: int = Field(default=0, ge=0)
    secondary_scoped_hours: int = Field(default=0, ge=0)

    # Provenance
    requestor: str = ""
    requestor_email: str = ""
    requestor_id: str = ""

    # Free-text documentation references (links, document ids)
    documentation: str = ""


class Task(TaskBase):
    """
    A unit of work tracked through the build lifecycle.

    Attributes:
        id: Logical identifier generated by the application (e.g. TASK-LX4K2-9FQ1Z)
        status: Lifecycle status; None until the task is first persisted
        lead: Lead assignee for the primary discipline
        secondary_lead: Lead assignee for the secondary discipline
        team: Supporting members, ordered; semantically a set
        row_id: Identifier assigned by the remote store; None before creation
    """
    id: str = ""
    status: Optional[TaskStatus] = None

    # Allocation
    lead: str = ""
    secondary_lead: str = ""
    team: List[str] = Field(default_factory=list)

    # Remote row identity, resolved by re-fetching the sheet
    row_id: Optional[int] = None

    @field_validator("team", mode="before")
    @classmethod
    def coerce_team(cls, v):
        return normalize_team(v)

    @property
    def is_active(self) -> bool:
        return self.status not in TERMINAL_STATUSES

    def participants(self) -> List[str]:
        """Everyone attached to the task: leads first, then the team."""
        names = [name for name in (self.lead, self.secondary_lead) if name]
        return names + list(self.team)


class TaskCreate(TaskBase):
    """Schema for submitting a new request."""
    status: Optional[TaskStatus] = None


class TaskUpdate(SQLModel):
    """Schema for updating a task. Only fields that are set are applied."""
    task_type: Optional[str] = None
    task_sub_type: Optional[str] = None
    sponsor: Optional[str] = None
    project_name: Optional[str] = None
    priority: Optional[Priority] = None
    edc_system: Optional[str] = None
    integrations: Optional[str] = None
    description: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    scoped_hours: Optional[int] = Field(default=None, ge=0)
    secondary_scoped_hours: Optional[int] = Field(default=None, ge=0)
    status: Optional[TaskStatus] = None
    lead: Optional[str] = None
    secondary_lead: Optional[str] = None
    team: Optional[List[str]] = None
    requestor: Optional[str] = None
    requestor_email: Optional[str] = None
    requestor_id: Optional[str] = None
    documentation: Optional[str] = None

    # Only dates and status may be cleared with an explicit null; text fields
    # are cleared with "" and the team with []
    @field_validator(
        "task_type", "task_sub_type", "sponsor", "project_name", "priority",
        "edc_system", "integrations", "description",
        "scoped_hours", "secondary_scoped_hours",
        "lead", "secondary_lead",
        "requestor", "requestor_email", "requestor_id", "documentation",
        mode="before",
    )
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("may not be null")
        return v

    @field_validator("team", mode="before")
    @classmethod
    def coerce_team(cls, v):
        if v is None:
            raise ValueError("may not be null")
        return normalize_team(v)


class AllocationRequest(SQLModel):
    """Schema for allocating a task to its leads and supporting team."""
    lead: str
    secondary_lead: Optional[str] = None
    team: List[str] = Field(default_factory=list)

    @field_validator("team", mode="before")
    @classmethod
    def coerce_team(cls, v):
        return normalize_team(v)
