"""
Allocation Rules Module

Advisory rules used when allocating tasks: who is eligible, who is free over a
task's dates, and how a task's hours are apportioned for reporting.

Nothing here is enforced on write. A caller may allocate a member this module
reports as unavailable, and the hours split never touches a task's stored
``scoped_hours``.
"""
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, List, Optional, Sequence

from pydantic import BaseModel, Field

from build_tracker.models.task import Task
from build_tracker.models.team import TeamMember

# Reporting weight applied to the lead's share of a task's hours
LEAD_PREMIUM = Decimal("1.1")


class MemberAvailability(BaseModel):
    name: str
    email: str = ""
    role: str = ""
    available: bool
    conflicts: List[str] = Field(default_factory=list)  # Ids of overlapping active tasks


class HoursShare(BaseModel):
    name: str
    role: str  # "Lead" or "Support"
    hours: int


def ranges_overlap(start1: date, end1: date, start2: date, end2: date) -> bool:
    """Inclusive range overlap: ranges sharing a single boundary day overlap."""
    return start1 <= end2 and start2 <= end1


def member_tasks(name: str, tasks: Iterable[Task]) -> List[Task]:
    """Tasks the member leads (either discipline) or supports."""
    return [
        t for t in tasks
        if name and (t.lead == name or t.secondary_lead == name or name in t.team)
    ]


def eligible_members(members: Iterable[TeamMember], roles: Sequence[str]) -> List[TeamMember]:
    """Members whose role label exactly matches one of ``roles``."""
    allowed = set(roles)
    return [m for m in members if m.role in allowed]


def conflicting_tasks(name: str, candidate: Task, tasks: Iterable[Task]) -> List[Task]:
    """
    The member's other active tasks whose dates overlap the candidate's.

    Tasks without both dates never conflict, and neither does a candidate
    without both dates.
    """
    if candidate.start_date is None or candidate.end_date is None:
        return []
    return [
        t for t in member_tasks(name, tasks)
        if t.id != candidate.id
        and t.is_active
        and t.start_date is not None
        and t.end_date is not None
        and ranges_overlap(t.start_date, t.end_date, candidate.start_date, candidate.end_date)
    ]


def is_available(name: str, candidate: Task, tasks: Iterable[Task]) -> bool:
    return not conflicting_tasks(name, candidate, tasks)


def availability(
    members: Iterable[TeamMember],
    candidate: Task,
    tasks: Sequence[Task],
    roles: Optional[Sequence[str]] = None,
) -> List[MemberAvailability]:
    """Availability of every eligible member for the candidate task."""
    pool = eligible_members(members, roles) if roles is not None else list(members)
    result = []
    for member in pool:
        conflicts = conflicting_tasks(member.name, candidate, tasks)
        result.append(MemberAvailability(
            name=member.name,
            email=member.email,
            role=member.role,
            available=not conflicts,
            conflicts=[t.id for t in conflicts],
        ))
    return result


def _round(value: Decimal) -> int:
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def split_hours(total: int, lead: Optional[str], team: Sequence[str]) -> List[HoursShare]:
    """
    Apportion ``total`` hours between a lead and N supporting members.

    Each of the N+1 participants nominally gets total / (N+1); the lead's
    share is then multiplied by LEAD_PREMIUM. Without a lead the team shares
    the hours evenly with no premium.
    """
    participants = len(team) + (1 if lead else 0)
    if participants == 0:
        return []

    share = Decimal(total) / Decimal(participants)
    shares = []
    if lead:
        shares.append(HoursShare(name=lead, role="Lead", hours=_round(share * LEAD_PREMIUM)))
    for name in team:
        shares.append(HoursShare(name=name, role="Support", hours=_round(share)))
    return shares


def task_hours(task: Task) -> List[HoursShare]:
    """
    Reporting hours for everyone on a task.

    Primary hours are split between the lead and the team. Secondary hours go
    to the secondary lead as-is.
    """
    shares = split_hours(task.scoped_hours, task.lead, task.team)
    if task.secondary_lead and task.secondary_scoped_hours:
        shares.append(HoursShare(name=task.secondary_lead, role="Lead", hours=task.secondary_scoped_hours))
    return shares
