"""
Reports Module

Read-only aggregations over the task list backing the dashboard and reports
pages: headline counters, status breakdown, resource allocation, deliverables
and the timeline view.
"""
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional, Sequence

from pydantic import BaseModel

from build_tracker.models.task import Task, TaskStatus, WORKING_STATUSES
from build_tracker.models.team import TeamMember
from build_tracker.services.allocation import member_tasks, task_hours


class DashboardSummary(BaseModel):
    total: int
    pending: int
    in_progress: int
    overdue: int
    due_this_week: int


class StatusCount(BaseModel):
    status: TaskStatus
    count: int


class ResourceLoad(BaseModel):
    name: str
    role: str
    tasks: int
    hours: int


class TimelineEntry(BaseModel):
    id: str
    project_name: str
    sponsor: str
    task_type: str
    status: Optional[TaskStatus]
    start_date: date
    end_date: date
    duration_days: int
    lead: str
    team: List[str]


def is_overdue(task: Task, today: date) -> bool:
    return task.end_date is not None and task.end_date < today and task.is_active


def end_of_week(today: date) -> date:
    """The Sunday closing the week that contains ``today``."""
    return today + timedelta(days=6 - today.weekday())


def is_due_this_week(task: Task, today: date) -> bool:
    return task.end_date is not None and today <= task.end_date <= end_of_week(today)


def dashboard_summary(tasks: Sequence[Task], today: date) -> DashboardSummary:
    return DashboardSummary(
        total=len(tasks),
        pending=sum(1 for t in tasks if t.status == TaskStatus.PENDING_ALLOCATION),
        in_progress=sum(1 for t in tasks if t.status in WORKING_STATUSES),
        overdue=sum(1 for t in tasks if is_overdue(t, today)),
        due_this_week=sum(1 for t in tasks if is_due_this_week(t, today)),
    )


def status_breakdown(tasks: Iterable[Task]) -> List[StatusCount]:
    """Task count per status, in lifecycle order; tasks without a status are skipped."""
    counts: Dict[TaskStatus, int] = {status: 0 for status in TaskStatus}
    for task in tasks:
        if task.status is not None:
            counts[task.status] += 1
    return [StatusCount(status=s, count=n) for s, n in counts.items()]


def resource_allocation(members: Iterable[TeamMember], tasks: Sequence[Task]) -> List[ResourceLoad]:
    """Per member: number of tasks they are on and their reporting hours."""
    loads = []
    for member in members:
        assigned = member_tasks(member.name, tasks)
        hours = sum(
            share.hours
            for task in assigned
            for share in task_hours(task)
            if share.name == member.name
        )
        loads.append(ResourceLoad(name=member.name, role=member.role, tasks=len(assigned), hours=hours))
    return loads


def unallocated_members(members: Iterable[TeamMember], tasks: Sequence[Task]) -> List[TeamMember]:
    """Members not on any task at all, whatever its status."""
    return [m for m in members if not member_tasks(m.name, tasks)]


def overdue_deliverables(tasks: Iterable[Task], today: date) -> List[Task]:
    return [t for t in tasks if is_overdue(t, today)]


def upcoming_deliverables(tasks: Iterable[Task], today: date, days: int = 14) -> List[Task]:
    """Active tasks ending between today and ``days`` from now, inclusive."""
    horizon = today + timedelta(days=days)
    return [
        t for t in tasks
        if t.end_date is not None and today <= t.end_date <= horizon and t.is_active
    ]


def filter_tasks(
    tasks: Iterable[Task],
    *,
    system: Optional[str] = None,
    member: Optional[str] = None,
    status: Optional[TaskStatus] = None,
    search: Optional[str] = None,
) -> List[Task]:
    """
    Dashboard filters. ``member`` matches leads and team; ``search`` is a
    case-insensitive substring match on project, sponsor and description.
    """
    result = list(tasks)
    if system:
        result = [t for t in result if t.edc_system == system]
    if member:
        result = member_tasks(member, result)
    if status:
        result = [t for t in result if t.status == status]
    if search:
        term = search.lower()
        result = [
            t for t in result
            if term in t.project_name.lower()
            or term in t.sponsor.lower()
            or term in t.description.lower()
        ]
    return result


def timeline(tasks: Iterable[Task]) -> List[TimelineEntry]:
    """Dated tasks sorted by start date, duration counted inclusively."""
    entries = [
        TimelineEntry(
            id=t.id,
            project_name=t.project_name,
            sponsor=t.sponsor,
            task_type=t.task_type,
            status=t.status,
            start_date=t.start_date,
            end_date=t.end_date,
            duration_days=(t.end_date - t.start_date).days + 1,
            lead=t.lead or "Unassigned",
            team=list(t.team),
        )
        for t in tasks
        if t.start_date is not None and t.end_date is not None
    ]
    entries.sort(key=lambda e: e.start_date)
    return entries
