"""
Report Endpoints Module

Aggregated views over the task sheet for the dashboard and reports pages.
Every endpoint reads the full sheet and computes on the fly.
"""
from datetime import date
from typing import Any, Dict, List, Optional
from fastapi import APIRouter, Depends
from build_tracker.api import deps
from build_tracker.models.task import Task
from build_tracker.models.team import TeamMember
from build_tracker.services import allocation, reports
from build_tracker.services.repository import TaskRepository
from build_tracker.services.team import TeamDirectory

router = APIRouter()


def _allocatable_members(directory: TeamDirectory) -> List[TeamMember]:
    roles = set(deps.allocation_roles())
    return [m for m in directory.list_members() if m.role in roles]


@router.get("/summary", response_model=reports.DashboardSummary)
async def summary(
    today: Optional[date] = None,
    repo: TaskRepository = Depends(deps.get_repository),
):
    """Headline counters: total, pending, in progress, overdue, due this week."""
    tasks = await deps.load_tasks(repo)
    return reports.dashboard_summary(tasks, today or date.today())


@router.get("/status", response_model=List[reports.StatusCount])
async def status_breakdown(repo: TaskRepository = Depends(deps.get_repository)):
    """Number of tasks in each lifecycle status."""
    return reports.status_breakdown(await deps.load_tasks(repo))


@router.get("/resources", response_model=List[reports.ResourceLoad])
async def resource_allocation(
    repo: TaskRepository = Depends(deps.get_repository),
    directory: TeamDirectory = Depends(deps.get_directory),
):
    """
    Task count and reporting hours per allocatable team member.

    Hours follow the reporting split (lead premium included), not the raw
    scoped hours of each task.
    """
    tasks = await deps.load_tasks(repo)
    return reports.resource_allocation(_allocatable_members(directory), tasks)


@router.get("/resources/unallocated", response_model=List[TeamMember])
async def unallocated_resources(
    repo: TaskRepository = Depends(deps.get_repository),
    directory: TeamDirectory = Depends(deps.get_directory),
):
    """Allocatable members who are not on any task."""
    tasks = await deps.load_tasks(repo)
    return reports.unallocated_members(_allocatable_members(directory), tasks)


@router.get("/deliverables", response_model=Dict[str, List[Task]])
async def deliverables(
    today: Optional[date] = None,
    days: int = 14,
    repo: TaskRepository = Depends(deps.get_repository),
):
    """Overdue active tasks and active tasks ending within ``days``."""
    tasks = await deps.load_tasks(repo)
    today = today or date.today()
    return {
        "overdue": reports.overdue_deliverables(tasks, today),
        "upcoming": reports.upcoming_deliverables(tasks, today, days=days),
    }


@router.get("/timeline", response_model=List[reports.TimelineEntry])
async def timeline(repo: TaskRepository = Depends(deps.get_repository)):
    """Dated tasks in start order, for the Gantt view."""
    return reports.timeline(await deps.load_tasks(repo))


@router.get("/hours/{task_id}", response_model=List[allocation.HoursShare])
async def task_hours(
    task_id: str,
    repo: TaskRepository = Depends(deps.get_repository),
) -> Any:
    """Reporting hours of each participant of one task."""
    tasks = await deps.load_tasks(repo)
    return allocation.task_hours(deps.find_task(tasks, task_id))
