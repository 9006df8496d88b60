"""
Task Endpoints Module

This module provides the endpoints for submitting, listing, updating and
allocating tasks, and for their quality metrics. Tasks live in the remote
sheet, so every endpoint goes through the TaskRepository and re-reads the
sheet rather than trusting any local copy.
"""
from typing import List, Literal, Optional
from fastapi import APIRouter, Depends
from build_tracker.api import deps
from build_tracker.core.config import settings
from build_tracker.models.metrics import MetricsUpdate, TaskMetrics
from build_tracker.models.task import AllocationRequest, Task, TaskCreate, TaskStatus, TaskUpdate
from build_tracker.services import allocation, reports
from build_tracker.services.repository import TaskRepository
from build_tracker.services.team import TeamDirectory

router = APIRouter()


@router.get("", response_model=List[Task])
async def list_tasks(
    system: Optional[str] = None,
    member: Optional[str] = None,
    status: Optional[TaskStatus] = None,
    search: Optional[str] = None,
    repo: TaskRepository = Depends(deps.get_repository),
):
    """
    Retrieve every task on the sheet, optionally filtered.

    Args:
        system: Only tasks for this EDC system
        member: Only tasks this person leads or supports
        status: Only tasks in this status
        search: Case-insensitive match on project, sponsor and description

    Raises:
        HTTPException 502: If the sheet could not be read
    """
    tasks = await deps.load_tasks(repo)
    return reports.filter_tasks(tasks, system=system, member=member, status=status, search=search)


@router.get("/{task_id}", response_model=Task)
async def read_task(
    task_id: str,
    repo: TaskRepository = Depends(deps.get_repository),
):
    """Get a specific task by its logical ID."""
    tasks = await deps.load_tasks(repo)
    return deps.find_task(tasks, task_id)


@router.post("", response_model=Task)
async def create_task(
    task_in: TaskCreate,
    repo: TaskRepository = Depends(deps.get_repository),
):
    """
    Submit a new request.

    The task gets a generated ID and starts as "Pending Allocation" unless a
    status is given.

    Returns:
        Task: The task as appended to the sheet
    """
    task = Task(**task_in.model_dump())
    if not await repo.create_task(task):
        deps.raise_for_repository(repo)
    return task


@router.patch("/{task_id}", response_model=Task)
async def update_task(
    task_id: str,
    task_update: TaskUpdate,
    repo: TaskRepository = Depends(deps.get_repository),
):
    """
    Update an existing task.

    Only the fields present in the body are changed; the full row is then
    written back. Concurrent edits are not detected: the last write wins.
    An explicit null is accepted only for the dates and the status (422
    otherwise).
    """
    current = deps.find_task(await deps.load_tasks(repo), task_id)
    merged = Task.model_validate({
        **current.model_dump(),
        **task_update.model_dump(exclude_unset=True),
    })

    updated = await repo.update_task(merged)
    if updated is None:
        deps.raise_for_repository(repo)
    return updated


@router.post("/{task_id}/allocate", response_model=Task)
async def allocate_task(
    task_id: str,
    allocation_in: AllocationRequest,
    repo: TaskRepository = Depends(deps.get_repository),
):
    """
    Allocate a task to its leads and supporting team.

    The status becomes "Assigned" whatever it was before. Availability is not
    checked here; see the availability endpoint.

    Returns:
        Task: The task as re-read from the sheet after allocation
    """
    ok = await repo.allocate_task(
        task_id,
        allocation_in.lead,
        allocation_in.secondary_lead,
        allocation_in.team,
    )
    if not ok:
        deps.raise_for_repository(repo)

    return deps.find_task(await deps.load_tasks(repo), task_id)


@router.get("/{task_id}/availability", response_model=List[allocation.MemberAvailability])
async def task_availability(
    task_id: str,
    pool: Literal["all", "lead", "support"] = "all",
    repo: TaskRepository = Depends(deps.get_repository),
    directory: TeamDirectory = Depends(deps.get_directory),
):
    """
    Who is free to work on a task.

    A member is available when none of their other active tasks overlaps the
    task's dates. Advisory only.

    Args:
        pool: Restrict candidates to lead-eligible or support-eligible roles
    """
    tasks = await deps.load_tasks(repo)
    candidate = deps.find_task(tasks, task_id)

    if pool == "lead":
        roles = settings.LEAD_ROLES
    elif pool == "support":
        roles = settings.SUPPORT_ROLES
    else:
        roles = deps.allocation_roles()

    return allocation.availability(directory.list_members(), candidate, tasks, roles)


@router.get("/{task_id}/metrics", response_model=TaskMetrics)
async def read_task_metrics(
    task_id: str,
    repo: TaskRepository = Depends(deps.get_repository),
):
    """
    Quality metrics of a task: units, errors and pass rate per person.

    Everyone on the task is listed; people with nothing recorded show zeros.

    Raises:
        HTTPException 404: If the task does not exist
        HTTPException 503: If no metrics sheet is configured
    """
    result = await repo.list_metrics(task_id)
    if result is None:
        deps.raise_for_repository(repo)
    return result


@router.put("/{task_id}/metrics", response_model=TaskMetrics)
async def save_task_metrics(
    task_id: str,
    metrics_in: MetricsUpdate,
    repo: TaskRepository = Depends(deps.get_repository),
):
    """
    Save the figures of several people on a task in one submission.

    Existing rows are replaced in one batch and new ones appended in another.
    Pass rates are computed here, not taken from the body.

    Returns:
        TaskMetrics: The figures as read back from the metrics sheet
    """
    result = await repo.save_metrics(task_id, metrics_in.members)
    if result is None:
        deps.raise_for_repository(repo)
    return result
