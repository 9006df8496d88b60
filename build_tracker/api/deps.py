"""
API Dependencies Module

FastAPI dependency functions wiring the sheet client, codec, notifier and task
repository from the application settings, plus the team directory bound to a
database session.

A fresh repository is built per request so that its ``last_error`` describes
only the call made by that request. The notifier is shared so the UI can read
recent messages across requests.
"""
from functools import lru_cache
from typing import List, Optional

from fastapi import Depends, HTTPException, status
from sqlmodel import Session

from build_tracker.core.config import settings
from build_tracker.db.session import get_db
from build_tracker.models.task import Task
from build_tracker.services.notifications import Notifier
from build_tracker.services.repository import TaskRepository
from build_tracker.services.team import TeamDirectory
from build_tracker.sheets.client import SheetClient
from build_tracker.sheets.codec import MetricCodec, RecordCodec
from build_tracker.sheets.columns import load_metric_scheme, load_scheme
from build_tracker.sheets.errors import MetricsNotConfiguredError, TaskNotFoundError


@lru_cache
def get_notifier() -> Notifier:
    return Notifier(maxlen=settings.NOTIFICATION_BUFFER)


@lru_cache
def get_codec() -> RecordCodec:
    """Codec for the configured column scheme; loaded once per process."""
    return RecordCodec(load_scheme(settings.COLUMN_SCHEME, settings.COLUMN_SCHEME_PATH))


def get_sheet_client() -> SheetClient:
    return SheetClient(
        settings.SHEET_API_URL,
        settings.SHEET_ID,
        token=settings.SHEET_API_TOKEN,
        proxy_url=settings.SHEET_PROXY_URL,
        timeout=settings.SHEET_TIMEOUT,
    )


@lru_cache
def get_metric_codec() -> MetricCodec:
    return MetricCodec(load_metric_scheme(settings.METRICS_COLUMN_SCHEME, settings.METRICS_COLUMN_SCHEME_PATH))


def get_metrics_client() -> Optional[SheetClient]:
    """Client for the quality-metrics sheet, or None when it is not configured."""
    if not settings.METRICS_SHEET_ID:
        return None
    return SheetClient(
        settings.SHEET_API_URL,
        settings.METRICS_SHEET_ID,
        token=settings.SHEET_API_TOKEN,
        proxy_url=settings.SHEET_PROXY_URL,
        timeout=settings.SHEET_TIMEOUT,
    )


def get_repository(
    client: SheetClient = Depends(get_sheet_client),
    codec: RecordCodec = Depends(get_codec),
    notifier: Notifier = Depends(get_notifier),
    metrics_client: Optional[SheetClient] = Depends(get_metrics_client),
    metric_codec: MetricCodec = Depends(get_metric_codec),
) -> TaskRepository:
    return TaskRepository(client, codec, notifier, metrics_client, metric_codec)


def get_directory(db: Session = Depends(get_db)) -> TeamDirectory:
    return TeamDirectory(db)


def allocation_roles() -> List[str]:
    """Roles eligible for allocation as either lead or support, in config order."""
    roles: List[str] = []
    for role in settings.LEAD_ROLES + settings.SUPPORT_ROLES:
        if role not in roles:
            roles.append(role)
    return roles


def raise_for_repository(repo: TaskRepository) -> None:
    """
    Translate a failed repository call into an HTTP error.

    Missing tasks become 404, an unconfigured metrics sheet 503; every store
    failure becomes 502 carrying the repository's message.
    """
    if isinstance(repo.last_exception, TaskNotFoundError):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")
    if isinstance(repo.last_exception, MetricsNotConfiguredError):
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(repo.last_exception))
    raise HTTPException(
        status_code=status.HTTP_502_BAD_GATEWAY,
        detail=repo.last_error or "Sheet store request failed",
    )


async def load_tasks(repo: TaskRepository) -> List[Task]:
    """All tasks, or an HTTP error when the sheet could not be read."""
    tasks = await repo.list_tasks()
    if repo.last_error:
        raise_for_repository(repo)
    return tasks


def find_task(tasks: List[Task], task_id: str) -> Task:
    task = next((t for t in tasks if t.id == task_id), None)
    if task is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")
    return task
