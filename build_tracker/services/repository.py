"""
Task Repository Module

The single place where task data crosses the network. The repository wraps the
sheet client and the record codec and exposes list/create/update/allocate,
plus reading and saving a task's quality metrics on the second sheet.

Error policy: every failure (transport, non-success status, undecodable body,
task not found) is caught here. Callers get ``[]``, ``False`` or ``None``; the
human-readable reason is left in ``last_error`` (the exception itself in
``last_exception``) and published on the notifier. No operation is retried.

Consistency: the store can only replace a row by its physical row id, so an
update first re-fetches the whole sheet to resolve the logical task id to a
row id and then writes the full row. Nothing checks that the row is unchanged
between the read and the write. Two overlapping updates of the same task both
succeed and the one written last wins.
"""
import logging
import secrets
import time
from typing import Any, List, Optional

from build_tracker.models.metrics import MemberMetricsIn, MetricRecord, TaskMetrics
from build_tracker.models.task import Task, TaskStatus, normalize_team
from build_tracker.services import metrics
from build_tracker.services.notifications import Notifier
from build_tracker.sheets.client import SheetClient
from build_tracker.sheets.codec import MetricCodec, RecordCodec
from build_tracker.sheets.errors import MetricsNotConfiguredError, SheetError, TaskNotFoundError

logger = logging.getLogger(__name__)

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def _base36(number: int) -> str:
    if number == 0:
        return "0"
    digits = []
    while number:
        number, rem = divmod(number, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def generate_task_id() -> str:
    """Logical task id: TASK-<base36 epoch millis>-<5 random base36 chars>."""
    millis = int(time.time() * 1000)
    suffix = "".join(secrets.choice(_BASE36) for _ in range(5))
    return f"TASK-{_base36(millis)}-{suffix}".upper()


def _created_row_id(data: Any) -> Optional[int]:
    """Row id of the first appended row, if the store echoed one back."""
    if not isinstance(data, dict):
        return None
    result = data.get("result")
    if isinstance(result, list) and result and isinstance(result[0], dict):
        row_id = result[0].get("id")
        return row_id if isinstance(row_id, int) else None
    return None


class TaskRepository:
    """Task persistence on top of a remote sheet."""

    def __init__(
        self,
        client: SheetClient,
        codec: RecordCodec,
        notifier: Optional[Notifier] = None,
        metrics_client: Optional[SheetClient] = None,
        metric_codec: Optional[MetricCodec] = None,
    ) -> None:
        self.client = client
        self.codec = codec
        self.metrics_client = metrics_client
        self.metric_codec = metric_codec
        self.notifier = notifier if notifier is not None else Notifier()
        self.last_error: Optional[str] = None
        self.last_exception: Optional[Exception] = None

    def _reset(self) -> None:
        self.last_error = None
        self.last_exception = None

    def _fail(self, message: str, exc: Exception) -> None:
        self.last_error = f"{message}: {exc}"
        self.last_exception = exc
        self.notifier.error(self.last_error)

    async def _fetch_tasks(self) -> List[Task]:
        rows = await self.client.get_rows()
        return [self.codec.decode(row) for row in rows]

    async def _find_task(self, task_id: str) -> Task:
        if not task_id:
            # Rows with a blank id cell all decode to "", so never match on it
            raise TaskNotFoundError(task_id)
        task = next((t for t in await self._fetch_tasks() if t.id == task_id), None)
        if task is None:
            raise TaskNotFoundError(task_id)
        return task

    async def list_tasks(self) -> List[Task]:
        """
        Fetch and decode every task.

        An empty list is ambiguous: check ``last_error`` to tell a failed fetch
        from an empty sheet.
        """
        self._reset()
        try:
            return await self._fetch_tasks()
        except SheetError as e:
            self._fail("Failed to fetch tasks", e)
            return []

    async def get_task(self, task_id: str) -> Optional[Task]:
        tasks = await self.list_tasks()
        return next((t for t in tasks if t.id == task_id), None)

    async def create_task(self, task: Task) -> bool:
        """
        Append a new task as one row.

        Fills in a generated id, the Pending Allocation status and a requestor
        id on ``task`` when they are missing. The row is sent without a row id;
        the id assigned by the store is copied back when the store returns it.
        """
        self._reset()
        if not task.id:
            task.id = generate_task_id()
        if task.status is None:
            task.status = TaskStatus.PENDING_ALLOCATION
        if not task.requestor_id:
            task.requestor_id = generate_task_id()

        try:
            task.team = normalize_team(task.team)
            data = await self.client.add_rows([self.codec.encode(task)])
        except (SheetError, ValueError) as e:
            self._fail("Failed to create task", e)
            return False

        task.row_id = _created_row_id(data)
        logger.debug("Created task %s row_id=%s", task.id, task.row_id)
        self.notifier.success("Task created successfully")
        return True

    async def update_task(self, task: Task) -> Optional[Task]:
        """
        Replace the stored row of ``task`` with its current field values.

        Resolves the row id by fetching the full sheet first. Returns the task
        as written (with the resolved row id), or None on any failure. When the
        task id is not on the sheet no write is issued.
        """
        self._reset()
        try:
            match = await self._find_task(task.id)

            updated = task.model_copy(update={
                "row_id": match.row_id,
                "team": normalize_team(task.team),
            })
            await self.client.update_rows([self.codec.encode(updated, include_row_id=True)])
        except (SheetError, ValueError) as e:
            self._fail("Failed to update task", e)
            return None

        logger.debug("Updated task %s row_id=%s status=%s", updated.id, updated.row_id, updated.status)
        self.notifier.success("Task updated successfully")
        return updated

    async def allocate_task(
        self,
        task_id: str,
        lead: str,
        secondary_lead: Optional[str] = None,
        team: Any = None,
    ) -> bool:
        """
        Assign leads and supporting team, then save through ``update_task``.

        Status is forced to Assigned whatever it was before, including statuses
        further along the lifecycle.
        """
        self._reset()
        try:
            task = await self._find_task(task_id)
            task.team = normalize_team(team)
        except (SheetError, ValueError) as e:
            self._fail("Failed to allocate task", e)
            return False

        task.lead = lead
        task.secondary_lead = secondary_lead or ""
        task.status = TaskStatus.ASSIGNED

        return await self.update_task(task) is not None

    # ---- quality metrics ----

    def _metrics_sheet(self):
        if self.metrics_client is None or self.metric_codec is None:
            raise MetricsNotConfiguredError()
        return self.metrics_client, self.metric_codec

    async def _fetch_metric_records(self) -> List[MetricRecord]:
        client, codec = self._metrics_sheet()
        return [codec.decode(row) for row in await client.get_rows()]

    async def list_metrics(self, task_id: str) -> Optional[TaskMetrics]:
        """
        Quality figures recorded for a task, one entry per person.

        Reads the task sheet (to find the task) and the metrics sheet. Returns
        None on any failure, with the reason in ``last_error``.
        """
        self._reset()
        try:
            self._metrics_sheet()
            task = await self._find_task(task_id)
            records = await self._fetch_metric_records()
        except SheetError as e:
            self._fail("Failed to fetch metrics", e)
            return None
        return metrics.task_metrics(task, records)

    async def save_metrics(self, task_id: str, members: List[MemberMetricsIn]) -> Optional[TaskMetrics]:
        """
        Write the figures of several people on one task.

        People whose row already exists (by the row id they carry, or by their
        metric id on the sheet) are replaced in one PUT; the rest are appended
        in one POST. The saved figures are then read back.
        """
        self._reset()
        try:
            client, codec = self._metrics_sheet()
            task = await self._find_task(task_id)
            existing = {r.metric_id: r.row_id for r in await self._fetch_metric_records() if r.metric_id}

            by_name = {m.name: m for m in members if m.name}
            records = [
                metrics.to_record(task, m, m.row_id or existing.get(metrics.metric_id_for(task.id, m.name)))
                for m in by_name.values()
            ]
            to_update = [r for r in records if r.row_id is not None]
            to_add = [r for r in records if r.row_id is None]

            if to_update:
                await client.update_rows([codec.encode(r, include_row_id=True) for r in to_update])
            if to_add:
                await client.add_rows([codec.encode(r) for r in to_add])
            saved = await self._fetch_metric_records()
        except (SheetError, ValueError) as e:
            self._fail("Failed to save metrics", e)
            return None

        logger.debug("Saved metrics for %s: %d updated, %d added", task.id, len(to_update), len(to_add))
        self.notifier.success("Metrics saved successfully")
        return metrics.task_metrics(task, saved)
