"""
Quality Metrics Rules Module

Pure helpers behind the metrics endpoints: metric ids, matching sheet rows
to tasks, and assembling the per-person figures of one task.
"""
import re
from typing import Dict, Iterable, List, Optional

from build_tracker.models.metrics import (
    MemberMetrics, MemberMetricsIn, MetricRecord, MetricRole, TaskMetrics, pass_rate,
)
from build_tracker.models.task import Task


def metric_id_for(task_id: str, name: str) -> str:
    slug = re.sub(r"\s+", "-", name.strip())
    return f"{task_id}-{slug}"


def belongs_to(record: MetricRecord, task: Task) -> bool:
    if record.metric_id.startswith(f"{task.id}-"):
        return True
    # Older rows are matched on the request they were recorded for
    return bool(task.project_name) and (
        record.project_name == task.project_name
        and record.task_type == task.task_type
        and record.task_sub_type == task.task_sub_type
    )


def role_of(name: str, task: Task) -> MetricRole:
    return MetricRole.LEAD if name and name in (task.lead, task.secondary_lead) else MetricRole.TEAM


def to_record(task: Task, member: MemberMetricsIn, row_id: Optional[int] = None) -> MetricRecord:
    return MetricRecord(
        metric_id=metric_id_for(task.id, member.name),
        employee=member.name,
        project_name=task.project_name,
        task_type=task.task_type,
        task_sub_type=task.task_sub_type,
        units=member.units,
        errors=member.errors,
        pass_rate=pass_rate(member.units, member.errors),
        row_id=row_id,
    )


def task_metrics(task: Task, records: Iterable[MetricRecord]) -> TaskMetrics:
    """
    The figures recorded for a task, one entry per person.

    Everyone on the task appears, with zeros when nothing was recorded yet.
    When several rows name the same person the last one wins.
    """
    recorded: Dict[str, MetricRecord] = {}
    for record in records:
        if record.employee and belongs_to(record, task):
            recorded[record.employee] = record

    names: List[str] = []
    for name in task.participants() + list(recorded):
        if name not in names:
            names.append(name)

    members = []
    for name in names:
        record = recorded.get(name)
        units = record.units if record else 0
        errors = record.errors if record else 0
        members.append(MemberMetrics(
            name=name,
            role=role_of(name, task),
            units=units,
            errors=errors,
            pass_rate=pass_rate(units, errors),
            row_id=record.row_id if record else None,
        ))

    return TaskMetrics(
        task_id=task.id,
        members=members,
        pass_rate=pass_rate(sum(m.units for m in members), sum(m.errors for m in members)),
    )
