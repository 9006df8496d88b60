# tests/test_metrics.py

from __future__ import annotations

import pytest

from build_tracker.models.metrics import MemberMetricsIn, MetricRecord, MetricRole, pass_rate
from build_tracker.models.task import Task
from build_tracker.services.metrics import belongs_to, metric_id_for, role_of, task_metrics, to_record


@pytest.mark.parametrize(
    "units, errors, expected",
    [(100, 2, 98.0), (80, 1, 98.75), (3, 1, 66.67), (8, 1, 87.5), (0, 0, 0.0), (0, 5, 0.0), (200, 1, 99.5)],
)
def test_pass_rate(units, errors, expected) -> None:
    assert pass_rate(units, errors) == expected


def test_metric_id_joins_task_and_name() -> None:
    assert metric_id_for("TASK-1", "Ada") == "TASK-1-Ada"
    assert metric_id_for("TASK-1", " Ada  King Lovelace ") == "TASK-1-Ada-King-Lovelace"


def test_rows_belong_by_metric_id_or_request(sample_task: Task) -> None:
    assert belongs_to(MetricRecord(metric_id=f"{sample_task.id}-Ada"), sample_task)
    assert belongs_to(
        MetricRecord(metric_id="legacy", project_name="ACM-301", task_type="Database Build", task_sub_type="Amendment"),
        sample_task,
    )
    assert not belongs_to(MetricRecord(metric_id="TASK-OTHER-Ada", project_name="ACM-999"), sample_task)

    no_project = Task(id="TASK-2")
    assert not belongs_to(MetricRecord(metric_id="legacy"), no_project)


def test_roles(sample_task: Task) -> None:
    assert role_of("Ada", sample_task) == MetricRole.LEAD
    assert role_of("Grace", sample_task) == MetricRole.LEAD
    assert role_of("Linus", sample_task) == MetricRole.TEAM
    assert role_of("", Task()) == MetricRole.TEAM


def test_to_record_copies_request_fields(sample_task: Task) -> None:
    record = to_record(sample_task, MemberMetricsIn(name="Linus", units=8, errors=1), row_id=12)

    assert record.metric_id == f"{sample_task.id}-Linus"
    assert (record.project_name, record.task_type, record.task_sub_type) == ("ACM-301", "Database Build", "Amendment")
    assert record.pass_rate == 87.5
    assert record.row_id == 12


def test_task_metrics_lists_everyone(sample_task: Task) -> None:
    records = [
        MetricRecord(metric_id=f"{sample_task.id}-Ada", employee="Ada", units=100, errors=5, row_id=1),
        MetricRecord(metric_id=f"{sample_task.id}-Ada", employee="Ada", units=100, errors=2, row_id=2),
        MetricRecord(
            metric_id="legacy", employee="Margaret", units=50, errors=0, row_id=3,
            project_name="ACM-301", task_type="Database Build", task_sub_type="Amendment",
        ),
        MetricRecord(metric_id="TASK-OTHER-Linus", employee="Linus", units=10, errors=10, row_id=4),
    ]

    result = task_metrics(sample_task, records)

    assert result.task_id == sample_task.id
    assert [m.name for m in result.members] == ["Ada", "Grace", "Linus", "Guido", "Margaret"]
    ada, grace, linus, _, margaret = result.members
    assert (ada.role, ada.units, ada.errors, ada.pass_rate, ada.row_id) == (MetricRole.LEAD, 100, 2, 98.0, 2)
    assert (grace.role, grace.units, grace.row_id) == (MetricRole.LEAD, 0, None)
    assert (linus.units, linus.errors) == (0, 0)
    assert (margaret.role, margaret.pass_rate) == (MetricRole.TEAM, 100.0)
    # 148 good units out of 150
    assert result.pass_rate == 98.67
