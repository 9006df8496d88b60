# tests/test_reports.py

from __future__ import annotations

from datetime import date

from build_tracker.models.task import Task, TaskStatus
from build_tracker.models.team import TeamMember
from build_tracker.services import reports

# A Wednesday
TODAY = date(2024, 5, 15)


def _tasks():
    return [
        Task(id="T1", status=TaskStatus.PENDING_ALLOCATION, end_date=date(2024, 5, 10)),
        Task(id="T2", status=TaskStatus.IN_PROGRESS, lead="Ada", end_date=date(2024, 5, 19),
             start_date=date(2024, 5, 1), scoped_hours=100, team=["Grace"]),
        Task(id="T3", status=TaskStatus.COMPLETED, lead="Ada", end_date=date(2024, 5, 1),
             start_date=date(2024, 4, 20)),
        Task(id="T4", status=TaskStatus.ASSIGNED, end_date=date(2024, 5, 25), sponsor="Acme Pharma",
             edc_system="Viedoc"),
        Task(id="T5"),
    ]


def test_end_of_week_is_sunday() -> None:
    assert reports.end_of_week(TODAY) == date(2024, 5, 19)
    assert reports.end_of_week(date(2024, 5, 19)) == date(2024, 5, 19)


def test_dashboard_summary() -> None:
    summary = reports.dashboard_summary(_tasks(), TODAY)
    assert summary.model_dump() == {
        "total": 5,
        "pending": 1,
        "in_progress": 2,
        "overdue": 1,
        "due_this_week": 1,
    }


def test_status_breakdown_in_lifecycle_order() -> None:
    counts = reports.status_breakdown(_tasks())
    assert counts[0].status == TaskStatus.PENDING_ALLOCATION
    assert {c.status: c.count for c in counts}[TaskStatus.COMPLETED] == 1
    assert sum(c.count for c in counts) == 4


def test_deliverables() -> None:
    tasks = _tasks()
    assert [t.id for t in reports.overdue_deliverables(tasks, TODAY)] == ["T1"]
    assert [t.id for t in reports.upcoming_deliverables(tasks, TODAY)] == ["T2", "T4"]
    assert [t.id for t in reports.upcoming_deliverables(tasks, TODAY, days=5)] == ["T2"]


def test_resource_allocation_uses_reporting_hours() -> None:
    members = [TeamMember(name="Ada"), TeamMember(name="Grace"), TeamMember(name="Linus")]

    loads = {l.name: l for l in reports.resource_allocation(members, _tasks())}

    assert (loads["Ada"].tasks, loads["Ada"].hours) == (2, 55)
    assert (loads["Grace"].tasks, loads["Grace"].hours) == (1, 50)
    assert [m.name for m in reports.unallocated_members(members, _tasks())] == ["Linus"]


def test_filter_tasks() -> None:
    tasks = _tasks()
    assert [t.id for t in reports.filter_tasks(tasks, member="Grace")] == ["T2"]
    assert [t.id for t in reports.filter_tasks(tasks, system="Viedoc")] == ["T4"]
    assert [t.id for t in reports.filter_tasks(tasks, search="acme")] == ["T4"]
    assert [t.id for t in reports.filter_tasks(tasks, member="Ada", status=TaskStatus.COMPLETED)] == ["T3"]


def test_timeline_counts_days_inclusively() -> None:
    entries = reports.timeline(_tasks())
    assert [(e.id, e.duration_days) for e in entries] == [("T3", 12), ("T2", 19)]
    assert entries[1].lead == "Ada"
