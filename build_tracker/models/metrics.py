"""
Quality Metrics Model Module

Per-person quality figures recorded against a task: units produced, errors
found and the resulting pass rate. Like tasks, metrics are not stored locally;
each person's figures for a task are one row of a separate metrics sheet.
"""
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import List, Optional

from sqlmodel import SQLModel, Field


class MetricRole(str, Enum):
    LEAD = "Lead"
    TEAM = "Team"


def pass_rate(units: int, errors: int) -> float:
    """Percentage of units without errors, to two decimals; 0 when no units."""
    if units <= 0:
        return 0.0
    rate = Decimal(units - errors) * 100 / Decimal(units)
    return float(rate.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


class MetricRecord(SQLModel):
    """
    One row of the metrics sheet as stored.

    Rows carry no task id column. They are tied to a task through
    ``metric_id`` (``<task id>-<name>``), or through project, task type and
    sub type for rows written before metric ids existed.
    """
    metric_id: str = ""
    employee: str = ""
    project_name: str = ""
    task_type: str = ""
    task_sub_type: str = ""
    units: int = 0
    errors: int = 0
    pass_rate: float = 0.0
    row_id: Optional[int] = None


class MemberMetricsIn(SQLModel):
    """Figures submitted for one person. ``row_id`` is echoed back from a read."""
    name: str
    units: int = Field(default=0, ge=0)
    errors: int = Field(default=0, ge=0)
    row_id: Optional[int] = None


class MemberMetrics(MemberMetricsIn):
    role: MetricRole = MetricRole.TEAM
    pass_rate: float = 0.0


class MetricsUpdate(SQLModel):
    """Schema for saving the figures of several people on one task at once."""
    members: List[MemberMetricsIn] = Field(default_factory=list)


class TaskMetrics(SQLModel):
    task_id: str
    members: List[MemberMetrics] = Field(default_factory=list)
    pass_rate: float = 0.0  # Over all members' units and errors
