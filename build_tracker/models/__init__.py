from .task import (
    Task, TaskCreate, TaskUpdate, AllocationRequest,
    TaskStatus, Priority, TERMINAL_STATUSES, normalize_team,
)
from .team import (
    TeamMember, TeamMemberCreate,
    Requestor, RequestorCreate,
    EdcSystem,
)
from .metrics import (
    MetricRecord, MemberMetrics, MemberMetricsIn, MetricsUpdate, TaskMetrics, MetricRole,
)

__all__ = [
    "Task", "TaskCreate", "TaskUpdate", "AllocationRequest",
    "TaskStatus", "Priority", "TERMINAL_STATUSES", "normalize_team",
    "TeamMember", "TeamMemberCreate",
    "Requestor", "RequestorCreate",
    "EdcSystem",
    "MetricRecord", "MemberMetrics", "MemberMetricsIn", "MetricsUpdate", "TaskMetrics", "MetricRole",
]
