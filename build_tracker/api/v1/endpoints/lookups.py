from typing import Any
from fastapi import APIRouter, Depends
from build_tracker.api import deps
from build_tracker.core.config import settings
from build_tracker.models.task import Priority, TaskStatus, TERMINAL_STATUSES
from build_tracker.services.team import TeamDirectory
from build_tracker.sheets.codec import RecordCodec

router = APIRouter()


@router.get("", response_model=dict[str, Any])
def lookups(
    directory: TeamDirectory = Depends(deps.get_directory),
    codec: RecordCodec = Depends(deps.get_codec),
) -> Any:
    """
    Option lists for the UI's forms and filters.
    """
    return {
        "statuses": [s.value for s in TaskStatus],
        "terminal_statuses": [s.value for s in TaskStatus if s in TERMINAL_STATUSES],
        "priorities": [p.value for p in Priority],
        "edc_systems": directory.list_edc_systems(),
        "lead_roles": settings.LEAD_ROLES,
        "support_roles": settings.SUPPORT_ROLES,
        "column_scheme": codec.scheme.name,
    }
