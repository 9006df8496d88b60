from typing import List
from fastapi import APIRouter, Depends, Query
from build_tracker.api import deps
from build_tracker.services.notifications import Notification, Notifier

router = APIRouter()


@router.get("", response_model=List[Notification])
def recent_notifications(
    limit: int = Query(default=20, ge=1, le=200),
    notifier: Notifier = Depends(deps.get_notifier),
):
    """
    Recent success and error messages from task operations, oldest first.
    """
    return notifier.recent(limit)


@router.delete("")
def clear_notifications(notifier: Notifier = Depends(deps.get_notifier)):
    notifier.clear()
    return {"status": "success", "detail": "Notifications cleared"}
