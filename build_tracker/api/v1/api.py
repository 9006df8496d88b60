from fastapi import APIRouter
from build_tracker.api.v1.endpoints import (
    health, lookups, notifications,
    tasks, reports,
    team_members, requestors, edc_systems,
)

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(lookups.router, prefix="/lookups", tags=["lookups"])
api_router.include_router(notifications.router, prefix="/notifications", tags=["notifications"])

# Sheet-backed resources
api_router.include_router(tasks.router, prefix="/tasks", tags=["tasks"])
api_router.include_router(reports.router, prefix="/reports", tags=["reports"])

# Locally stored directory
api_router.include_router(team_members.router, prefix="/team-members", tags=["team"])
api_router.include_router(requestors.router, prefix="/requestors", tags=["team"])
api_router.include_router(edc_systems.router, prefix="/edc-systems", tags=["team"])
