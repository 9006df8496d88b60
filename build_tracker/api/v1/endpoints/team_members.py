"""
Team Member Endpoints Module

Manage the people who can be allocated to tasks. The role label decides
eligibility: only members whose role is one of the configured lead or support
roles are offered during allocation.
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException
from build_tracker.api import deps
from build_tracker.models.team import TeamMember, TeamMemberCreate
from build_tracker.services.team import TeamDirectory

router = APIRouter()


@router.get("", response_model=List[TeamMember])
def list_team_members(
    role: Optional[str] = None,
    directory: TeamDirectory = Depends(deps.get_directory),
):
    """List team members, optionally only those with an exact role label."""
    return directory.list_members(role=role)


@router.post("", response_model=TeamMember)
def create_team_member(
    member_in: TeamMemberCreate,
    directory: TeamDirectory = Depends(deps.get_directory),
):
    """Add a team member."""
    return directory.add_member(member_in)


@router.delete("/{member_id}")
def delete_team_member(
    member_id: str,
    directory: TeamDirectory = Depends(deps.get_directory),
):
    """
    Remove a team member.

    Tasks that name the member keep the name; only the directory entry goes.
    """
    if not directory.remove_member(member_id):
        raise HTTPException(status_code=404, detail="Team member not found")
    return {"status": "success", "detail": "Team member deleted"}
