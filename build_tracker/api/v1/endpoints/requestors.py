"""
Requestor Endpoints Module

Requestors pre-fill the provenance fields (name, email, identifier) of new
requests.
"""
from typing import List
from fastapi import APIRouter, Depends, HTTPException
from build_tracker.api import deps
from build_tracker.models.team import Requestor, RequestorCreate
from build_tracker.services.team import TeamDirectory

router = APIRouter()


@router.get("", response_model=List[Requestor])
def list_requestors(directory: TeamDirectory = Depends(deps.get_directory)):
    return directory.list_requestors()


@router.get("/options", response_model=List[Requestor])
def requestor_options(directory: TeamDirectory = Depends(deps.get_directory)):
    """Requestors for the request form's picker, one entry per name."""
    return directory.requestor_options()


@router.post("", response_model=Requestor)
def create_requestor(
    requestor_in: RequestorCreate,
    directory: TeamDirectory = Depends(deps.get_directory),
):
    return directory.add_requestor(requestor_in)


@router.delete("/{requestor_id}")
def delete_requestor(
    requestor_id: int,
    directory: TeamDirectory = Depends(deps.get_directory),
):
    if not directory.remove_requestor(requestor_id):
        raise HTTPException(status_code=404, detail="Requestor not found")
    return {"status": "success", "detail": "Requestor deleted"}
