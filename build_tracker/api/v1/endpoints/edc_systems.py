from typing import List
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from build_tracker.api import deps
from build_tracker.models.team import EdcSystem
from build_tracker.services.team import TeamDirectory

router = APIRouter()


class EdcSystemIn(BaseModel):
    name: str


@router.get("", response_model=List[str])
def list_edc_systems(directory: TeamDirectory = Depends(deps.get_directory)):
    """
    EDC systems offered on the request form.

    A task's EDC system is free text; this list only drives the picker.
    """
    return directory.list_edc_systems()


@router.post("", response_model=EdcSystem)
def create_edc_system(
    system_in: EdcSystemIn,
    directory: TeamDirectory = Depends(deps.get_directory),
):
    if not system_in.name.strip():
        raise HTTPException(status_code=422, detail="Name is required")
    system = directory.add_edc_system(system_in.name)
    if system is None:
        raise HTTPException(status_code=409, detail="EDC system already exists")
    return system


@router.delete("/{name}")
def delete_edc_system(
    name: str,
    directory: TeamDirectory = Depends(deps.get_directory),
):
    if not directory.remove_edc_system(name):
        raise HTTPException(status_code=404, detail="EDC system not found")
    return {"status": "success", "detail": "EDC system deleted"}
