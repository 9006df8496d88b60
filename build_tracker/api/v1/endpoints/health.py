from fastapi import APIRouter, Depends
from typing import Any
from build_tracker.api import deps
from build_tracker.sheets.client import SheetClient
from build_tracker.sheets.errors import SheetError

router = APIRouter()


@router.get("", response_model=dict[str, Any])
def health_check() -> Any:
    """
    Health check endpoint.
    """
    return {"status": "ok"}


@router.get("/sheet", response_model=dict[str, Any])
async def sheet_diagnostics(client: SheetClient = Depends(deps.get_sheet_client)) -> Any:
    """
    Try to read the task sheet and report what happened.

    Always answers 200; the outcome is in the body so the settings page can
    show it.
    """
    result: dict[str, Any] = {
        "sheet_id": client.sheet_id,
        "via_proxy": bool(client.proxy_url),
    }
    try:
        rows = await client.get_rows()
    except SheetError as e:
        result.update(status="error", error_type=type(e).__name__, detail=str(e))
        return result
    result.update(status="ok", rows=len(rows))
    return result
