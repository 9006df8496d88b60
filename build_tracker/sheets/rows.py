"""
Sheet Row Models

Wire shapes of the remote store: a row is an optional row id plus an ordered
list of cells, each cell keyed by a numeric column id. Serialized with
camelCase aliases (``columnId``) exactly as the store expects.
"""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

# Cells normally hold text, numbers or booleans, but the store makes no promise
CellValue = Any


class SheetCell(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    column_id: int = Field(alias="columnId")
    value: CellValue = None


class SheetRow(BaseModel):
    """
    One physical row.

    ``id`` is assigned by the store when a row is appended; it must be sent
    back when replacing the row and must be omitted when appending.
    """
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: Optional[int] = None
    cells: List[SheetCell] = Field(default_factory=list)

    def cell_value(self, column_id: int) -> CellValue:
        for cell in self.cells:
            if cell.column_id == column_id:
                return cell.value
        return None

    def to_payload(self) -> Dict[str, Any]:
        """JSON-ready dict; the row id is left out when it is not set."""
        payload = self.model_dump(by_alias=True)
        if payload["id"] is None:
            del payload["id"]
        return payload
