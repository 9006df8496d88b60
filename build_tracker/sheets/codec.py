"""
Record Codec Module

Bidirectional, stateless mapping between a Task and a sheet row, and between
a MetricRecord and a row of the metrics sheet. The codecs perform no I/O; the
column scheme they use is injected.

Encoding writes one cell per field the scheme maps, with every task value
coerced to text. Decoding is total: a missing or empty cell yields the
field's default and a malformed numeric or date cell never raises.
"""
import logging
import math
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from build_tracker.models.task import Task, TaskStatus, Priority, TEAM_DELIMITER, normalize_team
from build_tracker.models.metrics import MetricRecord, pass_rate
from build_tracker.sheets.columns import ColumnScheme, MetricColumnScheme
from build_tracker.sheets.rows import CellValue, SheetCell, SheetRow

logger = logging.getLogger(__name__)

# Sheet field name -> Task attribute, where they differ
_ATTRIBUTES = {"task_id": "id"}

_INT_FIELDS = frozenset({"scoped_hours", "secondary_scoped_hours"})
_DATE_FIELDS = frozenset({"start_date", "end_date"})
_METRIC_NUMBERS = frozenset({"units", "errors", "pass_rate"})


def to_int(value: CellValue) -> int:
    """
    Parse an hours cell.

    Accepts ints, floats and numeric strings ("12", "12.5" -> 12). Anything
    else, including negative numbers, becomes 0.
    """
    if not value or isinstance(value, bool):
        return 0
    try:
        if isinstance(value, str):
            text = value.strip()
            try:
                number = int(text)
            except ValueError:
                number = int(float(text))
        else:
            if isinstance(value, float) and not math.isfinite(value):
                return 0
            number = int(value)
    except (TypeError, ValueError, OverflowError):
        return 0
    return max(number, 0)


def to_date(value: CellValue) -> Optional[date]:
    """Parse an ISO date cell; datetime strings are cut to their date part."""
    if not value or not isinstance(value, str):
        return None
    try:
        return date.fromisoformat(value.strip()[:10])
    except ValueError:
        return None


def _match_enum(enum_cls, value: str):
    try:
        return enum_cls(value)
    except ValueError:
        lowered = value.strip().lower()
        for member in enum_cls:
            if member.value.lower() == lowered:
                return member
    return None


def to_team(value: CellValue) -> List[str]:
    """Parse a team cell, whether it arrives as delimited text or as a list."""
    if not value:
        return []
    if isinstance(value, (list, tuple)):
        return normalize_team(value)
    return normalize_team(to_text(value))


def to_text(value: Any) -> str:
    """Render a Task attribute (or an odd-shaped cell) as cell text."""
    if value is None:
        return ""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, (list, tuple)):
        return TEAM_DELIMITER.join(str(v) for v in value)
    return str(value)


class RecordCodec:
    """
    Maps Tasks to rows of one sheet and back.

    Usage:
        codec = RecordCodec(load_scheme("requests-v2"))
        row = codec.encode(task)
        task = codec.decode(row)

    Round trip ``decode(encode(task))`` reproduces every field the scheme
    maps. Fields the scheme does not map are dropped on encode and come back
    as defaults; callers must not expect fidelity across scheme revisions.
    """

    def __init__(self, scheme: ColumnScheme) -> None:
        self.scheme = scheme

    def encode(self, task: Task, *, include_row_id: bool = False) -> SheetRow:
        """
        Build the row for a task.

        ``include_row_id`` is set for replace operations; appends leave the
        row id out so the store assigns one.
        """
        if include_row_id and task.row_id is None:
            raise ValueError(f"Task {task.id!r} has no row id to update")

        cells = [
            SheetCell(column_id=column_id, value=to_text(getattr(task, _ATTRIBUTES.get(field, field))))
            for field, column_id in self.scheme.columns.items()
        ]
        return SheetRow(id=task.row_id if include_row_id else None, cells=cells)

    def decode(self, row: SheetRow) -> Task:
        values: Dict[str, Any] = {"row_id": row.id}

        for field, column_id in self.scheme.columns.items():
            raw = row.cell_value(column_id)
            attr = _ATTRIBUTES.get(field, field)

            if field in _INT_FIELDS:
                values[attr] = to_int(raw)
            elif field in _DATE_FIELDS:
                values[attr] = to_date(raw)
            elif field == "team":
                values[attr] = to_team(raw)
            elif field == "priority":
                values[attr] = (_match_enum(Priority, to_text(raw)) if raw else None) or Priority.MEDIUM
            elif field == "status":
                status = _match_enum(TaskStatus, to_text(raw)) if raw else None
                if raw and status is None:
                    logger.warning("Row %s has unknown status %r", row.id, raw)
                values[attr] = status
            else:
                values[attr] = to_text(raw) if raw else ""

        return Task(**values)


class MetricCodec:
    """
    Maps MetricRecords to rows of the quality-metrics sheet and back.

    The pass rate is written for people reading the sheet, but recomputed
    from units and errors on decode.
    """

    def __init__(self, scheme: MetricColumnScheme) -> None:
        self.scheme = scheme

    def encode(self, record: MetricRecord, *, include_row_id: bool = False) -> SheetRow:
        if include_row_id and record.row_id is None:
            raise ValueError(f"Metric {record.metric_id!r} has no row id to update")
        cells = []
        for field, column_id in self.scheme.columns.items():
            value = getattr(record, field)
            # Numbers stay numeric so the sheet can total them
            if field not in _METRIC_NUMBERS:
                value = to_text(value)
            cells.append(SheetCell(column_id=column_id, value=value))
        return SheetRow(id=record.row_id if include_row_id else None, cells=cells)

    def decode(self, row: SheetRow) -> MetricRecord:
        values: Dict[str, Any] = {"row_id": row.id}
        for field, column_id in self.scheme.columns.items():
            raw = row.cell_value(column_id)
            if field in ("units", "errors"):
                values[field] = to_int(raw)
            elif field != "pass_rate":
                values[field] = to_text(raw) if raw else ""
        record = MetricRecord(**values)
        record.pass_rate = pass_rate(record.units, record.errors)
        return record
