"""
Column Scheme Module

A column scheme maps each Task field to the numeric column id it occupies in
one particular sheet. Column ids are specific to a sheet instance and have been
reissued every time the request sheet was rebuilt, so schemes are versioned,
registered by name, and injected into the codec rather than hard-coded. The
quality-metrics sheet has its own, smaller set of fields and its own schemes.

A scheme can also be loaded from a JSON file:

    {"name": "requests-prod", "columns": {"task_id": 7329347793014660, ...}}
"""
import json
import logging
from pathlib import Path
from typing import ClassVar, Dict, Optional, Tuple, Type, Union

from pydantic import BaseModel, field_validator

logger = logging.getLogger(__name__)

# Every Task field a scheme may map, in the order cells are written
SHEET_FIELDS = (
    "task_id",
    "task_type",
    "task_sub_type",
    "sponsor",
    "project_name",
    "edc_system",
    "integrations",
    "description",
    "start_date",
    "end_date",
    "scoped_hours",
    "secondary_scoped_hours",
    "priority",
    "status",
    "lead",
    "secondary_lead",
    "team",
    "requestor",
    "requestor_email",
    "requestor_id",
    "documentation",
)


class ColumnScheme(BaseModel):
    """
    Field-name to column-id mapping for one sheet instance.

    Fields left out of ``columns`` are simply not stored: they are skipped on
    encode and come back as defaults on decode.
    """
    FIELDS: ClassVar[Tuple[str, ...]] = SHEET_FIELDS

    name: str
    columns: Dict[str, int]

    @field_validator("columns")
    @classmethod
    def check_columns(cls, v: Dict[str, int]) -> Dict[str, int]:
        unknown = sorted(set(v) - set(cls.FIELDS))
        if unknown:
            raise ValueError(f"Unknown fields in column scheme: {unknown}")

        seen: Dict[int, str] = {}
        for field_name, column_id in v.items():
            if column_id in seen:
                raise ValueError(
                    f"Column id {column_id} mapped to both {seen[column_id]!r} and {field_name!r}"
                )
            seen[column_id] = field_name

        # Canonical order so encoded rows are stable across schemes
        return {f: v[f] for f in cls.FIELDS if f in v}

    def column_for(self, field_name: str) -> Optional[int]:
        return self.columns.get(field_name)


# First-generation request sheet: one lead, one hours column
REQUESTS_V1 = ColumnScheme(
    name="requests-v1",
    columns={
        "task_id": 7329347793014660,
        "task_type": 292473375248260,
        "sponsor": 8455247699857284,
        "project_name": 1825748165644164,
        "edc_system": 3951648072486788,
        "integrations": 5921972909461380,
        "description": 1418373282090884,
        "start_date": 1699848258801540,
        "end_date": 6203447886172036,
        "scoped_hours": 5577048165361540,
        "priority": 8297885466840964,
        "status": 4796073002618756,
        "lead": 2544273188933508,
        "team": 7047872816304004,
        "requestor": 3329347793014661,
        "requestor_email": 8825748165644165,
        "requestor_id": 4792473375248262,
    },
)

# Rebuilt sheet with a secondary discipline and documentation references
REQUESTS_V2 = ColumnScheme(
    name="requests-v2",
    columns={
        "task_id": 1044470154307460,
        "task_type": 5548069781677956,
        "task_sub_type": 3181582951337860,
        "sponsor": 3296269968025476,
        "project_name": 7799869595395972,
        "edc_system": 2170370061182852,
        "integrations": 6673969688553348,
        "description": 4422169874868100,
        "start_date": 8925769502238596,
        "end_date": 159175920865156,
        "scoped_hours": 4662775548235652,
        "secondary_scoped_hours": 2410975734550404,
        "priority": 6914575361920900,
        "status": 1285075827707780,
        "lead": 5788675455078276,
        "secondary_lead": 3536875641393028,
        "team": 8040475268763524,
        "requestor": 722125874286468,
        "requestor_email": 5225725501656964,
        "requestor_id": 2973925687971716,
        "documentation": 7477525315342212,
    },
)

SCHEMES: Dict[str, ColumnScheme] = {
    REQUESTS_V1.name: REQUESTS_V1,
    REQUESTS_V2.name: REQUESTS_V2,
}


# Fields of the quality-metrics sheet, one row per person per task
METRIC_FIELDS = (
    "metric_id",
    "employee",
    "project_name",
    "task_type",
    "task_sub_type",
    "units",
    "errors",
    "pass_rate",
)


class MetricColumnScheme(ColumnScheme):
    """Column mapping for a quality-metrics sheet."""
    FIELDS: ClassVar[Tuple[str, ...]] = METRIC_FIELDS


METRICS_V1 = MetricColumnScheme(
    name="metrics-v1",
    columns={
        "metric_id": 8272663237840772,
        "employee": 281097919483780,
        "project_name": 1552115308908420,
        "task_type": 5433382765023108,
        "task_sub_type": 3181582951337860,
        "units": 4784697546854276,
        "errors": 2532897733169028,
        "pass_rate": 929783137652612,
    },
)

METRIC_SCHEMES: Dict[str, MetricColumnScheme] = {
    METRICS_V1.name: METRICS_V1,
}


def _load(name, path, registry, model: Type[ColumnScheme]):
    if path:
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
        scheme = model.model_validate(raw)
        logger.info("Loaded column scheme %s from %s (%d columns)", scheme.name, path, len(scheme.columns))
        return scheme

    try:
        return registry[name]
    except KeyError:
        raise ValueError(f"Unknown column scheme {name!r}; known: {sorted(registry)}") from None


def load_scheme(name: str, path: Optional[Union[str, Path]] = None) -> ColumnScheme:
    """
    Resolve the task column scheme to use.

    A JSON file given by ``path`` wins over the built-in registry. Raises
    ValueError for an unknown name or an invalid file.
    """
    return _load(name, path, SCHEMES, ColumnScheme)


def load_metric_scheme(name: str, path: Optional[Union[str, Path]] = None) -> MetricColumnScheme:
    """Same as ``load_scheme`` for the quality-metrics sheet."""
    return _load(name, path, METRIC_SCHEMES, MetricColumnScheme)
