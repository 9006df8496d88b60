# tests/conftest.py

from __future__ import annotations

from datetime import date

import pytest
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, create_engine

from build_tracker.db.session import init_db
from build_tracker.models.task import Task, TaskStatus
from build_tracker.services.notifications import Notifier
from build_tracker.services.repository import TaskRepository
from build_tracker.services.team import TeamDirectory
from build_tracker.sheets.client import SheetClient
from build_tracker.sheets.codec import MetricCodec, RecordCodec
from build_tracker.sheets.columns import METRICS_V1, REQUESTS_V2

from .fakes import FakeSheetStore

BASE_URL = "https://sheets.test/2.0"


@pytest.fixture()
def codec() -> RecordCodec:
    return RecordCodec(REQUESTS_V2)


@pytest.fixture()
def sample_task() -> Task:
    return Task(
        id="TASK-LX4K2A-9FQ1Z",
        task_type="Database Build",
        task_sub_type="Amendment",
        sponsor="Acme Pharma",
        project_name="ACM-301",
        priority="High",
        edc_system="Rave",
        integrations="IRT, Lab",
        description="Phase III build",
        start_date=date(2024, 1, 1),
        end_date=date(2024, 1, 10),
        scoped_hours=100,
        secondary_scoped_hours=20,
        status=TaskStatus.ASSIGNED,
        lead="Ada",
        secondary_lead="Grace",
        team=["Linus", "Guido"],
        requestor="Rita",
        requestor_email="rita@example.com",
        requestor_id="REQ-1",
        documentation="DOC-77",
    )


@pytest.fixture()
def store() -> FakeSheetStore:
    return FakeSheetStore()


@pytest.fixture()
def sheet_client(store: FakeSheetStore) -> SheetClient:
    return SheetClient(BASE_URL, "42", token="secret-token", transport=store.transport())


@pytest.fixture()
def notifier() -> Notifier:
    return Notifier(maxlen=10)


@pytest.fixture()
def metric_codec() -> MetricCodec:
    return MetricCodec(METRICS_V1)


@pytest.fixture()
def metrics_store() -> FakeSheetStore:
    return FakeSheetStore()


@pytest.fixture()
def metrics_client(metrics_store: FakeSheetStore) -> SheetClient:
    return SheetClient(BASE_URL, "77", token="secret-token", transport=metrics_store.transport())


@pytest.fixture()
def repository(
    sheet_client: SheetClient,
    codec: RecordCodec,
    notifier: Notifier,
    metrics_client: SheetClient,
    metric_codec: MetricCodec,
) -> TaskRepository:
    return TaskRepository(sheet_client, codec, notifier, metrics_client, metric_codec)


@pytest.fixture()
def seed(store: FakeSheetStore, codec: RecordCodec):
    """Put tasks on the fake sheet as encoded rows."""

    def _seed(*tasks: Task) -> None:
        for task in tasks:
            row = codec.encode(task).to_payload()
            row["id"] = store._next_id
            store._next_id += 1
            store.rows.append(row)

    return _seed


@pytest.fixture()
def db_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    with Session(engine) as session:
        yield session


@pytest.fixture()
def directory(db_session: Session) -> TeamDirectory:
    return TeamDirectory(db_session)
