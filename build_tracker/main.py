from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlmodel import Session

from build_tracker.core.config import settings
from build_tracker.core.logging_setup import setup_logging
from build_tracker.api.v1.api import api_router
from build_tracker.db.session import engine, init_db
from build_tracker.services.team import seed_defaults

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.LOG_LEVEL, settings.LOG_FILE)
    init_db()
    with Session(engine) as session:
        seed_defaults(session, settings.DEFAULT_EDC_SYSTEMS)
    if not settings.SHEET_ID:
        logger.warning("SHEET_ID is not set; task operations will fail until it is configured")
    if not settings.METRICS_SHEET_ID:
        logger.info("METRICS_SHEET_ID is not set; quality metrics are disabled")
    logger.info(
        "%s %s started (column scheme %s)",
        settings.PROJECT_NAME, settings.VERSION, settings.COLUMN_SCHEME,
    )
    yield


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    lifespan=lifespan,
)

# Set up CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, specify actual origins
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(api_router, prefix=settings.API_V1_STR)
