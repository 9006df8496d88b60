from sqlmodel import SQLModel, create_engine, Session
from build_tracker.core.config import settings

# Global engine instance
_engine = None


def get_engine():
    global _engine

    if _engine is not None:
        return _engine

    db_url = settings.DATABASE_URL or "sqlite:///./build_tracker.db"

    # SQLite fix for multithreading
    connect_args = {"check_same_thread": False} if db_url.startswith("sqlite") else {}

    _engine = create_engine(db_url, connect_args=connect_args)
    return _engine


engine = get_engine()


def init_db(bind=None) -> None:
    """Create the directory tables if they do not exist yet."""
    # Register table models on the metadata before create_all
    from build_tracker.models import team  # noqa: F401

    SQLModel.metadata.create_all(bind or engine)


def get_db():
    with Session(engine) as session:
        yield session
