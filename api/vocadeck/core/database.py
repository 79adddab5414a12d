from sqlmodel import SQLModel, create_engine
from vocadeck.core.config import settings
from vocadeck.core.record_store import SqlRecordStore
import logging

logger = logging.getLogger(__name__)

db_url = settings.sqlalchemy_url

logger.info(f"Connecting to database: {db_url[:20]}...")  # Log partial URL for debugging

if db_url.startswith("sqlite"):
    # SQLite connections are shared between the threadpool workers
    engine = create_engine(
        db_url,
        echo=False,
        connect_args={"check_same_thread": False},
    )
else:
    engine = create_engine(
        db_url,
        echo=False,  # Set to False in production to reduce logs
        pool_pre_ping=True,  # Verify connections before using
        pool_size=5,
        max_overflow=10,
    )


def get_store():
    """Dependency for getting the record store bound to the application engine."""
    return SqlRecordStore(engine)


def init_db(bind=None):
    """Initialize database tables."""
    # Import models so they are registered on SQLModel.metadata
    from vocadeck import models  # noqa: F401
    SQLModel.metadata.create_all(bind or engine)
