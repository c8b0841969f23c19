"""
SQLAlchemy session configuration.
Provides the engine, the session factory and the FastAPI dependency.
"""
from typing import Generator, Optional
import logging

from sqlalchemy import create_engine, event, text
from sqlalchemy.orm import sessionmaker, Session

from app.core.config import settings

logger = logging.getLogger(__name__)


# === 1. ENGINE ===
#
# PostgreSQL gets a pooled engine with a forced UTC timezone.
# SQLite (local development) needs check_same_thread disabled because
# FastAPI runs sync endpoints in a threadpool.

def _engine_options() -> dict:
    if settings.is_sqlite:
        return {
            "connect_args": {"check_same_thread": False},
            "echo": False,
        }
    return {
        "pool_size": 5,              # Permanent connections
        "max_overflow": 10,          # Temporary extra connections
        "pool_timeout": 30,          # Seconds to wait for a connection
        "pool_recycle": 1800,        # Recycle connections after 30 min
        "pool_pre_ping": True,       # Check the connection before use
        "echo": settings.ENVIRONMENT == "development",
        "connect_args": {
            "application_name": "studio-manager",
            "options": "-c timezone=UTC",
        },
    }


engine = create_engine(settings.DATABASE_URL, **_engine_options())


# === 2. SESSION FACTORY ===

SessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
    expire_on_commit=False,   # Objects stay readable after commit
)


# === 3. FASTAPI DEPENDENCY ===

def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency yielding one session per request.

    Usage:
        @router.get("/members")
        def list_members(db: Session = Depends(get_db)):
            ...
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


class db_session:
    """
    Context manager for a session outside FastAPI.

    Commits on success, rolls back on error, always closes.

    Usage:
        with db_session() as db:
            db.add(slot)
            # automatic commit

        with db_session() as db:
            db.add(slot)
            raise Exception("Oops")  # automatic rollback
    """

    def __init__(self, commit_on_exit: bool = True):
        self.db: Optional[Session] = None
        self.commit_on_exit = commit_on_exit

    def __enter__(self) -> Session:
        self.db = SessionLocal()
        return self.db

    def __exit__(self, exc_type, exc_val, exc_tb):
        try:
            if exc_type is None and self.commit_on_exit:
                self.db.commit()
            else:
                self.db.rollback()
        finally:
            self.db.close()

        # Propagate the exception
        return False


# === 4. CONNECTION CHECK ===

def check_database_connection() -> bool:
    """
    Check that the database answers.

    Used by the health endpoint and at startup.

    Returns:
        True if the connection works, False otherwise
    """
    try:
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error(f"❌ Database connection error: {e}")
        return False


def get_database_info() -> dict:
    """
    Connection details for debugging and the admin health endpoint.

    Example:
        >>> get_database_info()
        {'backend': 'postgresql', 'database': 'studio', 'host': 'localhost', 'connected': True}
    """
    url = engine.url

    return {
        'backend': url.get_backend_name(),
        'database': url.database,
        'host': url.host,
        'connected': check_database_connection(),
    }


# === 5. EVENT LISTENERS (debugging) ===

if settings.ENVIRONMENT == "development" and not settings.is_sqlite:
    @event.listens_for(engine, "checkout")
    def on_checkout(dbapi_connection, connection_record, connection_proxy):
        logger.debug("📤 Connection borrowed from the pool")

    @event.listens_for(engine, "checkin")
    def on_checkin(dbapi_connection, connection_record):
        logger.debug("📥 Connection returned to the pool")
