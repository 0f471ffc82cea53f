"""
Database engine and session management for MedReminder
"""

import logging
from contextlib import contextmanager
from typing import Dict, Generator, Optional

from sqlalchemy import create_engine, event, func, inspect, select, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from sqlalchemy.pool import StaticPool

from config import settings


logger = logging.getLogger(__name__)


def create_db_engine(url: str, echo: bool = False) -> Engine:
    """
    Build an engine for `url`

    SQLite shares one connection and enforces foreign keys; other backends
    use a pre-pinged connection pool.
    """
    if not url.startswith("sqlite"):
        return create_engine(url, echo=echo, pool_size=10, max_overflow=20, pool_pre_ping=True)

    sqlite_engine = create_engine(
        url,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=echo
    )

    @event.listens_for(sqlite_engine, "connect")
    def enforce_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    return sqlite_engine


engine = create_db_engine(settings.DATABASE_URL, echo=settings.DATABASE_ECHO)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


@contextmanager
def get_db_context() -> Generator[Session, None, None]:
    """
    Session for work outside a request (scheduler runs, scripts)

    Commits on success and rolls back if the block raises.
    """
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def init_db(bind: Optional[Engine] = None) -> None:
    """Create any missing tables"""
    import models  # noqa: F401  registers the mappers on Base

    Base.metadata.create_all(bind=bind or engine)
    logger.info(f"Database ready at {settings.DATABASE_URL}")


def drop_db(bind: Optional[Engine] = None) -> None:
    """Drop every table. All reminder logs and adherence history are lost."""
    Base.metadata.drop_all(bind=bind or engine)
    logger.warning("All database tables dropped")


def reset_db(bind: Optional[Engine] = None) -> None:
    drop_db(bind)
    init_db(bind)


class DatabaseHealthCheck:
    """Connectivity and row counts for the /health endpoint"""

    @staticmethod
    def is_connected() -> bool:
        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"Database health check failed: {e}")
            return False

    @staticmethod
    def get_table_counts() -> Dict[str, int]:
        """Rows per application table that exists in the database"""
        existing = set(inspect(engine).get_table_names())

        with engine.connect() as conn:
            return {
                table.name: conn.execute(select(func.count()).select_from(table)).scalar_one()
                for table in Base.metadata.sorted_tables
                if table.name in existing
            }
