# backend/salonbook/database.py
import logging
from typing import Any, Dict, Generator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeMeta, Session, declarative_base, sessionmaker

from .core.config import settings

logger = logging.getLogger(__name__)

SQLITE_LOCK_TIMEOUT_SECONDS = 15


def _engine_kwargs(database_url: str) -> Dict[str, Any]:
    if database_url.startswith("sqlite"):
        # timeout: seconds a writer waits for the database lock before failing
        return {"connect_args": {"check_same_thread": False, "timeout": SQLITE_LOCK_TIMEOUT_SECONDS}}
    return {
        "pool_size": 10,  # Number of persistent connections
        "max_overflow": 10,  # Maximum overflow connections
        "pool_timeout": 30,  # Timeout for getting connection
        "pool_recycle": 3600,  # Recycle connections after 1 hour
        "pool_pre_ping": True,  # Test connections before using
        "connect_args": {"connect_timeout": 10, "application_name": "salonbook"},
    }


def configure_sqlite_engine(sqlite_engine: Engine) -> Engine:
    """
    Install the SQLite connection listeners.

    pysqlite defers BEGIN until the first write, so a SELECT-then-INSERT
    sequence reads outside any lock. Driver-level transaction handling is
    switched off and every transaction opens with BEGIN IMMEDIATE instead,
    which takes the database write lock up front: concurrent booking writers
    queue on it and the overlap re-check sees every committed row.
    """

    @event.listens_for(sqlite_engine, "connect")
    def _configure_sqlite_connection(dbapi_connection: Any, connection_record: Any) -> None:
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(sqlite_engine, "begin")
    def _begin_immediate(conn: Any) -> None:
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    return sqlite_engine


def build_engine(database_url: str, echo: bool = False) -> Engine:
    """Create an engine with dialect-appropriate pooling."""
    new_engine = create_engine(database_url, echo=echo, **_engine_kwargs(database_url))

    if new_engine.dialect.name == "sqlite":
        configure_sqlite_engine(new_engine)

    return new_engine


engine: Engine = build_engine(settings.database_url, echo=settings.database_echo)


@event.listens_for(engine, "checkout")
def receive_checkout(dbapi_connection: Any, connection_record: Any, connection_proxy: Any) -> None:
    logger.debug("Connection checked out from pool")


SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine, expire_on_commit=False)


Base: DeclarativeMeta = declarative_base()


def get_db() -> Generator[Session, None, None]:
    """Get database session with proper cleanup."""
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def init_db(bind: Engine | None = None) -> None:
    """Create all tables for the registered models."""
    from . import models  # noqa: F401  (register mappers)

    Base.metadata.create_all(bind=bind or engine)
