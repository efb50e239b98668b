"""
Database session management.

Provides explicit ORM session handling with SQLAlchemy.
"""

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Generator

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from echocollector.core.config import Config
from echocollector.core.models import Base

logger = logging.getLogger(__name__)

# One engine per database file for the life of the process
_engines: Dict[str, Engine] = {}


def _enable_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def get_engine(config: Config) -> Engine:
    """
    Create SQLAlchemy engine.

    Uses SQLite with WAL mode and foreign key enforcement.
    """
    db_path = Path(config.database_path)
    key = str(db_path.resolve())
    if key in _engines:
        return _engines[key]

    db_path.parent.mkdir(parents=True, exist_ok=True)

    engine = create_engine(
        f"sqlite:///{db_path}",
        connect_args={"check_same_thread": False},
    )
    event.listen(engine, "connect", _enable_foreign_keys)

    with engine.connect() as conn:
        conn.execute(text("PRAGMA journal_mode=WAL"))
        conn.commit()

    _engines[key] = engine
    return engine


def init_db(config: Config) -> Engine:
    """
    Initialize database schema.

    Creates all tables if they don't exist.
    """
    engine = get_engine(config)
    Base.metadata.create_all(engine)
    logger.info(f"Database ready at {config.database_path}")
    return engine


def get_session(config: Config) -> Session:
    """
    Create a new database session.

    Remember to close or use as context manager.
    """
    engine = get_engine(config)
    SessionLocal = sessionmaker(bind=engine, expire_on_commit=False)
    return SessionLocal()


@contextmanager
def session_scope(config: Config) -> Generator[Session, None, None]:
    """
    Provide transactional scope around a series of operations.

    Usage:
        with session_scope(config) as session:
            session.add(echo)
    """
    session = get_session(config)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
