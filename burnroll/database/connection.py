"""Database connection and session management."""

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

from sqlalchemy import Engine, create_engine, event
from sqlalchemy.engine import make_url
from sqlalchemy.orm import Session, sessionmaker

from burnroll.config import settings
from burnroll.database.models import Base


logger = logging.getLogger(__name__)


def create_db_engine(database_url: str, echo: bool = False) -> Engine:
    """Build an engine for a character database.

    SQLite files get their parent directory created and foreign keys
    switched on, so deleting a character removes its traits.

    Args:
        database_url: SQLAlchemy URL, e.g. ``sqlite:///campaign.db``.
        echo: Log every SQL statement.

    Returns:
        The configured engine.
    """
    url = make_url(database_url)
    if url.get_backend_name() != "sqlite":
        return create_engine(url, echo=echo, pool_pre_ping=True)

    if url.database and url.database != ":memory:":
        Path(url.database).parent.mkdir(parents=True, exist_ok=True)

    sqlite_engine = create_engine(
        url,
        echo=echo,
        connect_args={"check_same_thread": False},
    )

    @event.listens_for(sqlite_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    return sqlite_engine


engine = create_db_engine(settings.database_url, echo=settings.debug)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)


def init_db(bind: Engine | None = None) -> None:
    """Create any missing character tables."""
    target = bind or engine
    Base.metadata.create_all(bind=target)
    logger.debug(f"Character tables ready on {target.url}")


@contextmanager
def get_db_session() -> Generator[Session, None, None]:
    """Yield a session that commits on success and rolls back on error.

    Usage:
        with get_db_session() as db:
            store = SqlCharacterStore(db)
    """
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
