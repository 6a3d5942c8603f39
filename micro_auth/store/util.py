"""Helpers for engines, sessions and timestamps."""

from typing import Any, Generator, Tuple
from datetime import datetime
from contextlib import contextmanager
import logging

from pytz import UTC
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)

EPOCH = datetime.fromtimestamp(0, tz=UTC)


def now() -> int:
    """Get the current epoch/unix time."""
    return epoch(utcnow())


def utcnow() -> datetime:
    """Get the current time as a timezone-aware UTC datetime."""
    return datetime.now(tz=UTC)


def epoch(t: datetime) -> int:
    """Convert a :class:`.datetime` to UNIX time."""
    if t.tzinfo is None:
        t = UTC.localize(t)
    return int(round((t - EPOCH).total_seconds()))


def from_epoch(t: int) -> datetime:
    """Get a :class:`datetime` from an UNIX timestamp."""
    return datetime.fromtimestamp(t, tz=UTC)


def init_db(database_uri: str, **kwargs: Any) -> Tuple[Engine, sessionmaker]:
    """
    Create an engine and a session factory for ``database_uri``.

    In-memory SQLite databases are bound to a single shared connection, so
    that every session sees the same data.
    """
    if database_uri in ('sqlite://', 'sqlite:///:memory:'):
        kwargs.setdefault('poolclass', StaticPool)
        kwargs.setdefault('connect_args', {'check_same_thread': False})
    engine = create_engine(database_uri, **kwargs)
    # Domain objects are built after commit; keep loaded attributes.
    factory = sessionmaker(bind=engine, expire_on_commit=False)
    return engine, factory


@contextmanager
def transaction(session_factory: sessionmaker) -> Generator:
    """Context manager for database transaction."""
    session = session_factory()
    try:
        yield session
        session.commit()
    except SQLAlchemyError as e:
        logger.error('Commit failed, rolling back: %s', str(e))
        session.rollback()
        raise
    except Exception as e:
        logger.debug('Rolling back: %s', str(e))
        session.rollback()
        raise
    finally:
        session.close()


def create_all(engine: Engine) -> None:
    """Create all tables in the database."""
    from .models import Base
    Base.metadata.create_all(engine)


def drop_all(engine: Engine) -> None:
    """Drop all tables in the database."""
    from .models import Base
    Base.metadata.drop_all(engine)


def is_available(session_factory: sessionmaker) -> bool:
    """Check our connection to the database."""
    try:
        with transaction(session_factory) as session:
            session.execute(text('SELECT 1')).all()
    except Exception as e:
        logger.error('Encountered an error talking to database: %s', e)
        return False
    return True
