"""Testing helpers."""

from contextlib import contextmanager
from typing import Generator

from .. import util


@contextmanager
def temporary_db(database_uri: str = 'sqlite:///:memory:',
                 create: bool = True, drop: bool = True) -> Generator:
    """Provide a session factory for a throwaway (in-memory) database."""
    engine, session_factory = util.init_db(database_uri)
    if create:
        util.create_all(engine)
    try:
        yield session_factory
    finally:
        if drop:
            util.drop_all(engine)
        engine.dispose()
