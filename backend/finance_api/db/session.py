# finance_api/db/session.py
import logging
from contextlib import contextmanager
from typing import Generator, Iterator, Optional

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from finance_api.core.errors import PersistenceError
from finance_api.db.base import Base

logger = logging.getLogger(__name__)


class Database:
    """Owns the engine (and therefore the connection pool) for one application.

    Constructed explicitly and handed to the app; ``open`` at startup,
    ``close`` at shutdown.
    """

    def __init__(self, url: str):
        self.url = url
        self.engine: Optional[Engine] = None
        self._session_factory: Optional[sessionmaker] = None

    def open(self) -> None:
        if self.engine is not None:
            return
        connect_args = {"check_same_thread": False} if self.url.startswith("sqlite") else {}
        self.engine = create_engine(self.url, pool_pre_ping=True, future=True, connect_args=connect_args)
        self._session_factory = sessionmaker(autocommit=False, autoflush=False, bind=self.engine, future=True)

    def close(self) -> None:
        if self.engine is not None:
            self.engine.dispose()
        self.engine = None
        self._session_factory = None

    def create_all(self) -> None:
        self.open()
        Base.metadata.create_all(bind=self.engine)

    def session(self) -> Session:
        if self._session_factory is None:
            raise RuntimeError("Database is not open")
        return self._session_factory()


def get_db(request: Request) -> Generator[Session, None, None]:
    """
    FastAPI dependency that yields a SQLAlchemy Session for one request.
    The session is rolled back on error and always closed, which returns its
    connection to the pool whatever path the request takes.
    """
    db = request.app.state.database.session()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


@contextmanager
def persistence_guard(db: Session, message: str) -> Iterator[None]:
    """Roll back and re-raise store failures as PersistenceError(message)."""
    try:
        yield
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Database error: %s", message)
        raise PersistenceError(message) from exc
