import threading
from contextlib import contextmanager
from typing import Iterator

import structlog
from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

logger = structlog.get_logger(__name__)

Base = declarative_base()


class Store:
    """Handle on the backing database.

    Owns the engine, the session factory and the write lock. Built by the
    caller and handed to the catalog and planner; nothing here is global.
    """

    def __init__(self, database_url: str):
        self.database_url = database_url
        self.engine = create_engine(
            database_url, connect_args={"check_same_thread": False} if "sqlite" in database_url else {}
        )
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)
        self._write_lock = threading.RLock()

    def create_all(self) -> None:
        # Create tables
        import models  # noqa: F401  registers the tables on Base.metadata

        Base.metadata.create_all(bind=self.engine)
        logger.info("store.initialized", url=self.engine.url.render_as_string(hide_password=True))

    def dispose(self) -> None:
        self.engine.dispose()
        logger.info("store.disposed")

    @contextmanager
    def session(self) -> Iterator[Session]:
        """One transaction: commit on success, roll back on error."""
        db = self.SessionLocal()
        try:
            yield db
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    @contextmanager
    def write(self) -> Iterator[Session]:
        """A transaction that holds the write lock until it is committed."""
        with self._write_lock:
            with self.session() as db:
                yield db


def get_store(request: Request) -> Store:
    return request.app.state.store
