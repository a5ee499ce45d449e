"""Engine, session and transaction scope shared by every repository.

A :class:`Database` owns one SQLAlchemy :class:`~sqlalchemy.orm.Session`.
Repositories wrap each top-level write in :meth:`Database.transaction`; when
one repository calls another inside that scope, the inner call joins the
outer transaction instead of committing on its own, so a composite upsert
(a brawler and all of its accessories, say) commits or rolls back as one.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from brawl_sync.storage.models import Base

logger = logging.getLogger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection: Any, _record: Any) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_database_engine(url: str) -> Engine:
    """Create an engine for *url*; SQLite connections enforce foreign keys."""
    kwargs: dict[str, Any] = {}
    if url.startswith("sqlite") and (url.endswith(":memory:") or url in {"sqlite://", "sqlite:///"}):
        # One shared connection, otherwise every checkout sees an empty database.
        kwargs = {"poolclass": StaticPool, "connect_args": {"check_same_thread": False}}
    engine = create_engine(url, **kwargs)
    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    return engine


class Database:
    """Storage handle: engine, single session and nested transaction scope.

    Args:
        url: SQLAlchemy database URL, e.g. ``sqlite:///brawl_sync.db`` or
            ``sqlite://`` for an in-memory database.
    """

    def __init__(self, url: str) -> None:
        self.url = url
        self.engine = create_database_engine(url)
        self.session = Session(self.engine, expire_on_commit=False)
        self._depth = 0

    def create_schema(self) -> None:
        """Create every table that does not exist yet."""
        Base.metadata.create_all(self.engine)
        logger.info("storage: schema ready at %s", self.engine.url.render_as_string(hide_password=True))

    @property
    def in_transaction(self) -> bool:
        return self._depth > 0

    @contextmanager
    def transaction(self) -> Iterator[Session]:
        """Open a transaction scope and yield the session.

        The outermost scope commits on success; any exception raised inside
        any scope rolls the whole transaction back and propagates.
        """
        outermost = self._depth == 0
        self._depth += 1
        try:
            yield self.session
            if outermost:
                self.session.commit()
        except BaseException:
            if outermost:
                self.session.rollback()
                logger.debug("storage: transaction rolled back")
            raise
        finally:
            self._depth -= 1

    def close(self) -> None:
        self.session.close()
        self.engine.dispose()
