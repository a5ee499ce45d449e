"""Repository base class and the helpers shared by every concrete repository.

A repository owns one entity type.  Reads go through :meth:`Repository.find`
(criteria are translated into SQL filters); writes go through the subclass's
``create_or_update``, which must run inside :meth:`Database.transaction` so
nested repository calls share one commit.
"""

from __future__ import annotations

import abc
import logging
from collections.abc import Callable, Mapping, Sequence
from typing import Any, ClassVar, Generic, TypeVar

from sqlalchemy import ColumnElement, select
from sqlalchemy.orm import InstrumentedAttribute, Session
from sqlalchemy.orm.interfaces import LoaderOption

from brawl_sync.storage.database import Database
from brawl_sync.storage.models import Base

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Base)

Filter = Callable[[Any], ColumnElement[bool]]


def equals(column: InstrumentedAttribute[Any]) -> Filter:
    """Exact-match criterion."""
    return lambda value: column == value


def contains(column: InstrumentedAttribute[Any]) -> Filter:
    """Substring criterion (SQL ``LIKE '%value%'``)."""
    return lambda value: column.like(f"%{value}%")


class Repository(abc.ABC, Generic[E]):
    """Abstract base class for entity persistence.

    Subclasses set ``model`` and may extend :meth:`filters` with the criteria
    keys :meth:`find` understands.
    """

    model: ClassVar[type[Base]]

    def __init__(self, database: Database) -> None:
        self.database = database

    @property
    def session(self) -> Session:
        return self.database.session

    # -- reads ---------------------------------------------------------------

    def filters(self) -> dict[str, Filter]:
        return {"id": equals(self.model.id)}  # type: ignore[attr-defined]

    def find(self, criteria: Mapping[str, Any]) -> E | None:
        """Return the first entity (by id) matching every known criterion.

        Unknown keys and ``None`` values are ignored, so an empty mapping
        returns the first stored row.
        """
        known = self.filters()
        stmt = select(self.model)
        for key, value in criteria.items():
            if value is None or key not in known:
                continue
            stmt = stmt.where(known[key](value))
        stmt = stmt.order_by(self.model.id).limit(1)  # type: ignore[attr-defined]
        return self.session.scalars(stmt).first()  # type: ignore[return-value]

    # -- writes --------------------------------------------------------------

    @abc.abstractmethod
    def create_or_update(self, dto: Any) -> E:
        """Insert or update the entity identified by *dto*; return it."""

    def _upsert(self, identity: Mapping[str, Any], attributes: Mapping[str, Any]) -> E:
        """Find by *identity*, then update *attributes* in place or insert a new row.

        Must be called inside a transaction scope.  The session is flushed so
        the returned entity has its primary key.
        """
        entity = self.session.scalars(select(self.model).filter_by(**identity)).one_or_none()
        if entity is None:
            entity = self.model(**identity, **attributes)
            self.session.add(entity)
            logger.debug("storage: inserting %s %s", self.model.__name__, dict(identity))
        else:
            for key, value in attributes.items():
                setattr(entity, key, value)
        self.session.flush()
        return entity  # type: ignore[return-value]

    def _reconcile(self, current: list[Any], wanted: Sequence[Any]) -> None:
        """Make relationship collection *current* hold exactly *wanted*.

        Missing children are attached, stale ones detached (their link rows
        are deleted on flush).  Children themselves are never deleted.
        """
        wanted_ids = {child.id for child in wanted}
        for child in wanted:
            if child not in current:
                current.append(child)
        for child in list(current):
            if child.id not in wanted_ids:
                current.remove(child)
        self.session.flush()

    def _reload(self, entity_id: int, *options: LoaderOption) -> E:
        """Re-read an entity with its relations eagerly loaded from storage."""
        stmt = (
            select(self.model)
            .where(self.model.id == entity_id)  # type: ignore[attr-defined]
            .options(*options)
            .execution_options(populate_existing=True)
        )
        return self.session.scalars(stmt).one()  # type: ignore[return-value]
