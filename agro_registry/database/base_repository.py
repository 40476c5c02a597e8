# agro_registry/database/base_repository.py
# Provides a simplified base class for ORM repositories.

from typing import Any, Generic, List, Optional, Sequence, Type, TypeVar

from sqlalchemy import delete, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from agro_registry.database.base import Base
from agro_registry.utils.logger import logger
from agro_registry.api.errors import DatabaseError

ModelT = TypeVar("ModelT", bound=Base)

class BaseRepository(Generic[ModelT]):
    """
    Base class for data repositories using SQLAlchemy ORM Sessions.
    Methods receive the Session from the caller (see get_db_session); commit is external.
    Provides the find_by_id / find_many / save / delete_by_id primitives shared by
    every resource repository.
    """
    model: Type[ModelT]

    def __init__(self, engine: Engine):
        if not isinstance(engine, Engine):
             raise TypeError("engine must be an instance of sqlalchemy.engine.Engine")
        self.engine = engine
        logger.debug(f"{self.__class__.__name__} initialized with SQLAlchemy engine: {engine.url.database}")

    @property
    def _name(self) -> str:
        return self.model.__name__

    def find_by_id(self, db: Session, entity_id: str, relations: Sequence[Any] = ()) -> Optional[ModelT]:
        """Finds an entity by id, eagerly loading the given relationship options."""
        logger.debug(f"ORM: Finding {self._name} by ID {entity_id}")
        entity = db.get(self.model, entity_id, options=list(relations))
        logger.debug(f"ORM: {self._name} {'found' if entity else 'not found'} by ID {entity_id}.")
        return entity

    def find_many(self, db: Session, *criteria, order_by: Sequence[Any] = (), options: Sequence[Any] = (),
                  offset: Optional[int] = None, limit: Optional[int] = None) -> List[ModelT]:
        """Runs a filtered select over the model."""
        stmt = select(self.model).where(*criteria)
        if options:
            stmt = stmt.options(*options)
        if order_by:
            stmt = stmt.order_by(*order_by)
        if offset:
            stmt = stmt.offset(offset)
        if limit:
            stmt = stmt.limit(limit)
        entities = list(db.scalars(stmt).unique().all())
        logger.debug(f"ORM: Found {len(entities)} {self._name} rows.")
        return entities

    def save(self, db: Session, entity: ModelT) -> ModelT:
        """Adds or updates the entity, flushing to obtain generated values. Commit is external."""
        logger.debug(f"ORM: Saving {self._name} {getattr(entity, 'id', None)}")
        try:
            db.add(entity)
            db.flush()
            db.refresh(entity)
            logger.info(f"ORM: {self._name} saved in session (ID: {entity.id}). Commit pending.")
            return entity
        except IntegrityError as e:
            logger.error(f"ORM: Integrity error saving {self._name}: {e}", exc_info=True)
            raise DatabaseError(f"Failed to save {self._name} due to integrity constraint: {e.orig}") from e

    def delete_by_id(self, db: Session, entity_id: str) -> int:
        """Deletes by id and returns the affected row count."""
        logger.debug(f"ORM: Deleting {self._name} ID {entity_id}")
        result = db.execute(delete(self.model).where(self.model.id == entity_id))
        affected = result.rowcount or 0
        if affected:
            logger.info(f"ORM: {self._name} ID {entity_id} deleted ({affected} row). Commit pending.")
        else:
            logger.warning(f"ORM: Attempted to delete {self._name} ID {entity_id}, but it was not found.")
        return affected
