# agro_registry/database/producer_repository.py
# Handles database operations for Producers using SQLAlchemy ORM.

from typing import List, Optional
from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from .base_repository import BaseRepository
from agro_registry.domain.document_type import DocumentType
from agro_registry.domain.producer import Producer
from agro_registry.utils.logger import logger

class ProducerRepository(BaseRepository[Producer]):
    """Repository for Producers. Relations loaded for the response shape: farms."""
    model = Producer
    RESPONSE_RELATIONS = (selectinload(Producer.farms),)

    def find_with_farms(self, db: Session, producer_id: str) -> Optional[Producer]:
        return self.find_by_id(db, producer_id, relations=self.RESPONSE_RELATIONS)

    def exists_document(self, db: Session, document_number: str, exclude_id: Optional[str] = None) -> bool:
        """True if another producer already holds this (normalized) document number."""
        stmt = select(func.count(Producer.id)).where(Producer.document_number == document_number)
        if exclude_id:
            stmt = stmt.where(Producer.id != exclude_id)
        count = db.scalar(stmt) or 0
        logger.debug(f"ORM: Document '{document_number}' count (excluding {exclude_id}): {count}")
        return count > 0

    def list_all(self, db: Session, offset: Optional[int] = None, limit: Optional[int] = None) -> List[Producer]:
        return self.find_many(db, order_by=(Producer.name,), options=self.RESPONSE_RELATIONS, offset=offset, limit=limit)

    def search_by_name(self, db: Session, name: str) -> List[Producer]:
        return self.find_many(
            db, Producer.name.ilike(f"%{name}%"),
            order_by=(Producer.name,), options=self.RESPONSE_RELATIONS,
        )

    def find_by_document_type(self, db: Session, document_type: DocumentType) -> List[Producer]:
        return self.find_many(
            db, Producer.document_type == document_type,
            order_by=(Producer.name,), options=self.RESPONSE_RELATIONS,
        )

    def find_by_document(self, db: Session, document_type: DocumentType, document_number: str) -> List[Producer]:
        return self.find_many(
            db, Producer.document_type == document_type, Producer.document_number == document_number,
            options=self.RESPONSE_RELATIONS,
        )
