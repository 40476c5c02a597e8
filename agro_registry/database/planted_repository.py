# agro_registry/database/planted_repository.py
# Handles database operations for Planted cultures using SQLAlchemy ORM.

from typing import List, Optional
from sqlalchemy.orm import Session, joinedload

from .base_repository import BaseRepository
from agro_registry.domain.planted import PlantedCulture

class PlantedRepository(BaseRepository[PlantedCulture]):
    """Repository for planted cultures. Relations loaded for the response shape: crop."""
    model = PlantedCulture
    RESPONSE_RELATIONS = (joinedload(PlantedCulture.crop),)

    def find_with_crop(self, db: Session, planted_id: str) -> Optional[PlantedCulture]:
        return self.find_by_id(db, planted_id, relations=self.RESPONSE_RELATIONS)

    def list_all(self, db: Session, offset: Optional[int] = None, limit: Optional[int] = None) -> List[PlantedCulture]:
        return self.find_many(
            db, order_by=(PlantedCulture.name.desc(),), options=self.RESPONSE_RELATIONS, offset=offset, limit=limit
        )

    def find_by_crop(self, db: Session, crop_id: str) -> List[PlantedCulture]:
        return self.find_many(
            db, PlantedCulture.crop_id == crop_id,
            order_by=(PlantedCulture.name,), options=self.RESPONSE_RELATIONS,
        )
