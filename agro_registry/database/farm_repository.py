# agro_registry/database/farm_repository.py
# Handles database operations for Farms (and the dashboard aggregates) using SQLAlchemy ORM.

from typing import Any, Dict, List, Optional
from sqlalchemy import distinct, func, select
from sqlalchemy.orm import Session, joinedload

from .base_repository import BaseRepository
from agro_registry.domain.crop import Crop
from agro_registry.domain.farm import Farm
from agro_registry.domain.planted import PlantedCulture
from agro_registry.utils.logger import logger

class FarmRepository(BaseRepository[Farm]):
    """Repository for Farms. Relations loaded for the response shape: producer."""
    model = Farm
    RESPONSE_RELATIONS = (joinedload(Farm.producer),)

    def find_with_producer(self, db: Session, farm_id: str) -> Optional[Farm]:
        return self.find_by_id(db, farm_id, relations=self.RESPONSE_RELATIONS)

    def list_all(self, db: Session, offset: Optional[int] = None, limit: Optional[int] = None) -> List[Farm]:
        return self.find_many(db, order_by=(Farm.name,), options=self.RESPONSE_RELATIONS, offset=offset, limit=limit)

    def search_by_name(self, db: Session, name: str) -> List[Farm]:
        return self.find_many(db, Farm.name.ilike(f"%{name}%"), order_by=(Farm.name,), options=self.RESPONSE_RELATIONS)

    def search_by_state_and_city(self, db: Session, state: str, city: Optional[str] = None) -> List[Farm]:
        criteria = [Farm.state == state]
        if city:
            criteria.append(Farm.city == city)
        return self.find_many(db, *criteria, order_by=(Farm.name,), options=self.RESPONSE_RELATIONS)

    # --- Dashboard aggregates ---

    def count_by_state(self, db: Session) -> List[Dict[str, Any]]:
        stmt = (
            select(Farm.state.label("state"), func.count(distinct(Farm.id)).label("value"))
            .group_by(Farm.state)
            .order_by(Farm.state)
        )
        rows = db.execute(stmt).mappings().all()
        logger.debug(f"ORM: Farm count by state returned {len(rows)} rows.")
        return [{"state": row["state"], "value": int(row["value"])} for row in rows]

    def count_by_culture(self, db: Session) -> List[Dict[str, Any]]:
        stmt = (
            select(PlantedCulture.name.label("name"), func.count(distinct(Farm.id)).label("value"))
            .select_from(Farm)
            .join(Crop, Crop.farm_id == Farm.id)
            .join(PlantedCulture, PlantedCulture.crop_id == Crop.id)
            .where(PlantedCulture.name.is_not(None))
            .group_by(PlantedCulture.name)
            .order_by(PlantedCulture.name)
        )
        rows = db.execute(stmt).mappings().all()
        logger.debug(f"ORM: Farm count by culture returned {len(rows)} rows.")
        return [{"name": row["name"], "value": int(row["value"])} for row in rows]

    def sum_land_use(self, db: Session) -> Dict[str, float]:
        stmt = select(
            func.coalesce(func.sum(Farm.arable_area), 0).label("arable_area"),
            func.coalesce(func.sum(Farm.vegetation_area), 0).label("vegetation_area"),
        )
        row = db.execute(stmt).mappings().one()
        return {
            "arable_area": float(row["arable_area"] or 0),
            "vegetation_area": float(row["vegetation_area"] or 0),
        }
