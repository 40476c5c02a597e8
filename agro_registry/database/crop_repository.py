# agro_registry/database/crop_repository.py
# Handles database operations for Crops using SQLAlchemy ORM.

from typing import List, Optional
from sqlalchemy import Integer, cast, func
from sqlalchemy.orm import Session

from .base_repository import BaseRepository
from agro_registry.domain.crop import Crop

class CropRepository(BaseRepository[Crop]):
    model = Crop

    def list_all(self, db: Session, offset: Optional[int] = None, limit: Optional[int] = None) -> List[Crop]:
        return self.find_many(db, order_by=(Crop.year.desc(), Crop.name), offset=offset, limit=limit)

    def search_by_name(self, db: Session, name: str) -> List[Crop]:
        return self.find_many(db, func.lower(Crop.name).like(f"%{name.lower()}%"), order_by=(Crop.name,))

    def search_by_year_and_farm(self, db: Session, year: str, farm_id: Optional[str] = None) -> List[Crop]:
        criteria = [Crop.year == year]
        if farm_id:
            criteria.append(Crop.farm_id == farm_id)
        return self.find_many(db, *criteria, order_by=(Crop.name,))

    def find_by_farm(self, db: Session, farm_id: str) -> List[Crop]:
        return self.find_many(db, Crop.farm_id == farm_id, order_by=(Crop.year.desc(), Crop.name))

    def search_by_year_range(self, db: Session, start_year: int, end_year: int) -> List[Crop]:
        return self.find_many(
            db, cast(Crop.year, Integer).between(start_year, end_year),
            order_by=(Crop.year, Crop.name),
        )
