# agro_registry/domain/crop.py
# Define o modelo ORM para Safras usando SQLAlchemy.

from datetime import datetime
from typing import Dict, Any, List, Optional, TYPE_CHECKING
from sqlalchemy import String, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import TIMESTAMP

from agro_registry.database.base import Base, generate_uuid, utc_now, isoformat_or_none

if TYPE_CHECKING:
    from .farm import Farm
    from .planted import PlantedCulture

class Crop(Base):
    """Representa uma safra (ano agrícola) de uma fazenda."""
    __tablename__ = 'crops'

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    year: Mapped[str] = mapped_column(String(4), nullable=False, index=True) # "YYYY"
    farm_id: Mapped[str] = mapped_column(ForeignKey('farms.id', ondelete='CASCADE'), nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), default=utc_now, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), default=utc_now, onupdate=utc_now, nullable=False)

    farm: Mapped[Optional["Farm"]] = relationship(back_populates="crops")
    planted: Mapped[List["PlantedCulture"]] = relationship(back_populates="crop", cascade="all, delete-orphan", passive_deletes=True)

    def to_summary_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'year': self.year,
            'farm_id': self.farm_id,
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            **self.to_summary_dict(),
            'created_at': isoformat_or_none(self.created_at),
            'updated_at': isoformat_or_none(self.updated_at),
        }

    def __repr__(self):
        return f"<Crop(id={self.id}, year='{self.year}', farm_id={self.farm_id})>"
