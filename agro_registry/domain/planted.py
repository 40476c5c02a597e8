# agro_registry/domain/planted.py
# Define o modelo ORM para Culturas plantadas usando SQLAlchemy.

from datetime import datetime
from typing import Dict, Any, Optional, TYPE_CHECKING
from sqlalchemy import String, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import TIMESTAMP

from agro_registry.database.base import Base, generate_uuid, utc_now, isoformat_or_none

if TYPE_CHECKING:
    from .crop import Crop

class PlantedCulture(Base):
    """Cultura plantada em uma safra (ex: Soja, Milho, Café)."""
    __tablename__ = 'planted_cultures'

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    crop_id: Mapped[str] = mapped_column(ForeignKey('crops.id', ondelete='CASCADE'), nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), default=utc_now, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), default=utc_now, onupdate=utc_now, nullable=False)

    crop: Mapped[Optional["Crop"]] = relationship(back_populates="planted")

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'crop_id': self.crop_id,
            'crop': self.crop.to_summary_dict() if self.crop else None,
            'created_at': isoformat_or_none(self.created_at),
            'updated_at': isoformat_or_none(self.updated_at),
        }

    def __repr__(self):
        return f"<PlantedCulture(id={self.id}, name='{self.name}', crop_id={self.crop_id})>"
