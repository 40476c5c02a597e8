# agro_registry/domain/farm.py
# Define o modelo ORM para Fazendas usando SQLAlchemy.

from datetime import datetime
from typing import Dict, Any, List, Optional, TYPE_CHECKING
from sqlalchemy import String, Numeric, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import TIMESTAMP

from agro_registry.database.base import Base, generate_uuid, utc_now, isoformat_or_none

if TYPE_CHECKING:
    from .producer import Producer
    from .crop import Crop

AREA_TYPE = Numeric(10, 2, asdecimal=False)

class Farm(Base):
    """
    Representa uma fazenda como modelo ORM.
    Invariante: arable_area + vegetation_area <= total_area (validado na camada de serviço).
    """
    __tablename__ = 'farms'

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    city: Mapped[str] = mapped_column(String(100), nullable=False)
    state: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    total_area: Mapped[float] = mapped_column(AREA_TYPE, nullable=False)
    arable_area: Mapped[float] = mapped_column(AREA_TYPE, nullable=False)
    vegetation_area: Mapped[float] = mapped_column(AREA_TYPE, nullable=False)
    producer_id: Mapped[str] = mapped_column(ForeignKey('producers.id', ondelete='CASCADE'), nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), default=utc_now, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), default=utc_now, onupdate=utc_now, nullable=False)

    producer: Mapped[Optional["Producer"]] = relationship(back_populates="farms")
    crops: Mapped[List["Crop"]] = relationship(back_populates="farm", cascade="all, delete-orphan", passive_deletes=True)

    def to_summary_dict(self) -> Dict[str, Any]:
        """Representação sem relacionamentos, usada dentro da resposta de Producer."""
        return {
            'id': self.id,
            'name': self.name,
            'city': self.city,
            'state': self.state,
            'total_area': _as_float(self.total_area),
            'arable_area': _as_float(self.arable_area),
            'vegetation_area': _as_float(self.vegetation_area),
        }

    def to_dict(self) -> Dict[str, Any]:
        """Converte a Farm para o formato de resposta (inclui o resumo do produtor)."""
        return {
            **self.to_summary_dict(),
            'producer': self.producer.to_summary_dict() if self.producer else None,
            'created_at': isoformat_or_none(self.created_at),
            'updated_at': isoformat_or_none(self.updated_at),
        }

    def __repr__(self):
        return f"<Farm(id={self.id}, name='{self.name}', state='{self.state}')>"


def _as_float(value) -> Optional[float]:
    return float(value) if value is not None else None
