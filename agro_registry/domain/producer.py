# agro_registry/domain/producer.py
# Define o modelo ORM para Produtores rurais usando SQLAlchemy.

from datetime import datetime
from typing import Dict, Any, List, TYPE_CHECKING
from sqlalchemy import String, Text, Enum as SqlEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import TIMESTAMP

from agro_registry.database.base import Base, generate_uuid, utc_now, isoformat_or_none
from .document_type import DocumentType

if TYPE_CHECKING:
    from .farm import Farm

class Producer(Base):
    """
    Representa um produtor rural (pessoa física ou jurídica) como modelo ORM.
    O número do documento é armazenado apenas com dígitos e é único.
    """
    __tablename__ = 'producers'

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    document_number: Mapped[str] = mapped_column(String(14), unique=True, nullable=False, index=True)
    document_type: Mapped[DocumentType] = mapped_column(
        SqlEnum(DocumentType, name='document_type', native_enum=False, length=4), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), default=utc_now, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), default=utc_now, onupdate=utc_now, nullable=False)

    farms: Mapped[List["Farm"]] = relationship(back_populates="producer", order_by="Farm.name")

    def to_summary_dict(self) -> Dict[str, Any]:
        """Representação sem relacionamentos, usada dentro da resposta de Farm."""
        return {
            'id': self.id,
            'name': self.name,
            'document_number': self.document_number,
            'document_type': self.document_type.value if self.document_type else None,
        }

    def to_dict(self) -> Dict[str, Any]:
        """Converte o Producer para o formato de resposta (inclui as fazendas carregadas)."""
        farms = [farm.to_summary_dict() for farm in (self.farms or [])]
        return {
            **self.to_summary_dict(),
            'farm_count': len(farms),
            'farms': farms,
            'created_at': isoformat_or_none(self.created_at),
            'updated_at': isoformat_or_none(self.updated_at),
        }

    def __repr__(self):
        return f"<Producer(id={self.id}, document={self.document_type}:{self.document_number})>"
