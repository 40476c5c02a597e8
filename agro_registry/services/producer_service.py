# agro_registry/services/producer_service.py
# Contém a lógica de negócios para Produtores rurais (CPF/CNPJ) com cache-aside.

from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from agro_registry.api.errors import ValidationError, ValidationKind
from agro_registry.cache import CacheStore
from agro_registry.database.producer_repository import ProducerRepository
from agro_registry.domain.document_type import DocumentType
from agro_registry.domain.producer import Producer
from agro_registry.utils.document_validator import normalize, validate_document
from agro_registry.utils.logger import logger
from .cache_aside_service import CacheAsideService


class ProducerService(CacheAsideService[Producer]):
    """
    Camada de serviço para Produtores.

    O número do documento é sempre persistido apenas com dígitos e deve passar
    na validação de dígitos verificadores do tipo informado; não pode haver dois
    produtores com o mesmo número.
    """
    resource = "producer"
    collection = "producers"
    label = "Produtor"
    editable_fields = ("name", "document_number", "document_type")
    required_fields = ("name", "document_number", "document_type")

    def __init__(self, producer_repository: ProducerRepository, cache_store: CacheStore,
                 list_ttl_seconds: int = 3600):
        super().__init__(producer_repository, cache_store, list_ttl_seconds)
        self.producer_repository = producer_repository

    def _load_for_response(self, db: Session, entity_id: str) -> Optional[Producer]:
        return self.producer_repository.find_with_farms(db, entity_id)

    @staticmethod
    def _parse_document_type(value: Any) -> DocumentType:
        try:
            return DocumentType.parse(value)
        except ValueError as e:
            raise ValidationError(str(e), kind=ValidationKind.INVALID_DOCUMENT) from e

    def _validate(self, db: Session, values: Dict[str, Any], entity_id: Optional[str] = None) -> Dict[str, Any]:
        doc_type = self._parse_document_type(values["document_type"])
        number = normalize(values["document_number"])

        if not validate_document(doc_type, number):
            logger.warning(f"Documento inválido para {doc_type.value}: '{values['document_number']}'")
            raise ValidationError(f"{doc_type.value} inválido", kind=ValidationKind.INVALID_DOCUMENT)

        if self.producer_repository.exists_document(db, number, exclude_id=entity_id):
            logger.warning(f"Documento {number} já cadastrado para outro produtor")
            raise ValidationError(
                "Já existe um produtor com este documento",
                kind=ValidationKind.DUPLICATE_DOCUMENT,
            )

        return {**values, "name": str(values["name"]).strip(), "document_number": number, "document_type": doc_type}

    # --- Consultas sem cache ---

    def list_producers(self, page: Optional[int] = None, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        offset, limit = self._page_window(page, limit)
        return self._query(
            f"listagem (offset={offset}, limit={limit})",
            lambda db: self.producer_repository.list_all(db, offset=offset, limit=limit),
        )

    def search_by_name(self, name: str) -> List[Dict[str, Any]]:
        if not name or not name.strip():
            raise ValidationError("Informe o nome para a busca.", kind=ValidationKind.INVALID_FILTER)
        return self._query(f"nome contendo '{name}'", lambda db: self.producer_repository.search_by_name(db, name.strip()))

    def search_by_document_type(self, document_type: str) -> List[Dict[str, Any]]:
        doc_type = self._parse_document_type(document_type)
        return self._query(
            f"tipo de documento {doc_type.value}",
            lambda db: self.producer_repository.find_by_document_type(db, doc_type),
        )

    def search_by_document(self, document_type: str, document_number: str) -> List[Dict[str, Any]]:
        doc_type = self._parse_document_type(document_type)
        number = normalize(document_number)
        if not number:
            raise ValidationError("Informe o número do documento.", kind=ValidationKind.INVALID_FILTER)
        return self._query(
            f"documento {doc_type.value} {number}",
            lambda db: self.producer_repository.find_by_document(db, doc_type, number),
        )
