# agro_registry/services/crop_service.py
# Contém a lógica de negócios para Safras com cache-aside.

import re
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from agro_registry.api.errors import ValidationError, ValidationKind
from agro_registry.cache import CacheStore
from agro_registry.database.crop_repository import CropRepository
from agro_registry.domain.crop import Crop
from .cache_aside_service import CacheAsideService

YEAR_PATTERN = re.compile(r"\d{4}")


class CropService(CacheAsideService[Crop]):
    """Camada de serviço para Safras. A lista de safras por fazenda usa chave secundária com TTL."""
    resource = "crop"
    collection = "crops"
    label = "Safra"
    editable_fields = ("name", "year", "farm_id")
    required_fields = ("name", "year", "farm_id")

    def __init__(self, crop_repository: CropRepository, cache_store: CacheStore, list_ttl_seconds: int = 3600):
        super().__init__(crop_repository, cache_store, list_ttl_seconds)
        self.crop_repository = crop_repository

    def _validate(self, db: Session, values: Dict[str, Any], entity_id: Optional[str] = None) -> Dict[str, Any]:
        # farm_id é garantido pela chave estrangeira do banco.
        year = str(values["year"]).strip()
        if not YEAR_PATTERN.fullmatch(year):
            raise ValidationError(
                "O campo 'year' deve estar no formato AAAA",
                kind=ValidationKind.MISSING_REQUIRED_FIELD,
                payload={"fields": ["year"]},
            )
        return {**values, "name": str(values["name"]).strip(), "year": year}

    def list_crops(self, page: Optional[int] = None, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        offset, limit = self._page_window(page, limit)
        return self._query(
            f"listagem (offset={offset}, limit={limit})",
            lambda db: self.crop_repository.list_all(db, offset=offset, limit=limit),
        )

    def search_by_name(self, name: str) -> List[Dict[str, Any]]:
        if not name or not name.strip():
            raise ValidationError("Informe o nome para a busca.", kind=ValidationKind.INVALID_FILTER)
        return self._query(f"nome contendo '{name}'", lambda db: self.crop_repository.search_by_name(db, name.strip()))

    def search_by_year(self, year: str, farm_id: Optional[str] = None) -> List[Dict[str, Any]]:
        if not year or not str(year).strip():
            raise ValidationError("Informe o ano para a busca.", kind=ValidationKind.INVALID_FILTER)
        year = str(year).strip()
        return self._query(
            f"ano {year} fazenda {farm_id or '*'}",
            lambda db: self.crop_repository.search_by_year_and_farm(db, year, farm_id),
        )

    def find_by_farm(self, farm_id: str) -> List[Dict[str, Any]]:
        """Safras de uma fazenda. Cacheada em 'crops:farm:<farmId>'; vazio resulta em NotFoundError."""
        if not farm_id:
            raise ValidationError("Informe o ID da fazenda.", kind=ValidationKind.MISSING_REQUIRED_FIELD)
        return self._cached_relation_list(
            "farm", farm_id,
            lambda db: self.crop_repository.find_by_farm(db, farm_id),
            require_match=True,
            not_found_message=f"Nenhuma safra encontrada para a fazenda {farm_id}",
        )

    def search_by_year_range(self, start_year: Any, end_year: Any) -> List[Dict[str, Any]]:
        try:
            start, end = int(str(start_year).strip()), int(str(end_year).strip())
        except (TypeError, ValueError):
            raise ValidationError(
                "Os anos inicial e final devem ser numéricos.", kind=ValidationKind.INVALID_FILTER
            ) from None
        if start > end:
            raise ValidationError(
                "O ano inicial não pode ser maior que o ano final.", kind=ValidationKind.INVALID_FILTER
            )
        return self._query(
            f"intervalo de anos {start}-{end}",
            lambda db: self.crop_repository.search_by_year_range(db, start, end),
        )
