# agro_registry/services/planted_service.py
# Contém a lógica de negócios para Culturas plantadas com cache-aside.

from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from agro_registry.api.errors import ValidationError, ValidationKind
from agro_registry.cache import CacheStore
from agro_registry.database.planted_repository import PlantedRepository
from agro_registry.domain.planted import PlantedCulture
from agro_registry.domain.snapshot import ResourceSnapshot
from .cache_aside_service import CacheAsideService


class PlantedService(CacheAsideService[PlantedCulture]):
    """Camada de serviço para Culturas plantadas. crop_id deve referenciar uma safra existente (FK)."""
    resource = "planted"
    collection = "planteds"
    label = "Cultura plantada"
    editable_fields = ("name", "crop_id")
    required_fields = ("name", "crop_id")

    def __init__(self, planted_repository: PlantedRepository, cache_store: CacheStore,
                 list_ttl_seconds: int = 3600):
        super().__init__(planted_repository, cache_store, list_ttl_seconds)
        self.planted_repository = planted_repository

    def _load_for_response(self, db: Session, entity_id: str) -> Optional[PlantedCulture]:
        return self.planted_repository.find_with_crop(db, entity_id)

    def _snapshot_values(self, snapshot: ResourceSnapshot) -> Dict[str, Any]:
        values = super()._snapshot_values(snapshot)
        values["crop_id"] = values.get("crop_id") or snapshot.related_id("crop")
        return values

    def _validate(self, db: Session, values: Dict[str, Any], entity_id: Optional[str] = None) -> Dict[str, Any]:
        return {**values, "name": str(values["name"]).strip()}

    def list_planteds(self, page: Optional[int] = None, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        offset, limit = self._page_window(page, limit)
        return self._query(
            f"listagem (offset={offset}, limit={limit})",
            lambda db: self.planted_repository.list_all(db, offset=offset, limit=limit),
        )

    def find_by_crop(self, crop_id: str) -> List[Dict[str, Any]]:
        """Culturas de uma safra. Cacheada em 'planteds:crop:<cropId>'; vazio retorna [] sem cache."""
        if not crop_id:
            raise ValidationError("Informe o ID da safra.", kind=ValidationKind.MISSING_REQUIRED_FIELD)
        return self._cached_relation_list(
            "crop", crop_id,
            lambda db: self.planted_repository.find_by_crop(db, crop_id),
        )
