# agro_registry/services/farm_service.py
# Contém a lógica de negócios para Fazendas com cache-aside.

import math
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from agro_registry.api.errors import NotFoundError, ValidationError, ValidationKind
from agro_registry.cache import CacheStore
from agro_registry.database.farm_repository import FarmRepository
from agro_registry.database.producer_repository import ProducerRepository
from agro_registry.domain.farm import Farm
from agro_registry.domain.snapshot import ResourceSnapshot
from agro_registry.utils.logger import logger
from .cache_aside_service import CacheAsideService

AREA_FIELDS = ("total_area", "arable_area", "vegetation_area")


class FarmService(CacheAsideService[Farm]):
    """
    Camada de serviço para Fazendas.
    Invariante: arable_area + vegetation_area <= total_area, verificada sobre os
    valores resultantes (no update, campos omitidos vêm do estado atual).
    """
    resource = "farm"
    collection = "farms"
    label = "Fazenda"
    editable_fields = ("name", "city", "state") + AREA_FIELDS + ("producer_id",)
    required_fields = editable_fields

    def __init__(self, farm_repository: FarmRepository, producer_repository: ProducerRepository,
                 cache_store: CacheStore, list_ttl_seconds: int = 3600):
        super().__init__(farm_repository, cache_store, list_ttl_seconds)
        self.farm_repository = farm_repository
        self.producer_repository = producer_repository

    def _load_for_response(self, db: Session, entity_id: str) -> Optional[Farm]:
        return self.farm_repository.find_with_producer(db, entity_id)

    def _snapshot_values(self, snapshot: ResourceSnapshot) -> Dict[str, Any]:
        values = super()._snapshot_values(snapshot)
        # O snapshot embute o produtor, não o producer_id.
        values["producer_id"] = snapshot.related_id("producer")
        return values

    @staticmethod
    def check_areas(total_area: float, arable_area: float, vegetation_area: float) -> None:
        """Levanta ValidationError(AreaInvariantViolated) se a soma das áreas exceder a área total."""
        if arable_area + vegetation_area > total_area:
            raise ValidationError(
                "A soma da área agricultável e da área de vegetação não pode ultrapassar a área total da fazenda",
                kind=ValidationKind.AREA_INVARIANT_VIOLATED,
                payload={
                    'total_area': total_area,
                    'arable_area': arable_area,
                    'vegetation_area': vegetation_area,
                },
            )

    def _validate(self, db: Session, values: Dict[str, Any], entity_id: Optional[str] = None) -> Dict[str, Any]:
        areas = {}
        for name in AREA_FIELDS:
            try:
                areas[name] = float(values[name])
            except (TypeError, ValueError):
                raise ValidationError(
                    f"O campo '{name}' deve ser numérico", kind=ValidationKind.AREA_INVARIANT_VIOLATED
                ) from None
            if not math.isfinite(areas[name]):
                raise ValidationError(
                    f"O campo '{name}' deve ser um número finito", kind=ValidationKind.AREA_INVARIANT_VIOLATED
                )
            if areas[name] < 0:
                raise ValidationError(
                    f"O campo '{name}' não pode ser negativo", kind=ValidationKind.AREA_INVARIANT_VIOLATED
                )

        try:
            self.check_areas(**areas)
        except ValidationError:
            logger.warning(f"Invariante de áreas violada para fazenda {entity_id or '(nova)'}: {areas}")
            raise

        producer_id = values["producer_id"]
        if self.producer_repository.find_by_id(db, producer_id) is None:
            logger.warning(f"Produtor {producer_id} informado para a fazenda não existe")
            raise NotFoundError(f"Produtor com ID {producer_id} não encontrado(a)")

        return {**values, **areas}

    # --- Consultas sem cache ---

    def list_farms(self, page: Optional[int] = None, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        offset, limit = self._page_window(page, limit)
        return self._query(
            f"listagem (offset={offset}, limit={limit})",
            lambda db: self.farm_repository.list_all(db, offset=offset, limit=limit),
        )

    def search_by_name(self, name: str) -> List[Dict[str, Any]]:
        if not name or not name.strip():
            raise ValidationError("Informe o nome para a busca.", kind=ValidationKind.INVALID_FILTER)
        return self._query(f"nome contendo '{name}'", lambda db: self.farm_repository.search_by_name(db, name.strip()))

    def search_by_state(self, state: str, city: Optional[str] = None) -> List[Dict[str, Any]]:
        if not state or not state.strip():
            raise ValidationError("Informe o estado para a busca.", kind=ValidationKind.INVALID_FILTER)
        return self._query(
            f"estado '{state}' cidade '{city or '*'}'",
            lambda db: self.farm_repository.search_by_state_and_city(db, state.strip(), city),
        )
