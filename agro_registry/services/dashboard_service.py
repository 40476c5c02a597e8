# agro_registry/services/dashboard_service.py
# Agregados do dashboard (fazendas por estado, por cultura e uso do solo), cacheados com TTL.

from typing import Any, Callable, Dict

from sqlalchemy.orm import Session

from agro_registry.api.errors import DatabaseError, InfrastructureError, ServiceError
from agro_registry.cache import CacheStore, dashboard_key
from agro_registry.database import get_db_session
from agro_registry.database.farm_repository import FarmRepository
from agro_registry.utils.logger import logger

ARABLE_LAND_USE = "Área Agricultável"
VEGETATION_LAND_USE = "Área de Vegetação"


class DashboardService:
    """
    Camada de serviço para o dashboard.
    Cada agregado fica em 'dashboard:<agregado>' até expirar o TTL; escritas em
    fazendas e culturas não invalidam essas chaves.
    """

    def __init__(self, farm_repository: FarmRepository, cache_store: CacheStore, ttl_seconds: int = 600):
        self.farm_repository = farm_repository
        self.cache_store = cache_store
        self.ttl_seconds = ttl_seconds
        logger.info("DashboardService inicializado.")

    def _cached_aggregate(self, aggregate: str, description: str, loader: Callable[[Session], Any]) -> Any:
        key = dashboard_key(aggregate)
        logger.info(f"Buscando dados do dashboard {description}...")
        cached = self.cache_store.get_json(key)
        if cached is not None:
            logger.info(f"Dados {description} encontrados no cache.")
            return cached

        logger.info(f"Dados {description} não encontrados no cache, consultando banco de dados...")
        try:
            with get_db_session() as db:
                result = loader(db)
        except (DatabaseError, InfrastructureError) as e:
            logger.error(f"Erro ao buscar dados do dashboard {description}: {e}", exc_info=True)
            raise ServiceError(f"Erro ao buscar dados do dashboard {description}.") from e

        logger.debug(f"Dados {description} obtidos do banco: {result}")
        self.cache_store.set_json(key, result, self.ttl_seconds)
        return result

    def by_state(self):
        return self._cached_aggregate("byState", "por estado", self.farm_repository.count_by_state)

    def by_culture(self):
        return self._cached_aggregate("byCulture", "por cultura", self.farm_repository.count_by_culture)

    def by_land_use(self):
        def load(db: Session):
            totals = self.farm_repository.sum_land_use(db)
            return [
                {"land_use": ARABLE_LAND_USE, "value": totals["arable_area"]},
                {"land_use": VEGETATION_LAND_USE, "value": totals["vegetation_area"]},
            ]
        return self._cached_aggregate("byLandUse", "por uso do solo", load)

    def all(self) -> Dict[str, Any]:
        logger.info("Buscando todos os dados do dashboard...")
        data = {
            "by_state": self.by_state(),
            "by_culture": self.by_culture(),
            "by_land_use": self.by_land_use(),
        }
        logger.info("Dados completos do dashboard obtidos com sucesso.")
        return data
