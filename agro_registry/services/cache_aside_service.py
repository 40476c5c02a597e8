# agro_registry/services/cache_aside_service.py
# Protocolo cache-aside compartilhado pelos serviços de Produtor, Fazenda, Safra e Cultura plantada.

from typing import Any, Callable, Dict, Generic, Iterable, List, Mapping, Optional, Tuple, TypeVar

from sqlalchemy.orm import Session

from agro_registry.api.errors import NotFoundError, ValidationError, ValidationKind
from agro_registry.cache import CacheStore, entity_key, relation_key
from agro_registry.database import get_db_session
from agro_registry.database.base import Base
from agro_registry.database.base_repository import BaseRepository
from agro_registry.domain.snapshot import ResourceSnapshot
from agro_registry.utils.logger import logger

ModelT = TypeVar("ModelT", bound=Base)


class CacheAsideService(Generic[ModelT]):
    """
    Orquestra leitura com preenchimento do cache (read-through), escrita no
    banco seguida de escrita no cache (write-through) e remoção da chave por id
    na exclusão.

    Chaves por id ('<resource>:<id>') não têm TTL. Listas por relacionamento
    ('<collection>:<relation>:<foreignId>') têm TTL fixo e nunca são invalidadas
    por escritas nos itens listados. Não há lock nem versão: duas escritas
    concorrentes podem deixar o cache com a mais antiga, e update() parte do
    estado lido pelo mesmo caminho do get_by_id() (possivelmente do cache).
    """

    resource: str = ""
    collection: str = ""
    label: str = "Recurso"
    editable_fields: Tuple[str, ...] = ()
    required_fields: Tuple[str, ...] = ()

    def __init__(self, repository: BaseRepository[ModelT], cache_store: CacheStore,
                 list_ttl_seconds: int = 3600):
        self.repository = repository
        self.cache_store = cache_store
        self.list_ttl_seconds = list_ttl_seconds
        logger.info(f"{self.__class__.__name__} inicializado (cache-aside, recurso '{self.resource}').")

    # --- Hooks implemented per resource ---

    def _load_for_response(self, db: Session, entity_id: str) -> Optional[ModelT]:
        """Carrega a entidade com os relacionamentos exigidos pelo formato de resposta."""
        return self.repository.find_by_id(db, entity_id)

    def _validate(self, db: Session, values: Dict[str, Any], entity_id: Optional[str] = None) -> Dict[str, Any]:
        """Valida invariantes sobre os valores resultantes e devolve-os normalizados."""
        return values

    def _build_entity(self, values: Dict[str, Any]) -> ModelT:
        return self.repository.model(**values)

    def _apply(self, entity: ModelT, values: Dict[str, Any]) -> None:
        for field_name, value in values.items():
            setattr(entity, field_name, value)

    def _snapshot_values(self, snapshot: ResourceSnapshot) -> Dict[str, Any]:
        """Campos editáveis extraídos do snapshot atual (base do merge no update)."""
        return {name: snapshot.get(name) for name in self.editable_fields}

    # --- Helpers ---

    def cache_key(self, entity_id: str) -> str:
        return entity_key(self.resource, entity_id)

    def _not_found(self, entity_id: str) -> NotFoundError:
        return NotFoundError(f"{self.label} com ID {entity_id} não encontrado(a)")

    def _pick(self, data: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
        """Mantém apenas campos editáveis informados (None equivale a omitido)."""
        if not data:
            return {}
        return {k: v for k, v in data.items() if k in self.editable_fields and v is not None}

    def _check_required(self, values: Mapping[str, Any]) -> None:
        missing = [
            name for name in self.required_fields
            if values.get(name) is None or (isinstance(values.get(name), str) and not values.get(name).strip())
        ]
        if missing:
            logger.warning(f"{self.label}: campos obrigatórios ausentes: {missing}")
            raise ValidationError(
                f"Campos obrigatórios ausentes: {', '.join(missing)}",
                kind=ValidationKind.MISSING_REQUIRED_FIELD,
                payload={'fields': missing},
            )

    @staticmethod
    def _page_window(page: Optional[int], limit: Optional[int]) -> Tuple[Optional[int], Optional[int]]:
        if page is None and limit is None:
            return None, None
        page = 1 if page is None else page
        limit = 10 if limit is None else limit
        if page < 1 or limit < 1:
            raise ValidationError("page e limit devem ser inteiros positivos.", kind=ValidationKind.INVALID_FILTER)
        return (page - 1) * limit, limit

    @staticmethod
    def _to_responses(entities: Iterable[ModelT]) -> List[Dict[str, Any]]:
        return [entity.to_dict() for entity in entities]

    # --- Cache-aside protocol ---

    def read_snapshot(self, entity_id: str) -> ResourceSnapshot:
        """Lê pelo cache; no miss carrega do banco e preenche a chave por id (sem TTL)."""
        key = self.cache_key(entity_id)
        cached = self.cache_store.get_json(key)
        if cached is not None:
            logger.info(f"Cache encontrado para {key}")
            return ResourceSnapshot(self.resource, entity_id, cached, from_cache=True)

        with get_db_session() as db:
            entity = self._load_for_response(db, entity_id)
            if entity is None:
                logger.warning(f"{self.label} não encontrado(a) com ID: {entity_id}")
                raise self._not_found(entity_id)
            response = entity.to_dict()

        self.cache_store.set_json(key, response)
        logger.debug(f"{key} carregado do banco e armazenado em cache")
        return ResourceSnapshot(self.resource, entity_id, response, from_cache=False)

    def get_by_id(self, entity_id: str) -> Dict[str, Any]:
        logger.info(f"Buscando {self.label} por ID: {entity_id}")
        return self.read_snapshot(entity_id).data

    def create(self, data: Mapping[str, Any]) -> Dict[str, Any]:
        logger.info(f"Iniciando criação de {self.label}")
        values = self._pick(data)
        self._check_required(values)

        with get_db_session() as db:
            values = self._validate(db, values)
            saved = self.repository.save(db, self._build_entity(values))
            response = saved.to_dict()

        self.cache_store.set_json(self.cache_key(response['id']), response)
        logger.info(f"{self.label} criado(a) com sucesso: {response['id']}")
        return response

    def update(self, entity_id: str, patch: Mapping[str, Any]) -> Dict[str, Any]:
        logger.info(f"Atualizando {self.label}: {entity_id}")
        current = self.read_snapshot(entity_id)
        merged = {**self._snapshot_values(current), **self._pick(patch)}
        self._check_required(merged)

        with get_db_session() as db:
            merged = self._validate(db, merged, entity_id=entity_id)
            entity = self.repository.find_by_id(db, entity_id)
            if entity is None:
                logger.warning(f"{self.label} {entity_id} presente no cache mas ausente no banco")
                raise self._not_found(entity_id)
            self._apply(entity, merged)
            saved = self.repository.save(db, entity)
            response = saved.to_dict()

        self.cache_store.set_json(self.cache_key(entity_id), response)
        logger.info(f"{self.label} atualizado(a) com sucesso: {entity_id}")
        return response

    def delete(self, entity_id: str) -> None:
        logger.info(f"Removendo {self.label}: {entity_id}")
        with get_db_session() as db:
            affected = self.repository.delete_by_id(db, entity_id)
            if not affected:
                raise self._not_found(entity_id)

        # Listas secundárias que contenham este item continuam no cache até o TTL.
        self.cache_store.delete(self.cache_key(entity_id))
        logger.info(f"{self.label} removido(a) com sucesso: {entity_id}")

    def _cached_relation_list(self, relation: str, foreign_id: str,
                              loader: Callable[[Session], Iterable[ModelT]],
                              require_match: bool = False,
                              not_found_message: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        Consulta filtrada por um id estrangeiro estável, com chave secundária.
        Hit devolve o array armazenado sem alterações; miss consulta o banco e só
        armazena (com TTL) resultados não vazios.
        """
        key = relation_key(self.collection, relation, foreign_id)
        cached = self.cache_store.get_json(key)
        if cached is not None:
            logger.info(f"Lista {key} encontrada no cache ({len(cached)} itens)")
            return cached

        logger.info(f"Lista {key} não encontrada no cache, consultando banco de dados")
        with get_db_session() as db:
            items = self._to_responses(loader(db))

        if not items:
            logger.warning(f"Nenhum registro encontrado para {key}")
            if require_match:
                raise NotFoundError(not_found_message or f"Nenhum registro encontrado para {relation} {foreign_id}")
            return []

        self.cache_store.set_json(key, items, self.list_ttl_seconds)
        logger.info(f"Lista {key} salva em cache (ttl={self.list_ttl_seconds}s)")
        return items

    def _query(self, description: str, loader: Callable[[Session], Iterable[ModelT]]) -> List[Dict[str, Any]]:
        """Consulta sem chave estável: nunca passa pelo cache."""
        logger.info(f"Buscando {self.label}: {description}")
        with get_db_session() as db:
            items = self._to_responses(loader(db))
        logger.info(f"{len(items)} registro(s) de {self.label} encontrados ({description})")
        return items
