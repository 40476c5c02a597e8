# agro_registry/cache/cache_store.py
# Best-effort key/value cache over Redis used by the cache-aside services.

import json
from typing import Any, Optional

import redis
from redis.exceptions import RedisError

from agro_registry.utils.logger import logger

# Falhas de backend tratadas como miss/no-op.
CACHE_BACKEND_ERRORS = (RedisError, OSError)


class CacheStore:
    """
    Cache remoto (Redis) com ciclo de vida explícito: connect() na subida do
    processo e close() no desligamento. Uma única instância é compartilhada por
    todos os serviços.

    Todas as operações são best-effort: qualquer erro do backend é registrado
    em log e tratado como miss (get) ou no-op (set/delete). O cache nunca é
    fonte de verdade e nunca interrompe a operação no banco.
    """

    def __init__(self, url: Optional[str] = None, socket_timeout: float = 5.0,
                 client: Optional[redis.Redis] = None):
        self._url = url
        self._socket_timeout = socket_timeout
        self._client: Optional[redis.Redis] = client
        self._owns_client = client is None

    @classmethod
    def from_config(cls, config) -> "CacheStore":
        return cls(url=config.REDIS_URL, socket_timeout=config.REDIS_SOCKET_TIMEOUT)

    # --- Lifecycle ---

    def connect(self) -> bool:
        """Cria o cliente (se não injetado) e valida a conexão. Retorna False em modo degradado."""
        if self._client is None:
            if not self._url:
                logger.error("[Redis] URL de conexão não configurada; cache desativado.")
                return False
            self._client = redis.Redis.from_url(
                self._url,
                decode_responses=True,
                socket_timeout=self._socket_timeout,
                socket_connect_timeout=self._socket_timeout,
            )
        try:
            self._client.ping()
            logger.info("[Redis] Conexão estabelecida.")
            return True
        except CACHE_BACKEND_ERRORS as e:
            logger.error(f"[Redis] Falha ao conectar: {e}")
            return False

    def close(self) -> None:
        if self._client is None:
            return
        try:
            if self._owns_client:
                self._client.close()
            logger.info("[Redis] Conexão encerrada.")
        except CACHE_BACKEND_ERRORS as e:
            logger.error(f"[Redis] Erro ao encerrar conexão: {e}")
        finally:
            if self._owns_client:
                self._client = None

    @property
    def is_connected(self) -> bool:
        return self._client is not None

    def ping(self) -> bool:
        if self._client is None:
            return False
        try:
            return bool(self._client.ping())
        except CACHE_BACKEND_ERRORS as e:
            logger.error(f"[Redis] Erro no PING: {e}")
            return False

    # --- Operations ---

    def get(self, key: str) -> Optional[str]:
        if self._client is None:
            logger.debug(f'[Redis] GET chave="{key}" ignorado: cliente não conectado')
            return None
        try:
            value = self._client.get(key)
            logger.debug(f'[Redis] GET chave="{key}" ({"hit" if value is not None else "miss"})')
            if isinstance(value, bytes):
                value = value.decode('utf-8')
            return value
        except CACHE_BACKEND_ERRORS as e:
            logger.error(f'[Redis] Erro no GET da chave "{key}": {e}')
            return None

    def set(self, key: str, value: str, ttl_seconds: Optional[int] = None) -> None:
        if self._client is None:
            logger.debug(f'[Redis] SET chave="{key}" ignorado: cliente não conectado')
            return
        try:
            if ttl_seconds:
                self._client.setex(key, ttl_seconds, value)
            else:
                self._client.set(key, value)
            logger.debug(f'[Redis] SET chave="{key}" ttl={ttl_seconds}')
        except CACHE_BACKEND_ERRORS as e:
            logger.error(f'[Redis] Erro no SET da chave "{key}": {e}')

    def delete(self, key: str) -> None:
        if self._client is None:
            logger.debug(f'[Redis] DEL chave="{key}" ignorado: cliente não conectado')
            return
        try:
            self._client.delete(key)
            logger.debug(f'[Redis] DEL chave="{key}"')
        except CACHE_BACKEND_ERRORS as e:
            logger.error(f'[Redis] Erro no DEL da chave "{key}": {e}')

    def delete_by_pattern(self, pattern: str) -> None:
        """Remove todas as chaves que casam com o glob informado (SCAN + DEL)."""
        if self._client is None:
            logger.debug(f'[Redis] DEL padrão="{pattern}" ignorado: cliente não conectado')
            return
        try:
            keys = list(self._client.scan_iter(match=pattern))
            if keys:
                self._client.delete(*keys)
                logger.debug(f'[Redis] DEL padrão="{pattern}" ({len(keys)} chaves)')
            else:
                logger.debug(f'[Redis] Nenhuma chave encontrada com o padrão "{pattern}"')
        except CACHE_BACKEND_ERRORS as e:
            logger.error(f'[Redis] Erro ao deletar padrão "{pattern}": {e}')

    # --- JSON helpers ---

    def get_json(self, key: str) -> Optional[Any]:
        raw = self.get(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError as e:
            logger.error(f'[Redis] Valor inválido (JSON) na chave "{key}", tratado como miss: {e}')
            return None

    def set_json(self, key: str, value: Any, ttl_seconds: Optional[int] = None) -> None:
        self.set(key, json.dumps(value, ensure_ascii=False), ttl_seconds)
