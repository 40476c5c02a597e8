# agro_registry/cache/__init__.py
# Makes 'cache' a package. Exports the cache store and key builders.

from .cache_store import CacheStore
from .keys import entity_key, relation_key, dashboard_key

__all__ = ["CacheStore", "entity_key", "relation_key", "dashboard_key"]
