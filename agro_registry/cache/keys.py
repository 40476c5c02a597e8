# agro_registry/cache/keys.py
# Namespaces das chaves de cache.

def entity_key(resource: str, entity_id: str) -> str:
    """Chave por id, sem TTL: '<resource>:<id>'."""
    return f"{resource}:{entity_id}"


def relation_key(resource: str, relation: str, foreign_id: str) -> str:
    """Chave secundária de listagem, com TTL: '<resource>:<relation>:<foreignId>'."""
    return f"{resource}:{relation}:{foreign_id}"


def dashboard_key(aggregate: str) -> str:
    return f"dashboard:{aggregate}"
