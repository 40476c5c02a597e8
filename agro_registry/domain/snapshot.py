# agro_registry/domain/snapshot.py
# Representação "snapshot" de um recurso: o formato de resposta já serializado.

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class ResourceSnapshot:
    """
    Cópia do formato de resposta de um recurso em um dado momento.

    Quando vem do cache (from_cache=True) é exatamente o JSON decodificado:
    datas são strings ISO-8601 e relacionamentos são dicionários simples, não
    modelos ORM. Nunca é mesclado com o estado atual do banco.
    """
    resource: str
    id: str
    data: Dict[str, Any] = field(default_factory=dict)
    from_cache: bool = False

    def get(self, key: str, default: Optional[Any] = None) -> Any:
        return self.data.get(key, default)

    def related_id(self, relation: str) -> Optional[str]:
        """Id de um relacionamento embutido (ex: 'producer' -> producer['id'])."""
        related = self.data.get(relation)
        if isinstance(related, dict):
            return related.get('id')
        return None
