# agro_registry/domain/__init__.py
# Makes 'domain' a package. Exports ORM models and value types.

from .document_type import DocumentType
from .producer import Producer
from .farm import Farm
from .crop import Crop
from .planted import PlantedCulture
from .snapshot import ResourceSnapshot

__all__ = [
    "DocumentType",
    "Producer",
    "Farm",
    "Crop",
    "PlantedCulture",
    "ResourceSnapshot",
]
