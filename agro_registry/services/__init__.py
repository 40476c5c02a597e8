# agro_registry/services/__init__.py
# Makes 'services' a package. Exports service classes.

from .cache_aside_service import CacheAsideService
from .producer_service import ProducerService
from .farm_service import FarmService
from .crop_service import CropService
from .planted_service import PlantedService
from .dashboard_service import DashboardService

__all__ = [
    "CacheAsideService",
    "ProducerService",
    "FarmService",
    "CropService",
    "PlantedService",
    "DashboardService",
]
