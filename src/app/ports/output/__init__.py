from .route_repository import IRouteRepository
from .tick_scheduler import ITickHandle, ITickScheduler
from .vehicle_registry import IVehicleRegistry

__all__ = [
    "IRouteRepository",
    "ITickHandle",
    "ITickScheduler",
    "IVehicleRegistry",
]
