from .local_route_repository import LocalRouteRepository
from .local_vehicle_registry import LocalVehicleRegistry

__all__ = [
    "LocalRouteRepository",
    "LocalVehicleRegistry",
]
