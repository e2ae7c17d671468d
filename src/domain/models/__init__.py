from .geo import GeoPoint
from .route import Route, Stop
from .simulation import SimulationOutcome, SimulationProgress
from .vehicle import FleetSnapshot, Vehicle, VehicleStatus

__all__ = [
    "FleetSnapshot",
    "GeoPoint",
    "Route",
    "SimulationOutcome",
    "SimulationProgress",
    "Stop",
    "Vehicle",
    "VehicleStatus",
]
