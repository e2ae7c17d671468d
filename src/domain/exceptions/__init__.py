from .fleet import FleetError, RouteNotFound, RouteTooShort, VehicleNotFound

__all__ = [
    "FleetError",
    "RouteNotFound",
    "RouteTooShort",
    "VehicleNotFound",
]
