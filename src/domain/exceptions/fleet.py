class FleetError(Exception):
    """Base exception for fleet simulation failures."""


class VehicleNotFound(FleetError):
    """Raised when a vehicle id does not resolve in the fleet store."""

    def __init__(self, vehicle_id: str) -> None:
        super().__init__(f"Vehicle not found: {vehicle_id}")
        self.vehicle_id = vehicle_id


class RouteNotFound(FleetError):
    """Raised when a route id does not resolve in the route repository."""

    def __init__(self, route_id: str) -> None:
        super().__init__(f"Route not found: {route_id}")
        self.route_id = route_id


class RouteTooShort(FleetError):
    """Raised when a route has fewer than two stops and cannot be driven."""

    def __init__(self, route_id: str, stop_count: int) -> None:
        super().__init__(f"Route {route_id} has {stop_count} stop(s); need at least 2")
        self.route_id = route_id
        self.stop_count = stop_count
