from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field

from src.app.ports.output import IRouteRepository, ITickHandle, ITickScheduler
from src.app.services.fleet_simulation_service import FleetSimulationService
from src.app.services.fleet_store import FleetStore
from src.app.services.notification_bus import NotificationBus
from src.domain.models import FleetSnapshot, GeoPoint, Route, Stop, Vehicle


@dataclass(slots=True)
class FakeRouteRepository(IRouteRepository):
    routes: dict[str, Route] = field(default_factory=dict)

    def get_route(self, route_id: str) -> Route | None:
        return self.routes.get(route_id)

    def list_routes(self) -> tuple[Route, ...]:
        return tuple(self.routes.values())


@dataclass(slots=True)
class ManualTickHandle(ITickHandle):
    name: str
    period_s: float
    callback: Callable[[], None]
    is_cancelled: bool = False

    def cancel(self) -> None:
        self.is_cancelled = True

    @property
    def cancelled(self) -> bool:
        return self.is_cancelled


@dataclass(slots=True)
class ManualTickScheduler(ITickScheduler):
    """Fires ticks only when the test says so."""

    handles: list[ManualTickHandle] = field(default_factory=list)
    refusing: bool = False

    def schedule(
        self, *, name: str, period_s: float, callback: Callable[[], None]
    ) -> ManualTickHandle:
        if self.refusing:
            raise RuntimeError("can't start new thread")
        handle = ManualTickHandle(name=name, period_s=period_s, callback=callback)
        self.handles.append(handle)
        return handle

    @property
    def live(self) -> list[ManualTickHandle]:
        return [h for h in self.handles if not h.cancelled]

    def tick(self, n: int = 1) -> None:
        for _ in range(n):
            for handle in self.live:
                handle.callback()


def make_route(route_id: str, *points: tuple[float, float]) -> Route:
    return Route(
        id=route_id,
        name=f"Route {route_id}",
        stops=tuple(
            Stop(id=f"{route_id}-{i}", name=f"Stop {i}", location=GeoPoint(lat=lat, lon=lon))
            for i, (lat, lon) in enumerate(points)
        ),
    )


def make_vehicle(vehicle_id: str, lat: float = 0.0, lon: float = 0.0) -> Vehicle:
    return Vehicle(id=vehicle_id, location=GeoPoint(lat=lat, lon=lon))


@dataclass(slots=True)
class SimulationHarness:
    service: FleetSimulationService
    ticker: ManualTickScheduler
    published: list[FleetSnapshot]


def make_harness(
    routes: Iterable[Route],
    vehicles: Iterable[Vehicle],
    *,
    steps_per_segment: int = 20,
) -> SimulationHarness:
    ticker = ManualTickScheduler()
    service = FleetSimulationService(
        store=FleetStore.from_vehicles(vehicles),
        bus=NotificationBus(),
        route_repository=FakeRouteRepository({r.id: r for r in routes}),
        tick_scheduler=ticker,
        steps_per_segment=steps_per_segment,
    )
    published: list[FleetSnapshot] = []
    service.subscribe(published.append)
    return SimulationHarness(service=service, ticker=ticker, published=published)
