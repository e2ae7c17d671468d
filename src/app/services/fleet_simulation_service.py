from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field

from src.app.ports.output import IRouteRepository, ITickHandle, ITickScheduler
from src.domain.algorithms.geo_utils import initial_bearing_deg, interpolate
from src.domain.exceptions import RouteNotFound, RouteTooShort, VehicleNotFound
from src.domain.models import (
    FleetSnapshot,
    Route,
    SimulationOutcome,
    SimulationProgress,
)

from .fleet_store import FleetStore
from .notification_bus import NotificationBus, Observer, Unsubscribe

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class _Simulation:
    vehicle_id: str
    route: Route
    epoch: int
    segment_index: int = 0
    step: int = 0
    handle: ITickHandle | None = None

    def cancel(self) -> None:
        if self.handle is not None:
            self.handle.cancel()


@dataclass(slots=True)
class FleetSimulationService:
    """Drives vehicles along their routes and broadcasts fleet snapshots.

    Per vehicle the lifecycle is Idle -> Running -> Idle. At most one
    simulation runs per vehicle: every simulation carries an epoch token and a
    tick only applies while its epoch is still the current one, so a superseded
    or stopped simulation is inert even if its timer fires once more.

    Progress is counted in ticks, not wall-clock time: each tick advances
    `1 / steps_per_segment` of the current segment, so trajectories are
    reproducible regardless of scheduler jitter.
    """

    store: FleetStore
    bus: NotificationBus
    route_repository: IRouteRepository
    tick_scheduler: ITickScheduler

    # Tuning knobs
    tick_period_s: float = 0.1
    steps_per_segment: int = 20

    _simulations: dict[str, _Simulation] = field(
        default_factory=dict, init=False, repr=False
    )
    _epoch: int = field(default=0, init=False, repr=False)
    _lock: threading.RLock = field(
        default_factory=threading.RLock, init=False, repr=False
    )

    def __post_init__(self) -> None:
        if self.steps_per_segment < 1:
            raise ValueError(f"steps_per_segment must be >= 1: {self.steps_per_segment}")
        if self.tick_period_s <= 0.0:
            raise ValueError(f"tick_period_s must be > 0: {self.tick_period_s}")

    # -- observers -----------------------------------------------------------

    def subscribe(self, observer: Observer) -> Unsubscribe:
        return self.bus.subscribe(observer)

    def current_snapshot(self) -> FleetSnapshot:
        return self.store.snapshot()

    # -- read side -----------------------------------------------------------

    def list_routes(self) -> tuple[Route, ...]:
        return self.route_repository.list_routes()

    def get_route(self, route_id: str) -> Route | None:
        return self.route_repository.get_route(route_id)

    def running_vehicle_ids(self) -> frozenset[str]:
        with self._lock:
            return frozenset(self._simulations)

    def progress(self, vehicle_id: str) -> SimulationProgress | None:
        with self._lock:
            sim = self._simulations.get(vehicle_id)
            if sim is None:
                return None
            return SimulationProgress(
                vehicle_id=vehicle_id,
                route_id=sim.route.id,
                segment_index=sim.segment_index,
                step=sim.step,
                steps_per_segment=self.steps_per_segment,
                epoch=sim.epoch,
            )

    # -- commands ------------------------------------------------------------

    def start_route(
        self, *, driver_id: str, vehicle_id: str, route_id: str
    ) -> SimulationOutcome:
        """Put a vehicle on a route, replacing any simulation it already runs.

        Unknown vehicle or route ids, and routes that cannot be driven, are
        reported through the returned outcome and leave everything untouched.
        So does a tick scheduler that refuses the new task.
        """

        try:
            route = self._resolve_route(route_id)
        except RouteNotFound as exc:
            logger.warning("start_route rejected: %s", exc)
            return SimulationOutcome.ROUTE_NOT_FOUND
        except RouteTooShort as exc:
            logger.warning("start_route rejected: %s", exc)
            return SimulationOutcome.ROUTE_TOO_SHORT

        with self._lock:
            try:
                self.store.get(vehicle_id)
            except VehicleNotFound as exc:
                logger.warning("start_route rejected: %s", exc)
                return SimulationOutcome.VEHICLE_NOT_FOUND

            # Ticks of the new epoch are inert until the simulation is registered.
            epoch = self._epoch + 1
            try:
                handle = self.tick_scheduler.schedule(
                    name=f"vehicle-{vehicle_id}",
                    period_s=self.tick_period_s,
                    callback=lambda: self._tick(vehicle_id, epoch),
                )
            except Exception:
                logger.exception(
                    "start_route rejected: cannot schedule ticks for vehicle %s", vehicle_id
                )
                return SimulationOutcome.SCHEDULER_UNAVAILABLE

            previous = self._simulations.pop(vehicle_id, None)
            if previous is not None:
                previous.cancel()

            self._epoch = epoch
            self._simulations[vehicle_id] = _Simulation(
                vehicle_id=vehicle_id, route=route, epoch=epoch, handle=handle
            )

            first, second = route.stops[0], route.stops[1]
            self.store.activate(vehicle_id, route_id=route.id, driver_id=driver_id)
            self.store.set_position(
                vehicle_id,
                first.location,
                initial_bearing_deg(first.location, second.location),
            )

            outcome = (
                SimulationOutcome.RESTARTED
                if previous is not None
                else SimulationOutcome.STARTED
            )
            logger.info(
                "Vehicle %s %s route %s (driver=%s, stops=%d, epoch=%d)",
                vehicle_id,
                outcome.value,
                route.id,
                driver_id,
                len(route.stops),
                epoch,
            )
            self.bus.publish(self.store.snapshot())
            return outcome

    def stop_route(self, vehicle_id: str) -> SimulationOutcome:
        with self._lock:
            sim = self._simulations.pop(vehicle_id, None)
            if sim is None:
                logger.debug("stop_route: vehicle %s has no running simulation", vehicle_id)
                return SimulationOutcome.NOT_RUNNING

            sim.cancel()
            try:
                self.store.deactivate(vehicle_id)
            except VehicleNotFound:
                logger.warning("stop_route: vehicle %s vanished while running", vehicle_id)
            logger.info("Vehicle %s stopped on route %s", vehicle_id, sim.route.id)
            self.bus.publish(self.store.snapshot())
            return SimulationOutcome.STOPPED

    def close(self) -> None:
        """Cancel every running simulation without publishing."""

        with self._lock:
            sims = list(self._simulations.values())
            self._simulations.clear()
            for sim in sims:
                sim.cancel()
        if sims:
            logger.info("Cancelled %d running simulation(s)", len(sims))

    # -- internals -----------------------------------------------------------

    def _resolve_route(self, route_id: str) -> Route:
        route = self.route_repository.get_route(route_id)
        if route is None:
            raise RouteNotFound(route_id)
        if not route.is_simulatable:
            raise RouteTooShort(route_id, len(route.stops))
        return route

    def _discard(self, sim: _Simulation) -> None:
        sim.cancel()
        if self._simulations.get(sim.vehicle_id) is sim:
            del self._simulations[sim.vehicle_id]

    def _tick(self, vehicle_id: str, epoch: int) -> None:
        with self._lock:
            sim = self._simulations.get(vehicle_id)
            if sim is None or sim.epoch != epoch:
                return

            vehicle = self.store.find(vehicle_id)
            if vehicle is None or not self.store.is_active(vehicle_id):
                logger.info(
                    "Vehicle %s no longer active; dropping simulation (epoch=%d)",
                    vehicle_id,
                    epoch,
                )
                self._discard(sim)
                return

            stops = sim.route.stops
            sim.step += 1

            if sim.step < self.steps_per_segment:
                a = stops[sim.segment_index].location
                b = stops[sim.segment_index + 1].location
                t = sim.step / self.steps_per_segment
                self.store.set_position(
                    vehicle_id, interpolate(a, b, t), initial_bearing_deg(a, b)
                )
            else:
                sim.segment_index += 1
                sim.step = 0
                reached = stops[sim.segment_index]

                if sim.segment_index >= len(stops) - 1:
                    self.store.set_position(vehicle_id, reached.location, vehicle.heading)
                    self.store.deactivate(vehicle_id)
                    self._discard(sim)
                    logger.info(
                        "Vehicle %s completed route %s at %s",
                        vehicle_id,
                        sim.route.id,
                        reached.name,
                    )
                else:
                    following = stops[sim.segment_index + 1]
                    self.store.set_position(
                        vehicle_id,
                        reached.location,
                        initial_bearing_deg(reached.location, following.location),
                    )
                    logger.debug(
                        "Vehicle %s reached stop %s (%d/%d)",
                        vehicle_id,
                        reached.name,
                        sim.segment_index + 1,
                        len(stops),
                    )

            self.bus.publish(self.store.snapshot())
