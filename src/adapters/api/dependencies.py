from __future__ import annotations

import asyncio

from starlette.requests import HTTPConnection

from src.adapters.config import SimulatorRuntimeConfig
from src.adapters.persistence import LocalRouteRepository, LocalVehicleRegistry
from src.adapters.scheduling import AsyncioTickScheduler, ThreadTickScheduler
from src.app.ports.output import ITickScheduler
from src.app.services.fleet_simulation_service import FleetSimulationService
from src.app.services.fleet_store import FleetStore
from src.app.services.notification_bus import NotificationBus


def build_fleet_simulation_service(
    config: SimulatorRuntimeConfig | None = None,
) -> FleetSimulationService:
    """Wire the simulator once per process; the app keeps it on `app.state`.

    With SIM_TICKER=asyncio this must be called from inside the running loop,
    which then owns every tick task.
    """

    cfg = config or SimulatorRuntimeConfig.from_env()

    tick_scheduler: ITickScheduler
    if cfg.ticker == "asyncio":
        tick_scheduler = AsyncioTickScheduler(loop=asyncio.get_running_loop())
    else:
        tick_scheduler = ThreadTickScheduler()

    vehicles = LocalVehicleRegistry(base_path=cfg.data_path).load_vehicles()
    return FleetSimulationService(
        store=FleetStore.from_vehicles(vehicles),
        bus=NotificationBus(),
        route_repository=LocalRouteRepository(base_path=cfg.data_path),
        tick_scheduler=tick_scheduler,
        tick_period_s=cfg.tick_period_s,
        steps_per_segment=cfg.steps_per_segment,
    )


def get_fleet_simulation_service(conn: HTTPConnection) -> FleetSimulationService:
    service = getattr(conn.app.state, "fleet_simulation_service", None)
    if service is None:
        raise RuntimeError("Fleet simulation service not configured")
    return service
