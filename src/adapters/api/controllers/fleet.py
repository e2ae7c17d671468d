from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter, Depends, HTTPException, WebSocket

from src.adapters.api.dependencies import get_fleet_simulation_service
from src.adapters.api.schemas.fleet import (
    CommandResponseSchema,
    FleetSnapshotSchema,
    SimulationProgressSchema,
    StartRouteRequestSchema,
    VehicleSchema,
)
from src.adapters.api.schemas.routes import GeoPointSchema
from src.app.services.fleet_simulation_service import FleetSimulationService
from src.domain.models import FleetSnapshot, SimulationOutcome, Vehicle

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/fleet", tags=["fleet"])

_OUTCOME_ERRORS: dict[SimulationOutcome, tuple[int, str]] = {
    SimulationOutcome.VEHICLE_NOT_FOUND: (404, "Vehicle not found"),
    SimulationOutcome.ROUTE_NOT_FOUND: (404, "Route not found"),
    SimulationOutcome.ROUTE_TOO_SHORT: (422, "Route needs at least two stops"),
    SimulationOutcome.SCHEDULER_UNAVAILABLE: (503, "Simulator cannot schedule ticks"),
}


def _vehicle_to_schema(v: Vehicle) -> VehicleSchema:
    return VehicleSchema(
        vehicle_id=v.id,
        location=GeoPointSchema(lat=v.location.lat, lon=v.location.lon),
        heading=v.heading,
        status=v.status.value,
        number=v.number,
        name=v.name,
        capacity=v.capacity,
        route_id=v.route_id,
        driver_id=v.driver_id,
    )


def _snapshot_to_schema(snapshot: FleetSnapshot) -> FleetSnapshotSchema:
    return FleetSnapshotSchema(
        sequence=snapshot.sequence,
        taken_at=snapshot.taken_at,
        active_vehicle_ids=sorted(snapshot.active_ids),
        vehicles=[_vehicle_to_schema(v) for v in snapshot.vehicles],
    )


def _command_response(vehicle_id: str, outcome: SimulationOutcome) -> CommandResponseSchema:
    if not outcome.ok:
        status_code, detail = _OUTCOME_ERRORS[outcome]
        raise HTTPException(status_code=status_code, detail=detail)
    return CommandResponseSchema(vehicle_id=vehicle_id, outcome=outcome)


@router.get("", response_model=FleetSnapshotSchema)
def get_fleet(
    service: FleetSimulationService = Depends(get_fleet_simulation_service),
) -> FleetSnapshotSchema:
    return _snapshot_to_schema(service.current_snapshot())


@router.get("/{vehicle_id}", response_model=VehicleSchema)
def get_vehicle(
    vehicle_id: str,
    service: FleetSimulationService = Depends(get_fleet_simulation_service),
) -> VehicleSchema:
    vehicle = service.current_snapshot().get(vehicle_id)
    if vehicle is None:
        raise HTTPException(status_code=404, detail="Vehicle not found")
    return _vehicle_to_schema(vehicle)


@router.get("/{vehicle_id}/simulation", response_model=SimulationProgressSchema)
def get_simulation(
    vehicle_id: str,
    service: FleetSimulationService = Depends(get_fleet_simulation_service),
) -> SimulationProgressSchema:
    progress = service.progress(vehicle_id)
    if progress is None:
        raise HTTPException(status_code=404, detail="No running simulation")
    return SimulationProgressSchema(
        vehicle_id=progress.vehicle_id,
        route_id=progress.route_id,
        segment_index=progress.segment_index,
        step=progress.step,
        steps_per_segment=progress.steps_per_segment,
        progress=progress.progress,
        epoch=progress.epoch,
    )


@router.post("/{vehicle_id}/start", response_model=CommandResponseSchema)
def start_route(
    vehicle_id: str,
    req: StartRouteRequestSchema,
    service: FleetSimulationService = Depends(get_fleet_simulation_service),
) -> CommandResponseSchema:
    outcome = service.start_route(
        driver_id=req.driver_id, vehicle_id=vehicle_id, route_id=req.route_id
    )
    return _command_response(vehicle_id, outcome)


@router.post("/{vehicle_id}/stop", response_model=CommandResponseSchema)
def stop_route(
    vehicle_id: str,
    service: FleetSimulationService = Depends(get_fleet_simulation_service),
) -> CommandResponseSchema:
    return _command_response(vehicle_id, service.stop_route(vehicle_id))


@router.websocket("/stream")
async def stream_fleet(
    websocket: WebSocket,
    service: FleetSimulationService = Depends(get_fleet_simulation_service),
) -> None:
    """Push the current snapshot, then every published snapshot, until the client leaves."""

    await websocket.accept()

    loop = asyncio.get_running_loop()
    # Holds only the newest snapshot; a slow client skips the ones in between.
    queue: asyncio.Queue[FleetSnapshot] = asyncio.Queue(maxsize=1)

    def offer(snapshot: FleetSnapshot) -> None:
        if queue.full():
            queue.get_nowait()
        queue.put_nowait(snapshot)

    def on_snapshot(snapshot: FleetSnapshot) -> None:
        # Published from tick and worker threads as well as from the loop itself.
        loop.call_soon_threadsafe(offer, snapshot)

    async def pump() -> None:
        while True:
            snapshot = await queue.get()
            await websocket.send_json(_snapshot_to_schema(snapshot).model_dump(mode="json"))

    def on_pump_done(task: asyncio.Task[None]) -> None:
        if not task.cancelled() and task.exception() is not None:
            logger.warning("Fleet stream sender stopped: %r", task.exception())
            unsubscribe()

    unsubscribe = service.subscribe(on_snapshot)
    await websocket.send_json(
        _snapshot_to_schema(service.current_snapshot()).model_dump(mode="json")
    )
    sender = asyncio.create_task(pump())
    sender.add_done_callback(on_pump_done)
    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break
    finally:
        unsubscribe()
        sender.cancel()
        await asyncio.gather(sender, return_exceptions=True)
        logger.debug("Fleet stream client disconnected")
