from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from src.adapters.api.schemas.routes import GeoPointSchema
from src.domain.models import SimulationOutcome


class VehicleSchema(BaseModel):
    vehicle_id: str
    location: GeoPointSchema
    heading: float = Field(..., ge=0.0, lt=360.0)
    status: Literal["idle", "active"]
    number: str | None = None
    name: str | None = None
    capacity: int | None = None
    route_id: str | None = None
    driver_id: str | None = None


class FleetSnapshotSchema(BaseModel):
    sequence: int
    taken_at: datetime
    active_vehicle_ids: list[str]
    vehicles: list[VehicleSchema]


class StartRouteRequestSchema(BaseModel):
    driver_id: str = Field(..., min_length=1)
    route_id: str = Field(..., min_length=1)


class CommandResponseSchema(BaseModel):
    vehicle_id: str
    outcome: SimulationOutcome


class SimulationProgressSchema(BaseModel):
    vehicle_id: str
    route_id: str
    segment_index: int
    step: int
    steps_per_segment: int
    progress: float = Field(..., ge=0.0, lt=1.0)
    epoch: int
