from __future__ import annotations

from pydantic import BaseModel, Field


class GeoPointSchema(BaseModel):
    lat: float = Field(..., ge=-90.0, le=90.0)
    lon: float = Field(..., ge=-180.0, le=180.0)


class StopSchema(BaseModel):
    stop_id: str
    name: str
    location: GeoPointSchema


class RouteSummarySchema(BaseModel):
    route_id: str
    name: str
    origin_name: str | None = None
    destination_name: str | None = None
    color: str | None = None
    estimated_duration_min: int | None = None
    stop_count: int
    simulatable: bool


class RouteSchema(RouteSummarySchema):
    stops: list[StopSchema] = []
    total_distance_m: float | None = None
