from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from src.adapters.api.dependencies import get_fleet_simulation_service
from src.adapters.api.schemas.routes import (
    GeoPointSchema,
    RouteSchema,
    RouteSummarySchema,
    StopSchema,
)
from src.app.services.fleet_simulation_service import FleetSimulationService
from src.domain.models import Route

router = APIRouter(prefix="/routes", tags=["routes"])


def _route_to_summary(route: Route) -> RouteSummarySchema:
    return RouteSummarySchema(
        route_id=route.id,
        name=route.name,
        origin_name=route.origin_name,
        destination_name=route.destination_name,
        color=route.color,
        estimated_duration_min=route.estimated_duration_min,
        stop_count=len(route.stops),
        simulatable=route.is_simulatable,
    )


def _route_to_schema(route: Route) -> RouteSchema:
    return RouteSchema(
        **_route_to_summary(route).model_dump(),
        stops=[
            StopSchema(
                stop_id=s.id,
                name=s.name,
                location=GeoPointSchema(lat=s.location.lat, lon=s.location.lon),
            )
            for s in route.stops
        ],
        total_distance_m=route.total_distance_m,
    )


@router.get("", response_model=list[RouteSummarySchema])
def list_routes(
    service: FleetSimulationService = Depends(get_fleet_simulation_service),
) -> list[RouteSummarySchema]:
    return [_route_to_summary(r) for r in service.list_routes()]


@router.get("/{route_id}", response_model=RouteSchema)
def get_route(
    route_id: str,
    service: FleetSimulationService = Depends(get_fleet_simulation_service),
) -> RouteSchema:
    route = service.get_route(route_id)
    if route is None:
        raise HTTPException(status_code=404, detail="Route not found")
    return _route_to_schema(route)
