from __future__ import annotations

import json
import logging
import os
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

from src.app.ports.output import IRouteRepository
from src.domain.models import GeoPoint, Route, Stop

logger = logging.getLogger(__name__)


def _str_or_none(raw: Any) -> str | None:
    value = str(raw).strip() if raw is not None else ""
    return value or None


def _parse_stop(route_id: str, index: int, row: Mapping[str, Any]) -> Stop:
    stop_id = _str_or_none(row.get("id")) or f"{route_id}-{index}"
    return Stop(
        id=stop_id,
        name=_str_or_none(row.get("name")) or stop_id,
        location=GeoPoint(lat=float(row["lat"]), lon=float(row["lon"])),
    )


def parse_route(row: Mapping[str, Any]) -> Route:
    """Build a Route from one entry of routes.json.

    Stops keep file order; that order is the direction of travel.
    """

    route_id = _str_or_none(row.get("id"))
    if route_id is None:
        raise ValueError("route entry without id")

    duration = row.get("estimated_duration_min")
    return Route(
        id=route_id,
        name=_str_or_none(row.get("name")) or route_id,
        stops=tuple(
            _parse_stop(route_id, i, s) for i, s in enumerate(row.get("stops") or ())
        ),
        origin_name=_str_or_none(row.get("from")),
        destination_name=_str_or_none(row.get("to")),
        color=_str_or_none(row.get("color")),
        estimated_duration_min=int(duration) if duration is not None else None,
    )


@dataclass(slots=True)
class LocalRouteRepository(IRouteRepository):
    """Loads route definitions from `routes.json` once and serves them from memory.

    Env vars:
      - FLEET_DATA_PATH: directory containing routes.json (default data/fleet)
    """

    base_path: str | Path | None = None

    _routes_by_id: dict[str, Route] | None = field(default=None, init=False, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    def _path(self) -> Path:
        value = self.base_path or os.getenv("FLEET_DATA_PATH") or "data/fleet"
        return Path(value) / "routes.json"

    def _load(self) -> dict[str, Route]:
        with self._lock:
            if self._routes_by_id is not None:
                return self._routes_by_id

            path = self._path()
            with path.open("r", encoding="utf-8") as fp:
                payload = json.load(fp)

            routes: dict[str, Route] = {}
            for row in payload.get("routes") or ():
                route = parse_route(row)
                if not route.is_simulatable:
                    logger.warning(
                        "Route %s has %d stop(s) and cannot be simulated",
                        route.id,
                        len(route.stops),
                    )
                routes[route.id] = route

            logger.info("Loaded %d route(s) from %s", len(routes), path)
            self._routes_by_id = routes
            return routes

    def get_route(self, route_id: str) -> Route | None:
        return self._load().get(route_id)

    def list_routes(self) -> tuple[Route, ...]:
        routes = list(self._load().values())
        routes.sort(key=lambda r: (r.name, r.id))
        return tuple(routes)
