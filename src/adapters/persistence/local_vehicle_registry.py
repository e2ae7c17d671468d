from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

from src.app.ports.output import IVehicleRegistry
from src.domain.algorithms.geo_utils import normalize_heading_deg
from src.domain.models import GeoPoint, Vehicle, VehicleStatus

logger = logging.getLogger(__name__)


def parse_vehicle(row: Mapping[str, Any]) -> Vehicle:
    vehicle_id = str(row.get("id") or "").strip()
    if not vehicle_id:
        raise ValueError("vehicle entry without id")

    capacity = row.get("capacity")
    return Vehicle(
        id=vehicle_id,
        location=GeoPoint(lat=float(row["lat"]), lon=float(row["lon"])),
        heading=normalize_heading_deg(float(row.get("heading") or 0.0)),
        status=VehicleStatus(str(row.get("status") or "idle").strip().lower()),
        number=(str(row.get("number") or "").strip() or None),
        name=(str(row.get("name") or "").strip() or None),
        capacity=int(capacity) if capacity is not None else None,
    )


@dataclass(slots=True)
class LocalVehicleRegistry(IVehicleRegistry):
    """Reads the initial fleet from `vehicles.json`.

    Env vars:
      - FLEET_DATA_PATH: directory containing vehicles.json (default data/fleet)
    """

    base_path: str | Path | None = None

    def _path(self) -> Path:
        value = self.base_path or os.getenv("FLEET_DATA_PATH") or "data/fleet"
        return Path(value) / "vehicles.json"

    def load_vehicles(self) -> tuple[Vehicle, ...]:
        path = self._path()
        with path.open("r", encoding="utf-8") as fp:
            payload = json.load(fp)

        vehicles = tuple(parse_vehicle(row) for row in payload.get("vehicles") or ())
        logger.info("Loaded %d vehicle(s) from %s", len(vehicles), path)
        return vehicles
