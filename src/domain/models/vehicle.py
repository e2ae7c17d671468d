from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from .geo import GeoPoint


class VehicleStatus(str, Enum):
    IDLE = "idle"
    ACTIVE = "active"


@dataclass(frozen=True, slots=True)
class Vehicle:
    """A fleet vehicle as held by the fleet store.

    Frozen: the store swaps whole records, so readers never see a half-applied
    position update.
    """

    id: str
    location: GeoPoint
    heading: float = 0.0  # degrees, 0 = north, clockwise
    status: VehicleStatus = VehicleStatus.IDLE
    number: str | None = None  # fleet/plate number
    name: str | None = None
    capacity: int | None = None
    route_id: str | None = None
    driver_id: str | None = None

    @property
    def is_active(self) -> bool:
        return self.status is VehicleStatus.ACTIVE


@dataclass(frozen=True, slots=True)
class FleetSnapshot:
    """Immutable copy of every vehicle at one instant."""

    vehicles: tuple[Vehicle, ...]
    sequence: int
    taken_at: datetime

    def get(self, vehicle_id: str) -> Vehicle | None:
        for v in self.vehicles:
            if v.id == vehicle_id:
                return v
        return None

    @property
    def active_ids(self) -> frozenset[str]:
        return frozenset(v.id for v in self.vehicles if v.is_active)
