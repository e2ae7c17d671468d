from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone

from src.domain.algorithms.geo_utils import normalize_heading_deg
from src.domain.exceptions import VehicleNotFound
from src.domain.models import FleetSnapshot, GeoPoint, Vehicle, VehicleStatus

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(slots=True)
class FleetStore:
    """Authoritative in-memory vehicle state.

    - One coarse lock guards every read and write.
    - Records are frozen and swapped whole, so a snapshot never mixes a new
      latitude with a stale longitude.
    - Insertion order is kept and is the order vehicles appear in snapshots.
    """

    clock: Callable[[], datetime] = _utcnow

    _vehicles: dict[str, Vehicle] = field(default_factory=dict, init=False, repr=False)
    _active: set[str] = field(default_factory=set, init=False, repr=False)
    _sequence: int = field(default=0, init=False, repr=False)
    _lock: threading.RLock = field(
        default_factory=threading.RLock, init=False, repr=False
    )

    @classmethod
    def from_vehicles(cls, vehicles: Iterable[Vehicle], **kwargs) -> "FleetStore":
        store = cls(**kwargs)
        for v in vehicles:
            store.add(v)
        return store

    def add(self, vehicle: Vehicle) -> None:
        with self._lock:
            self._vehicles[vehicle.id] = vehicle
            if vehicle.is_active:
                self._active.add(vehicle.id)
            else:
                self._active.discard(vehicle.id)

    def remove(self, vehicle_id: str) -> Vehicle | None:
        with self._lock:
            self._active.discard(vehicle_id)
            return self._vehicles.pop(vehicle_id, None)

    def find(self, vehicle_id: str) -> Vehicle | None:
        with self._lock:
            return self._vehicles.get(vehicle_id)

    def get(self, vehicle_id: str) -> Vehicle:
        vehicle = self.find(vehicle_id)
        if vehicle is None:
            raise VehicleNotFound(vehicle_id)
        return vehicle

    def is_active(self, vehicle_id: str) -> bool:
        with self._lock:
            return vehicle_id in self._active

    def active_ids(self) -> frozenset[str]:
        with self._lock:
            return frozenset(self._active)

    def set_position(self, vehicle_id: str, location: GeoPoint, heading: float) -> bool:
        """Move a vehicle. Returns False (and does nothing) if it no longer exists."""

        with self._lock:
            current = self._vehicles.get(vehicle_id)
            if current is None:
                logger.debug("set_position ignored for missing vehicle %s", vehicle_id)
                return False
            self._vehicles[vehicle_id] = replace(
                current, location=location, heading=normalize_heading_deg(heading)
            )
            return True

    def activate(
        self,
        vehicle_id: str,
        *,
        route_id: str | None = None,
        driver_id: str | None = None,
    ) -> Vehicle:
        with self._lock:
            current = self._vehicles.get(vehicle_id)
            if current is None:
                raise VehicleNotFound(vehicle_id)
            updated = replace(
                current,
                status=VehicleStatus.ACTIVE,
                route_id=route_id,
                driver_id=driver_id,
            )
            self._vehicles[vehicle_id] = updated
            self._active.add(vehicle_id)
            return updated

    def deactivate(self, vehicle_id: str) -> Vehicle:
        with self._lock:
            current = self._vehicles.get(vehicle_id)
            if current is None:
                raise VehicleNotFound(vehicle_id)
            updated = replace(
                current, status=VehicleStatus.IDLE, route_id=None, driver_id=None
            )
            self._vehicles[vehicle_id] = updated
            self._active.discard(vehicle_id)
            return updated

    def snapshot(self) -> FleetSnapshot:
        with self._lock:
            self._sequence += 1
            return FleetSnapshot(
                vehicles=tuple(self._vehicles.values()),
                sequence=self._sequence,
                taken_at=self.clock(),
            )
