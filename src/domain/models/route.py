from __future__ import annotations

from dataclasses import dataclass, field

from .geo import GeoPoint


@dataclass(frozen=True, slots=True)
class Stop:
    id: str
    name: str
    location: GeoPoint


@dataclass(frozen=True, slots=True)
class Route:
    """An ordered stop sequence; order is the direction of travel."""

    id: str
    name: str
    stops: tuple[Stop, ...] = field(default_factory=tuple)
    origin_name: str | None = None
    destination_name: str | None = None
    color: str | None = None  # hex with '#', as shown in the admin UI
    estimated_duration_min: int | None = None

    @property
    def is_simulatable(self) -> bool:
        return len(self.stops) >= 2

    @property
    def segments(self) -> tuple[tuple[Stop, Stop], ...]:
        return tuple(zip(self.stops, self.stops[1:]))

    @property
    def total_distance_m(self) -> float:
        from src.domain.algorithms.geo_utils import haversine_distance_m

        return float(
            sum(haversine_distance_m(a.location, b.location) for a, b in self.segments)
        )
