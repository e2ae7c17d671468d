from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class GeoPoint:
    """WGS84 coordinate in degrees.

    Not range-checked here; the HTTP schemas validate user input.
    """

    lat: float
    lon: float
