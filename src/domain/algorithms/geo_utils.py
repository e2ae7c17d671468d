from __future__ import annotations

import math

from src.domain.models import GeoPoint


def haversine_distance_m(a: GeoPoint, b: GeoPoint) -> float:
    """Great-circle distance in meters."""

    r = 6371000.0
    lat1 = math.radians(a.lat)
    lon1 = math.radians(a.lon)
    lat2 = math.radians(b.lat)
    lon2 = math.radians(b.lon)

    dlat = lat2 - lat1
    dlon = lon2 - lon1

    s = (
        math.sin(dlat / 2.0) ** 2
        + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2.0) ** 2
    )
    return 2.0 * r * math.asin(math.sqrt(s))


def normalize_heading_deg(value: float) -> float:
    """Fold any angle into [0, 360)."""

    out = math.fmod(value, 360.0)
    if out < 0.0:
        out += 360.0
    # fmod of a tiny negative number can round up to exactly 360.0.
    return 0.0 if out >= 360.0 else out


def initial_bearing_deg(a: GeoPoint, b: GeoPoint) -> float:
    """Initial great-circle bearing from `a` towards `b`.

    0 = north, 90 = east. Identical points yield 0.0.
    """

    if a == b:
        return 0.0

    lat1 = math.radians(a.lat)
    lat2 = math.radians(b.lat)
    dlon = math.radians(b.lon - a.lon)

    y = math.sin(dlon) * math.cos(lat2)
    x = math.cos(lat1) * math.sin(lat2) - math.sin(lat1) * math.cos(lat2) * math.cos(
        dlon
    )
    return normalize_heading_deg(math.degrees(math.atan2(y, x)))


def interpolate(a: GeoPoint, b: GeoPoint, t: float) -> GeoPoint:
    """Planar linear interpolation between two points.

    Latitude and longitude are blended independently, which is not geodesic
    but is close enough over the few kilometres of a route segment.
    The end points are returned as-is so t=0 and t=1 are exact.
    """

    if t <= 0.0:
        return a
    if t >= 1.0:
        return b
    return GeoPoint(
        lat=a.lat + (b.lat - a.lat) * t,
        lon=a.lon + (b.lon - a.lon) * t,
    )
