from __future__ import annotations

import pytest

from src.domain.models import GeoPoint, Route, Stop

pytestmark = pytest.mark.unit


def _stop(i: int, lat: float, lon: float) -> Stop:
    return Stop(id=f"S{i}", name=f"Stop {i}", location=GeoPoint(lat=lat, lon=lon))


def test_route_needs_two_stops_to_be_simulatable() -> None:
    assert not Route(id="R0", name="empty").is_simulatable
    assert not Route(id="R1", name="one", stops=(_stop(0, 0.0, 0.0),)).is_simulatable
    assert Route(
        id="R2", name="two", stops=(_stop(0, 0.0, 0.0), _stop(1, 0.0, 1.0))
    ).is_simulatable


def test_segments_follow_stop_order() -> None:
    stops = (_stop(0, 0.0, 0.0), _stop(1, 0.0, 1.0), _stop(2, 1.0, 1.0))
    route = Route(id="R", name="R", stops=stops)

    assert route.segments == ((stops[0], stops[1]), (stops[1], stops[2]))


def test_total_distance_sums_segments() -> None:
    stops = (_stop(0, 0.0, 0.0), _stop(1, 1.0, 0.0), _stop(2, 2.0, 0.0))
    route = Route(id="R", name="R", stops=stops)

    # Two degrees of latitude, roughly 222km.
    assert 220_000.0 < route.total_distance_m < 225_000.0
    assert Route(id="X", name="X").total_distance_m == 0.0
