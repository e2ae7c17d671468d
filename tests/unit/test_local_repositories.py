from __future__ import annotations

import json
from pathlib import Path

import pytest

from src.adapters.persistence import LocalRouteRepository, LocalVehicleRegistry
from src.domain.models import GeoPoint, VehicleStatus

pytestmark = pytest.mark.unit


def _write(path: Path, name: str, payload: dict) -> None:
    (path / name).write_text(json.dumps(payload), encoding="utf-8")


def test_route_repository_keeps_stop_order_and_metadata(tmp_path: Path) -> None:
    _write(
        tmp_path,
        "routes.json",
        {
            "routes": [
                {
                    "id": "R1",
                    "name": "Soweto Express",
                    "from": "Soweto",
                    "to": "CBD",
                    "color": "#2563eb",
                    "estimated_duration_min": 45,
                    "stops": [
                        {"id": "b", "name": "Bravo", "lat": 1.0, "lon": 1.0},
                        {"id": "a", "name": "Alpha", "lat": 0.0, "lon": 0.0},
                        {"lat": 2.0, "lon": 2.0},
                    ],
                }
            ]
        },
    )

    repo = LocalRouteRepository(base_path=tmp_path)
    route = repo.get_route("R1")

    assert route is not None
    assert [s.id for s in route.stops] == ["b", "a", "R1-2"]
    assert route.stops[2].name == "R1-2"
    assert route.stops[0].location == GeoPoint(lat=1.0, lon=1.0)
    assert (route.origin_name, route.destination_name) == ("Soweto", "CBD")
    assert route.estimated_duration_min == 45
    assert repo.get_route("missing") is None


def test_route_repository_loads_once(tmp_path: Path) -> None:
    _write(tmp_path, "routes.json", {"routes": [{"id": "R1", "stops": []}]})
    repo = LocalRouteRepository(base_path=tmp_path)
    assert [r.id for r in repo.list_routes()] == ["R1"]

    _write(tmp_path, "routes.json", {"routes": []})
    assert [r.id for r in repo.list_routes()] == ["R1"]


def test_route_repository_uses_env_path(tmp_path: Path, monkeypatch) -> None:
    _write(tmp_path, "routes.json", {"routes": [{"id": "Z", "name": "Zulu"}]})
    monkeypatch.setenv("FLEET_DATA_PATH", str(tmp_path))

    route = LocalRouteRepository().get_route("Z")

    assert route is not None and route.name == "Zulu"
    assert not route.is_simulatable


def test_route_without_id_is_rejected(tmp_path: Path) -> None:
    _write(tmp_path, "routes.json", {"routes": [{"name": "anonymous"}]})

    with pytest.raises(ValueError):
        LocalRouteRepository(base_path=tmp_path).list_routes()


def test_vehicle_registry_parses_fleet(tmp_path: Path) -> None:
    _write(
        tmp_path,
        "vehicles.json",
        {
            "vehicles": [
                {
                    "id": "b1",
                    "number": "GP 101",
                    "name": "Bus 101",
                    "capacity": 60,
                    "lat": -26.2,
                    "lon": 28.0,
                    "heading": 90,
                },
                {"id": "b2", "lat": 0, "lon": 0, "status": "ACTIVE"},
            ]
        },
    )

    vehicles = LocalVehicleRegistry(base_path=tmp_path).load_vehicles()

    assert [v.id for v in vehicles] == ["b1", "b2"]
    b1, b2 = vehicles
    assert b1.location == GeoPoint(lat=-26.2, lon=28.0)
    assert b1.heading == 90.0
    assert b1.status is VehicleStatus.IDLE
    assert (b1.number, b1.name, b1.capacity) == ("GP 101", "Bus 101", 60)
    assert b2.status is VehicleStatus.ACTIVE
    assert b2.capacity is None


def test_vehicle_registry_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        LocalVehicleRegistry(base_path=tmp_path).load_vehicles()


def test_bundled_seed_data_is_consistent() -> None:
    base = Path(__file__).resolve().parents[2] / "data" / "fleet"

    routes = LocalRouteRepository(base_path=base).list_routes()
    vehicles = LocalVehicleRegistry(base_path=base).load_vehicles()

    assert routes and all(r.is_simulatable for r in routes)
    assert {v.id for v in vehicles} >= {"b1"}
    assert all(v.status is VehicleStatus.IDLE for v in vehicles)
