from __future__ import annotations

from datetime import datetime, timezone

import pytest

from src.app.services.notification_bus import NotificationBus
from src.domain.models import FleetSnapshot

pytestmark = pytest.mark.unit


def _snapshot(seq: int) -> FleetSnapshot:
    return FleetSnapshot(
        vehicles=(), sequence=seq, taken_at=datetime(2026, 1, 8, tzinfo=timezone.utc)
    )


def test_publish_delivers_same_instance_in_registration_order() -> None:
    bus = NotificationBus()
    calls: list[tuple[str, FleetSnapshot]] = []

    bus.subscribe(lambda s: calls.append(("first", s)))
    bus.subscribe(lambda s: calls.append(("second", s)))

    snap = _snapshot(1)
    assert bus.publish(snap) == 2

    assert [name for name, _ in calls] == ["first", "second"]
    assert all(s is snap for _, s in calls)


def test_failing_observer_does_not_block_the_rest(caplog) -> None:
    bus = NotificationBus()
    received: list[int] = []

    def broken(_: FleetSnapshot) -> None:
        raise RuntimeError("boom")

    bus.subscribe(broken)
    bus.subscribe(lambda s: received.append(s.sequence))

    with caplog.at_level("ERROR"):
        delivered = bus.publish(_snapshot(7))

    assert delivered == 1
    assert received == [7]
    assert "failed on snapshot 7" in caplog.text


def test_unsubscribe_is_idempotent_and_stops_delivery() -> None:
    bus = NotificationBus()
    received: list[int] = []

    unsubscribe = bus.subscribe(lambda s: received.append(s.sequence))
    other = bus.subscribe(lambda s: None)
    bus.publish(_snapshot(1))

    unsubscribe()
    unsubscribe()
    bus.publish(_snapshot(2))

    assert received == [1]
    assert bus.observer_count == 1
    other()
    assert bus.observer_count == 0


def test_observer_registered_later_misses_earlier_snapshots() -> None:
    bus = NotificationBus()
    bus.publish(_snapshot(1))

    received: list[int] = []
    bus.subscribe(lambda s: received.append(s.sequence))
    bus.publish(_snapshot(2))

    assert received == [2]


def test_same_callable_can_subscribe_twice_independently() -> None:
    bus = NotificationBus()
    received: list[FleetSnapshot] = []

    first = bus.subscribe(received.append)
    bus.subscribe(received.append)
    first()

    bus.publish(_snapshot(3))
    assert len(received) == 1
