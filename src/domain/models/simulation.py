from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class SimulationOutcome(str, Enum):
    """Result code of a simulator command.

    Commands report problems through this instead of raising, so a bad id from
    the UI never interrupts the caller.
    """

    STARTED = "started"
    RESTARTED = "restarted"
    STOPPED = "stopped"
    NOT_RUNNING = "not_running"
    VEHICLE_NOT_FOUND = "vehicle_not_found"
    ROUTE_NOT_FOUND = "route_not_found"
    ROUTE_TOO_SHORT = "route_too_short"
    SCHEDULER_UNAVAILABLE = "scheduler_unavailable"

    @property
    def ok(self) -> bool:
        return self in {
            SimulationOutcome.STARTED,
            SimulationOutcome.RESTARTED,
            SimulationOutcome.STOPPED,
            SimulationOutcome.NOT_RUNNING,
        }


@dataclass(frozen=True, slots=True)
class SimulationProgress:
    vehicle_id: str
    route_id: str
    segment_index: int
    step: int
    steps_per_segment: int
    epoch: int

    @property
    def progress(self) -> float:
        return self.step / self.steps_per_segment
