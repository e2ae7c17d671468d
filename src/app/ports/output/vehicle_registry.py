from __future__ import annotations

from abc import ABC, abstractmethod

from src.domain.models import Vehicle


class IVehicleRegistry(ABC):
    """Port for the initial vehicle list, loaded once at process start."""

    @abstractmethod
    def load_vehicles(self) -> tuple[Vehicle, ...]:
        raise NotImplementedError
