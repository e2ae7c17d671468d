from __future__ import annotations

from abc import ABC, abstractmethod

from src.domain.models import Route


class IRouteRepository(ABC):
    """Port for looking up route definitions (ordered stop lists)."""

    @abstractmethod
    def get_route(self, route_id: str) -> Route | None:
        """Return the route, or None when the id does not resolve."""

    @abstractmethod
    def list_routes(self) -> tuple[Route, ...]:
        raise NotImplementedError
