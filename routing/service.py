"""
Route service interface, result container, and an offline implementation.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

Coordinate = Tuple[float, float]


class RoutingError(RuntimeError):
    """A route could not be obtained; the planning attempt is over."""


@dataclass(frozen=True)
class RouteResult:
    """
    A standardized representation of a planned route.

    Attributes:
        coordinates (list): Ordered ``(lat, lon)`` pairs.
        distance_km (float): Total driving distance reported by the service.
        duration_min (float): Travel time estimated by the service.
    """
    coordinates: List[Coordinate]
    distance_km: float
    duration_min: float


class RouteService(ABC):
    """
    Abstract Base Class for route providers.
    Every provider returns our standard :class:`RouteResult` or raises :class:`RoutingError`.
    """

    @abstractmethod
    def fetch_route(self, start: Coordinate, end: Coordinate) -> RouteResult:
        """Plan a driving route from *start* to *end* (both ``(lat, lon)``)."""


class StaticRouteService(RouteService):
    """Returns a fixed route; used by the offline demo and the tests."""

    def __init__(
        self,
        coordinates: Sequence[Coordinate],
        distance_km: float,
        duration_min: Optional[float] = None,
    ):
        if not coordinates:
            raise ValueError("a static route needs at least one coordinate")
        self._coordinates = [(float(lat), float(lon)) for lat, lon in coordinates]
        self._distance_km = float(distance_km)
        self._duration_min = float(duration_min) if duration_min is not None else 0.0
        self.calls = 0

    def fetch_route(self, start: Coordinate, end: Coordinate) -> RouteResult:
        self.calls += 1
        return RouteResult(
            coordinates=list(self._coordinates),
            distance_km=self._distance_km,
            duration_min=self._duration_min,
        )
