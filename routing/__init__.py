"""
routing: Route acquisition
===========================

Turns a start / end coordinate pair into the ordered point list and
total distance the simulation engine consumes.

Modules
-------
service
    :class:`RouteService` interface, :class:`RouteResult`,
    :class:`RoutingError`, :class:`StaticRouteService`.
osrm
    :class:`OsrmRouteService` HTTP client (``requests``).
"""

from .service import RouteResult, RouteService, RoutingError, StaticRouteService
from .osrm import OsrmRouteService

__all__ = [
    "RouteResult",
    "RouteService",
    "RoutingError",
    "StaticRouteService",
    "OsrmRouteService",
]
