"""
Adapter for the public OSRM routing HTTP API.

Only the ``route`` endpoint of the driving profile is used; the full
route geometry is requested as GeoJSON so it can be drawn and followed
point by point.
"""

import logging
from typing import Optional

import requests

import config
from .service import Coordinate, RouteResult, RouteService, RoutingError

log = logging.getLogger(__name__)


class OsrmRouteService(RouteService):
    """The adapter for the OSRM ``/route/v1/driving`` endpoint."""
    ROUTE_PATH = "/route/v1/driving/{start_lon},{start_lat};{end_lon},{end_lat}"

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout_s: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = (base_url or config.OSRM_BASE_URL).rstrip("/")
        self.timeout_s = timeout_s if timeout_s is not None else config.ROUTE_TIMEOUT_S
        self._http = session or requests

    def route_url(self, start: Coordinate, end: Coordinate) -> str:
        # OSRM wants lon,lat order
        path = self.ROUTE_PATH.format(
            start_lon=start[1], start_lat=start[0],
            end_lon=end[1], end_lat=end[0],
        )
        return self.base_url + path

    def fetch_route(self, start: Coordinate, end: Coordinate) -> RouteResult:
        url = self.route_url(start, end)
        params = {"overview": "full", "geometries": "geojson"}
        log.info("requesting route %s", url)
        try:
            response = self._http.get(url, params=params, timeout=self.timeout_s)
            response.raise_for_status()
            data = response.json()
        except requests.exceptions.RequestException as e:
            log.error("network error while requesting route: %s", e)
            raise RoutingError(f"routing request failed: {e}") from e
        except ValueError as e:
            log.error("routing response is not JSON: %s", e)
            raise RoutingError("routing response is not valid JSON") from e

        if not isinstance(data, dict) or data.get("code") != "Ok":
            code = data.get("code") if isinstance(data, dict) else None
            log.warning("route not found code=%s", code)
            raise RoutingError(f"Route not found (code={code})")

        try:
            best = data["routes"][0]
            # *** NORMALIZATION: GeoJSON [lon, lat] -> our (lat, lon) ***
            coordinates = [
                (float(c[1]), float(c[0])) for c in best["geometry"]["coordinates"]
            ]
            distance_km = float(best["distance"]) / 1000.0
            duration_min = float(best["duration"]) / 60.0
        except (KeyError, IndexError, TypeError, ValueError) as e:
            log.error("could not parse routing response: %s", e)
            raise RoutingError("malformed routing response") from e

        if not coordinates:
            raise RoutingError("routing response contains an empty geometry")

        log.info(
            "route received points=%d distance=%.2f km duration=%.1f min",
            len(coordinates), distance_km, duration_min,
        )
        return RouteResult(
            coordinates=coordinates,
            distance_km=distance_km,
            duration_min=duration_min,
        )
