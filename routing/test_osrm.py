#!/usr/bin/env python3
"""
Tests for the OSRM adapter; the HTTP layer is mocked.
"""

import unittest
from unittest.mock import MagicMock, patch

import requests

from routing.osrm import OsrmRouteService
from routing.service import RoutingError, StaticRouteService

_START = (17.4474, 78.3762)
_END = (17.3850, 78.4867)


def _response(payload):
    response = MagicMock()
    response.raise_for_status.return_value = None
    response.json.return_value = payload
    return response


class OsrmRouteServiceTests(unittest.TestCase):
    def setUp(self):
        self.service = OsrmRouteService(base_url="https://osrm.test/", timeout_s=3)

    def test_route_url_uses_lon_lat_order(self):
        self.assertEqual(
            self.service.route_url(_START, _END),
            "https://osrm.test/route/v1/driving/78.3762,17.4474;78.4867,17.385",
        )

    @patch("routing.osrm.requests.get")
    def test_successful_route_is_normalized(self, mock_get):
        mock_get.return_value = _response({
            "code": "Ok",
            "routes": [{
                "distance": 15234.0,
                "duration": 1800.0,
                "geometry": {"coordinates": [[78.3762, 17.4474], [78.42, 17.41], [78.4867, 17.385]]},
            }],
        })

        result = self.service.fetch_route(_START, _END)

        self.assertEqual(result.coordinates, [(17.4474, 78.3762), (17.41, 78.42), (17.385, 78.4867)])
        self.assertAlmostEqual(result.distance_km, 15.234)
        self.assertAlmostEqual(result.duration_min, 30.0)
        args, kwargs = mock_get.call_args
        self.assertEqual(args[0], self.service.route_url(_START, _END))
        self.assertEqual(kwargs["params"], {"overview": "full", "geometries": "geojson"})
        self.assertEqual(kwargs["timeout"], 3)

    @patch("routing.osrm.requests.get")
    def test_non_ok_code_raises(self, mock_get):
        mock_get.return_value = _response({"code": "NoRoute", "routes": []})
        with self.assertRaisesRegex(RoutingError, "NoRoute"):
            self.service.fetch_route(_START, _END)

    @patch("routing.osrm.requests.get")
    def test_network_error_raises(self, mock_get):
        mock_get.side_effect = requests.exceptions.ConnectionError("offline")
        with self.assertRaises(RoutingError) as ctx:
            self.service.fetch_route(_START, _END)
        self.assertIsInstance(ctx.exception.__cause__, requests.exceptions.ConnectionError)

    @patch("routing.osrm.requests.get")
    def test_http_error_raises(self, mock_get):
        response = _response({})
        response.raise_for_status.side_effect = requests.exceptions.HTTPError("503")
        mock_get.return_value = response
        with self.assertRaises(RoutingError):
            self.service.fetch_route(_START, _END)

    @patch("routing.osrm.requests.get")
    def test_malformed_body_raises(self, mock_get):
        mock_get.return_value = _response({"code": "Ok", "routes": [{"distance": 1.0}]})
        with self.assertRaisesRegex(RoutingError, "malformed"):
            self.service.fetch_route(_START, _END)

    @patch("routing.osrm.requests.get")
    def test_empty_geometry_raises(self, mock_get):
        mock_get.return_value = _response({
            "code": "Ok",
            "routes": [{"distance": 0.0, "duration": 0.0, "geometry": {"coordinates": []}}],
        })
        with self.assertRaises(RoutingError):
            self.service.fetch_route(_START, _END)

    def test_explicit_session_is_used(self):
        session = MagicMock()
        session.get.return_value = _response({"code": "Ok", "routes": []})
        service = OsrmRouteService(base_url="https://osrm.test", session=session)
        with self.assertRaises(RoutingError):
            service.fetch_route(_START, _END)
        session.get.assert_called_once()


class StaticRouteServiceTests(unittest.TestCase):
    def test_returns_copy_of_fixed_route(self):
        service = StaticRouteService([(1, 2), (3, 4)], 5, duration_min=7)
        first = service.fetch_route(_START, _END)
        first.coordinates.append((9.0, 9.0))
        second = service.fetch_route(_START, _END)

        self.assertEqual(second.coordinates, [(1.0, 2.0), (3.0, 4.0)])
        self.assertEqual(second.distance_km, 5.0)
        self.assertEqual(second.duration_min, 7.0)
        self.assertEqual(service.calls, 2)

    def test_requires_a_coordinate(self):
        with self.assertRaises(ValueError):
            StaticRouteService([], 1.0)


if __name__ == "__main__":
    unittest.main()
