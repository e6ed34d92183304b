#!/usr/bin/env python3
"""
Quick demo: runs the Pygame view with a canned route so you can
see the UI without reaching the routing service.

Usage:
    python3 demo.py
"""

import logging

import config
from logging_setup import setup_logging
from routing.service import StaticRouteService
from sim.geo import distance_m, interpolate
from sim.sim_bridge import SimBridge

# Intermediate waypoints roughly following the HITEC City → Charminar drive.
_WAYPOINTS = [
    config.START_POINT,
    (17.4401, 78.3911),
    (17.4265, 78.4102),
    (17.4123, 78.4349),
    (17.4016, 78.4562),
    (17.3921, 78.4730),
    config.END_POINT,
]
_POINTS_PER_LEG = 40


def demo_route():
    """Densify the waypoints into a polyline; returns ``(points, distance_km)``."""
    points = [_WAYPOINTS[0]]
    for a, b in zip(_WAYPOINTS, _WAYPOINTS[1:]):
        for k in range(1, _POINTS_PER_LEG + 1):
            points.append(interpolate(a, b, k / _POINTS_PER_LEG))
    total_m = sum(distance_m(a, b) for a, b in zip(points, points[1:]))
    return points, total_m / 1000.0


if __name__ == "__main__":
    from ui import run_pygame_view

    setup_logging(logging.INFO)
    points, distance_km = demo_route()
    bridge = SimBridge(route_service=StaticRouteService(points, distance_km))

    print("Starting demo with a canned route...")
    print("Controls: P=plan  S=start  SPACE=pause  R=reset  UP/DOWN=speed  F3=debug  F12=screenshot")
    run_pygame_view(bridge)
