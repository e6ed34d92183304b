#!/usr/bin/env python3
"""
sim/geo.py
==========
Low-level geographic helpers used by :mod:`sim.route` and :mod:`sim.engine`.

Keeping these in a separate module avoids circular imports and makes unit
testing straightforward.
"""

from __future__ import annotations

import math
from typing import Tuple

Coordinate = Tuple[float, float]
"""``(latitude, longitude)`` in decimal degrees."""

EARTH_RADIUS_M = 6_371_000.0


def distance_m(a: Coordinate, b: Coordinate) -> float:
    """Great-circle distance between two coordinates (haversine).

    Parameters
    ----------
    a, b : Coordinate
        ``(lat, lon)`` pairs in degrees.

    Returns
    -------
    float
        Distance in metres.  Identical points give exactly ``0.0``.
    """
    phi1 = math.radians(a[0])
    phi2 = math.radians(b[0])
    d_phi = math.radians(b[0] - a[0])
    d_lambda = math.radians(b[1] - a[1])

    h = (math.sin(d_phi / 2) * math.sin(d_phi / 2)
         + math.cos(phi1) * math.cos(phi2)
         * math.sin(d_lambda / 2) * math.sin(d_lambda / 2))
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
    return EARTH_RADIUS_M * c


def interpolate(a: Coordinate, b: Coordinate, frac: float) -> Coordinate:
    """Planar blend of *a* towards *b*; latitude and longitude independently."""
    return (
        a[0] + (b[0] - a[0]) * frac,
        a[1] + (b[1] - a[1]) * frac,
    )
