#!/usr/bin/env python3
"""
sim/route.py
============
Immutable route description consumed by :class:`~sim.engine.SimulationEngine`.

A :class:`Route` is built once per route assignment.  The school-zone
centre is derived from the points at construction time and is never
changed on its own: a new route always means a new centre.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterable, Tuple

from sim.geo import Coordinate, interpolate


@dataclass(frozen=True)
class Route:
    """Ordered coordinates plus the externally supplied total distance.

    Attributes
    ----------
    points : tuple of Coordinate
        Path to follow, at least one point.
    total_distance_km : float
        Trusted as given; never recomputed from the segments.
    zone_center : Coordinate
        ``points[len(points) // 2]``.
    """

    points: Tuple[Coordinate, ...]
    total_distance_km: float
    zone_center: Coordinate = field(init=False)

    def __post_init__(self) -> None:
        if not self.points:
            raise ValueError("a route needs at least one point")
        object.__setattr__(self, "zone_center", self.points[len(self.points) // 2])

    @classmethod
    def from_points(cls, points: Iterable[Iterable[float]], total_distance_km: float) -> "Route":
        """Build a route from any iterable of ``(lat, lon)`` pairs."""
        coords = tuple((float(p[0]), float(p[1])) for p in map(tuple, points))
        return cls(points=coords, total_distance_km=float(total_distance_km))

    @property
    def last_index(self) -> int:
        return len(self.points) - 1

    def __len__(self) -> int:
        return len(self.points)

    def position_at(self, index: float) -> Coordinate:
        """Interpolated coordinate at a real-valued cursor into :attr:`points`."""
        i = int(math.floor(index))
        i = min(max(i, 0), self.last_index)
        j = min(i + 1, self.last_index)
        frac = index - i
        return interpolate(self.points[i], self.points[j], frac)
