"""
ui/types.py
===========
Lightweight data containers used across every UI module.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence, Tuple

ColorRGB = Tuple[int, int, int]
ColorRGBA = Tuple[int, int, int, int]
LatLon = Tuple[float, float]

_EARTH_RADIUS_M = 6_371_000.0


@dataclass
class MapCamera:
    """Viewport mapping ``(lat, lon)`` to screen pixels.

    Uses a local equirectangular projection around the camera centre,
    which is plenty for a city-sized map.
    """
    screen_w: int
    screen_h: int
    center_lat: float = 0.0
    center_lon: float = 0.0
    meters_per_px: float = 20.0
    offset_x: int = 0
    offset_y: int = 0

    def latlon_to_screen(self, lat: float, lon: float) -> Tuple[float, float]:
        east_m = (math.radians(lon - self.center_lon) * _EARTH_RADIUS_M
                  * math.cos(math.radians(self.center_lat)))
        north_m = math.radians(lat - self.center_lat) * _EARTH_RADIUS_M
        sx = self.offset_x + self.screen_w / 2 + east_m / self.meters_per_px
        sy = self.offset_y + self.screen_h / 2 - north_m / self.meters_per_px
        return sx, sy

    def screen_to_latlon(self, sx: float, sy: float) -> LatLon:
        east_m = (sx - self.offset_x - self.screen_w / 2) * self.meters_per_px
        north_m = -(sy - self.offset_y - self.screen_h / 2) * self.meters_per_px
        lat = self.center_lat + math.degrees(north_m / _EARTH_RADIUS_M)
        lon = self.center_lon + math.degrees(
            east_m / (_EARTH_RADIUS_M * math.cos(math.radians(self.center_lat)))
        )
        return lat, lon

    def meters_to_px(self, meters: float) -> float:
        return meters / self.meters_per_px

    def pan_to(self, lat: float, lon: float, smoothing: float = 1.0) -> None:
        """Move the centre towards ``(lat, lon)``; ``smoothing=1`` jumps."""
        t = max(0.0, min(1.0, smoothing))
        self.center_lat += (lat - self.center_lat) * t
        self.center_lon += (lon - self.center_lon) * t

    def fit_bounds(self, points: Sequence[LatLon], padding_px: int = 50) -> None:
        """Centre on *points* and zoom so all of them fit inside the padding."""
        if not points:
            return
        lats = [p[0] for p in points]
        lons = [p[1] for p in points]
        self.center_lat = (min(lats) + max(lats)) / 2
        self.center_lon = (min(lons) + max(lons)) / 2
        height_m = math.radians(max(lats) - min(lats)) * _EARTH_RADIUS_M
        width_m = (math.radians(max(lons) - min(lons)) * _EARTH_RADIUS_M
                   * math.cos(math.radians(self.center_lat)))
        usable_w = max(1, self.screen_w - 2 * padding_px)
        usable_h = max(1, self.screen_h - 2 * padding_px)
        self.meters_per_px = max(1.0, width_m / usable_w, height_m / usable_h)


@dataclass
class ButtonRect:
    """Stores a button's screen rect and label for click detection."""
    action: str
    label: str
    x: int
    y: int
    w: int
    h: int
    enabled: bool = True

    def contains(self, mx: int, my: int) -> bool:
        return self.x <= mx <= self.x + self.w and self.y <= my <= self.y + self.h


@dataclass
class SliderRect:
    """Horizontal slider track mapping pixels to a value range."""
    x: int
    y: int
    w: int
    h: int
    min_value: float
    max_value: float
    step: float = 1.0

    def contains(self, mx: int, my: int) -> bool:
        return self.x - 6 <= mx <= self.x + self.w + 6 and self.y - 8 <= my <= self.y + self.h + 8

    def value_at(self, mx: int) -> float:
        t = max(0.0, min(1.0, (mx - self.x) / float(self.w)))
        raw = self.min_value + t * (self.max_value - self.min_value)
        if self.step > 0:
            raw = round(raw / self.step) * self.step
        return max(self.min_value, min(self.max_value, raw))

    def knob_x(self, value: float) -> int:
        span = self.max_value - self.min_value
        t = 0.0 if span <= 0 else (value - self.min_value) / span
        return int(self.x + max(0.0, min(1.0, t)) * self.w)
