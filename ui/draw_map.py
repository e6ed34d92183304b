"""
ui/draw_map.py
==============
Renders the map layer: neutral grid background, the planned route
polyline, the translucent school-zone circle, start / end markers and
the vehicle marker.

All methods are *pure renderers*: they read bridge data and draw to a
surface through the view's :class:`~ui.types.MapCamera`.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence, Tuple

import pygame

from .helpers import draw_alpha_circle, draw_alpha_rect, render_text


class MapRenderer:
    """Mixin that draws everything living in map coordinates."""

    def draw_background(self, surface: pygame.Surface) -> None:
        cam = self.camera
        area = pygame.Rect(cam.offset_x, cam.offset_y, cam.screen_w, cam.screen_h)
        pygame.draw.rect(surface, self.BG_COLOR, area)
        spacing = self.GRID_SPACING_PX
        for x in range(area.left, area.right, spacing):
            pygame.draw.line(surface, self.GRID_COLOR, (x, area.top), (x, area.bottom))
        for y in range(area.top, area.bottom, spacing):
            pygame.draw.line(surface, self.GRID_COLOR, (area.left, y), (area.right, y))

    def draw_route(self, surface: pygame.Surface, points: Sequence[Tuple[float, float]]) -> None:
        if len(points) < 2:
            return
        screen_pts = [self._to_int_point(self.camera.latlon_to_screen(lat, lon))
                      for lat, lon in points]
        overlay = pygame.Surface(surface.get_size(), pygame.SRCALPHA)
        pygame.draw.lines(
            overlay,
            (*self.ROUTE_COLOR, self.ROUTE_ALPHA),
            False,
            screen_pts,
            self.ROUTE_WIDTH_PX,
        )
        surface.blit(overlay, (0, 0))

    def draw_zone(self, surface: pygame.Surface, zone: Optional[Dict[str, Any]]) -> None:
        if not zone:
            return
        lat, lon = zone["center"]
        centre = self._to_int_point(self.camera.latlon_to_screen(lat, lon))
        radius = int(self.camera.meters_to_px(zone["radius_m"]))
        draw_alpha_circle(surface, (*self.ZONE_COLOR, self.ZONE_FILL_ALPHA), centre, radius)
        if radius >= 1:
            pygame.draw.circle(surface, self.ZONE_COLOR, centre, radius, width=3)

        if self.font_tiny is None:
            return
        label = f"School Zone - {self.zone_speed_label} {self.SPEED_UNIT}"
        img = self.font_tiny.render(label, True, (40, 40, 60))
        box = img.get_rect(center=centre).inflate(12, 6)
        draw_alpha_rect(surface, (255, 255, 255, 210), box, border_radius=4)
        surface.blit(img, img.get_rect(center=centre))

    def draw_markers(self, surface: pygame.Surface, markers: List[Dict[str, Any]]) -> None:
        for marker in markers:
            lat, lon = marker["position"]
            pos = self._to_int_point(self.camera.latlon_to_screen(lat, lon))
            color = self.START_COLOR if marker["kind"] == "start" else self.END_COLOR
            pygame.draw.circle(surface, color, pos, self.MARKER_RADIUS_PX)
            pygame.draw.circle(surface, (255, 255, 255), pos, self.MARKER_RADIUS_PX, width=3)
            if self.font_tiny is not None:
                render_text(
                    surface,
                    self.font_tiny,
                    marker["label"],
                    (pos[0], pos[1] - self.MARKER_RADIUS_PX - 4),
                    color=(40, 40, 40),
                    anchor="midbottom",
                )

    def draw_vehicle(self, surface: pygame.Surface, position: Optional[Tuple[float, float]]) -> None:
        if position is None:
            return
        pos = self._to_int_point(self.camera.latlon_to_screen(*position))
        r = self.VEHICLE_RADIUS_PX
        draw_alpha_circle(surface, (0, 0, 0, 60), (pos[0] + 2, pos[1] + 2), r)
        pygame.draw.circle(surface, self.VEHICLE_COLOR, pos, r)
        pygame.draw.circle(surface, (255, 255, 255), pos, r, width=2)
        pygame.draw.circle(surface, (60, 60, 60), pos, 3)
