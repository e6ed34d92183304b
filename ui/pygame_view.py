#!/usr/bin/env python3
"""
Main view class: combines all UI mixins into one runnable Pygame window.

Module layout
─────────────
    ui/
    ├── types.py           – ColorRGB, MapCamera, ButtonRect, SliderRect
    ├── constants.py       – ViewConstants mixin (all class-level constants)
    ├── helpers.py         – ViewHelpers mixin  (static utilities)
    ├── draw_map.py        – MapRenderer mixin  (grid, route, zone, markers, vehicle)
    ├── hud.py             – HudRenderer mixin  (controls, status, event log, splash)
    └── pygame_view.py     – PygameDriveView (this file – main loop)

The view is also the frame pump: every display frame it asks the bridge
to run the engine ticks requested on the previous frame.
"""

from __future__ import annotations

import logging
import os
from datetime import datetime
from typing import Any, Optional

import pygame

import config
from .constants import ViewConstants
from .draw_map import MapRenderer
from .helpers import ViewHelpers
from .hud import HudRenderer
from .types import MapCamera

log = logging.getLogger("ui")


class PygameDriveView(
    ViewConstants,
    ViewHelpers,
    MapRenderer,
    HudRenderer,
):
    """School-zone drive visualiser powered by Pygame.

    Inherits drawing logic from focused mixin modules so each file
    stays small and single-purpose.
    """

    def __init__(
        self,
        bridge: Any,
        width: int = config.WINDOW_WIDTH,
        height: int = config.WINDOW_HEIGHT,
        fps: int = config.TARGET_FPS,
    ):
        self.bridge = bridge
        self.width = width
        self.height = height
        self.fps = fps

        self.screen: Optional[pygame.Surface] = None
        self.clock: Optional[pygame.time.Clock] = None
        self.font_small: Optional[pygame.font.Font] = None
        self.font_tiny: Optional[pygame.font.Font] = None
        self.font_title: Optional[pygame.font.Font] = None

        self.camera = MapCamera(
            screen_w=width - self.SIDEBAR_WIDTH,
            screen_h=height,
            center_lat=config.MAP_CENTER[0],
            center_lon=config.MAP_CENTER[1],
            meters_per_px=config.MAP_METERS_PER_PIXEL,
        )
        self.min_speed = config.MIN_SPEED_KMH
        self.max_speed = config.MAX_SPEED_KMH
        self.zone_speed_label = f"{bridge.policy.zone_speed_kmh:g}"
        self.time_seconds = 0.0

        # UI state
        self.show_debug = False
        self.show_legend = True
        self.show_splash = True
        self.planning = False
        self.dragging_slider = False
        self.buttons = []
        self.slider = None
        self._alert_text = ""
        self._alert_until = 0.0
        self._screenshot_flash_until = 0.0
        self.layout_controls()

    # ------------------------------------------------------------------ #
    #  Resize                                                              #
    # ------------------------------------------------------------------ #
    def _handle_resize(self, new_w: int, new_h: int) -> None:
        self.width = max(self.SIDEBAR_WIDTH + 300, new_w)
        self.height = max(560, new_h)
        self.camera.screen_w = self.width - self.SIDEBAR_WIDTH
        self.camera.screen_h = self.height
        self.screen = pygame.display.set_mode(
            (self.width, self.height), pygame.RESIZABLE
        )
        self.layout_controls()

    # ------------------------------------------------------------------ #
    #  Screenshot                                                          #
    # ------------------------------------------------------------------ #
    def _take_screenshot(self) -> None:
        if self.screen is None:
            return
        os.makedirs(self.SCREENSHOT_DIR, exist_ok=True)
        stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        path = os.path.join(self.SCREENSHOT_DIR, f"drive_{stamp}.png")
        pygame.image.save(self.screen, path)
        log.info("screenshot saved to %s", path)
        self._screenshot_flash_until = self.time_seconds + 0.35

    # ------------------------------------------------------------------ #
    #  Commands                                                            #
    # ------------------------------------------------------------------ #
    def _plan_route(self) -> None:
        if not self.bridge.can_plan() or self.planning:
            return
        self.planning = True
        self.refresh_button_states()
        # Show the banner before the blocking HTTP request
        self._render()
        self._draw_banner(self.screen, "Planning...")
        pygame.display.flip()
        try:
            ok = self.bridge.plan_route()
        finally:
            self.planning = False
        if ok:
            self.camera.fit_bounds(self.bridge.get_route_points(), self.FIT_PADDING_PX)
        else:
            self._alert("Failed to plan route. Please try again.")

    def _start(self) -> None:
        if self.bridge.can_start():
            self.bridge.start()

    def _toggle_pause(self) -> None:
        if self.bridge.can_pause():
            self.bridge.toggle_pause()

    def _reset(self) -> None:
        self.bridge.reset()
        self.camera.center_lat, self.camera.center_lon = config.MAP_CENTER
        self.camera.meters_per_px = config.MAP_METERS_PER_PIXEL

    def _nudge_speed(self, delta: float) -> None:
        self.bridge.set_target_speed(self.bridge.get_slider_value() + delta)

    def _alert(self, text: str, seconds: float = 3.0) -> None:
        self._alert_text = text
        self._alert_until = self.time_seconds + seconds

    def _dispatch_button(self, action: str) -> None:
        if action == "plan":
            self._plan_route()
        elif action == "start":
            self._start()
        elif action == "pause":
            self._toggle_pause()
        elif action == "reset":
            self._reset()

    # ------------------------------------------------------------------ #
    #  Events                                                              #
    # ------------------------------------------------------------------ #
    def _handle_event(self, event: pygame.event.Event) -> bool:
        """Process one pygame event; returns ``False`` when the window should close."""
        if event.type == pygame.QUIT:
            return False
        if event.type == pygame.VIDEORESIZE:
            self._handle_resize(event.w, event.h)
        elif event.type == pygame.KEYDOWN:
            if self.show_splash:
                self.show_splash = False
                return True
            if event.key == pygame.K_p:
                self._plan_route()
            elif event.key == pygame.K_s:
                self._start()
            elif event.key == pygame.K_SPACE:
                self._toggle_pause()
            elif event.key == pygame.K_r:
                self._reset()
            elif event.key == pygame.K_UP:
                self._nudge_speed(config.SLIDER_STEP_KMH)
            elif event.key == pygame.K_DOWN:
                self._nudge_speed(-config.SLIDER_STEP_KMH)
            elif event.key == pygame.K_F3:
                self.show_debug = not self.show_debug
            elif event.key == pygame.K_l:
                self.show_legend = not self.show_legend
            elif event.key == pygame.K_F12:
                self._take_screenshot()
            elif event.key in (pygame.K_EQUALS, pygame.K_PLUS):
                self.camera.meters_per_px = max(1.0, self.camera.meters_per_px / 1.2)
            elif event.key == pygame.K_MINUS:
                self.camera.meters_per_px = min(500.0, self.camera.meters_per_px * 1.2)
        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if self.show_splash:
                self.show_splash = False
                return True
            mx, my = event.pos
            if self.slider is not None and self.slider.contains(mx, my):
                self.dragging_slider = True
                self.bridge.set_target_speed(self.slider.value_at(mx))
            else:
                for button in self.buttons:
                    if button.enabled and button.contains(mx, my):
                        self._dispatch_button(button.action)
                        break
        elif event.type == pygame.MOUSEMOTION and self.dragging_slider:
            self.bridge.set_target_speed(self.slider.value_at(event.pos[0]))
        elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
            self.dragging_slider = False
        return True

    # ------------------------------------------------------------------ #
    #  Render                                                              #
    # ------------------------------------------------------------------ #
    def _render(self, delta_time: float = 0.0) -> None:
        surface = self.screen
        bridge = self.bridge

        map_rect = pygame.Rect(0, 0, self.camera.screen_w, self.camera.screen_h)
        surface.set_clip(map_rect)
        self.draw_background(surface)
        self.draw_route(surface, bridge.get_route_points())
        self.draw_zone(surface, bridge.get_zone())
        self.draw_markers(surface, bridge.get_markers())
        self.draw_vehicle(surface, bridge.get_vehicle_position())
        if self.show_legend:
            self._draw_legend(surface)
        if self.show_debug:
            self._draw_debug_overlay(surface, delta_time, bridge.get_event_metrics())
        surface.set_clip(None)

        self.refresh_button_states()
        self.draw_controls(surface, bridge.get_slider_value())
        self.draw_status_panel(surface, bridge.get_status(), self.time_seconds)
        self.draw_event_log(surface, bridge.get_events(self.EVENT_LOG_ROWS))

        if bridge.is_paused():
            self._draw_pause_banner(surface)
        if self.time_seconds < self._alert_until:
            self._draw_alert(surface, self._alert_text)
        if self.time_seconds < self._screenshot_flash_until:
            flash = pygame.Surface((self.width, self.height), pygame.SRCALPHA)
            flash.fill((255, 255, 255, 40))
            surface.blit(flash, (0, 0))

    # ------------------------------------------------------------------ #
    #  Main loop                                                           #
    # ------------------------------------------------------------------ #
    def run(self) -> None:
        pygame.init()
        pygame.display.set_caption("SCHOOL ZONE DRIVE SIM")
        self.screen = pygame.display.set_mode(
            (self.width, self.height), pygame.RESIZABLE
        )
        self.clock = pygame.time.Clock()
        self.font_small = self._load_font(13, bold=False)
        self.font_tiny = self._load_font(11, bold=False)
        self.font_title = self._load_font(24, bold=True)

        running = True
        while running:
            delta_time = self.clock.tick(self.fps) / 1000.0
            self.time_seconds += delta_time

            # ---- events ------------------------------------------------- #
            for event in pygame.event.get():
                if not self._handle_event(event):
                    running = False
                    break

            # ---- splash ------------------------------------------------- #
            if self.show_splash:
                self._draw_splash(self.screen, self.time_seconds)
                pygame.display.flip()
                continue

            # ---- simulation frame --------------------------------------- #
            self.bridge.pump_frame()
            vehicle = self.bridge.get_vehicle_position()
            if vehicle is not None and self.bridge.is_running():
                self.camera.pan_to(vehicle[0], vehicle[1], self.PAN_SMOOTHING)

            # ---- render ------------------------------------------------- #
            self._render(delta_time)
            pygame.display.flip()

        pygame.quit()


# ---------------------------------------------------------------------- #
#  Convenience entry point                                                 #
# ---------------------------------------------------------------------- #
def run_pygame_view(
    bridge: Any,
    width: int = config.WINDOW_WIDTH,
    height: int = config.WINDOW_HEIGHT,
    fps: int = config.TARGET_FPS,
) -> None:
    view = PygameDriveView(bridge=bridge, width=width, height=height, fps=fps)
    view.run()


if __name__ == "__main__":
    raise SystemExit(
        "pygame_view.py needs a bridge object. Run `python main.py` "
        "or call run_pygame_view(your_bridge)."
    )
