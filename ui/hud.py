#!/usr/bin/env python3
"""Sidebar controls, status panel, event log, splash screen, and banners (mixin)."""

from __future__ import annotations

import time
from typing import Any, List, Mapping, Sequence

import pygame

from .helpers import draw_alpha_rect, format_status_rows, render_text
from .types import ButtonRect, SliderRect


class HudRenderer:
    """Mixin that draws every overlay / HUD element."""

    # ------------------------------------------------------------------ #
    #  Layout                                                              #
    # ------------------------------------------------------------------ #

    def _sidebar_rect(self) -> pygame.Rect:
        return pygame.Rect(self.width - self.SIDEBAR_WIDTH, 0, self.SIDEBAR_WIDTH, self.height)

    def layout_controls(self) -> None:
        """Recompute button and slider rects (after start-up or a resize)."""
        side = self._sidebar_rect()
        x0 = side.x + 16
        gap = 8
        bw = (side.w - 32 - 3 * gap) // 4
        y = 56
        self.buttons = [
            ButtonRect("plan", "Plan", x0, y, bw, 30),
            ButtonRect("start", "Start", x0 + (bw + gap), y, bw, 30),
            ButtonRect("pause", "Pause", x0 + 2 * (bw + gap), y, bw, 30),
            ButtonRect("reset", "Reset", x0 + 3 * (bw + gap), y, bw, 30),
        ]
        self.slider = SliderRect(
            x=x0,
            y=y + 66,
            w=side.w - 32,
            h=6,
            min_value=self.min_speed,
            max_value=self.max_speed,
            step=1,
        )

    def refresh_button_states(self) -> None:
        bridge = self.bridge
        for button in self.buttons:
            if button.action == "plan":
                button.enabled = bridge.can_plan() and not self.planning
                if self.planning:
                    button.label = "..."
                else:
                    button.label = "Plan" if bridge.can_plan() else "Planned"
            elif button.action == "start":
                button.enabled = bridge.can_start()
            elif button.action == "pause":
                button.enabled = bridge.can_pause()
                button.label = "Resume" if bridge.is_paused() else "Pause"
            elif button.action == "reset":
                button.enabled = True

    # ------------------------------------------------------------------ #
    #  Controls                                                            #
    # ------------------------------------------------------------------ #

    def draw_controls(self, surface: pygame.Surface, slider_value: float) -> None:
        if self.font_small is None or self.font_tiny is None:
            return
        side = self._sidebar_rect()
        pygame.draw.rect(surface, self.SIDEBAR_BG_COLOR, side)
        render_text(surface, self.font_title, "DRIVE SIM", (side.x + 16, 14), color=self.TEXT_COLOR)

        for button in self.buttons:
            color = self.BUTTON_COLOR if button.enabled else self.BUTTON_DISABLED_COLOR
            rect = pygame.Rect(button.x, button.y, button.w, button.h)
            pygame.draw.rect(surface, color, rect, border_radius=5)
            txt_color = (255, 255, 255) if button.enabled else self.MUTED_TEXT_COLOR
            render_text(surface, self.font_small, button.label, rect.center, color=txt_color, anchor="center")

        s = self.slider
        render_text(
            surface,
            self.font_tiny,
            f"TARGET SPEED  {slider_value:.0f} {self.SPEED_UNIT}",
            (s.x, s.y - 22),
            color=self.MUTED_TEXT_COLOR,
        )
        pygame.draw.rect(surface, self.HUD_BORDER_COLOR, (s.x, s.y, s.w, s.h), border_radius=3)
        kx = s.knob_x(slider_value)
        pygame.draw.rect(surface, self.BUTTON_COLOR, (s.x, s.y, kx - s.x, s.h), border_radius=3)
        pygame.draw.circle(surface, (255, 255, 255), (kx, s.y + s.h // 2), 8)
        render_text(surface, self.font_tiny, f"{s.min_value:.0f}", (s.x, s.y + 12), color=self.MUTED_TEXT_COLOR)
        render_text(
            surface, self.font_tiny, f"{s.max_value:.0f}",
            (s.x + s.w, s.y + 12), color=self.MUTED_TEXT_COLOR, anchor="topright",
        )

    # ------------------------------------------------------------------ #
    #  Status panel                                                        #
    # ------------------------------------------------------------------ #

    def draw_status_panel(self, surface: pygame.Surface, status: Mapping[str, Any], tick: float) -> None:
        if self.font_small is None or self.font_tiny is None:
            return
        side = self._sidebar_rect()
        rows = format_status_rows(status, self.SPEED_UNIT)
        row_h = 24
        panel = pygame.Rect(side.x + 16, 160, side.w - 32, 30 + len(rows) * row_h)
        pygame.draw.rect(surface, self.HUD_BG_COLOR, panel, border_radius=6)
        pygame.draw.rect(surface, self.HUD_BORDER_COLOR, panel, width=1, border_radius=6)
        render_text(surface, self.font_tiny, "STATUS", (panel.x + 10, panel.y + 8), color=self.MUTED_TEXT_COLOR)

        in_zone = status.get("zoneStatus") == "School Zone"
        blink_on = int((tick * 1000) // self.HUD_BLINK_MS) % 2 == 0
        y = panel.y + 30
        for label, value in rows:
            render_text(surface, self.font_small, label, (panel.x + 10, y), color=(180, 180, 180))
            color = self.TEXT_COLOR
            if label == "Zone" and in_zone:
                color = self.WARNING_COLOR if blink_on else (200, 160, 20)
            render_text(surface, self.font_small, value, (panel.right - 10, y), color=color, anchor="topright")
            y += row_h

    # ------------------------------------------------------------------ #
    #  Event log                                                           #
    # ------------------------------------------------------------------ #

    def draw_event_log(self, surface: pygame.Surface, events: Sequence[Any]) -> None:
        if self.font_tiny is None:
            return
        side = self._sidebar_rect()
        top = 340
        panel = pygame.Rect(side.x + 16, top, side.w - 32, self.height - top - 16)
        pygame.draw.rect(surface, self.HUD_BG_COLOR, panel, border_radius=6)
        pygame.draw.rect(surface, self.HUD_BORDER_COLOR, panel, width=1, border_radius=6)
        render_text(surface, self.font_tiny, "EVENT LOG", (panel.x + 10, panel.y + 8), color=self.MUTED_TEXT_COLOR)

        y = panel.y + 28
        max_w = panel.w - 80
        for event in events[: self.EVENT_LOG_ROWS]:
            if y > panel.bottom - 16:
                break
            stamp = time.strftime("%H:%M:%S", time.localtime(event.ts))
            render_text(surface, self.font_tiny, stamp, (panel.x + 10, y), color=self.MUTED_TEXT_COLOR)
            for line in self._wrap(event.text, max_w):
                render_text(surface, self.font_tiny, line, (panel.x + 72, y), color=self.TEXT_COLOR)
                y += 14
            y += 4

    def _wrap(self, text: str, max_w: int) -> List[str]:
        words = text.split()
        lines: List[str] = []
        current = ""
        for word in words:
            candidate = f"{current} {word}".strip()
            if current and self.font_tiny.size(candidate)[0] > max_w:
                lines.append(current)
                current = word
            else:
                current = candidate
        if current:
            lines.append(current)
        return lines or [""]

    # ------------------------------------------------------------------ #
    #  Splash screen                                                       #
    # ------------------------------------------------------------------ #

    def _draw_splash(self, surface: pygame.Surface, tick: float) -> None:
        if self.font_title is None or self.font_small is None:
            return
        surface.fill(self.SIDEBAR_BG_COLOR)
        title = self.font_title.render("SCHOOL ZONE DRIVE SIM", True, (240, 240, 240))
        surface.blit(
            title,
            title.get_rect(center=(self.width // 2, self.height // 2 - 30)),
        )
        if int(tick * 2) % 2 == 0:
            prompt = self.font_small.render("Press any key to start", True, (160, 160, 160))
            surface.blit(
                prompt,
                prompt.get_rect(center=(self.width // 2, self.height // 2 + 20)),
            )
        lines = [
            "P      Plan route",
            "S      Start drive",
            "SPACE  Pause/Resume",
            "R      Reset",
            "UP/DN  Target speed",
            "+ / -  Zoom in/out",
            "L      Toggle legend",
            "F3     Debug overlay",
            "F12    Screenshot",
        ]
        y = self.height // 2 + 60
        for line in lines:
            t = self.font_tiny.render(line, True, (100, 100, 100)) if self.font_tiny else None
            if t:
                surface.blit(t, t.get_rect(center=(self.width // 2, y)))
                y += 16

    # ------------------------------------------------------------------ #
    #  Legend                                                              #
    # ------------------------------------------------------------------ #

    def _draw_legend(self, surface: pygame.Surface) -> None:
        if self.font_tiny is None:
            return
        x = 22
        y = self.height - 16 - len(self.LEGEND_ITEMS) * 18 - 8
        box_w, box_h = 130, len(self.LEGEND_ITEMS) * 18 + 10
        pygame.draw.rect(
            surface, self.HUD_BG_COLOR, (x - 6, y - 4, box_w, box_h), border_radius=4
        )
        pygame.draw.rect(
            surface, self.HUD_BORDER_COLOR, (x - 6, y - 4, box_w, box_h), width=1, border_radius=4
        )
        for label, color in self.LEGEND_ITEMS:
            pygame.draw.circle(surface, color, (x + 4, y + 6), 4)
            text = self.font_tiny.render(label, True, (200, 200, 200))
            surface.blit(text, (x + 14, y))
            y += 18

    # ------------------------------------------------------------------ #
    #  Debug / FPS overlay                                                 #
    # ------------------------------------------------------------------ #

    def _draw_debug_overlay(self, surface: pygame.Surface, dt: float, metrics: Mapping[str, int]) -> None:
        if self.font_tiny is None:
            return
        fps = self.clock.get_fps() if self.clock else 0.0
        lines = [
            f"FPS  {fps:.1f}",
            f"DT   {dt * 1000:.1f} ms",
            f"MPP  {self.camera.meters_per_px:.1f} m/px",
            f"RES  {self.width}x{self.height}",
            f"TIME {self.time_seconds:.1f}s",
            f"EVT  {metrics.get('total', 0)}",
        ]
        x, y = 16, 16
        for line in lines:
            text = self.font_tiny.render(line, True, (20, 120, 60))
            surface.blit(text, (x, y))
            y += 14

    # ------------------------------------------------------------------ #
    #  Banners                                                             #
    # ------------------------------------------------------------------ #

    def _draw_banner(self, surface: pygame.Surface, text: str, color=(220, 220, 220)) -> None:
        map_w = self.width - self.SIDEBAR_WIDTH
        overlay = pygame.Surface((map_w, self.height), pygame.SRCALPHA)
        overlay.fill((0, 0, 0, 100))
        surface.blit(overlay, (0, 0))
        if self.font_title:
            img = self.font_title.render(text, True, color)
            surface.blit(img, img.get_rect(center=(map_w // 2, self.height // 2)))

    def _draw_pause_banner(self, surface: pygame.Surface) -> None:
        self._draw_banner(surface, "PAUSED")

    def _draw_alert(self, surface: pygame.Surface, text: str) -> None:
        if self.font_small is None:
            return
        map_w = self.width - self.SIDEBAR_WIDTH
        img = self.font_small.render(text, True, (255, 255, 255))
        box = img.get_rect(midtop=(map_w // 2, 18)).inflate(24, 12)
        draw_alpha_rect(surface, (*self.ERROR_COLOR, 220), box, border_radius=6)
        surface.blit(img, img.get_rect(center=box.center))
