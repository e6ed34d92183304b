"""
ui/helpers.py
=============
Pure utility functions shared across UI modules:
alpha-surface drawing, text rendering and formatting of status
values, plus the :class:`ViewHelpers` mixin.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional, Tuple

import pygame

# ── Alpha drawing helpers ────────────────────────────────────────────────────

def draw_alpha_rect(
    target: pygame.Surface,
    color: Tuple[int, ...],
    rect: pygame.Rect,
    border_radius: int = 0,
) -> None:
    """Draw a semi-transparent rectangle (colour tuple with 4 channels)."""
    tmp = pygame.Surface((rect.w, rect.h), pygame.SRCALPHA)
    pygame.draw.rect(tmp, color, (0, 0, rect.w, rect.h), border_radius=border_radius)
    target.blit(tmp, rect.topleft)


def draw_alpha_circle(
    target: pygame.Surface,
    color: Tuple[int, ...],
    centre: Tuple[int, int],
    radius: int,
) -> None:
    """Draw a semi-transparent circle."""
    if radius < 1:
        return
    size = radius * 2
    tmp = pygame.Surface((size, size), pygame.SRCALPHA)
    pygame.draw.circle(tmp, color, (radius, radius), radius)
    target.blit(tmp, (centre[0] - radius, centre[1] - radius))


# ── Text helper ──────────────────────────────────────────────────────────────

def render_text(
    surface: pygame.Surface,
    font: pygame.font.Font,
    text: str,
    pos: Tuple[int, int],
    color: Tuple[int, ...] = (230, 230, 235),
    anchor: str = "topleft",
) -> pygame.Rect:
    """Render text with flexible *anchor* ('topleft', 'center', 'midright' …)."""
    img = font.render(text, True, color)
    rect = img.get_rect(**{anchor: pos})
    surface.blit(img, rect)
    return rect


# ── Status formatting ────────────────────────────────────────────────────────

def format_status_rows(status: Mapping[str, Any], unit: str = "km/h"):
    """Label / value pairs for the status panel, in display order."""
    return [
        ("Current speed", f"{status.get('currentSpeed', 0)} {unit}"),
        ("Advised speed", f"{_fmt_speed(status.get('advisedSpeed', 0))} {unit}"),
        ("Zone", str(status.get("zoneStatus", "Normal"))),
        ("Distance", f"{status.get('distance', '0.0')} km"),
        ("ETA", str(status.get("eta", "--:--"))),
        ("Status", str(status.get("simStatus", "Ready"))),
    ]


def _fmt_speed(value: Any) -> str:
    try:
        return f"{float(value):g}"
    except (TypeError, ValueError):
        return str(value)


class ViewHelpers:
    """Mixin with small stateless helpers used by the renderers."""

    @staticmethod
    def _load_font(size: int, bold: bool = False) -> pygame.font.Font:
        for name in ("Menlo", "Consolas", "DejaVu Sans Mono", "Courier New"):
            path: Optional[str] = pygame.font.match_font(name, bold=bold)
            if path:
                return pygame.font.Font(path, size)
        return pygame.font.Font(None, size + 4)

    @staticmethod
    def _to_int_point(point: Tuple[float, float]) -> Tuple[int, int]:
        return int(round(point[0])), int(round(point[1]))
