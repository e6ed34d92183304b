#!/usr/bin/env python3
"""Visual constants shared across all renderers."""

from __future__ import annotations

from typing import Sequence, Tuple

from .types import ColorRGB


class ViewConstants:
    """Mixin providing every visual / layout constant."""

    BG_COLOR: ColorRGB = (236, 238, 241)
    GRID_COLOR: ColorRGB = (222, 225, 230)
    ROUTE_COLOR: ColorRGB = (102, 126, 234)
    ZONE_COLOR: ColorRGB = (102, 126, 234)
    START_COLOR: ColorRGB = (81, 207, 102)
    END_COLOR: ColorRGB = (255, 107, 107)
    VEHICLE_COLOR: ColorRGB = (250, 176, 5)
    SIDEBAR_BG_COLOR: ColorRGB = (22, 22, 22)
    HUD_BG_COLOR: ColorRGB = (32, 32, 32)
    HUD_BORDER_COLOR: ColorRGB = (52, 52, 52)
    TEXT_COLOR: ColorRGB = (230, 230, 235)
    MUTED_TEXT_COLOR: ColorRGB = (140, 140, 140)
    WARNING_COLOR: ColorRGB = (255, 193, 7)
    ERROR_COLOR: ColorRGB = (255, 60, 60)
    BUTTON_COLOR: ColorRGB = (102, 126, 234)
    BUTTON_DISABLED_COLOR: ColorRGB = (60, 60, 66)

    ROUTE_ALPHA = 180
    ZONE_FILL_ALPHA = 38
    HUD_BLINK_MS = 500

    SIDEBAR_WIDTH = 340
    ROUTE_WIDTH_PX = 5
    MARKER_RADIUS_PX = 10
    VEHICLE_RADIUS_PX = 9
    FIT_PADDING_PX = 50
    PAN_SMOOTHING = 0.25
    GRID_SPACING_PX = 48
    EVENT_LOG_ROWS = 12

    LEGEND_ITEMS: Sequence[Tuple[str, ColorRGB]] = (
        ("START", (81, 207, 102)),
        ("END", (255, 107, 107)),
        ("VEHICLE", (250, 176, 5)),
        ("SCHOOL ZONE", (102, 126, 234)),
    )

    SPEED_UNIT = "km/h"

    SCREENSHOT_DIR = "screenshots"
