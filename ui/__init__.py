#!/usr/bin/env python3

from .types import ColorRGB, ColorRGBA, MapCamera, ButtonRect, SliderRect
from .constants import ViewConstants
from .helpers import ViewHelpers
from .draw_map import MapRenderer
from .hud import HudRenderer
from .pygame_view import PygameDriveView, run_pygame_view

__all__ = [
    "ColorRGB",
    "ColorRGBA",
    "MapCamera",
    "ButtonRect",
    "SliderRect",
    "ViewConstants",
    "ViewHelpers",
    "MapRenderer",
    "HudRenderer",
    "PygameDriveView",
    "run_pygame_view",
]
