#!/usr/bin/env python3
"""
config.py
=========
Application-wide configuration constants.

Values can be overridden via environment variables (see :mod:`main`).
This module is a thin, import-safe leaf: it never imports from
other project packages.
"""

# ── Route endpoints ──────────────────────────────────────────────────────────
START_POINT: tuple = (17.4474, 78.3762)
START_NAME: str = "HITEC City"
END_POINT: tuple = (17.3850, 78.4867)
END_NAME: str = "Charminar"

# ── School zone ──────────────────────────────────────────────────────────────
ZONE_RADIUS_M: float = 1500.0
ZONE_SPEED_KMH: float = 30.0

# ── Speed control ────────────────────────────────────────────────────────────
DEFAULT_TARGET_SPEED_KMH: float = 50.0
MIN_SPEED_KMH: float = 20.0
MAX_SPEED_KMH: float = 80.0
ACCELERATION_STEP_KMH: float = 0.3      # per tick, not per second
REFERENCE_SPEED_KMH: float = 50.0
BASE_INDEX_STEP: float = 0.5
REFERENCE_FRAME_RATE: float = 60.0

# ── Frame scheduling ─────────────────────────────────────────────────────────
UPDATE_INTERVAL_MS: int = 16

# ── Routing service ──────────────────────────────────────────────────────────
OSRM_BASE_URL: str = "https://router.project-osrm.org"
ROUTE_TIMEOUT_S: float = 10.0

# ── UI defaults ──────────────────────────────────────────────────────────────
WINDOW_WIDTH: int = 1100
WINDOW_HEIGHT: int = 720
TARGET_FPS: int = 60
MAP_CENTER: tuple = (17.4162, 78.4315)
MAP_METERS_PER_PIXEL: float = 20.0
SLIDER_STEP_KMH: int = 5

# ── Logging ──────────────────────────────────────────────────────────────────
LOG_FILE: str = "drive_sim.log"
ENGINE_DEBUG_LOG_FILE: str = "engine_debug.log"
