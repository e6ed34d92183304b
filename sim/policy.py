#!/usr/bin/env python3
"""
sim/policy.py
=============
Tunable speed, zone and timing parameters for the drive simulation.
Every constant lives in the frozen :class:`SimPolicy` dataclass so that
experiments can swap policies without touching code.

Also provides two stateless helpers used by the tick algorithm:

* :func:`approach_speed`: per-tick capped move towards a target speed.
* :func:`format_eta`: minutes → ``MM:SS`` label.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import config


@dataclass(frozen=True)
class SimPolicy:
    """Immutable bag of every tunable simulation parameter."""

    # ── School zone ───────────────────────────────────────────────────────
    zone_radius_m: float = config.ZONE_RADIUS_M
    """Radius of the reduced-speed circle around the zone centre."""

    zone_speed_kmh: float = config.ZONE_SPEED_KMH
    """Advised speed while inside the zone; overrides the user target."""

    # ── Longitudinal control ──────────────────────────────────────────────
    default_target_speed_kmh: float = config.DEFAULT_TARGET_SPEED_KMH
    """Cruising speed before the user touches the slider."""

    acceleration_step_kmh: float = config.ACCELERATION_STEP_KMH
    """Largest speed change applied in a single tick (not per second)."""

    # ── Cursor movement ───────────────────────────────────────────────────
    reference_speed_kmh: float = config.REFERENCE_SPEED_KMH
    """Speed at which the cursor advances by :attr:`base_index_step` per reference frame."""

    base_index_step: float = config.BASE_INDEX_STEP
    """Index units per reference frame at the reference speed."""

    reference_frame_rate: float = config.REFERENCE_FRAME_RATE
    """Frames per second the movement step is normalised to."""


def approach_speed(current: float, target: float, step: float) -> float:
    """Move *current* towards *target* by at most *step*."""
    if current < target:
        return min(target, current + step)
    if current > target:
        return max(target, current - step)
    return current


def format_eta(minutes: float) -> str:
    """Format a duration in minutes as ``MM:SS`` (floor minutes, floor seconds)."""
    mins = math.floor(minutes)
    secs = math.floor((minutes - mins) * 60)
    return f"{mins:02d}:{secs:02d}"
