#!/usr/bin/env python3
"""
main.py
=======
Application entry point.

Wires the OSRM route service, the :class:`~sim.sim_bridge.SimBridge`
and the pygame view together.  Configuration defaults live in
:mod:`config`; the environment (or a ``.env`` file) may override:

* ``DRIVE_SIM_TARGET_SPEED``     initial target speed in km/h
* ``DRIVE_SIM_OSRM_URL``         routing service base URL
* ``DRIVE_SIM_ROUTE_TIMEOUT_S``  HTTP timeout for route planning
* ``DRIVE_SIM_LOG_LEVEL``        ``DEBUG`` / ``INFO`` / ``WARNING``
* ``DRIVE_SIM_HEADLESS``         ``1`` to run one drive without a window
"""

import logging
import os
import threading
import time

from dotenv import load_dotenv

import config
from logging_setup import setup_logging
from routing.osrm import OsrmRouteService
from sim.policy import SimPolicy
from sim.scheduler import ThreadedFrameScheduler
from sim.sim_bridge import SimBridge

log = logging.getLogger("main")


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        log.warning("ignoring %s=%r: not a number", name, raw)
        return default


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in ("1", "true", "yes", "on")


def build_policy() -> SimPolicy:
    speed = _env_float("DRIVE_SIM_TARGET_SPEED", config.DEFAULT_TARGET_SPEED_KMH)
    clamped = min(config.MAX_SPEED_KMH, max(config.MIN_SPEED_KMH, speed))
    if clamped != speed:
        log.warning(
            "DRIVE_SIM_TARGET_SPEED=%g outside %g..%g km/h, using %g",
            speed, config.MIN_SPEED_KMH, config.MAX_SPEED_KMH, clamped,
        )
    return SimPolicy(default_target_speed_kmh=clamped)


def build_route_service() -> OsrmRouteService:
    return OsrmRouteService(
        base_url=os.getenv("DRIVE_SIM_OSRM_URL") or config.OSRM_BASE_URL,
        timeout_s=_env_float("DRIVE_SIM_ROUTE_TIMEOUT_S", config.ROUTE_TIMEOUT_S),
    )


def run_headless(
    bridge: SimBridge, scheduler: ThreadedFrameScheduler, poll_s: float = 1.0
) -> int:
    """Plan, drive to completion on the frame thread, and log progress.

    Returns ``0`` once the drive completes, ``1`` when planning fails or
    the run is aborted by a tick error.
    """
    if not bridge.plan_route():
        log.error("Failed to plan route")
        return 1
    scheduler.on_error = bridge.abort
    scheduler.start()
    if not bridge.start():
        scheduler.stop()
        return 1
    try:
        while bridge.is_running():
            time.sleep(poll_s)
            log.info("status %s", bridge.get_status())
    except KeyboardInterrupt:
        log.info("Shutting down...")
    finally:
        scheduler.stop()
    log.info("final status %s", bridge.get_status())
    return 0 if bridge.is_finished() else 1


def main() -> int:
    load_dotenv()
    level = getattr(logging, os.getenv("DRIVE_SIM_LOG_LEVEL", "INFO").upper(), logging.INFO)
    setup_logging(level)
    log.info("Starting drive simulator...")

    policy = build_policy()
    route_service = build_route_service()

    if _env_flag("DRIVE_SIM_HEADLESS"):
        # the frame thread holds the same lock as the control calls
        lock = threading.RLock()
        scheduler = ThreadedFrameScheduler(lock=lock)
        bridge = SimBridge(
            route_service=route_service, scheduler=scheduler, policy=policy, lock=lock
        )
        return run_headless(bridge, scheduler)

    from ui import run_pygame_view

    bridge = SimBridge(route_service=route_service, policy=policy)
    run_pygame_view(bridge)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
