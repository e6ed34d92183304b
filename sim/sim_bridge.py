"""
sim/sim_bridge.py
=================
Controller tying :mod:`sim.engine`, the route service and the
:class:`events.event_log.EventLog` together.  The UI issues commands
(plan / start / pause-resume / reset / target speed) and polls the
bridge for the latest snapshot without ever touching the engine state.

Public API consumed by :mod:`ui.pygame_view`
--------------------------------------------
* ``plan_route()``            → ``bool``
* ``start()``                 → ``bool``
* ``toggle_pause()``          → ``None``
* ``reset()``                 → ``None``
* ``abort(error)``            → ``None``
* ``set_target_speed(kmh)``   → ``float``
* ``pump_frame()``            → ``int``
* ``get_status()``            → ``dict``
* ``get_events(limit)``       → ``List[SimEvent]``
* ``get_route_points()``      → ``List[Coordinate]``
* ``get_zone()``              → ``dict`` or ``None``
* ``get_vehicle_position()``  → ``Coordinate`` or ``None``
* ``get_markers()``           → ``List[dict]``
"""

from __future__ import annotations

import logging
import threading
from dataclasses import replace
from typing import Any, Dict, List, Optional

import config
from events.event_log import EventLog
from events.message import EventKind, SimEvent
from routing.service import RouteService, RoutingError
from sim.engine import (
    ZONE_LABEL_NORMAL,
    RunPhase,
    SimulationEngine,
    SimulationListener,
    SimulationStateError,
    StatusSnapshot,
)
from sim.geo import Coordinate
from sim.policy import SimPolicy
from sim.scheduler import FrameQueueScheduler, FrameScheduler

log = logging.getLogger("sim_bridge")

STATUS_READY = "Ready"
STATUS_ROUTE_PLANNED = "Route Planned"
STATUS_ERROR = "Error"
ETA_UNKNOWN = "--:--"


class SimBridge(SimulationListener):
    """Owns one engine for the whole application lifetime.

    Engine notifications arrive through the :class:`SimulationListener`
    hooks and are cached here; the UI reads copies of the cache.  Every
    public method holds the bridge lock, which a threaded scheduler also
    holds while it runs a tick.

    Parameters
    ----------
    route_service : RouteService
        Source of planned routes.
    scheduler : FrameScheduler or None
        Frame source for the engine; a :class:`FrameQueueScheduler`
        pumped through :meth:`pump_frame` when *None*.
    policy : SimPolicy or None
        Engine constants.
    start, end : Coordinate or None
        Route endpoints (defaults from :mod:`config`).
    clock : callable or None
        Time source shared with the engine and the event log.
    lock : lock-like or None
        Re-entrant lock guarding the engine; created when *None*.
    """

    def __init__(
        self,
        route_service: RouteService,
        scheduler: Optional[FrameScheduler] = None,
        policy: Optional[SimPolicy] = None,
        start: Optional[Coordinate] = None,
        end: Optional[Coordinate] = None,
        start_name: str = config.START_NAME,
        end_name: str = config.END_NAME,
        clock=None,
        lock=None,
    ) -> None:
        self._lock = lock or threading.RLock()
        self._route_service = route_service
        self._scheduler = scheduler or FrameQueueScheduler()
        self.start_point: Coordinate = tuple(start or config.START_POINT)
        self.end_point: Coordinate = tuple(end or config.END_POINT)
        self.start_name = start_name
        self.end_name = end_name

        self.policy = policy or SimPolicy()
        self.events = EventLog(clock=clock)
        self.engine = SimulationEngine(
            scheduler=self._scheduler,
            listener=self,
            policy=self.policy,
            clock=clock,
        )

        # Cached state: written through listener hooks, read by the UI
        self._slider_kmh: float = self.policy.default_target_speed_kmh
        self._status: StatusSnapshot = self._idle_status()
        self._route_points: List[Coordinate] = []
        self._zone: Optional[Dict[str, Any]] = None
        self._vehicle: Optional[Coordinate] = None
        self._route_planned = False

        self.events.add(EventKind.SYSTEM, "System initialized - Ready to plan route")

    @property
    def lock(self):
        return self._lock

    # ── Listener hooks (engine → bridge) ──────────────────────────────────────

    def on_zone(self, center: Coordinate, radius_m: float) -> None:
        self._zone = {"center": center, "radius_m": radius_m}

    def on_vehicle_created(self, position: Coordinate) -> None:
        self._vehicle = position

    def on_position(self, position: Coordinate) -> None:
        self._vehicle = position

    def on_status(self, snapshot: StatusSnapshot) -> None:
        self._status = snapshot

    def on_event(self, event: SimEvent) -> None:
        self.events.append(event)

    # ── Commands (UI → bridge) ────────────────────────────────────────────────

    def plan_route(self) -> bool:
        """Fetch a route between the configured endpoints and arm the engine.

        Blocks for the duration of the HTTP request.  Returns ``False``
        when routing fails; the user may simply try again.
        """
        with self._lock:
            self.events.add(
                EventKind.ROUTE_PLANNING,
                f"Planning route from {self.start_name} to {self.end_name}",
            )
        try:
            result = self._route_service.fetch_route(self.start_point, self.end_point)
        except RoutingError as e:
            log.warning("route planning failed: %s", e)
            with self._lock:
                self.events.add(EventKind.ROUTE_FAILED, "Error planning route")
            return False

        with self._lock:
            self.engine.set_route(result.coordinates, result.distance_km)
            self._route_points = list(self.engine.route.points)
            self._route_planned = True
            self.events.add(
                EventKind.ROUTE_PLANNED,
                f"Route planned - Distance: {result.distance_km:.2f} km",
            )
            self._status = replace(
                self._status,
                advised_speed=self._slider_kmh,
                distance_km=0.0,
                sim_status=STATUS_ROUTE_PLANNED,
            )
        return True

    def start(self) -> bool:
        """Start the drive; ignored until a route has been planned."""
        with self._lock:
            if not self._route_planned:
                log.debug("start ignored: no route planned")
                return False
            try:
                self.engine.start()
            except SimulationStateError as e:
                log.error("cannot start simulation: %s", e)
                self.events.add(EventKind.ERROR, f"Cannot start: {e}")
                return False
            if not self.engine.is_running():
                return False
            self._status = self._with_sim_status(RunPhase.RUNNING.value)
            return True

    def toggle_pause(self) -> None:
        with self._lock:
            if self.engine.is_paused():
                self.engine.resume()
                self._status = self._with_sim_status(RunPhase.RUNNING.value)
            elif self.engine.is_running():
                self.engine.pause()
                self._status = self._with_sim_status(RunPhase.PAUSED.value)

    def reset(self) -> None:
        with self._lock:
            self.engine.reset()
            self._route_points = []
            self._zone = None
            self._vehicle = None
            self._route_planned = False
            self._status = self._idle_status()
            self.events.clear()
            self.events.add(EventKind.RESET, "System reset")

    def abort(self, error: Exception) -> None:
        """Stop the run after a failed tick; the route stays planned."""
        with self._lock:
            if self.engine.phase not in (RunPhase.RUNNING, RunPhase.PAUSED):
                return
            self.engine.stop()
            log.error("simulation aborted: %s", error)
            self.events.add(EventKind.ERROR, f"Simulation error: {error}")
            self._status = self._with_sim_status(STATUS_ERROR)

    def set_target_speed(self, speed_kmh: float) -> float:
        """Apply a slider value (clamped to the slider range); returns it."""
        speed = min(config.MAX_SPEED_KMH, max(config.MIN_SPEED_KMH, float(speed_kmh)))
        with self._lock:
            self._slider_kmh = speed
            self.engine.set_target_speed(speed)
            advised = self.policy.zone_speed_kmh if self.engine.state.in_zone else speed
            self._status = replace(self._status, advised_speed=advised)
        return speed

    def pump_frame(self) -> int:
        """Run the frame callbacks due now (render-loop driven scheduling)."""
        if not isinstance(self._scheduler, FrameQueueScheduler):
            return 0
        with self._lock:
            return self._scheduler.run_pending()

    # ── Queries ───────────────────────────────────────────────────────────────

    def get_status(self) -> Dict[str, Any]:
        with self._lock:
            return self._status.as_dict()

    def get_snapshot(self) -> StatusSnapshot:
        with self._lock:
            return self._status

    def get_events(self, limit: Optional[int] = None) -> List[SimEvent]:
        with self._lock:
            return self.events.entries(limit)

    def get_event_metrics(self) -> Dict[str, int]:
        with self._lock:
            return self.events.metrics.report()

    def get_route_points(self) -> List[Coordinate]:
        with self._lock:
            return list(self._route_points)

    def get_zone(self) -> Optional[Dict[str, Any]]:
        with self._lock:
            return dict(self._zone) if self._zone else None

    def get_vehicle_position(self) -> Optional[Coordinate]:
        with self._lock:
            return self._vehicle

    def get_markers(self) -> List[Dict[str, Any]]:
        """Start / end markers, only once a route has been planned."""
        with self._lock:
            if not self._route_planned:
                return []
            return [
                {"kind": "start", "position": self.start_point, "label": self.start_name},
                {"kind": "end", "position": self.end_point, "label": self.end_name},
            ]

    def get_slider_value(self) -> float:
        with self._lock:
            return self._slider_kmh

    @property
    def route_planned(self) -> bool:
        return self._route_planned

    def is_running(self) -> bool:
        with self._lock:
            return self.engine.is_running()

    def is_paused(self) -> bool:
        with self._lock:
            return self.engine.is_paused()

    def is_finished(self) -> bool:
        with self._lock:
            return self.engine.is_finished()

    def can_plan(self) -> bool:
        with self._lock:
            return not self._route_planned

    def can_start(self) -> bool:
        with self._lock:
            return self._route_planned and self.engine.phase is RunPhase.IDLE

    def can_pause(self) -> bool:
        with self._lock:
            return self.engine.phase in (RunPhase.RUNNING, RunPhase.PAUSED)

    # ── helpers ───────────────────────────────────────────────────────────────

    def _idle_status(self) -> StatusSnapshot:
        return StatusSnapshot(
            current_speed=0,
            advised_speed=self._slider_kmh,
            zone_status=ZONE_LABEL_NORMAL,
            distance_km=0.0,
            eta=ETA_UNKNOWN,
            sim_status=STATUS_READY,
        )

    def _with_sim_status(self, sim_status: str) -> StatusSnapshot:
        return replace(self._status, sim_status=sim_status)
