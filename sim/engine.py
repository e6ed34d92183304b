#!/usr/bin/env python3
"""
sim/engine.py
=============
Frame-driven motion simulation along a precomputed route.

The :class:`SimulationEngine` owns a single :class:`RunState`.  On every
scheduled frame it advances a real-valued cursor along the route's
points, checks school-zone membership, steers the current speed
towards the advised speed, and derives distance / ETA.  Everything it
produces leaves through a :class:`SimulationListener`, so the engine
never touches a renderer directly.
"""

from __future__ import annotations

import logging
import math
import time
import uuid
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Callable, Dict, Iterable, Optional

from events.message import EventKind, SimEvent
from sim.geo import Coordinate, distance_m
from sim.policy import SimPolicy, approach_speed, format_eta
from sim.route import Route
from sim.scheduler import FrameHandle, FrameScheduler

log = logging.getLogger("engine")

ZONE_LABEL_NORMAL = "Normal"
ZONE_LABEL_SCHOOL = "School Zone"
ZONE_LABEL_COMPLETED = "Completed"


class SimulationStateError(RuntimeError):
    """A control call that the current run phase cannot honour."""


class RunPhase(str, Enum):
    IDLE = "Idle"
    RUNNING = "Running"
    PAUSED = "Paused"
    COMPLETED = "Completed"


@dataclass
class RunState:
    """Mutable per-run state; only the engine writes it.

    Attributes
    ----------
    position_index : float
        Cursor into the route points, ``0 .. last_index``.
    current_speed_kmh : float
        Smoothed speed; follows the advised speed by a per-tick cap.
    target_speed_kmh : float
        User-selected cruising speed.
    traveled_km : float
        ``position_index / len(points) * total_distance_km``.
    phase : RunPhase
    in_zone : bool
        Zone membership seen on the previous tick.
    started_at, last_tick_at : float
        Clock readings in seconds.
    """

    position_index: float = 0.0
    current_speed_kmh: float = 0.0
    target_speed_kmh: float = 50.0
    traveled_km: float = 0.0
    phase: RunPhase = RunPhase.IDLE
    in_zone: bool = False
    started_at: float = 0.0
    last_tick_at: float = 0.0


@dataclass(frozen=True)
class StatusSnapshot:
    """Read-only status payload emitted at the end of a tick."""

    current_speed: int
    advised_speed: float
    zone_status: str
    distance_km: float
    eta: str
    sim_status: str

    def as_dict(self) -> Dict[str, Any]:
        return {
            "currentSpeed": self.current_speed,
            "advisedSpeed": self.advised_speed,
            "zoneStatus": self.zone_status,
            "distance": f"{self.distance_km:.2f}",
            "eta": self.eta,
            "simStatus": self.sim_status,
        }


class SimulationListener:
    """Receiver for everything the engine emits.  Override what you need."""

    def on_zone(self, center: Coordinate, radius_m: float) -> None:
        pass

    def on_vehicle_created(self, position: Coordinate) -> None:
        pass

    def on_position(self, position: Coordinate) -> None:
        pass

    def on_status(self, snapshot: StatusSnapshot) -> None:
        pass

    def on_event(self, event: SimEvent) -> None:
        pass


class SimulationEngine:
    """Vehicle motion state machine: ``Idle → Running ⇄ Paused → Completed``.

    Parameters
    ----------
    scheduler : FrameScheduler
        Provides the next-frame callback and its cancellable handle.
    listener : SimulationListener or None
        Sink for zone, position, status and event notifications.
    policy : SimPolicy or None
        Tunable constants; uses defaults when *None*.
    clock : callable or None
        Returns the current time in seconds (defaults to ``time.time``).
    """

    def __init__(
        self,
        scheduler: FrameScheduler,
        listener: Optional[SimulationListener] = None,
        policy: Optional[SimPolicy] = None,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        self.policy = policy or SimPolicy()
        self._scheduler = scheduler
        self._listener = listener or SimulationListener()
        self._clock = clock or time.time
        self.state = RunState(target_speed_kmh=self.policy.default_target_speed_kmh)
        self.route: Optional[Route] = None
        self._armed = False
        self._frame: Optional[FrameHandle] = None
        self._tick_count = 0

    # ── queries ───────────────────────────────────────────────────────────

    @property
    def phase(self) -> RunPhase:
        return self.state.phase

    def is_running(self) -> bool:
        return self.state.phase is RunPhase.RUNNING

    def is_paused(self) -> bool:
        return self.state.phase is RunPhase.PAUSED

    def is_finished(self) -> bool:
        return self.state.phase is RunPhase.COMPLETED

    def advised_speed(self, in_zone: Optional[bool] = None) -> float:
        if in_zone is None:
            in_zone = self.state.in_zone
        return self.policy.zone_speed_kmh if in_zone else self.state.target_speed_kmh

    # ── route assignment ──────────────────────────────────────────────────

    def set_route(self, points: Iterable[Iterable[float]], total_distance_km: float) -> Route:
        """Assign a new route and rearm the run to its first point.

        Keeps the run phase and the target speed; zeroes the cursor,
        traveled distance and current speed.
        """
        route = Route.from_points(points, total_distance_km)
        self.route = route
        self.state.position_index = 0.0
        self.state.traveled_km = 0.0
        self.state.current_speed_kmh = 0.0
        self._armed = True
        log.info(
            "route set points=%d distance=%.2f km zone_center=(%.5f, %.5f)",
            len(route), route.total_distance_km, *route.zone_center,
        )
        self._listener.on_zone(route.zone_center, self.policy.zone_radius_m)
        return route

    # ── control ───────────────────────────────────────────────────────────

    def start(self) -> None:
        phase = self.state.phase
        if phase in (RunPhase.RUNNING, RunPhase.PAUSED):
            log.debug("start ignored in phase %s", phase.value)
            return
        if self.route is None:
            raise SimulationStateError("cannot start: no route has been set")
        if phase is RunPhase.COMPLETED and not self._armed:
            raise SimulationStateError(
                "cannot restart a completed run without assigning a new route"
            )

        now = self._clock()
        self.state.phase = RunPhase.RUNNING
        self.state.started_at = now
        self.state.last_tick_at = now
        self._armed = False
        self._tick_count = 0
        log.info("run started target=%.1f km/h", self.state.target_speed_kmh)
        self._listener.on_vehicle_created(self.route.points[0])
        self._emit(EventKind.STARTED, "Simulation started")
        self._schedule_tick()

    def pause(self) -> None:
        if self.state.phase is not RunPhase.RUNNING:
            log.debug("pause ignored in phase %s", self.state.phase.value)
            return
        self.state.phase = RunPhase.PAUSED
        self._cancel_tick()
        log.info("run paused at index %.3f", self.state.position_index)
        self._emit(EventKind.PAUSED, "Simulation paused")

    def resume(self) -> None:
        if self.state.phase is not RunPhase.PAUSED:
            log.debug("resume ignored in phase %s", self.state.phase.value)
            return
        self.state.phase = RunPhase.RUNNING
        # the pause duration must not show up as one huge delta
        self.state.last_tick_at = self._clock()
        log.info("run resumed at index %.3f", self.state.position_index)
        self._emit(EventKind.RESUMED, "Simulation resumed")
        self._schedule_tick()

    def stop(self, phase: RunPhase = RunPhase.IDLE) -> None:
        """Leave Running / Paused and cancel the pending frame."""
        if self.state.phase in (RunPhase.RUNNING, RunPhase.PAUSED):
            self.state.phase = phase
        self._cancel_tick()

    def reset(self) -> None:
        self.stop()
        self.state.position_index = 0.0
        self.state.traveled_km = 0.0
        self.state.current_speed_kmh = 0.0
        self.state.in_zone = False
        self.state.phase = RunPhase.IDLE
        log.info("run reset")
        self._emit(EventKind.RESET, "Simulation reset")

    def set_target_speed(self, speed_kmh: float) -> None:
        self.state.target_speed_kmh = float(speed_kmh)
        log.debug("target speed set to %.1f km/h", self.state.target_speed_kmh)

    # ── tick ──────────────────────────────────────────────────────────────

    def tick(self) -> None:
        """Advance the run by one frame."""
        self._frame = None
        if self.state.phase is not RunPhase.RUNNING or self.route is None:
            return

        route = self.route
        state = self.state
        policy = self.policy
        self._tick_count += 1

        now = self._clock()
        delta_s = now - state.last_tick_at
        state.last_tick_at = now

        position = route.position_at(state.position_index)

        to_center = distance_m(position, route.zone_center)
        in_zone_now = to_center <= policy.zone_radius_m
        if in_zone_now and not state.in_zone:
            self._emit(
                EventKind.ZONE_ENTERED,
                f"Entered school zone - Speed limited to {policy.zone_speed_kmh:g} km/h",
            )
        elif state.in_zone and not in_zone_now:
            self._emit(EventKind.ZONE_EXITED, "Exited school zone - Normal speed resumed")
        state.in_zone = in_zone_now

        advised = self.advised_speed(in_zone_now)
        state.current_speed_kmh = approach_speed(
            state.current_speed_kmh, advised, policy.acceleration_step_kmh
        )

        speed_factor = state.current_speed_kmh / policy.reference_speed_kmh
        step = policy.base_index_step * speed_factor * delta_s * policy.reference_frame_rate
        state.position_index += step

        log.debug(
            "tick=%d dt=%.4f idx=%.4f speed=%.2f advised=%.1f zone_d=%.1f m",
            self._tick_count, delta_s, state.position_index,
            state.current_speed_kmh, advised, to_center,
        )

        if state.position_index >= route.last_index:
            state.position_index = float(route.last_index)
            # only a set_route after this point may restart the run
            self._armed = False
            self.stop(RunPhase.COMPLETED)
            log.info("run completed after %d ticks", self._tick_count)
            self._emit(EventKind.COMPLETED, "Simulation completed")
            self._listener.on_status(StatusSnapshot(
                current_speed=0,
                advised_speed=state.target_speed_kmh,
                zone_status=ZONE_LABEL_COMPLETED,
                distance_km=route.total_distance_km,
                eta="00:00",
                sim_status=RunPhase.COMPLETED.value,
            ))
            return

        self._listener.on_position(position)
        state.traveled_km = (
            state.position_index / len(route) * route.total_distance_km
        )

        elapsed_h = (now - state.started_at) / 3600.0
        avg_speed = state.traveled_km / elapsed_h if elapsed_h != 0 else 0.0
        remaining_km = route.total_distance_km - state.traveled_km
        eta_minutes = remaining_km / avg_speed * 60 if avg_speed > 0 else 0.0

        self._listener.on_status(StatusSnapshot(
            current_speed=int(math.floor(state.current_speed_kmh + 0.5)),
            advised_speed=advised,
            zone_status=ZONE_LABEL_SCHOOL if in_zone_now else ZONE_LABEL_NORMAL,
            distance_km=round(state.traveled_km, 2),
            eta=format_eta(eta_minutes),
            sim_status=RunPhase.RUNNING.value,
        ))

        self._schedule_tick()

    def snapshot_state(self) -> RunState:
        """Copy of the current run state (for tests and debug overlays)."""
        return replace(self.state)

    # ── helpers ───────────────────────────────────────────────────────────

    def _schedule_tick(self) -> None:
        self._cancel_tick()
        self._frame = self._scheduler.schedule(self.tick)

    def _cancel_tick(self) -> None:
        if self._frame is not None:
            self._frame.cancel()
            self._frame = None

    def _emit(self, kind: EventKind, text: str) -> None:
        event = SimEvent(id=str(uuid.uuid4()), kind=kind, text=text, ts=self._clock())
        self._listener.on_event(event)
