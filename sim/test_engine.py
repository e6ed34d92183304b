#!/usr/bin/env python3
"""
Tests for the simulation engine state machine and tick algorithm.
"""

from __future__ import annotations

import unittest

from events.message import EventKind
from sim.engine import (
    RunPhase,
    SimulationEngine,
    SimulationListener,
    SimulationStateError,
)
from sim.policy import approach_speed, format_eta
from sim.scheduler import FrameQueueScheduler

_THREE_POINTS = [[17.0, 78.0], [17.1, 78.1], [17.2, 78.2]]
_FIVE_POINTS = [[17.0, 78.0], [17.1, 78.1], [17.2, 78.2], [17.3, 78.3], [17.4, 78.4]]
_FRAME_S = 1.0 / 60.0


class FakeClock:
    def __init__(self, now: float = 0.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingListener(SimulationListener):
    def __init__(self) -> None:
        self.zones = []
        self.created = []
        self.positions = []
        self.statuses = []
        self.events = []

    def on_zone(self, center, radius_m):
        self.zones.append((center, radius_m))

    def on_vehicle_created(self, position):
        self.created.append(position)

    def on_position(self, position):
        self.positions.append(position)

    def on_status(self, snapshot):
        self.statuses.append(snapshot)

    def on_event(self, event):
        self.events.append(event)

    def kinds(self):
        return [e.kind for e in self.events]


class EngineTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.clock = FakeClock()
        self.scheduler = FrameQueueScheduler()
        self.listener = RecordingListener()
        self.engine = SimulationEngine(
            scheduler=self.scheduler, listener=self.listener, clock=self.clock
        )

    def _frame(self, seconds: float = _FRAME_S) -> int:
        self.clock.advance(seconds)
        return self.scheduler.run_pending()

    def _run_until_done(self, max_frames: int = 2000, seconds: float = _FRAME_S) -> int:
        frames = 0
        while self.engine.phase is RunPhase.RUNNING and frames < max_frames:
            self._frame(seconds)
            frames += 1
        return frames


class RouteAssignmentTests(EngineTestCase):
    def test_set_route_notifies_zone_at_midpoint(self) -> None:
        self.engine.set_route(_FIVE_POINTS, 10.0)
        self.assertEqual(self.listener.zones, [((17.2, 78.2), 1500.0)])
        self.assertEqual(self.engine.route.zone_center, (17.2, 78.2))

    def test_set_route_rejects_empty_points(self) -> None:
        with self.assertRaises(ValueError):
            self.engine.set_route([], 1.0)

    def test_set_route_rearms_but_keeps_phase_and_target(self) -> None:
        self.engine.set_route(_FIVE_POINTS, 10.0)
        self.engine.set_target_speed(70)
        self.engine.start()
        for _ in range(30):
            self._frame()
        self.assertGreater(self.engine.state.position_index, 0.0)

        self.engine.set_route(_THREE_POINTS, 4.0)

        state = self.engine.state
        self.assertEqual(state.position_index, 0.0)
        self.assertEqual(state.traveled_km, 0.0)
        self.assertEqual(state.current_speed_kmh, 0.0)
        self.assertEqual(state.target_speed_kmh, 70.0)
        self.assertIs(state.phase, RunPhase.RUNNING)
        self.assertEqual(self.engine.route.zone_center, (17.1, 78.1))


class ControlTests(EngineTestCase):
    def test_start_without_route_is_reported(self) -> None:
        with self.assertRaises(SimulationStateError):
            self.engine.start()
        self.assertIs(self.engine.phase, RunPhase.IDLE)

    def test_start_stamps_clock_and_creates_vehicle(self) -> None:
        self.engine.set_route(_THREE_POINTS, 10.0)
        self.clock.now = 42.0
        self.engine.start()

        self.assertIs(self.engine.phase, RunPhase.RUNNING)
        self.assertEqual(self.engine.state.started_at, 42.0)
        self.assertEqual(self.engine.state.last_tick_at, 42.0)
        self.assertEqual(self.listener.created, [(17.0, 78.0)])
        self.assertEqual(self.scheduler.pending(), 1)
        self.assertIn(EventKind.STARTED, self.listener.kinds())

    def test_invalid_control_calls_are_noops(self) -> None:
        self.engine.pause()
        self.engine.resume()
        self.assertIs(self.engine.phase, RunPhase.IDLE)
        self.assertEqual(self.listener.events, [])

        self.engine.set_route(_THREE_POINTS, 10.0)
        self.engine.start()
        self.engine.resume()
        self.engine.start()
        self.assertIs(self.engine.phase, RunPhase.RUNNING)
        self.assertEqual(self.listener.kinds().count(EventKind.STARTED), 1)
        self.assertNotIn(EventKind.RESUMED, self.listener.kinds())
        self.assertEqual(self.scheduler.pending(), 1)

    def test_pause_cancels_pending_tick(self) -> None:
        self.engine.set_route(_FIVE_POINTS, 10.0)
        self.engine.start()
        self._frame()
        self.engine.pause()

        self.assertIs(self.engine.phase, RunPhase.PAUSED)
        index = self.engine.state.position_index
        self.assertEqual(self._frame(), 0)
        self.assertEqual(self.engine.state.position_index, index)

    def test_stray_tick_after_pause_is_harmless(self) -> None:
        self.engine.set_route(_FIVE_POINTS, 10.0)
        self.engine.start()
        self._frame()
        self.engine.pause()
        before = self.engine.snapshot_state()
        statuses = len(self.listener.statuses)

        self.clock.advance(5.0)
        self.engine.tick()

        self.assertEqual(self.engine.snapshot_state(), before)
        self.assertEqual(len(self.listener.statuses), statuses)

    def test_resume_does_not_count_pause_duration(self) -> None:
        self.engine.set_route(_FIVE_POINTS, 10.0)
        self.engine.start()
        for _ in range(10):
            self._frame()
        self.engine.pause()

        self.clock.advance(600.0)
        self.engine.resume()
        self.assertEqual(self.engine.state.last_tick_at, self.clock.now)
        self.assertIn(EventKind.RESUMED, self.listener.kinds())

        before = self.engine.state.position_index
        self._frame(0.05)
        speed = self.engine.state.current_speed_kmh
        expected_step = 0.5 * (speed / 50.0) * 0.05 * 60
        self.assertAlmostEqual(self.engine.state.position_index - before, expected_step)

    def test_reset_is_idempotent(self) -> None:
        self.engine.set_route(_FIVE_POINTS, 10.0)
        self.engine.start()
        for _ in range(40):
            self._frame()

        self.engine.reset()
        once = self.engine.snapshot_state()
        self.engine.reset()
        twice = self.engine.snapshot_state()

        self.assertEqual(once, twice)
        self.assertIs(once.phase, RunPhase.IDLE)
        self.assertEqual(once.position_index, 0.0)
        self.assertEqual(once.traveled_km, 0.0)
        self.assertEqual(once.current_speed_kmh, 0.0)
        self.assertFalse(once.in_zone)
        self.assertEqual(self.scheduler.pending(), 0)

    def test_restart_after_completion_requires_new_route(self) -> None:
        self.engine.set_route(_THREE_POINTS, 10.0)
        self.engine.start()
        self.engine.state.current_speed_kmh = 50.0
        self._frame(1.0)
        self.assertIs(self.engine.phase, RunPhase.COMPLETED)

        with self.assertRaises(SimulationStateError):
            self.engine.start()

        self.engine.set_route(_THREE_POINTS, 10.0)
        self.engine.start()
        self.assertIs(self.engine.phase, RunPhase.RUNNING)

    def test_route_set_during_run_does_not_allow_restart_after_completion(self) -> None:
        self.engine.set_route(_FIVE_POINTS, 10.0)
        self.engine.start()
        self._frame()
        self.engine.set_route(_THREE_POINTS, 10.0)
        self.engine.state.current_speed_kmh = 50.0
        self._frame(1.0)
        self.assertIs(self.engine.phase, RunPhase.COMPLETED)

        with self.assertRaises(SimulationStateError):
            self.engine.start()
        self.assertIs(self.engine.phase, RunPhase.COMPLETED)

        self.engine.set_route(_THREE_POINTS, 10.0)
        self.engine.start()
        self.assertIs(self.engine.phase, RunPhase.RUNNING)


class TickTests(EngineTestCase):
    def test_three_point_scenario_completes_within_a_second(self) -> None:
        self.engine.set_route(_THREE_POINTS, 10.0)
        self.engine.set_target_speed(50)
        self.engine.start()

        frames = self._run_until_done()

        self.assertIs(self.engine.phase, RunPhase.COMPLETED)
        self.assertLess(frames * _FRAME_S, 1.0)
        self.assertEqual(self.engine.state.position_index, 2.0)
        final = self.listener.statuses[-1]
        self.assertEqual(final.distance_km, 10.0)
        self.assertEqual(final.eta, "00:00")

    def test_one_second_frame_at_reference_speed_moves_thirty_units(self) -> None:
        self.engine.set_route([[17.0, 78.0]] + [[17.0 + i * 0.01, 78.0] for i in range(1, 41)], 10.0)
        self.engine.start()
        self.engine.state.current_speed_kmh = 50.0
        self._frame(1.0)
        self.assertAlmostEqual(self.engine.state.position_index, 30.0)

    def test_completion_snapshot_and_no_further_ticks(self) -> None:
        self.engine.set_route(_FIVE_POINTS, 12.5)
        self.engine.set_target_speed(65)
        self.engine.start()
        self._run_until_done()

        final = self.listener.statuses[-1]
        self.assertEqual(final.current_speed, 0)
        self.assertAlmostEqual(final.distance_km, 12.5)
        self.assertEqual(final.eta, "00:00")
        self.assertEqual(final.sim_status, "Completed")
        self.assertEqual(final.zone_status, "Completed")
        self.assertEqual(final.advised_speed, 65.0)
        self.assertEqual(self.listener.kinds().count(EventKind.COMPLETED), 1)

        statuses = len(self.listener.statuses)
        self.assertEqual(self.scheduler.pending(), 0)
        self.assertEqual(self._frame(), 0)
        self.engine.tick()
        self.assertEqual(len(self.listener.statuses), statuses)

    def test_zone_transition_emits_one_event_per_edge(self) -> None:
        self.engine.set_route(_THREE_POINTS, 10.0)
        self.engine.start()
        self._run_until_done()

        kinds = self.listener.kinds()
        self.assertEqual(kinds.count(EventKind.ZONE_ENTERED), 1)
        self.assertEqual(kinds.count(EventKind.ZONE_EXITED), 1)
        self.assertLess(kinds.index(EventKind.ZONE_ENTERED), kinds.index(EventKind.ZONE_EXITED))
        entered = next(e for e in self.listener.events if e.kind is EventKind.ZONE_ENTERED)
        self.assertEqual(entered.text, "Entered school zone - Speed limited to 30 km/h")
        in_zone_snapshots = [s for s in self.listener.statuses if s.zone_status == "School Zone"]
        self.assertGreater(len(in_zone_snapshots), 1)

    def test_zone_center_forces_zone_speed(self) -> None:
        self.engine.set_route(_THREE_POINTS, 10.0)
        self.engine.set_target_speed(80)
        self.engine.start()
        self.engine.state.position_index = 1.0

        self.engine.tick()

        self.assertTrue(self.engine.state.in_zone)
        status = self.listener.statuses[-1]
        self.assertEqual(status.advised_speed, 30.0)
        self.assertEqual(status.zone_status, "School Zone")

    def test_speed_change_per_tick_is_capped(self) -> None:
        self.engine.set_route(_FIVE_POINTS, 10.0)
        self.engine.set_target_speed(80)
        self.engine.start()
        for frame in range(120):
            if frame == 60:
                self.engine.set_target_speed(20)
            before = self.engine.state.current_speed_kmh
            self._frame(0.25)
            if self.engine.phase is not RunPhase.RUNNING:
                break
            after = self.engine.state.current_speed_kmh
            self.assertLessEqual(abs(after - before), 0.3 + 1e-9)

    def test_traveled_distance_uses_point_count(self) -> None:
        self.engine.set_route(_FIVE_POINTS, 10.0)
        self.engine.start()
        for _ in range(25):
            self._frame()

        state = self.engine.state
        self.assertAlmostEqual(state.traveled_km, state.position_index / 5 * 10.0)
        self.assertEqual(self.listener.statuses[-1].distance_km, round(state.traveled_km, 2))

    def test_eta_from_average_speed(self) -> None:
        self.engine.set_route(_FIVE_POINTS, 10.0)
        self.engine.start()
        self.engine.state.current_speed_kmh = 50.0
        self.engine.state.started_at = -1800.0
        self._frame(0.1)

        self.assertAlmostEqual(self.engine.state.position_index, 3.0)
        status = self.listener.statuses[-1]
        self.assertEqual(status.distance_km, 6.0)
        self.assertEqual(status.current_speed, 50)
        self.assertEqual(status.eta, "20:00")
        self.assertEqual(status.sim_status, "Running")
        self.assertEqual(status.zone_status, "Normal")

    def test_first_tick_without_elapsed_time_has_zero_eta(self) -> None:
        self.engine.set_route(_FIVE_POINTS, 0.0)
        self.engine.start()
        self.scheduler.run_pending()

        status = self.listener.statuses[-1]
        self.assertEqual(status.eta, "00:00")
        self.assertEqual(status.distance_km, 0.0)

    def test_single_point_route_completes_on_first_tick(self) -> None:
        self.engine.set_route([[17.0, 78.0]], 0.0)
        self.engine.start()
        self.scheduler.run_pending()

        self.assertIs(self.engine.phase, RunPhase.COMPLETED)
        self.assertEqual(self.listener.statuses[-1].distance_km, 0.0)
        self.assertIn(EventKind.COMPLETED, self.listener.kinds())

    def test_backwards_clock_moves_vehicle_back(self) -> None:
        self.engine.set_route(_FIVE_POINTS, 10.0)
        self.engine.start()
        for _ in range(20):
            self._frame()
        before = self.engine.state.position_index

        self._frame(-0.5)

        self.assertLess(self.engine.state.position_index, before)

    def test_positions_are_interpolated_between_points(self) -> None:
        self.engine.set_route(_FIVE_POINTS, 10.0)
        self.engine.start()
        self.engine.state.position_index = 0.5
        self.engine.tick()
        lat, lon = self.listener.positions[-1]
        self.assertAlmostEqual(lat, 17.05)
        self.assertAlmostEqual(lon, 78.05)


class PolicyHelperTests(unittest.TestCase):
    def test_format_eta(self) -> None:
        self.assertEqual(format_eta(0), "00:00")
        self.assertEqual(format_eta(2.5), "02:30")
        self.assertEqual(format_eta(61.999), "61:59")

    def test_approach_speed(self) -> None:
        self.assertEqual(approach_speed(0.0, 50.0, 0.3), 0.3)
        self.assertEqual(approach_speed(30.1, 30.0, 0.3), 30.0)
        self.assertAlmostEqual(approach_speed(50.0, 30.0, 0.3), 49.7)
        self.assertEqual(approach_speed(30.0, 30.0, 0.3), 30.0)


if __name__ == "__main__":
    unittest.main()
