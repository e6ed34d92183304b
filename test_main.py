#!/usr/bin/env python3
"""
Tests for the entry-point wiring: environment overrides and headless runs.
"""

import os
import threading
import unittest
from unittest.mock import patch

import config
import main
from events.message import EventKind
from routing.service import StaticRouteService
from sim.engine import SimulationEngine
from sim.scheduler import ThreadedFrameScheduler
from sim.sim_bridge import SimBridge

_POINTS = [(17.0, 78.0), (17.001, 78.001), (17.002, 78.002)]


class BuildPolicyTests(unittest.TestCase):
    def test_target_speed_override_is_clamped(self):
        with patch.dict(os.environ, {"DRIVE_SIM_TARGET_SPEED": "200"}):
            self.assertEqual(main.build_policy().default_target_speed_kmh, config.MAX_SPEED_KMH)
        with patch.dict(os.environ, {"DRIVE_SIM_TARGET_SPEED": "5"}):
            self.assertEqual(main.build_policy().default_target_speed_kmh, config.MIN_SPEED_KMH)

    def test_target_speed_override_in_range(self):
        with patch.dict(os.environ, {"DRIVE_SIM_TARGET_SPEED": "65"}):
            self.assertEqual(main.build_policy().default_target_speed_kmh, 65.0)

    def test_bad_target_speed_falls_back_to_default(self):
        with patch.dict(os.environ, {"DRIVE_SIM_TARGET_SPEED": "fast"}):
            self.assertEqual(
                main.build_policy().default_target_speed_kmh,
                config.DEFAULT_TARGET_SPEED_KMH,
            )


class HeadlessRunTests(unittest.TestCase):
    def _wiring(self):
        lock = threading.RLock()
        scheduler = ThreadedFrameScheduler(interval_s=0.005, lock=lock)
        bridge = SimBridge(
            route_service=StaticRouteService(_POINTS, 0.3), scheduler=scheduler, lock=lock
        )
        return bridge, scheduler

    def test_drive_completes(self):
        bridge, scheduler = self._wiring()

        self.assertEqual(main.run_headless(bridge, scheduler, poll_s=0.01), 0)
        self.assertTrue(bridge.is_finished())
        self.assertEqual(bridge.get_status()["simStatus"], "Completed")

    def test_failing_tick_ends_the_run(self):
        bridge, scheduler = self._wiring()

        with patch.object(SimulationEngine, "tick", side_effect=RuntimeError("tick failed")):
            code = main.run_headless(bridge, scheduler, poll_s=0.01)

        self.assertEqual(code, 1)
        self.assertFalse(bridge.is_running())
        self.assertIs(bridge.get_events(1)[0].kind, EventKind.ERROR)


if __name__ == "__main__":
    unittest.main()
