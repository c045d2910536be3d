from __future__ import annotations

import unittest
from dataclasses import replace

from tests.unit._helpers import make_checkpoint, make_track


def _mixed_track():
    distances = [i * 1000.0 for i in range(11)]
    gradients = [0, 0, 12, -8, 3, 15, -6, 0, -5, 10, 1]
    return make_track(distances, gradients=gradients)


def _checkpoints():
    return (
        make_checkpoint("Start", 0.0),
        make_checkpoint("CP1", 2500.0),
        make_checkpoint("CP2", 5000.0),
        make_checkpoint("CP3", 7500.0),
        make_checkpoint("Finish", 10000.0),
    )


class TestStrategySolver(unittest.TestCase):
    def _target_strategy(self, **overrides):
        from core.models import Strategy

        base = Strategy(
            mode="target_time",
            target_hours=10,
            target_minutes=0,
            dwell_time_per_checkpoint=15.0,
            pace_distribution_ratio=0.9,
        )
        return replace(base, **overrides)

    def test_pace_mode_is_identity(self) -> None:
        from core.models import Strategy
        from core.strategy_solver import solve

        strategy = Strategy(mode="pace")
        self.assertIs(solve(_mixed_track(), _checkpoints(), 10000.0, strategy), strategy)

    def test_round_trip_reproduces_target(self) -> None:
        from core.checkpoint_projector import total_dwell_seconds
        from core.pace_simulator import simulate, total_time_s
        from core.strategy_solver import solve

        track = _mixed_track()
        checkpoints = _checkpoints()
        strategy = self._target_strategy()

        solved = solve(track, checkpoints, 10000.0, strategy)
        dwell = total_dwell_seconds(checkpoints, 10000.0, strategy.dwell_time_per_checkpoint)
        self.assertEqual(dwell, 3 * 15 * 60)

        total = total_time_s(simulate(track, solved)) + dwell
        self.assertLess(abs(total - 10 * 3600), 1.0)

    def test_solved_paces_keep_fixed_ratio(self) -> None:
        from core.strategy_solver import solve

        solved = solve(_mixed_track(), _checkpoints(), 10000.0, self._target_strategy())
        self.assertAlmostEqual(solved.climb_pace / solved.flat_pace, 2.0, places=9)
        self.assertAlmostEqual(solved.descent_pace / solved.flat_pace, 0.8, places=9)
        self.assertEqual(solved.mode, "target_time")
        self.assertEqual(solved.dwell_time_per_checkpoint, 15.0)

    def test_non_positive_net_target_falls_back(self) -> None:
        from core.strategy_solver import solve
        from core.transform_report import TransformReport

        strategy = self._target_strategy(target_hours=0, target_minutes=45)
        report = TransformReport()
        out = solve(_mixed_track(), _checkpoints(), 10000.0, strategy, report=report)
        self.assertIs(out, strategy)
        self.assertEqual(report.find("solver:fallback").reason, "non-positive net target time")

    def test_zero_reference_time_falls_back(self) -> None:
        from core.strategy_solver import solve

        strategy = self._target_strategy()
        track = make_track([0, 0, 0])
        self.assertIs(solve(track, (), 0.0, strategy), strategy)


if __name__ == "__main__":
    unittest.main()
