from __future__ import annotations

import unittest
from dataclasses import replace
from datetime import time

from tests.unit._helpers import make_checkpoint, make_track


class TestNearestSample(unittest.TestCase):
    def test_nearest_sample_index(self) -> None:
        from core.checkpoint_projector import nearest_sample_index

        distances = [0.0, 100.0, 200.0]
        self.assertEqual(nearest_sample_index(distances, 50.0), 0)  # egalite -> premier
        self.assertEqual(nearest_sample_index(distances, 51.0), 1)
        self.assertEqual(nearest_sample_index(distances, -5.0), 0)
        self.assertEqual(nearest_sample_index(distances, 999.0), 2)
        self.assertEqual(nearest_sample_index(distances, 200.0), 2)

    def test_duplicates_resolve_to_first(self) -> None:
        from core.checkpoint_projector import nearest_sample_index

        distances = [0.0, 100.0, 100.0, 200.0]
        self.assertEqual(nearest_sample_index(distances, 100.0), 1)
        self.assertEqual(nearest_sample_index(distances, 150.0), 1)
        self.assertEqual(nearest_sample_index(distances, 120.0), 1)

    def test_assign_checkpoint_times(self) -> None:
        from core.checkpoint_projector import assign_checkpoint_times
        from core.models import Strategy
        from core.pace_simulator import simulate

        track = simulate(make_track([0, 1000, 2000, 3000]), Strategy(flat_pace=6.0))
        checkpoints = (make_checkpoint("A", 0.0), make_checkpoint("B", 1900.0), make_checkpoint("C", 3000.0))
        out = assign_checkpoint_times(track, checkpoints)
        self.assertEqual([cp.predicted_time for cp in out], [0.0, 720.0, 1080.0])
        self.assertTrue(all(cp.predicted_time is None for cp in checkpoints))


class TestDwellAccounting(unittest.TestCase):
    def test_arrival_dwell_count_with_start_checkpoint(self) -> None:
        from core.checkpoint_projector import arrival_dwell_count

        cps = [make_checkpoint("S", 50.0), make_checkpoint("A", 3000.0), make_checkpoint("B", 6000.0)]
        self.assertEqual([arrival_dwell_count(cps, i) for i in range(3)], [0, 0, 1])

    def test_arrival_dwell_count_without_start_checkpoint(self) -> None:
        from core.checkpoint_projector import arrival_dwell_count

        cps = [make_checkpoint("A", 3000.0), make_checkpoint("B", 6000.0)]
        self.assertEqual([arrival_dwell_count(cps, i) for i in range(2)], [0, 1])

    def test_total_dwell_excludes_start_and_goal(self) -> None:
        from core.checkpoint_projector import charged_checkpoint_count, total_dwell_seconds

        cps = [
            make_checkpoint("S", 0.0),
            make_checkpoint("A", 2500.0),
            make_checkpoint("B", 5000.0),
            make_checkpoint("C", 7500.0),
            make_checkpoint("G", 9950.0),
        ]
        self.assertEqual(charged_checkpoint_count(cps, 10000.0), 3)
        self.assertEqual(total_dwell_seconds(cps, 10000.0, 15.0), 2700.0)
        self.assertEqual(total_dwell_seconds(cps[1:4], 10000.0, 15.0), 2700.0)
        self.assertEqual(total_dwell_seconds([], 10000.0, 15.0), 0.0)

    def test_edge_tolerance(self) -> None:
        from core.checkpoint_projector import is_at_goal, is_at_start

        self.assertTrue(is_at_start(make_checkpoint("S", 99.9)))
        self.assertFalse(is_at_start(make_checkpoint("S", 100.0)))
        self.assertTrue(is_at_goal(make_checkpoint("G", 9900.1), 10000.0))
        self.assertFalse(is_at_goal(make_checkpoint("G", 9900.0), 10000.0))

    def test_clock_wraps_on_midnight(self) -> None:
        from core.checkpoint_projector import clock_seconds

        self.assertEqual(clock_seconds(time(23, 0), 7200.0), 3600.0)
        self.assertEqual(clock_seconds(time(7, 0), 0.0), 7 * 3600.0)


class TestArrivalTable(unittest.TestCase):
    def _strategy(self):
        from core.models import Strategy

        return Strategy(dwell_time_per_checkpoint=10.0, start_clock_time=time(6, 30))

    def test_start_and_goal_checkpoints_replace_edge_rows(self) -> None:
        from core.checkpoint_projector import build_arrival_table

        cps = [
            replace(make_checkpoint("Depart", 0.0), predicted_time=0.0),
            replace(make_checkpoint("A", 4000.0), predicted_time=1800.0),
            replace(make_checkpoint("B", 8000.0), predicted_time=3600.0),
            replace(make_checkpoint("Arrivee", 12000.0), predicted_time=5400.0),
        ]
        rows = build_arrival_table(cps, total_distance=12000.0, total_run_time_s=5400.0, strategy=self._strategy())

        self.assertEqual([r.name for r in rows], ["Depart (START)", "A", "B", "Arrivee"])
        self.assertEqual([r.dwell_s for r in rows], [0.0, 0.0, 600.0, 1200.0])
        self.assertIsNone(rows[0].section_distance_m)
        self.assertEqual(rows[1].section_distance_m, 4000.0)
        self.assertEqual(rows[3].elapsed_s, 5400.0 + 1200.0)
        self.assertEqual(rows[3].clock_s, 6.5 * 3600 + 6600.0)

    def test_missing_edges_add_start_and_goal_rows(self) -> None:
        from core.checkpoint_projector import build_arrival_table

        cps = [
            replace(make_checkpoint("A", 4000.0), predicted_time=1800.0),
            replace(make_checkpoint("B", 8000.0), predicted_time=3600.0),
        ]
        rows = build_arrival_table(cps, total_distance=12000.0, total_run_time_s=5400.0, strategy=self._strategy())

        self.assertEqual([r.kind for r in rows], ["start", "checkpoint", "checkpoint", "goal"])
        self.assertEqual(rows[0].elapsed_s, 0.0)
        self.assertEqual(rows[0].clock_s, 6.5 * 3600)
        self.assertEqual(rows[2].elapsed_s, 3600.0 + 600.0)
        self.assertEqual(rows[3].dwell_s, 1200.0)
        self.assertEqual(rows[3].section_distance_m, 4000.0)


if __name__ == "__main__":
    unittest.main()
