from __future__ import annotations

import json
import math
import unittest
from datetime import time

from tests.unit._bootstrap import ensure_project_on_path


ensure_project_on_path()


class TestSerialization(unittest.TestCase):
    def test_to_jsonable_dataclasses_and_scalars(self) -> None:
        import numpy as np

        from core.checkpoint_projector import ArrivalRow
        from services.serialization import to_jsonable

        row = ArrivalRow(
            name="A",
            distance_m=1000.0,
            section_distance_m=None,
            run_time_s=np.float64(360.0),
            dwell_s=0.0,
            elapsed_s=360.0,
            clock_s=math.nan,
            kind="checkpoint",
        )
        out = to_jsonable({"row": row, "start": time(7, 0), "n": np.int64(3)})
        self.assertEqual(out["row"]["run_time_s"], 360.0)
        self.assertIsNone(out["row"]["clock_s"])
        self.assertEqual(out["start"], "07:00:00")
        self.assertEqual(out["n"], 3)
        json.dumps(out)

    def test_df_to_records_replaces_nan(self) -> None:
        import pandas as pd

        from services.serialization import df_to_records

        df = pd.DataFrame({"a": [1.0, math.nan], "b": ["x", None]})
        self.assertEqual(df_to_records(df), [{"a": 1.0, "b": "x"}, {"a": None, "b": None}])
        self.assertEqual(df_to_records(df, limit=1), [{"a": 1.0, "b": "x"}])

    def test_plotly_figure(self) -> None:
        import plotly.graph_objects as go

        from services.serialization import to_jsonable

        fig = go.Figure(go.Scatter(x=[0, 1], y=[10, 20]))
        out = to_jsonable(fig)
        self.assertEqual(out["type"], "plotly")
        self.assertIn("data", out["figure"])
        json.dumps(out)


if __name__ == "__main__":
    unittest.main()
