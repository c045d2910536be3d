"""Helpers de serialisation (sans UI).

Convertit des objets backend (dataclasses, pandas, numpy, figures plotly)
en structures 100% JSON-serialisables pour l'API.
"""

from __future__ import annotations

from dataclasses import fields, is_dataclass
from datetime import date, datetime, time
from typing import Any

import numpy as np
import pandas as pd


def _is_nan(value: Any) -> bool:
    try:
        return bool(value != value)
    except Exception:
        return False


def df_to_records(df: pd.DataFrame, *, limit: int | None = None) -> list[dict[str, Any]]:
    if df is None:
        return []
    if limit is not None:
        df = df.head(int(limit))
    # IMPORTANT: cast en object pour conserver None dans les colonnes numeriques.
    safe = df.copy().astype(object)
    safe = safe.where(pd.notna(safe), None)
    return [{str(k): to_jsonable(v) for k, v in row.items()} for row in safe.to_dict(orient="records")]


def to_jsonable(obj: Any, *, dataframe_limit: int | None = None) -> Any:
    """Convertit obj en primitives JSON-serialisables.

    Retourne uniquement dict/list/str/int/float/bool/None.
    """

    if obj is None:
        return None

    if isinstance(obj, (datetime, date)):
        return obj.isoformat()
    if isinstance(obj, time):
        return obj.strftime("%H:%M:%S")

    # Scalaire numpy
    if isinstance(obj, np.generic):
        return to_jsonable(obj.item())

    if isinstance(obj, (str, int, bool)):
        return obj
    if isinstance(obj, float):
        return None if _is_nan(obj) or obj in (float("inf"), float("-inf")) else obj

    if isinstance(obj, dict):
        return {str(k): to_jsonable(v, dataframe_limit=dataframe_limit) for k, v in obj.items()}
    if isinstance(obj, (list, tuple, set)):
        return [to_jsonable(v, dataframe_limit=dataframe_limit) for v in obj]
    if isinstance(obj, np.ndarray):
        return [to_jsonable(v) for v in obj.tolist()]

    if isinstance(obj, pd.DataFrame):
        return {
            "type": "dataframe",
            "shape": [int(obj.shape[0]), int(obj.shape[1])],
            "columns": [str(c) for c in obj.columns],
            "records": df_to_records(obj, limit=dataframe_limit),
        }

    # Figures Plotly (ou tout objet exposant to_plotly_json)
    to_plotly_json = getattr(obj, "to_plotly_json", None)
    if callable(to_plotly_json):
        return {
            "type": "plotly",
            "figure": to_jsonable(to_plotly_json(), dataframe_limit=dataframe_limit),
        }

    if is_dataclass(obj) and not isinstance(obj, type):
        out: dict[str, Any] = {}
        for f in fields(obj):
            out[f.name] = to_jsonable(getattr(obj, f.name), dataframe_limit=dataframe_limit)
        return out

    return str(obj)
