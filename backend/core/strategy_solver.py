from __future__ import annotations

"""Mode temps cible : recalcule les allures plat / montee / descente.

Le temps total est lineaire en l'echelle des allures tant que le ratio
1 : 2 : 0.8 est fixe ; une seule simulation de reference suffit.
"""

import logging
from dataclasses import replace
from typing import Sequence

from core.checkpoint_projector import total_dwell_seconds
from core.constants import REFERENCE_CLIMB_PACE, REFERENCE_DESCENT_PACE, REFERENCE_FLAT_PACE
from core.models import Checkpoint, Strategy, TrackSample
from core.pace_simulator import simulate, total_time_s
from core.transform_report import TransformReport


logger = logging.getLogger("coursepace.core.strategy_solver")


def reference_strategy(strategy: Strategy) -> Strategy:
    return replace(
        strategy,
        flat_pace=REFERENCE_FLAT_PACE,
        climb_pace=REFERENCE_CLIMB_PACE,
        descent_pace=REFERENCE_DESCENT_PACE,
    )


def _fallback(strategy: Strategy, reason: str, report: TransformReport | None, **details) -> Strategy:
    logger.warning("solver_fallback", extra={"reason": reason, **details})
    if report is not None:
        report.add("solver:fallback", rows_in=1, rows_out=1, reason=reason, details=details or None)
    return strategy


def solve(
    track: Sequence[TrackSample],
    checkpoints: Sequence[Checkpoint],
    total_distance: float,
    strategy: Strategy,
    *,
    report: TransformReport | None = None,
) -> Strategy:
    """Strategie effective : identite en mode "pace", allures resolues en mode "target_time".

    Les cas degeneres renvoient la strategie inchangee (pas d'exception).
    """
    if strategy.mode != "target_time":
        return strategy

    target_s = strategy.target_seconds
    dwell_s = total_dwell_seconds(checkpoints, total_distance, strategy.dwell_time_per_checkpoint)
    net_target_s = target_s - dwell_s
    if net_target_s <= 0:
        return _fallback(
            strategy, "non-positive net target time", report, target_s=target_s, dwell_s=dwell_s
        )

    reference_s = total_time_s(simulate(track, reference_strategy(strategy)))
    if reference_s <= 0:
        return _fallback(strategy, "zero reference time", report, reference_s=reference_s)

    ratio = net_target_s / reference_s
    solved = replace(
        strategy,
        flat_pace=REFERENCE_FLAT_PACE * ratio,
        climb_pace=REFERENCE_CLIMB_PACE * ratio,
        descent_pace=REFERENCE_DESCENT_PACE * ratio,
    )
    if report is not None:
        report.add(
            "solver:paces",
            rows_in=1,
            rows_out=1,
            reason="rescaled reference paces",
            details={"ratio": ratio, "net_target_s": net_target_s, "reference_s": reference_s},
        )
    logger.info("solver_ok", extra={"ratio": round(ratio, 4), "net_target_s": net_target_s})
    return solved
