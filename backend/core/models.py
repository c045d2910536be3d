from __future__ import annotations

"""Types valeur du moteur (parcours, points de passage, strategie).

Toutes les classes sont figees : chaque transformation renvoie de nouvelles
instances via dataclasses.replace().
"""

from dataclasses import dataclass
from datetime import time
from typing import Literal

from core.constants import DESCENT_GRADIENT_THRESHOLD
from core.errors import StrategyError


CalculationMode = Literal["pace", "target_time"]


@dataclass(frozen=True)
class RawSample:
    latitude: float
    longitude: float
    elevation: float


@dataclass(frozen=True)
class RawMarker:
    latitude: float
    longitude: float
    elevation: float
    name: str


@dataclass(frozen=True)
class TrackSample:
    latitude: float
    longitude: float
    elevation: float
    distance_from_start: float
    gradient: float = 0.0
    predicted_time: float | None = None


@dataclass(frozen=True)
class Checkpoint:
    latitude: float
    longitude: float
    elevation: float
    name: str
    distance_from_start: float
    predicted_time: float | None = None


@dataclass(frozen=True)
class Course:
    samples: tuple[TrackSample, ...]
    checkpoints: tuple[Checkpoint, ...]
    total_distance: float
    elevation_gain: float
    elevation_loss: float


@dataclass(frozen=True)
class Strategy:
    """Politique d'allure (min/km) fonction de la pente.

    En mode "target_time", les trois allures sont recalculees par le solveur ;
    elles restent les valeurs de repli si la resolution echoue.
    pace_distribution_ratio = 1 : allure constante ; 0.8 : vitesse finale a 80 %.
    """

    mode: CalculationMode = "pace"
    flat_pace: float = 6.0
    climb_pace: float = 12.0
    descent_pace: float = 5.5
    climb_gradient_threshold: float = 10.0
    descent_gradient_threshold: float = DESCENT_GRADIENT_THRESHOLD
    dwell_time_per_checkpoint: float = 5.0
    start_clock_time: time = time(7, 0)
    pace_distribution_ratio: float = 1.0
    target_hours: int = 10
    target_minutes: int = 0

    @property
    def target_seconds(self) -> float:
        return float(self.target_hours) * 3600.0 + float(self.target_minutes) * 60.0

    @property
    def dwell_seconds_per_checkpoint(self) -> float:
        return float(self.dwell_time_per_checkpoint) * 60.0

    def validate(self) -> None:
        if self.mode not in ("pace", "target_time"):
            raise StrategyError(f"Mode de calcul inconnu: {self.mode!r}")
        # Aussi en mode "target_time" : le solveur peut retomber sur ces allures.
        for label, pace in (
            ("flat_pace", self.flat_pace),
            ("climb_pace", self.climb_pace),
            ("descent_pace", self.descent_pace),
        ):
            if not pace > 0:
                raise StrategyError(f"{label} doit etre > 0 (recu {pace}).")
        if not 0 < self.pace_distribution_ratio <= 1:
            raise StrategyError("pace_distribution_ratio doit etre dans ]0, 1].")
        if self.dwell_time_per_checkpoint < 0:
            raise StrategyError("Temps d'arret negatif interdit.")
        if self.target_hours < 0 or self.target_minutes < 0:
            raise StrategyError("Temps cible negatif interdit.")
