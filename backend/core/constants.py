"""Constantes partagees (sans dependance UI).

Ce module centralise les seuils et valeurs par defaut utilises dans core/ et services/.
Garder ce module sans dependances (hors stdlib).
"""

from __future__ import annotations


# Filtre d'hysteresis pour le D+/D- : une variation n'est comptee qu'a partir de ce seuil.
ELEVATION_HYSTERESIS_M: float = 3.0

# Un point de passage a moins de cette distance du depart / de l'arrivee est traite
# comme le depart / l'arrivee (pas de temps d'arret compte).
EDGE_TOLERANCE_M: float = 100.0

# Pente (%) strictement en dessous de laquelle l'allure de descente s'applique.
DESCENT_GRADIENT_THRESHOLD: float = -5.0

# Triplet d'allures de reference (plat : montee : descente) du mode temps cible.
REFERENCE_FLAT_PACE: float = 1.0
REFERENCE_CLIMB_PACE: float = 2.0
REFERENCE_DESCENT_PACE: float = 0.8

SECONDS_PER_DAY: int = 24 * 3600

# Nombre maximal de points affiches sur le profil altimetrique.
PROFILE_MAX_POINTS: int = 2000
