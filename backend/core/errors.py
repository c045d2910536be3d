from __future__ import annotations

"""Exceptions du moteur de prediction.

Les deux heritent de ValueError : cote API, une ValueError est une erreur client (400).
"""


class ParseError(ValueError):
    """Le fichier n'est pas un enregistrement de parcours exploitable."""


class StrategyError(ValueError):
    """Strategie d'allure incoherente (allure <= 0, ratio hors bornes...)."""
