"""Erreurs d'entree du moteur de calcul.

Toutes les erreurs sont synchrones et locales a un appel: elles sont levees
avant le traitement du premier mois, jamais en cours de route.
"""


class CalculationInputError(ValueError):
    """Entree de calcul rejetee."""


class InvalidIntervalError(CalculationInputError):
    """La date de fin precede la date de debut."""


class InvalidSalaryError(CalculationInputError):
    """Salaire de base nul, negatif ou non fini."""


class InvalidTerminationTypeError(CalculationInputError):
    """Type de fin de contrat inconnu."""
