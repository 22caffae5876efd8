"""Modele d'entree d'un calcul: la periode d'emploi."""

from __future__ import annotations

import datetime
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from enum import Enum

from custoclt.errors import (
    InvalidIntervalError,
    InvalidSalaryError,
    InvalidTerminationTypeError,
)
from custoclt.money import Nombre, to_decimal
from custoclt.payroll.dates import as_utc_date, today_utc
from custoclt.payroll.rates import Sector


class TerminationType(str, Enum):
    """Type de fin de contrat (tipo de rescisao)."""

    UNJUST_DISMISSAL = "unjust_dismissal"  # Demissao sem justa causa
    JUST_CAUSE_DISMISSAL = "just_cause_dismissal"  # Demissao com justa causa
    RESIGNATION = "resignation"  # Pedido de demissao
    MUTUAL_AGREEMENT = "mutual_agreement"  # Acordo (art. 484-A CLT)
    CONTRACT_END = "contract_end"  # Termino de contrato
    RETIREMENT = "retirement"  # Aposentadoria


@dataclass(frozen=True)
class EmploymentPeriod:
    """Periode d'emploi fournie par l'appelant, immuable pour un calcul.

    Une date de fin absente signifie un contrat en cours: la fin est la date
    du jour (UTC).
    """

    start_date: datetime.date
    end_date: datetime.date | None
    base_salary: Nombre
    sector: Sector | str = Sector.DEFAULT
    termination_type: TerminationType | None = None


@dataclass(frozen=True)
class ValidatedPeriod:
    """Periode validee: dates UTC normalisees et salaire en Decimal."""

    start: datetime.date
    end: datetime.date
    base_salary: Decimal
    termination_type: TerminationType | None = None


def validate_period(period: EmploymentPeriod) -> ValidatedPeriod:
    """Valide une periode d'emploi avant tout calcul mensuel.

    Raises:
        InvalidIntervalError: Si la date de fin precede la date de debut.
        InvalidSalaryError: Si le salaire est nul, negatif ou non fini.
        InvalidTerminationTypeError: Si le type de fin de contrat est inconnu.
    """
    debut = as_utc_date(period.start_date)
    fin = as_utc_date(period.end_date) if period.end_date is not None else today_utc()
    if fin < debut:
        raise InvalidIntervalError(
            f"La date de fin ({fin.isoformat()}) precede la date de debut "
            f"({debut.isoformat()})"
        )

    try:
        salaire = to_decimal(period.base_salary)
    except (InvalidOperation, TypeError, ValueError) as e:
        raise InvalidSalaryError(f"Salaire de base invalide: {period.base_salary!r}") from e
    if not salaire.is_finite() or salaire <= 0:
        raise InvalidSalaryError(
            f"Le salaire de base doit etre superieur a zero (recu: {period.base_salary})"
        )

    type_fin = None
    if period.termination_type is not None:
        try:
            type_fin = TerminationType(period.termination_type)
        except ValueError as e:
            raise InvalidTerminationTypeError(
                f"Type de fin de contrat inconnu: {period.termination_type!r}"
            ) from e

    return ValidatedPeriod(
        start=debut, end=fin, base_salary=salaire, termination_type=type_fin,
    )
