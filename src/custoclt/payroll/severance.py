"""Moteur de rescision: verbas rescisorias a la fin du contrat.

Recalcule independamment du moteur d'accumulation les mois qui comptent
pour le 13e salaire et les vacances (regle des 15 jours), puis ajoute les
montants propres au type de fin de contrat:

- demissao sem justa causa: amende de 40% sur le solde FGTS + aviso previo
  indemnise (30 jours + 3 jours par annee complete, maximum 90 jours);
- acordo (art. 484-A CLT): amende de 20% sur le solde FGTS, sans aviso previo;
- autres types: ni amende ni aviso previo.
"""

from __future__ import annotations

import datetime
import logging
from dataclasses import dataclass
from decimal import Decimal

from custoclt.payroll.accrual import compute_accrual_period
from custoclt.payroll.config import CalculationConfig, VacationMethod
from custoclt.payroll.dates import exclusive_end, iter_months, overlap_days
from custoclt.payroll.models import EmploymentPeriod, TerminationType, validate_period

logger = logging.getLogger(__name__)

SEUIL_REGLE_15_JOURS = 15
MOIS_PAR_AN = 12
JOURS_PAR_AN = 365

AVISO_JOURS_BASE = 30
AVISO_JOURS_PAR_ANNEE = 3
AVISO_JOURS_MAX = 90
AVISO_DIVISEUR = 30  # Salaire journalier = salaire / 30

# Taux d'amende sur le solde FGTS par type de fin de contrat
TAUX_AMENDE_FGTS: dict[TerminationType, Decimal] = {
    TerminationType.UNJUST_DISMISSAL: Decimal("0.40"),
    TerminationType.MUTUAL_AGREEMENT: Decimal("0.20"),
}


@dataclass(frozen=True)
class QualifyingMonths:
    """Decompte des mois admissibles et des jours travailles."""

    thirteenth: int
    vacation: int
    total_days_worked: int


@dataclass(frozen=True)
class SeveranceResult:
    """Verbas rescisorias calculees a la fin de la periode d'emploi."""

    qualifying_months_thirteenth: int
    qualifying_months_vacation: int
    total_days_worked: int

    proportional_thirteenth: Decimal
    proportional_vacation: Decimal
    vacation_bonus: Decimal
    severance_fund_on_benefits: Decimal
    severance_fund_balance: Decimal

    # Propres au type de fin de contrat (None si non applicable)
    termination_fine: Decimal | None
    notice_days: int | None
    notice_indemnity: Decimal | None

    total: Decimal  # 13e + ferias + 1/3 + FGTS sur verbas
    termination_cost: Decimal  # total + amende + aviso previo
    advisories: tuple[str, ...] = ()


def count_qualifying_months(
    start: datetime.date,
    end_exclusive: datetime.date,
    apply_fifteen_day_rule: bool = True,
) -> QualifyingMonths:
    """Compte les mois admissibles au 13e et aux vacances.

    Un mois compte seulement si au moins 15 jours y ont ete travailles,
    sauf si la regle est desactivee (tout jour travaille fait compter le mois).
    """
    mois_13 = 0
    mois_ferias = 0
    total_jours = 0

    for annee, mois in iter_months(start, end_exclusive):
        jours = overlap_days(start, end_exclusive, annee, mois)
        if jours <= 0:
            continue
        total_jours += jours
        if not apply_fifteen_day_rule or jours >= SEUIL_REGLE_15_JOURS:
            mois_13 += 1
            mois_ferias += 1

    return QualifyingMonths(
        thirteenth=mois_13, vacation=mois_ferias, total_days_worked=total_jours,
    )


def notice_days_for(total_days_worked: int) -> int:
    """Jours d'aviso previo: 30 + 3 par annee complete, plafonne a 90 (Lei 12.506/2011)."""
    annees = total_days_worked // JOURS_PAR_AN
    return min(AVISO_JOURS_BASE + AVISO_JOURS_PAR_ANNEE * annees, AVISO_JOURS_MAX)


def compute_severance(
    period: EmploymentPeriod,
    config: CalculationConfig | None = None,
    severance_fund_balance: Decimal | None = None,
) -> SeveranceResult:
    """Calcule les verbas rescisorias de la periode d'emploi.

    Args:
        period: Periode d'emploi; termination_type choisit amende et aviso previo.
        config: Configuration du calcul (defaut: CalculationConfig()).
        severance_fund_balance: Solde FGTS accumule. Si None, il est derive
            des depots mensuels calcules par le moteur d'accumulation.

    Returns:
        SeveranceResult avec toutes les composantes arrondies.

    Raises:
        InvalidIntervalError: Si la fin precede le debut.
        InvalidSalaryError: Si le salaire de base est <= 0.
        InvalidTerminationTypeError: Si le type de fin de contrat est inconnu.
    """
    config = config or CalculationConfig()
    periode = validate_period(period)
    arrondi = config.rounding
    fin_exclusive = exclusive_end(periode.end, config.inclusive_end)
    salaire = periode.base_salary

    admissibles = count_qualifying_months(
        periode.start, fin_exclusive, config.apply_fifteen_day_rule,
    )

    parcelle_mensuelle = salaire / MOIS_PAR_AN
    decimo = arrondi.round(parcelle_mensuelle * admissibles.thirteenth)

    if config.vacation_method is VacationMethod.DAILY_FRACTION:
        fraction_annee = Decimal(admissibles.total_days_worked) / Decimal(JOURS_PAR_AN)
        ferias = arrondi.round(parcelle_mensuelle * fraction_annee)
    else:
        ferias = arrondi.round(parcelle_mensuelle * admissibles.vacation)

    terco = arrondi.round(ferias / 3)
    fgts_verbas = arrondi.round((decimo + ferias + terco) * config.rates.severance_fund)
    total = arrondi.sum([decimo, ferias, terco, fgts_verbas])

    if severance_fund_balance is None:
        solde_fgts = compute_accrual_period(period, config).severance_fund_balance
    else:
        solde_fgts = arrondi.round(severance_fund_balance)

    # --- Montants propres au type de fin de contrat ---
    amende: Decimal | None = None
    jours_aviso: int | None = None
    aviso: Decimal | None = None
    avis: list[str] = []

    type_fin = periode.termination_type
    if type_fin in TAUX_AMENDE_FGTS:
        taux_amende = TAUX_AMENDE_FGTS[type_fin]
        amende = arrondi.round(solde_fgts * taux_amende)

    if type_fin is TerminationType.UNJUST_DISMISSAL:
        jours_aviso = notice_days_for(admissibles.total_days_worked)
        aviso = arrondi.round(salaire / AVISO_DIVISEUR * jours_aviso)
        avis.append("Amende de 40% du FGTS et aviso previo indemnise inclus")
    elif type_fin is TerminationType.MUTUAL_AGREEMENT:
        avis.append("Amende de 20% du FGTS incluse (acordo trabalhista)")

    cout_rescision = arrondi.sum([total, amende or 0, aviso or 0])

    logger.debug(
        "Rescision %s -> %s (%s): %d mois 13e, total %s, cout %s",
        periode.start, periode.end, type_fin, admissibles.thirteenth, total, cout_rescision,
    )

    return SeveranceResult(
        qualifying_months_thirteenth=admissibles.thirteenth,
        qualifying_months_vacation=admissibles.vacation,
        total_days_worked=admissibles.total_days_worked,
        proportional_thirteenth=decimo,
        proportional_vacation=ferias,
        vacation_bonus=terco,
        severance_fund_on_benefits=fgts_verbas,
        severance_fund_balance=solde_fgts,
        termination_fine=amende,
        notice_days=jours_aviso,
        notice_indemnity=aviso,
        total=total,
        termination_cost=cout_rescision,
        advisories=tuple(avis),
    )
