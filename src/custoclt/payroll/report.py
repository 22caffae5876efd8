"""Assemblage du rapport de cout du travail.

Combine le resultat du moteur d'accumulation (encargos et provisions mois par
mois) et celui du moteur de rescision en un sommaire unique, avec des avis
informatifs (jamais des erreurs).
"""

from __future__ import annotations

import datetime
import logging
from dataclasses import dataclass
from decimal import Decimal

from custoclt.money import RoundingPolicy
from custoclt.payroll.accrual import PeriodReport, compute_accrual_period
from custoclt.payroll.config import CalculationConfig, VacationMethod, config_for_sector
from custoclt.payroll.dates import DayCountBasis, count_full_months, exclusive_end
from custoclt.payroll.models import EmploymentPeriod, TerminationType, validate_period
from custoclt.payroll.rates import Sector, resolve_sector
from custoclt.payroll.severance import SeveranceResult, compute_severance

logger = logging.getLogger(__name__)

CENT = Decimal("100")
RAT_MAXIMAL = Decimal("0.03")


@dataclass(frozen=True)
class EmployeeSummary:
    """Donnees de l'employe telles qu'utilisees par le calcul."""

    start_date: datetime.date
    end_date: datetime.date
    base_salary: Decimal
    sector: Sector
    termination_type: TerminationType | None
    calendar_days_worked: int
    full_months: int  # Mois calendaires entierement couverts


@dataclass(frozen=True)
class CostSummary:
    """Totaux du rapport de cout."""

    salaries_paid: Decimal
    mandatory_charges: Decimal
    provisions: Decimal
    termination_cost: Decimal
    estimated_total_cost: Decimal  # salaires + encargos + rescision
    average_monthly_cost: Decimal
    charges_percentage: Decimal  # (encargos + rescision) / salaires, en %


@dataclass(frozen=True)
class LaborCostReport:
    """Rapport complet: accumulation, rescision, totaux et avis."""

    employee: EmployeeSummary
    period: PeriodReport
    severance: SeveranceResult
    totals: CostSummary
    advisories: tuple[str, ...]


def estimation_config(sector: Sector | str | None = None) -> CalculationConfig:
    """Configuration d'estimation forfaitaire: taux du secteur, base 30 jours."""
    return config_for_sector(
        sector,
        provision_partial_month=True,
        day_count_basis=DayCountBasis.COMMERCIAL_30,
        vacation_method=VacationMethod.MONTHLY_FRACTION,
        rounding=RoundingPolicy(),
    )


def _pourcentage(numerateur: Decimal, denominateur: Decimal, arrondi: RoundingPolicy) -> Decimal:
    if denominateur <= 0:
        return Decimal("0.0")
    return RoundingPolicy(decimals=1, mode=arrondi.mode).round(
        numerateur / denominateur * CENT
    )


def assemble_report(
    period: EmploymentPeriod,
    config: CalculationConfig | None = None,
) -> LaborCostReport:
    """Calcule le rapport de cout du travail complet d'une periode d'emploi.

    Sans configuration explicite, utilise estimation_config() pour le secteur
    de la periode. Avec une configuration, ses taux sont utilises tels quels
    et le secteur ne sert qu'aux avis.

    Raises:
        InvalidIntervalError: Si la fin precede le debut.
        InvalidSalaryError: Si le salaire de base est <= 0.
        InvalidTerminationTypeError: Si le type de fin de contrat est inconnu.
    """
    periode = validate_period(period)
    secteur, repli = resolve_sector(period.sector)
    if config is None:
        config = estimation_config(secteur)
    arrondi = config.rounding

    accumulation = compute_accrual_period(period, config)
    rescision = compute_severance(
        period, config, severance_fund_balance=accumulation.severance_fund_balance,
    )

    fin_exclusive = exclusive_end(periode.end, config.inclusive_end)
    mois_complets = count_full_months(periode.start, fin_exclusive)

    salaires = accumulation.totals.salary
    encargos = accumulation.totals.charges
    cout_rescision = rescision.termination_cost
    cout_total = arrondi.sum([salaires, encargos, cout_rescision])
    nb_mois = len(accumulation.months) or 1
    pourcentage = _pourcentage(encargos + cout_rescision, salaires, arrondi)

    # --- Avis informatifs ---
    avis: list[str] = list(rescision.advisories)
    if mois_complets == 0:
        avis.append("Aucun mois complet travaille - calculs proportionnels appliques")
    if pourcentage > config.charges_warning_threshold:
        avis.append(f"Les encargos totaux representent {pourcentage}% du salaire")
    if secteur is Sector.CONSTRUCTION and config.rates.risk_insurance >= RAT_MAXIMAL:
        avis.append("Secteur construction civile - RAT maximal applique (3%)")
    if repli:
        avis.append(
            f"Secteur inconnu '{period.sector}': taux du secteur "
            f"{Sector.DEFAULT.value} appliques"
        )

    logger.debug("Rapport assemble: cout total %s, %d avis", cout_total, len(avis))

    return LaborCostReport(
        employee=EmployeeSummary(
            start_date=periode.start,
            end_date=periode.end,
            base_salary=periode.base_salary,
            sector=secteur,
            termination_type=periode.termination_type,
            calendar_days_worked=(fin_exclusive - periode.start).days,
            full_months=mois_complets,
        ),
        period=accumulation,
        severance=rescision,
        totals=CostSummary(
            salaries_paid=salaires,
            mandatory_charges=encargos,
            provisions=accumulation.totals.provisions,
            termination_cost=cout_rescision,
            estimated_total_cost=cout_total,
            average_monthly_cost=arrondi.round(cout_total / nb_mois),
            charges_percentage=pourcentage,
        ),
        advisories=tuple(avis),
    )
