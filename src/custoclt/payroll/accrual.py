"""Moteur d'accumulation: encargos et provisions par competence mensuelle.

Pour chaque mois calendaire touche par la periode d'emploi:
1. Jours travailles = intersection de l'intervalle avec le mois (0 -> ignore)
2. Mois complet si jours >= jours du mois (selon la base de decompte)
3. Salaire du mois = salaire de base * facteur de prorata
4. Encargos = salaire du mois * chaque taux (INSS, FGTS, RAT, terceiros)
5. Provisions = 1/12 du salaire * facteur (13e, ferias), 1/3 de ferias,
   FGTS sur provisions
6. Total du mois = encargos + provisions

Toutes les fonctions sont pures et tous les montants passent par la
politique d'arrondi de la configuration. Les totaux de periode sont des
sommes sans derive (sum_rounded) des valeurs mensuelles deja arrondies.
"""

from __future__ import annotations

import datetime
import logging
from dataclasses import dataclass
from decimal import Decimal

from custoclt.money import RoundingPolicy
from custoclt.payroll.config import CalculationConfig, VacationMethod
from custoclt.payroll.dates import days_in_month, exclusive_end, iter_months, overlap_days
from custoclt.payroll.models import EmploymentPeriod, validate_period
from custoclt.payroll.rates import ChargeRates

logger = logging.getLogger(__name__)

UN = Decimal("1")
ZERO = Decimal("0")
MOIS_PAR_AN = 12
JOURS_PAR_AN = 365


@dataclass(frozen=True)
class MonthlyCharges:
    """Encargos patronaux d'une competence (ou leur cumul sur la periode)."""

    employer_social_security: Decimal  # INSS patronal
    severance_fund: Decimal  # Depot FGTS
    risk_insurance: Decimal  # RAT
    third_party_levy: Decimal  # Terceiros
    total: Decimal


@dataclass(frozen=True)
class MonthlyProvisions:
    """Provisions d'une competence (ou leur cumul sur la periode)."""

    thirteenth_salary: Decimal
    vacation: Decimal
    vacation_bonus: Decimal  # 1/3 constitutionnel
    severance_fund_on_provisions: Decimal
    total: Decimal


@dataclass(frozen=True)
class CompetencyMonth:
    """Tranche d'un mois calendaire de la periode d'emploi."""

    year: int
    month: int
    days_in_month: int  # Selon la base de decompte
    days_worked: int  # Plafonne a days_in_month
    calendar_days: int  # Intersection brute avec le mois
    salary_factor: Decimal
    provisions_factor: Decimal
    prorated_salary: Decimal
    charges: MonthlyCharges
    provisions: MonthlyProvisions
    month_total: Decimal
    is_fully_provisioned: bool

    @property
    def competency_id(self) -> str:
        return f"{self.year}-{self.month:02d}"

    @property
    def is_full_month(self) -> bool:
        return self.calendar_days >= self.days_in_month


@dataclass(frozen=True)
class PeriodTotals:
    """Totaux agreges de la periode."""

    salary: Decimal
    charges: Decimal
    provisions: Decimal
    grand_total: Decimal  # encargos + provisions


@dataclass(frozen=True)
class PeriodReport:
    """Resultat complet de l'accumulation sur la periode d'emploi."""

    months: tuple[CompetencyMonth, ...]
    totals: PeriodTotals
    charges_breakdown: MonthlyCharges
    provisions_breakdown: MonthlyProvisions

    @property
    def severance_fund_balance(self) -> Decimal:
        """Solde FGTS accumule: somme des depots mensuels."""
        return self.charges_breakdown.severance_fund


# =============================================================================
# Facteurs de prorata
# =============================================================================
def proration_factors(
    days_worked: int,
    days_in_basis: int,
    config: CalculationConfig,
) -> tuple[Decimal, Decimal, bool]:
    """Calcule les facteurs de prorata (salaire, provisions) d'un mois.

    Returns:
        (facteur_salaire, facteur_provisions, provisionne)
    """
    if days_worked >= days_in_basis:
        return UN, UN, True

    facteur_salaire = min(UN, Decimal(days_worked) / Decimal(days_in_basis))
    if not config.provision_partial_month:
        return facteur_salaire, ZERO, False
    if config.vacation_method is VacationMethod.DAILY_FRACTION:
        return facteur_salaire, Decimal(days_worked) / Decimal(JOURS_PAR_AN), True
    return facteur_salaire, facteur_salaire, True


# =============================================================================
# Encargos (INSS patronal, FGTS, RAT, terceiros)
# =============================================================================
def compute_charges(
    prorated_salary: Decimal,
    rates: ChargeRates,
    rounding: RoundingPolicy,
) -> MonthlyCharges:
    """Calcule les encargos patronaux sur le salaire du mois.

    Chaque composante est arrondie individuellement; le total est la somme
    sans derive des composantes arrondies.
    """
    inss = rounding.round(prorated_salary * rates.employer_social_security)
    fgts = rounding.round(prorated_salary * rates.severance_fund)
    rat = rounding.round(prorated_salary * rates.risk_insurance)
    terceiros = rounding.round(prorated_salary * rates.third_party_levy)
    return MonthlyCharges(
        employer_social_security=inss,
        severance_fund=fgts,
        risk_insurance=rat,
        third_party_levy=terceiros,
        total=rounding.sum([inss, fgts, rat, terceiros]),
    )


# =============================================================================
# Provisions (13e salaire, ferias, 1/3 de ferias, FGTS sur provisions)
# =============================================================================
def compute_provisions(
    base_salary: Decimal,
    provisions_factor: Decimal,
    severance_fund_rate: Decimal,
    rounding: RoundingPolicy,
) -> MonthlyProvisions:
    """Calcule les provisions d'une competence.

    13e = ferias = (salaire / 12) * facteur
    1/3 de ferias = ferias / 3
    FGTS sur provisions = (13e + ferias + 1/3) * taux FGTS
    """
    parcelle_mensuelle = base_salary / MOIS_PAR_AN
    decimo = rounding.round(parcelle_mensuelle * provisions_factor)
    ferias = rounding.round(parcelle_mensuelle * provisions_factor)
    terco = rounding.round(ferias / 3)
    fgts = rounding.round((decimo + ferias + terco) * severance_fund_rate)
    return MonthlyProvisions(
        thirteenth_salary=decimo,
        vacation=ferias,
        vacation_bonus=terco,
        severance_fund_on_provisions=fgts,
        total=rounding.sum([decimo, ferias, terco, fgts]),
    )


def compute_month(
    start: datetime.date,
    end_exclusive: datetime.date,
    year: int,
    month: int,
    base_salary: Decimal,
    config: CalculationConfig,
) -> CompetencyMonth | None:
    """Calcule une competence mensuelle; None si aucun jour travaille dans le mois."""
    jours = overlap_days(start, end_exclusive, year, month)
    if jours <= 0:
        return None

    jours_base = days_in_month(year, month, config.day_count_basis)
    facteur_salaire, facteur_provisions, provisionne = proration_factors(
        jours, jours_base, config,
    )
    arrondi = config.rounding

    salaire_mois = arrondi.round(base_salary * facteur_salaire)
    encargos = compute_charges(salaire_mois, config.rates, arrondi)
    provisions = compute_provisions(
        base_salary, facteur_provisions, config.rates.severance_fund, arrondi,
    )

    return CompetencyMonth(
        year=year,
        month=month,
        days_in_month=jours_base,
        days_worked=min(jours, jours_base),
        calendar_days=jours,
        salary_factor=facteur_salaire,
        provisions_factor=facteur_provisions,
        prorated_salary=salaire_mois,
        charges=encargos,
        provisions=provisions,
        month_total=arrondi.round(encargos.total + provisions.total),
        is_fully_provisioned=provisionne,
    )


def _cumuler_encargos(mois: list[CompetencyMonth], arrondi: RoundingPolicy) -> MonthlyCharges:
    return MonthlyCharges(
        employer_social_security=arrondi.sum(m.charges.employer_social_security for m in mois),
        severance_fund=arrondi.sum(m.charges.severance_fund for m in mois),
        risk_insurance=arrondi.sum(m.charges.risk_insurance for m in mois),
        third_party_levy=arrondi.sum(m.charges.third_party_levy for m in mois),
        total=arrondi.sum(m.charges.total for m in mois),
    )


def _cumuler_provisions(
    mois: list[CompetencyMonth], arrondi: RoundingPolicy,
) -> MonthlyProvisions:
    return MonthlyProvisions(
        thirteenth_salary=arrondi.sum(m.provisions.thirteenth_salary for m in mois),
        vacation=arrondi.sum(m.provisions.vacation for m in mois),
        vacation_bonus=arrondi.sum(m.provisions.vacation_bonus for m in mois),
        severance_fund_on_provisions=arrondi.sum(
            m.provisions.severance_fund_on_provisions for m in mois
        ),
        total=arrondi.sum(m.provisions.total for m in mois),
    )


def compute_accrual_period(
    period: EmploymentPeriod,
    config: CalculationConfig | None = None,
) -> PeriodReport:
    """Calcule les encargos et provisions de chaque competence de la periode.

    Args:
        period: Periode d'emploi (debut, fin optionnelle, salaire de base).
        config: Configuration du calcul (defaut: CalculationConfig()).

    Returns:
        PeriodReport avec les competences dans l'ordre chronologique et les
        totaux agreges.

    Raises:
        InvalidIntervalError: Si la fin precede le debut.
        InvalidSalaryError: Si le salaire de base est <= 0.
    """
    config = config or CalculationConfig()
    periode = validate_period(period)
    arrondi = config.rounding
    fin_exclusive = exclusive_end(periode.end, config.inclusive_end)

    mois: list[CompetencyMonth] = []
    for annee, numero_mois in iter_months(periode.start, fin_exclusive):
        competence = compute_month(
            periode.start, fin_exclusive, annee, numero_mois,
            periode.base_salary, config,
        )
        if competence is not None:
            mois.append(competence)

    total_salaire = arrondi.sum(m.prorated_salary for m in mois)
    encargos = _cumuler_encargos(mois, arrondi)
    provisions = _cumuler_provisions(mois, arrondi)

    logger.debug(
        "Accumulation %s -> %s: %d competences, encargos %s, provisions %s",
        periode.start, periode.end, len(mois), encargos.total, provisions.total,
    )

    return PeriodReport(
        months=tuple(mois),
        totals=PeriodTotals(
            salary=total_salaire,
            charges=encargos.total,
            provisions=provisions.total,
            grand_total=arrondi.sum([encargos.total, provisions.total]),
        ),
        charges_breakdown=encargos,
        provisions_breakdown=provisions,
    )
