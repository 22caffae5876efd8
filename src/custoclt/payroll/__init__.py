"""Moteur de calcul CLT: encargos, provisions et verbas rescisorias."""

from custoclt.payroll.accrual import (
    CompetencyMonth,
    MonthlyCharges,
    MonthlyProvisions,
    PeriodReport,
    PeriodTotals,
    compute_accrual_period,
)
from custoclt.payroll.config import (
    CalculationConfig,
    VacationMethod,
    config_for_sector,
    load_config,
)
from custoclt.payroll.dates import DayCountBasis
from custoclt.payroll.models import EmploymentPeriod, TerminationType
from custoclt.payroll.rates import ChargeRates, Sector, rates_for
from custoclt.payroll.report import LaborCostReport, assemble_report, estimation_config
from custoclt.payroll.severance import SeveranceResult, compute_severance

__all__ = [
    "CalculationConfig",
    "ChargeRates",
    "CompetencyMonth",
    "DayCountBasis",
    "EmploymentPeriod",
    "LaborCostReport",
    "MonthlyCharges",
    "MonthlyProvisions",
    "PeriodReport",
    "PeriodTotals",
    "Sector",
    "SeveranceResult",
    "TerminationType",
    "VacationMethod",
    "assemble_report",
    "compute_accrual_period",
    "compute_severance",
    "config_for_sector",
    "estimation_config",
    "load_config",
    "rates_for",
]
