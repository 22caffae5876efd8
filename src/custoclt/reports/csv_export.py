"""Export CSV du rapport de cout du travail.

Une ligne par competence mensuelle, suivie d'une ligne de totaux. Format
machine-readable pour la couche de presentation ou un tableur.
"""

from __future__ import annotations

import csv
from pathlib import Path

from custoclt.payroll.accrual import CompetencyMonth, PeriodReport
from custoclt.payroll.report import LaborCostReport

EN_TETES = [
    "competence",
    "jours_mois",
    "jours_travailles",
    "salaire",
    "inss_patronal",
    "fgts",
    "rat",
    "terceiros",
    "total_encargos",
    "decimo_terceiro",
    "ferias",
    "terco_ferias",
    "fgts_provisoes",
    "total_provisoes",
    "total_mois",
]


def _ligne_mois(m: CompetencyMonth) -> list:
    return [
        m.competency_id,
        m.days_in_month,
        m.days_worked,
        m.prorated_salary,
        m.charges.employer_social_security,
        m.charges.severance_fund,
        m.charges.risk_insurance,
        m.charges.third_party_levy,
        m.charges.total,
        m.provisions.thirteenth_salary,
        m.provisions.vacation,
        m.provisions.vacation_bonus,
        m.provisions.severance_fund_on_provisions,
        m.provisions.total,
        m.month_total,
    ]


def _ligne_totaux(p: PeriodReport) -> list:
    enc = p.charges_breakdown
    prov = p.provisions_breakdown
    return [
        "TOTAL",
        "",
        sum(m.days_worked for m in p.months),
        p.totals.salary,
        enc.employer_social_security,
        enc.severance_fund,
        enc.risk_insurance,
        enc.third_party_levy,
        enc.total,
        prov.thirteenth_salary,
        prov.vacation,
        prov.vacation_bonus,
        prov.severance_fund_on_provisions,
        prov.total,
        p.totals.grand_total,
    ]


def period_rows(period: PeriodReport) -> list[list]:
    """Lignes de donnees CSV (competences + totaux)."""
    lignes = [_ligne_mois(m) for m in period.months]
    lignes.append(_ligne_totaux(period))
    return lignes


def report_to_csv(report: LaborCostReport | PeriodReport, output_path: Path) -> Path:
    """Genere le detail mensuel en format CSV.

    Args:
        report: Rapport assemble ou rapport d'accumulation seul.
        output_path: Chemin du fichier CSV de sortie.

    Returns:
        Chemin du fichier CSV cree.
    """
    periode = report.period if isinstance(report, LaborCostReport) else report
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(EN_TETES)
        for row in period_rows(periode):
            writer.writerow(row)
    return output_path
