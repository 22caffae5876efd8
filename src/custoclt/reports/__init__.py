"""Exports du rapport de cout du travail."""

from custoclt.reports.csv_export import EN_TETES, period_rows, report_to_csv

__all__ = [
    "EN_TETES",
    "period_rows",
    "report_to_csv",
]
