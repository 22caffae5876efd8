"""Commandes CLI de calcul.

Usage:
    cclt calc accrual 2025-05-01 100000 --end 2025-08-01
    cclt calc severance 2024-01-01 2024-12-31 8000 --termination unjust_dismissal
    cclt calc report 2024-01-15 2025-08-31 5000 --sector servicos -t unjust_dismissal --csv out.csv
    cclt calc sectors
"""

from __future__ import annotations

import datetime
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from custoclt.errors import CalculationInputError
from custoclt.payroll.accrual import PeriodReport, compute_accrual_period
from custoclt.payroll.config import CalculationConfig, config_for_sector, load_config
from custoclt.payroll.models import EmploymentPeriod, TerminationType
from custoclt.payroll.rates import SECTOR_RATES, Sector
from custoclt.payroll.report import LaborCostReport, assemble_report
from custoclt.payroll.severance import SeveranceResult, compute_severance

app = typer.Typer(no_args_is_help=True)
console = Console()


def _erreur(message: str) -> typer.Exit:
    console.print(f"[red]Erreur: {message}[/red]")
    return typer.Exit(code=1)


def _date(valeur: str) -> datetime.date:
    try:
        return datetime.date.fromisoformat(valeur)
    except ValueError:
        raise _erreur(f"date invalide '{valeur}' (format attendu: AAAA-MM-JJ)")


def _montant(valeur: str) -> Decimal:
    try:
        return Decimal(valeur)
    except InvalidOperation:
        raise _erreur(f"montant invalide '{valeur}'")


def _configuration() -> CalculationConfig | None:
    """Configuration du fichier --config, sinon None."""
    from custoclt.cli.app import get_config_path

    chemin = get_config_path()
    if chemin is None:
        return None
    try:
        return load_config(chemin)
    except (FileNotFoundError, ValidationError) as e:
        raise _erreur(str(e))


@app.command("accrual")
def accrual(
    debut: str = typer.Argument(..., help="Date d'entree (AAAA-MM-JJ)"),
    salaire: str = typer.Argument(..., help="Salaire de base mensuel"),
    fin: Optional[str] = typer.Option(
        None, "--end", "-e", help="Date de sortie (defaut: aujourd'hui)",
    ),
    secteur: str = typer.Option(
        Sector.DEFAULT.value, "--sector", "-s", help="Secteur d'activite",
    ),
) -> None:
    """Afficher les encargos et provisions de chaque competence."""
    periode = EmploymentPeriod(
        start_date=_date(debut),
        end_date=_date(fin) if fin else None,
        base_salary=_montant(salaire),
        sector=secteur,
    )
    config = _configuration()
    if config is None:
        config = config_for_sector(secteur)
    try:
        resultat = compute_accrual_period(periode, config)
    except CalculationInputError as e:
        raise _erreur(str(e))

    _afficher_competences(resultat, config.currency)


@app.command("severance")
def severance(
    debut: str = typer.Argument(..., help="Date d'entree (AAAA-MM-JJ)"),
    fin: str = typer.Argument(..., help="Date de sortie (AAAA-MM-JJ)"),
    salaire: str = typer.Argument(..., help="Salaire de base mensuel"),
    type_fin: Optional[TerminationType] = typer.Option(
        None, "--termination", "-t", help="Type de fin de contrat",
    ),
    secteur: str = typer.Option(
        Sector.DEFAULT.value, "--sector", "-s", help="Secteur d'activite",
    ),
) -> None:
    """Afficher les verbas rescisorias a la fin du contrat."""
    periode = EmploymentPeriod(
        start_date=_date(debut),
        end_date=_date(fin),
        base_salary=_montant(salaire),
        sector=secteur,
        termination_type=type_fin,
    )
    config = _configuration()
    if config is None:
        config = config_for_sector(secteur)
    try:
        resultat = compute_severance(periode, config)
    except CalculationInputError as e:
        raise _erreur(str(e))

    _afficher_rescision(resultat, config.currency)


@app.command("report")
def report(
    debut: str = typer.Argument(..., help="Date d'entree (AAAA-MM-JJ)"),
    fin: str = typer.Argument(..., help="Date de sortie (AAAA-MM-JJ)"),
    salaire: str = typer.Argument(..., help="Salaire de base mensuel"),
    secteur: str = typer.Option(
        Sector.DEFAULT.value, "--sector", "-s", help="Secteur d'activite",
    ),
    type_fin: Optional[TerminationType] = typer.Option(
        None, "--termination", "-t", help="Type de fin de contrat",
    ),
    csv: Optional[str] = typer.Option(
        None, "--csv", help="Exporter le detail mensuel en CSV",
    ),
) -> None:
    """Rapport complet: salaires, encargos, provisions, rescision et avis."""
    periode = EmploymentPeriod(
        start_date=_date(debut),
        end_date=_date(fin),
        base_salary=_montant(salaire),
        sector=secteur,
        termination_type=type_fin,
    )
    config = _configuration()
    try:
        resultat = assemble_report(periode, config)
    except CalculationInputError as e:
        raise _erreur(str(e))

    devise = config.currency if config else "BRL"
    _afficher_sommaire(resultat, devise)
    _afficher_competences(resultat.period, devise)
    _afficher_rescision(resultat.severance, devise)

    if resultat.advisories:
        console.print("\n[bold]Observations[/bold]")
        for avis in resultat.advisories:
            console.print(f"  [yellow]- {avis}[/yellow]")

    if csv:
        from custoclt.reports.csv_export import report_to_csv

        chemin = report_to_csv(resultat, Path(csv))
        console.print(f"\n[green]Detail mensuel exporte: {chemin}[/green]")


@app.command("sectors")
def sectors() -> None:
    """Afficher la table des taux d'encargos par secteur."""
    table = Table(title="Taux d'encargos par secteur", show_header=True, header_style="bold")
    table.add_column("Secteur", style="cyan")
    table.add_column("INSS", justify="right")
    table.add_column("FGTS", justify="right")
    table.add_column("RAT", justify="right")
    table.add_column("Terceiros", justify="right")
    table.add_column("Total", justify="right")

    for secteur, taux in SECTOR_RATES.items():
        nom = secteur.value
        if secteur is Sector.DEFAULT:
            nom += " (defaut)"
        table.add_row(
            nom,
            _pct(taux.employer_social_security),
            _pct(taux.severance_fund),
            _pct(taux.risk_insurance),
            _pct(taux.third_party_levy),
            f"[bold]{_pct(taux.total)}[/bold]",
        )

    console.print(table)


def _pct(taux: Decimal) -> str:
    return f"{(taux * 100).normalize():f}%"


def _afficher_competences(resultat: PeriodReport, devise: str) -> None:
    """Affiche le detail mensuel des encargos et provisions avec Rich."""
    table = Table(
        title=f"Competences ({devise})", show_header=True, header_style="bold",
    )
    table.add_column("Competence", style="cyan")
    table.add_column("Jours", justify="right")
    table.add_column("Salaire", justify="right")
    table.add_column("Encargos", justify="right")
    table.add_column("Provisions", justify="right")
    table.add_column("Total", justify="right")

    for m in resultat.months:
        jours = f"{m.days_worked}/{m.days_in_month}"
        provisions = f"{m.provisions.total}"
        if not m.is_fully_provisioned:
            provisions = f"[dim]{provisions}[/dim]"
        table.add_row(
            m.competency_id,
            jours,
            f"{m.prorated_salary}",
            f"{m.charges.total}",
            provisions,
            f"{m.month_total}",
        )

    table.add_section()
    table.add_row(
        "[bold]Total[/bold]",
        "",
        f"[bold]{resultat.totals.salary}[/bold]",
        f"[bold]{resultat.totals.charges}[/bold]",
        f"[bold]{resultat.totals.provisions}[/bold]",
        f"[bold green]{resultat.totals.grand_total}[/bold green]",
    )

    console.print(table)


def _afficher_rescision(resultat: SeveranceResult, devise: str) -> None:
    """Affiche les verbas rescisorias avec Rich."""
    table = Table(
        title=f"Verbas rescisorias ({devise})", show_header=True, header_style="bold",
    )
    table.add_column("Element", style="cyan")
    table.add_column("Montant", justify="right")

    table.add_row(
        f"  13e proportionnel ({resultat.qualifying_months_thirteenth} mois)",
        f"{resultat.proportional_thirteenth}",
    )
    table.add_row(
        f"  Ferias proportionnelles ({resultat.qualifying_months_vacation} mois)",
        f"{resultat.proportional_vacation}",
    )
    table.add_row("  1/3 de ferias", f"{resultat.vacation_bonus}")
    table.add_row("  FGTS sur verbas", f"{resultat.severance_fund_on_benefits}")
    table.add_row("[bold]Total verbas[/bold]", f"[bold]{resultat.total}[/bold]")

    table.add_section()
    table.add_row("  Solde FGTS", f"{resultat.severance_fund_balance}")
    if resultat.termination_fine is not None:
        table.add_row("  Amende FGTS", f"{resultat.termination_fine}")
    if resultat.notice_indemnity is not None:
        table.add_row(
            f"  Aviso previo ({resultat.notice_days} jours)",
            f"{resultat.notice_indemnity}",
        )
    table.add_row(
        "[bold]Cout de rescision[/bold]",
        f"[bold red]{resultat.termination_cost}[/bold red]",
    )

    console.print(table)


def _afficher_sommaire(resultat: LaborCostReport, devise: str) -> None:
    """Affiche le sommaire du rapport de cout avec Rich."""
    employe = resultat.employee
    totaux = resultat.totals
    table = Table(
        title=(
            f"Cout du travail {employe.start_date} a {employe.end_date} - "
            f"Salaire: {employe.base_salary} {devise}"
        ),
        show_header=True,
        header_style="bold",
    )
    table.add_column("Element", style="cyan")
    table.add_column("Montant", justify="right")

    table.add_row("  Secteur", employe.sector.value)
    table.add_row("  Jours travailles", f"{employe.calendar_days_worked}")
    table.add_row("  Mois complets", f"{employe.full_months}")

    table.add_section()
    table.add_row("  Salaires payes", f"{totaux.salaries_paid}")
    table.add_row("  Encargos obligatoires", f"{totaux.mandatory_charges}")
    table.add_row("  Provisions constituees", f"{totaux.provisions}")
    table.add_row("  Cout de rescision", f"{totaux.termination_cost}")

    table.add_section()
    table.add_row(
        "[bold green]Cout total estime[/bold green]",
        f"[bold green]{totaux.estimated_total_cost}[/bold green]",
    )
    table.add_row("  Cout moyen mensuel", f"{totaux.average_monthly_cost}")
    table.add_row("  Encargos sur salaire", f"{totaux.charges_percentage}%")

    console.print(table)
