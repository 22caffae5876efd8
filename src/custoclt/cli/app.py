"""Application CLI principale CustoCLT."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

import custoclt

app = typer.Typer(
    name="cclt",
    help="CustoCLT - Cout du travail CLT: encargos, provisions et rescision",
    no_args_is_help=True,
)

console = Console()

# Options globales stockees via le callback
_config_path: Path | None = None


def get_config_path() -> Path | None:
    """Retourne le chemin du fichier de configuration YAML, s'il a ete fourni."""
    return _config_path


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"CustoCLT version {custoclt.__version__}")
        raise typer.Exit()


@app.callback()
def main(
    config: Optional[str] = typer.Option(
        None,
        "--config",
        "-c",
        help="Chemin vers un fichier YAML de configuration de calcul",
    ),
    verbose: bool = typer.Option(
        False, "--verbose", help="Journalisation detaillee (DEBUG)",
    ),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        help="Afficher la version de CustoCLT",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """CustoCLT - Calcul des encargos, provisions et verbas rescisorias CLT."""
    global _config_path
    _config_path = Path(config) if config else None
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=console, show_path=False)],
        )


# Import et enregistrement des sous-commandes
from custoclt.cli.calc import app as calc_app  # noqa: E402

app.add_typer(calc_app, name="calc", help="Calculs d'encargos, provisions et rescision")
