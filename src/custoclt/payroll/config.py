"""Configuration d'un calcul: taux, politiques de prorata et d'arrondi.

La configuration appartient a l'appelant et est passee par valeur a chaque
calcul (modele Pydantic gele). Aucune configuration globale mutable.

Peut etre chargee depuis un fichier YAML; une cle `sector` sans cle `rates`
selectionne les taux de la table sectorielle.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Annotated, Any

import yaml
from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

from custoclt.money import RoundingPolicy
from custoclt.payroll.dates import DayCountBasis
from custoclt.payroll.rates import (
    SECTOR_RATES,
    ChargeRates,
    Sector,
    _float_en_texte,
    rates_for,
)

logger = logging.getLogger(__name__)


class VacationMethod(str, Enum):
    """Methode de prorata des vacances (ferias)."""

    MONTHLY_FRACTION = "monthly_fraction"  # 1/12 du salaire par mois
    DAILY_FRACTION = "daily_fraction"  # jours travailles / 365


def _taux_par_defaut() -> ChargeRates:
    return SECTOR_RATES[Sector.DEFAULT]


class CalculationConfig(BaseModel):
    """Parametres d'un calcul d'encargos, de provisions et de rescision."""

    model_config = ConfigDict(frozen=True)

    rates: ChargeRates = Field(default_factory=_taux_par_defaut)
    provision_partial_month: bool = True
    day_count_basis: DayCountBasis = DayCountBasis.CALENDAR
    vacation_method: VacationMethod = VacationMethod.MONTHLY_FRACTION
    inclusive_end: bool = True
    rounding: RoundingPolicy = RoundingPolicy()
    apply_fifteen_day_rule: bool = True
    charges_warning_threshold: Annotated[
        Decimal, BeforeValidator(_float_en_texte), Field(ge=0)
    ] = Decimal("100")
    currency: str = "BRL"


def config_for_sector(sector: Sector | str | None, **overrides: Any) -> CalculationConfig:
    """Construit une configuration avec les taux du secteur donne."""
    return CalculationConfig(rates=rates_for(sector), **overrides)


# ---------------------------------------------------------------------------
# YAML par defaut integre (pour les tests et initialisation)
# ---------------------------------------------------------------------------

_CONFIG_DEFAUT_YAML = """
rates:
  employer_social_security: "0.20"
  severance_fund: "0.08"
  risk_insurance: "0.02"
  third_party_levy: "0.058"
provision_partial_month: true
day_count_basis: calendar
vacation_method: monthly_fraction
inclusive_end: true
rounding:
  decimals: 2
  mode: half-even
apply_fifteen_day_rule: true
charges_warning_threshold: "100"
currency: BRL
"""


def load_config(
    chemin: str | Path = "config/calcul.yaml",
    *,
    _default_yaml: bool = False,
) -> CalculationConfig:
    """Charge et valide une configuration de calcul depuis un fichier YAML.

    Args:
        chemin: Chemin vers le fichier YAML de configuration.
        _default_yaml: Si True, utilise la configuration par defaut integree
                       (utile pour les tests sans fichier sur disque).

    Returns:
        CalculationConfig validee par Pydantic.

    Raises:
        FileNotFoundError: Si le fichier n'existe pas et _default_yaml est False.
        pydantic.ValidationError: Si le contenu est invalide.
    """
    if _default_yaml:
        raw = yaml.safe_load(_CONFIG_DEFAUT_YAML)
    else:
        path = Path(chemin)
        if not path.exists():
            raise FileNotFoundError(f"Fichier de configuration introuvable: {chemin}")
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
        logger.info("Configuration chargee depuis %s", path)

    raw = dict(raw or {})
    secteur = raw.pop("sector", None)
    if secteur is not None and "rates" not in raw:
        raw["rates"] = rates_for(secteur)

    return CalculationConfig.model_validate(raw)
