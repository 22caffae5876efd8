"""Taux d'encargos patronaux par secteur d'activite.

Toutes les valeurs sont en Decimal -- jamais de float.
Source: Lei 8.212/91 (INSS patronal, RAT), Lei 8.036/90 (FGTS),
contributions aux tiers (Sistema S / SENAR).

Le RAT (assurance risque) varie de 1% a 3% selon la classe de risque du
secteur; les autres composantes sont identiques d'un secteur a l'autre,
sauf le secteur rural (SENAR 2.5% au lieu de 5.8%).
"""

from __future__ import annotations

import logging
from decimal import Decimal
from enum import Enum
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

logger = logging.getLogger(__name__)


def _float_en_texte(v: Any) -> Any:
    """Convertit un float (ex: lu depuis YAML) via son texte decimal."""
    if isinstance(v, float):
        return str(v)
    return v


TauxDecimal = Annotated[Decimal, BeforeValidator(_float_en_texte), Field(ge=0, le=1)]


class Sector(str, Enum):
    """Secteur d'activite de l'employeur (classe de risque RAT)."""

    COMMERCE = "commerce"
    SERVICES = "services"
    INDUSTRY = "industry"
    CONSTRUCTION = "construction"
    RURAL = "rural"

    # Variante par defaut explicite (alias de SERVICES)
    DEFAULT = "services"


class ChargeRates(BaseModel):
    """Ensemble des taux d'encargos appliques au salaire du mois."""

    model_config = ConfigDict(frozen=True)

    employer_social_security: TauxDecimal  # INSS patronal 20%
    severance_fund: TauxDecimal  # FGTS 8%
    risk_insurance: TauxDecimal  # RAT 1% a 3%
    third_party_levy: TauxDecimal  # Terceiros 5.8% (SENAR 2.5% rural)

    @property
    def total(self) -> Decimal:
        return (
            self.employer_social_security
            + self.severance_fund
            + self.risk_insurance
            + self.third_party_levy
        )


INSS_PATRONAL = Decimal("0.20")
FGTS = Decimal("0.08")
TERCEIROS = Decimal("0.058")

SECTOR_RATES: dict[Sector, ChargeRates] = {
    Sector.COMMERCE: ChargeRates(
        employer_social_security=INSS_PATRONAL,
        severance_fund=FGTS,
        risk_insurance=Decimal("0.01"),  # Risque faible
        third_party_levy=TERCEIROS,
    ),
    Sector.SERVICES: ChargeRates(
        employer_social_security=INSS_PATRONAL,
        severance_fund=FGTS,
        risk_insurance=Decimal("0.02"),  # Risque moyen
        third_party_levy=TERCEIROS,
    ),
    Sector.INDUSTRY: ChargeRates(
        employer_social_security=INSS_PATRONAL,
        severance_fund=FGTS,
        risk_insurance=Decimal("0.02"),  # Risque moyen
        third_party_levy=TERCEIROS,
    ),
    Sector.CONSTRUCTION: ChargeRates(
        employer_social_security=INSS_PATRONAL,
        severance_fund=FGTS,
        risk_insurance=Decimal("0.03"),  # Risque eleve (maximum)
        third_party_levy=TERCEIROS,
    ),
    Sector.RURAL: ChargeRates(
        employer_social_security=INSS_PATRONAL,
        severance_fund=FGTS,
        risk_insurance=Decimal("0.025"),  # RAT moyen rural
        third_party_levy=Decimal("0.025"),  # SENAR
    ),
}

# Noms portugais acceptes en entree (sans accents)
_ALIAS_SECTEURS: dict[str, Sector] = {
    "comercio": Sector.COMMERCE,
    "servicos": Sector.SERVICES,
    "industria": Sector.INDUSTRY,
    "construcao": Sector.CONSTRUCTION,
}


def resolve_sector(code: Sector | str | None) -> tuple[Sector, bool]:
    """Resout un code de secteur en Sector.

    Un code inconnu n'est pas une erreur: la classification sectorielle est
    indicative, on retombe sur Sector.DEFAULT.

    Returns:
        (secteur, repli) ou repli est True si le code etait inconnu.
    """
    if isinstance(code, Sector):
        return code, False
    if code is None:
        return Sector.DEFAULT, False

    cle = str(code).strip().lower()
    try:
        return Sector(cle), False
    except ValueError:
        pass
    if cle in _ALIAS_SECTEURS:
        return _ALIAS_SECTEURS[cle], False

    logger.warning(
        "Secteur inconnu %r: taux du secteur %s appliques", code, Sector.DEFAULT.value,
    )
    return Sector.DEFAULT, True


def rates_for(sector: Sector | str | None) -> ChargeRates:
    """Retourne les taux d'encargos du secteur (repli sur le defaut si inconnu)."""
    secteur, _repli = resolve_sector(sector)
    return SECTOR_RATES[secteur]
