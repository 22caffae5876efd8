"""Arrondi monetaire: politique d'arrondi canonique et somme sans derive.

Toutes les valeurs sont en Decimal -- jamais de float. Les float ne sont
acceptes qu'a la frontiere (to_decimal) et passent par leur representation
decimale la plus courte, jamais par leur expansion binaire.

Deux modes:
- half-even (defaut): une egalite exacte va au voisin pair (arrondi bancaire);
- half-up: une egalite exacte s'eloigne de zero.

Les egalites sont detectees exactement par Decimal.quantize -- aucun epsilon.
"""

from __future__ import annotations

from collections.abc import Iterable
from decimal import ROUND_HALF_EVEN, ROUND_HALF_UP, Decimal, localcontext
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

Nombre = Decimal | int | float | str


class RoundingMode(str, Enum):
    """Mode d'arrondi applique a chaque montant produit par le moteur."""

    HALF_EVEN = "half-even"
    HALF_UP = "half-up"


_MODES_DECIMAL = {
    RoundingMode.HALF_EVEN: ROUND_HALF_EVEN,
    RoundingMode.HALF_UP: ROUND_HALF_UP,
}


def to_decimal(value: Nombre) -> Decimal:
    """Convertit une valeur d'entree en Decimal.

    Les float passent par str() pour que 1.235 devienne Decimal("1.235")
    et non 1.2350000000000000977.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise TypeError("Un booleen n'est pas un montant")
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def _quantum(decimals: int) -> Decimal:
    if decimals < 0:
        raise ValueError(f"Nombre de decimales invalide: {decimals}")
    return Decimal(1).scaleb(-decimals)


def round_money(
    value: Nombre,
    decimals: int = 2,
    mode: RoundingMode | str = RoundingMode.HALF_EVEN,
) -> Decimal:
    """Arrondit un montant a `decimals` decimales selon `mode`.

    Une entree non finie (NaN, +/-Infinity) donne zero au lieu de se
    propager dans les agregats.

    Exemples:
        round_money(1.245, 2, "half-even") -> Decimal("1.24")
        round_money(1.245, 2, "half-up")   -> Decimal("1.25")
    """
    quantum = _quantum(decimals)
    montant = to_decimal(value)
    if not montant.is_finite():
        return Decimal(0).quantize(quantum)
    # La precision doit couvrir tous les chiffres entiers plus les decimales
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, montant.adjusted() + decimals + 2)
        return montant.quantize(quantum, rounding=_MODES_DECIMAL[RoundingMode(mode)])


def sum_rounded(
    values: Iterable[Nombre],
    decimals: int = 2,
    mode: RoundingMode | str = RoundingMode.HALF_EVEN,
) -> Decimal:
    """Somme sans derive: arrondit chaque element, somme, puis arrondit le total.

    Le dernier arrondi garantit que l'agregat tombe exactement sur la grille
    decimale, meme si les entrees venaient d'une autre echelle.
    """
    arrondis = [round_money(v, decimals, mode) for v in values]
    if not arrondis:
        return round_money(0, decimals, mode)
    with localcontext() as ctx:
        chiffres = max(a.adjusted() for a in arrondis) + len(str(len(arrondis)))
        ctx.prec = max(ctx.prec, chiffres + decimals + 2)
        total = sum(arrondis, Decimal(0))
    return round_money(total, decimals, mode)


class RoundingPolicy(BaseModel):
    """Politique d'arrondi active pour un calcul (decimales + mode)."""

    model_config = ConfigDict(frozen=True)

    decimals: int = Field(default=2, ge=0, le=10)
    mode: RoundingMode = RoundingMode.HALF_EVEN

    def round(self, value: Nombre) -> Decimal:
        return round_money(value, self.decimals, self.mode)

    def sum(self, values: Iterable[Nombre]) -> Decimal:
        return sum_rounded(values, self.decimals, self.mode)
