"""Arithmetique des intervalles de dates pour les competences mensuelles.

Toute l'arithmetique se fait sur des datetime.date (UTC, date seulement):
aucune heure locale, aucun changement d'heure ne peut decaler un jour.

L'intervalle d'emploi est traite en interne comme [debut, fin_exclusive).
Le drapeau inclusive_end de la configuration decide si la date de fin
fournie par l'appelant compte comme jour travaille (fin + 1 jour).
"""

from __future__ import annotations

import calendar
import datetime
from collections.abc import Iterator
from enum import Enum

from dateutil.relativedelta import relativedelta


class DayCountBasis(str, Enum):
    """Base de decompte des jours d'un mois."""

    CALENDAR = "calendar"  # Nombre reel de jours (gregorien)
    COMMERCIAL_30 = "commercial30"  # Tous les mois ont 30 jours (estimations forfaitaires)


def as_utc_date(value: datetime.date | datetime.datetime) -> datetime.date:
    """Ramene une date ou un datetime a une date UTC sans heure.

    Un datetime avec fuseau est d'abord converti en UTC; un datetime naif
    est considere comme deja exprime en UTC.
    """
    if isinstance(value, datetime.datetime):
        if value.tzinfo is not None:
            value = value.astimezone(datetime.timezone.utc)
        return value.date()
    return value


def today_utc() -> datetime.date:
    """Date du jour en UTC (fin implicite d'un intervalle ouvert)."""
    return datetime.datetime.now(datetime.timezone.utc).date()


def days_in_month(
    year: int,
    month: int,
    basis: DayCountBasis | str = DayCountBasis.CALENDAR,
) -> int:
    """Nombre de jours du mois selon la base de decompte."""
    if DayCountBasis(basis) is DayCountBasis.COMMERCIAL_30:
        return 30
    return calendar.monthrange(year, month)[1]


def step_to_next_month(d: datetime.date) -> datetime.date:
    """Premier jour du mois suivant celui de `d`."""
    return d.replace(day=1) + relativedelta(months=1)


def exclusive_end(end: datetime.date, inclusive: bool) -> datetime.date:
    """Borne de fin exclusive: avance d'un jour si la date de fin est travaillee."""
    if inclusive:
        return end + datetime.timedelta(days=1)
    return end


def overlap_days(
    start: datetime.date,
    end_exclusive: datetime.date,
    year: int,
    month: int,
) -> int:
    """Nombre de jours de [start, end_exclusive) tombant dans le mois donne.

    Retourne 0 si l'intervalle ne touche pas le mois.
    """
    start = as_utc_date(start)
    end_exclusive = as_utc_date(end_exclusive)

    debut_mois = datetime.date(year, month, 1)
    fin_mois_exclusive = step_to_next_month(debut_mois)

    debut = max(start, debut_mois)
    fin = min(end_exclusive, fin_mois_exclusive)
    if fin <= debut:
        return 0
    return (fin - debut).days


def iter_months(
    start: datetime.date,
    end_exclusive: datetime.date,
) -> Iterator[tuple[int, int]]:
    """Genere (annee, mois) pour chaque mois calendaire touche par l'intervalle."""
    curseur = as_utc_date(start).replace(day=1)
    fin = as_utc_date(end_exclusive)
    while curseur < fin:
        yield curseur.year, curseur.month
        curseur = step_to_next_month(curseur)


def count_full_months(start: datetime.date, end_exclusive: datetime.date) -> int:
    """Nombre de mois calendaires entierement couverts par l'intervalle."""
    return sum(
        1
        for annee, mois in iter_months(start, end_exclusive)
        if overlap_days(start, end_exclusive, annee, mois) == days_in_month(annee, mois)
    )
