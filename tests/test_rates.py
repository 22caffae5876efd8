"""Tests pour la table des taux sectoriels (rates.py)."""

import logging
from decimal import Decimal

import pytest
from pydantic import ValidationError

from custoclt.payroll.rates import (
    SECTOR_RATES,
    ChargeRates,
    Sector,
    rates_for,
    resolve_sector,
)


class TestSectorRates:
    def test_tous_les_secteurs_ont_des_taux(self) -> None:
        for secteur in Sector:
            assert secteur in SECTOR_RATES

    def test_defaut_est_services(self) -> None:
        assert Sector.DEFAULT is Sector.SERVICES

    def test_taux_communs(self) -> None:
        taux = SECTOR_RATES[Sector.COMMERCE]
        assert taux.employer_social_security == Decimal("0.20")
        assert taux.severance_fund == Decimal("0.08")
        assert taux.third_party_levy == Decimal("0.058")

    @pytest.mark.parametrize(
        ("secteur", "rat"),
        [
            (Sector.COMMERCE, Decimal("0.01")),
            (Sector.SERVICES, Decimal("0.02")),
            (Sector.INDUSTRY, Decimal("0.02")),
            (Sector.CONSTRUCTION, Decimal("0.03")),
            (Sector.RURAL, Decimal("0.025")),
        ],
    )
    def test_rat_par_secteur(self, secteur: Sector, rat: Decimal) -> None:
        assert SECTOR_RATES[secteur].risk_insurance == rat

    def test_rural_senar(self) -> None:
        assert SECTOR_RATES[Sector.RURAL].third_party_levy == Decimal("0.025")

    def test_total(self) -> None:
        assert SECTOR_RATES[Sector.SERVICES].total == Decimal("0.358")
        assert SECTOR_RATES[Sector.CONSTRUCTION].total == Decimal("0.368")


class TestChargeRates:
    def test_float_converti_par_le_texte(self) -> None:
        taux = ChargeRates(
            employer_social_security=0.2,
            severance_fund=0.08,
            risk_insurance=0.02,
            third_party_levy=0.058,
        )
        assert taux.third_party_levy == Decimal("0.058")

    def test_taux_superieur_a_un_rejete(self) -> None:
        with pytest.raises(ValidationError):
            ChargeRates(
                employer_social_security="1.5",
                severance_fund="0.08",
                risk_insurance="0.02",
                third_party_levy="0.058",
            )

    def test_taux_negatif_rejete(self) -> None:
        with pytest.raises(ValidationError):
            ChargeRates(
                employer_social_security="0.20",
                severance_fund="-0.08",
                risk_insurance="0.02",
                third_party_levy="0.058",
            )


class TestResolveSector:
    def test_code_anglais(self) -> None:
        assert resolve_sector("construction") == (Sector.CONSTRUCTION, False)

    def test_alias_portugais(self) -> None:
        assert resolve_sector("comercio") == (Sector.COMMERCE, False)
        assert resolve_sector("Servicos") == (Sector.SERVICES, False)
        assert resolve_sector("industria") == (Sector.INDUSTRY, False)
        assert resolve_sector("construcao") == (Sector.CONSTRUCTION, False)

    def test_none_donne_le_defaut_sans_repli(self) -> None:
        assert resolve_sector(None) == (Sector.DEFAULT, False)

    def test_code_inconnu_retombe_sur_le_defaut(self, caplog) -> None:
        with caplog.at_level(logging.WARNING, logger="custoclt.payroll.rates"):
            secteur, repli = resolve_sector("mineracao")
        assert secteur is Sector.DEFAULT
        assert repli is True
        assert "mineracao" in caplog.text

    def test_rates_for(self) -> None:
        assert rates_for("rural") is SECTOR_RATES[Sector.RURAL]
        assert rates_for("inconnu") is SECTOR_RATES[Sector.DEFAULT]
