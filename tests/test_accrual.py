"""Tests pour le moteur d'accumulation mensuel (accrual.py)."""

import datetime
from decimal import Decimal

import pytest
from freezegun import freeze_time

from custoclt.errors import InvalidIntervalError, InvalidSalaryError
from custoclt.money import RoundingPolicy
from custoclt.payroll.accrual import (
    compute_accrual_period,
    compute_charges,
    compute_provisions,
    proration_factors,
)
from custoclt.payroll.config import CalculationConfig, VacationMethod, config_for_sector
from custoclt.payroll.dates import DayCountBasis
from custoclt.payroll.models import EmploymentPeriod
from custoclt.payroll.rates import SECTOR_RATES, Sector

D = datetime.date


@pytest.fixture
def config_services() -> CalculationConfig:
    return config_for_sector(Sector.SERVICES)


@pytest.fixture
def config_commerciale() -> CalculationConfig:
    return config_for_sector(Sector.SERVICES, day_count_basis=DayCountBasis.COMMERCIAL_30)


# =============================================================================
# Tests des briques de calcul
# =============================================================================


class TestProrationFactors:
    def test_mois_complet(self, config_services) -> None:
        assert proration_factors(31, 31, config_services) == (Decimal(1), Decimal(1), True)

    def test_mois_partiel_avec_provisions(self, config_services) -> None:
        salaire, provisions, provisionne = proration_factors(15, 30, config_services)
        assert salaire == Decimal("0.5")
        assert provisions == Decimal("0.5")
        assert provisionne is True

    def test_mois_partiel_sans_provisions(self) -> None:
        config = CalculationConfig(provision_partial_month=False)
        salaire, provisions, provisionne = proration_factors(15, 30, config)
        assert salaire == Decimal("0.5")
        assert provisions == Decimal(0)
        assert provisionne is False

    def test_methode_journaliere(self) -> None:
        config = CalculationConfig(vacation_method=VacationMethod.DAILY_FRACTION)
        _salaire, provisions, _ = proration_factors(73, 90, config)
        assert provisions == Decimal("0.2")

    def test_facteur_plafonne_a_un(self, config_services) -> None:
        assert proration_factors(31, 30, config_services)[0] == Decimal(1)


class TestComputeCharges:
    def test_services_sur_10000(self) -> None:
        encargos = compute_charges(
            Decimal("10000.00"), SECTOR_RATES[Sector.SERVICES], RoundingPolicy(),
        )
        assert encargos.employer_social_security == Decimal("2000.00")
        assert encargos.severance_fund == Decimal("800.00")
        assert encargos.risk_insurance == Decimal("200.00")
        assert encargos.third_party_levy == Decimal("580.00")
        assert encargos.total == Decimal("3580.00")

    def test_chaque_composante_arrondie(self) -> None:
        encargos = compute_charges(
            Decimal("3225.81"), SECTOR_RATES[Sector.SERVICES], RoundingPolicy(),
        )
        assert encargos.employer_social_security == Decimal("645.16")
        assert encargos.severance_fund == Decimal("258.06")
        assert encargos.risk_insurance == Decimal("64.52")
        assert encargos.third_party_levy == Decimal("187.10")
        assert encargos.total == Decimal("1154.84")


class TestComputeProvisions:
    def test_mois_complet_sur_10000(self) -> None:
        provisions = compute_provisions(
            Decimal("10000"), Decimal(1), Decimal("0.08"), RoundingPolicy(),
        )
        assert provisions.thirteenth_salary == Decimal("833.33")
        assert provisions.vacation == Decimal("833.33")
        assert provisions.vacation_bonus == Decimal("277.78")
        assert provisions.severance_fund_on_provisions == Decimal("155.56")
        assert provisions.total == Decimal("2100.00")

    def test_facteur_nul(self) -> None:
        provisions = compute_provisions(
            Decimal("10000"), Decimal(0), Decimal("0.08"), RoundingPolicy(),
        )
        assert provisions.total == Decimal("0.00")


# =============================================================================
# Tests de la periode complete
# =============================================================================


class TestComputeAccrualPeriod:
    def test_mois_complet_janvier(self, config_services) -> None:
        periode = EmploymentPeriod(D(2025, 1, 1), D(2025, 1, 31), Decimal("10000"))
        resultat = compute_accrual_period(periode, config_services)

        assert len(resultat.months) == 1
        janvier = resultat.months[0]
        assert janvier.competency_id == "2025-01"
        assert janvier.is_full_month
        assert janvier.is_fully_provisioned
        assert janvier.prorated_salary == Decimal("10000.00")
        assert janvier.charges.total == Decimal("3580.00")
        assert janvier.provisions.total == Decimal("2100.00")
        assert janvier.month_total == Decimal("5680.00")

    def test_quatre_competences_dont_une_partielle(self, config_services) -> None:
        periode = EmploymentPeriod(D(2025, 5, 1), D(2025, 8, 1), Decimal("100000"))
        resultat = compute_accrual_period(periode, config_services)

        assert [m.competency_id for m in resultat.months] == [
            "2025-05", "2025-06", "2025-07", "2025-08",
        ]
        mai, _juin, _juillet, aout = resultat.months
        assert mai.provisions.total == Decimal("21000.00")
        assert aout.days_worked == 1
        assert not aout.is_full_month
        assert aout.prorated_salary == Decimal("3225.81")
        assert aout.charges.total == Decimal("1154.84")

    def test_totaux_egaux_a_la_somme_des_mois(self, config_services) -> None:
        periode = EmploymentPeriod(D(2024, 11, 18), D(2025, 3, 7), Decimal("4321.09"))
        resultat = compute_accrual_period(periode, config_services)

        assert resultat.totals.salary == sum(m.prorated_salary for m in resultat.months)
        assert resultat.totals.charges == sum(m.charges.total for m in resultat.months)
        assert resultat.totals.provisions == sum(m.provisions.total for m in resultat.months)
        assert resultat.totals.grand_total == resultat.totals.charges + resultat.totals.provisions

    def test_ventilation_coherente(self, config_services) -> None:
        periode = EmploymentPeriod(D(2025, 1, 10), D(2025, 6, 20), Decimal("7500"))
        resultat = compute_accrual_period(periode, config_services)
        enc = resultat.charges_breakdown

        assert enc.total == resultat.totals.charges
        assert enc.severance_fund == sum(m.charges.severance_fund for m in resultat.months)
        assert resultat.severance_fund_balance == enc.severance_fund
        assert resultat.provisions_breakdown.total == resultat.totals.provisions

    def test_base_commerciale(self, config_commerciale) -> None:
        periode = EmploymentPeriod(D(2025, 1, 15), D(2025, 1, 31), Decimal("6000"))
        resultat = compute_accrual_period(periode, config_commerciale)

        janvier = resultat.months[0]
        assert janvier.days_in_month == 30
        assert janvier.days_worked == 17
        assert janvier.prorated_salary == Decimal("3400.00")

    def test_jours_travailles_plafonnes_en_base_commerciale(self, config_commerciale) -> None:
        periode = EmploymentPeriod(D(2025, 1, 1), D(2025, 1, 31), Decimal("3000"))
        janvier = compute_accrual_period(periode, config_commerciale).months[0]

        assert janvier.calendar_days == 31
        assert janvier.days_worked == 30
        assert janvier.prorated_salary == Decimal("3000.00")

    def test_fin_exclusive(self) -> None:
        config = CalculationConfig(inclusive_end=False)
        periode = EmploymentPeriod(D(2025, 1, 1), D(2025, 2, 1), Decimal("3100"))
        resultat = compute_accrual_period(periode, config)

        assert [m.competency_id for m in resultat.months] == ["2025-01"]
        assert resultat.months[0].is_full_month

    def test_mois_partiel_sans_provisions(self) -> None:
        config = CalculationConfig(provision_partial_month=False)
        periode = EmploymentPeriod(D(2025, 1, 16), D(2025, 2, 28), Decimal("3100"))
        janvier, fevrier = compute_accrual_period(periode, config).months

        assert not janvier.is_fully_provisioned
        assert janvier.provisions.total == Decimal("0.00")
        assert janvier.prorated_salary == Decimal("1600.00")
        assert fevrier.is_fully_provisioned

    def test_provisions_desactivees_sans_effet_sur_salaire_et_encargos(self) -> None:
        periode = EmploymentPeriod(D(2025, 1, 16), D(2025, 2, 28), Decimal("3100"))
        sans = compute_accrual_period(periode, CalculationConfig(provision_partial_month=False))
        avec = compute_accrual_period(periode, CalculationConfig(provision_partial_month=True))

        assert sans.months[0].prorated_salary == avec.months[0].prorated_salary
        assert sans.months[0].charges == avec.months[0].charges
        assert sans.totals.charges == avec.totals.charges
        assert avec.months[0].provisions.total > Decimal("0")
        # Le mois complet garde ses provisions
        assert sans.months[1].provisions == avec.months[1].provisions

    def test_tres_grand_salaire(self, config_services) -> None:
        periode = EmploymentPeriod(D(2025, 1, 1), D(2025, 1, 31), Decimal("1e27"))
        janvier = compute_accrual_period(periode, config_services).months[0]

        assert janvier.prorated_salary == Decimal("1e27")
        assert janvier.charges.employer_social_security == Decimal("2e26")
        assert janvier.charges.severance_fund == Decimal("8e25")

    def test_meme_jour(self, config_services) -> None:
        periode = EmploymentPeriod(D(2025, 4, 10), D(2025, 4, 10), Decimal("3000"))
        resultat = compute_accrual_period(periode, config_services)

        assert len(resultat.months) == 1
        assert resultat.months[0].days_worked == 1
        assert resultat.months[0].prorated_salary == Decimal("100.00")

    def test_salaire_float_accepte(self, config_services) -> None:
        periode = EmploymentPeriod(D(2025, 1, 1), D(2025, 1, 31), 10000.0)
        resultat = compute_accrual_period(periode, config_services)
        assert resultat.totals.grand_total == Decimal("5680.00")

    def test_configuration_par_defaut(self) -> None:
        periode = EmploymentPeriod(D(2025, 1, 1), D(2025, 1, 31), Decimal("10000"))
        assert compute_accrual_period(periode).totals.charges == Decimal("3580.00")

    @freeze_time("2025-03-10")
    def test_fin_ouverte_jusqu_a_aujourd_hui(self, config_services) -> None:
        periode = EmploymentPeriod(D(2025, 2, 1), None, Decimal("3100"))
        resultat = compute_accrual_period(periode, config_services)

        assert [m.competency_id for m in resultat.months] == ["2025-02", "2025-03"]
        assert resultat.months[-1].days_worked == 10
        assert resultat.months[-1].prorated_salary == Decimal("1000.00")


class TestErreursDeSaisie:
    def test_fin_avant_debut(self) -> None:
        periode = EmploymentPeriod(D(2025, 2, 1), D(2025, 1, 31), Decimal("3000"))
        with pytest.raises(InvalidIntervalError, match="precede"):
            compute_accrual_period(periode)

    @pytest.mark.parametrize("salaire", [Decimal("0"), Decimal("-100"), "NaN", "abc", float("inf")])
    def test_salaire_invalide(self, salaire) -> None:
        periode = EmploymentPeriod(D(2025, 1, 1), D(2025, 1, 31), salaire)
        with pytest.raises(InvalidSalaryError):
            compute_accrual_period(periode)

    def test_erreurs_sont_des_value_error(self) -> None:
        periode = EmploymentPeriod(D(2025, 1, 1), D(2025, 1, 31), 0)
        with pytest.raises(ValueError):
            compute_accrual_period(periode)
