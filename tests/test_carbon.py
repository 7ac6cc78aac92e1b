import pytest

from greencalc.carbon import carbon_reduction
from greencalc.config import EngineSettings
from greencalc.energy.production import project_energy


def test_reduction_follows_energy(solar_system):
    energy = project_energy(solar_system)
    carbon = carbon_reduction(solar_system, energy)

    assert carbon.daily_kg == pytest.approx(52.0 * 0.95)
    assert carbon.monthly_kg == pytest.approx(52.0 * 30 * 0.95)
    assert carbon.yearly_kg == pytest.approx(52.0 * 365 * 0.95)
    assert [row.reduction_kg for row in carbon.yearly_reduction] == pytest.approx(
        [e * 0.95 for e in energy.yearly_series]
    )
    assert carbon.lifetime_kg == pytest.approx(energy.total_kwh * 0.95)


def test_financial_benefit_uses_credit_rate(solar_system):
    energy = project_energy(solar_system)
    carbon = carbon_reduction(solar_system, energy)
    assert carbon.financial_benefit == pytest.approx(carbon.lifetime_kg / 1000 * 190)
    assert carbon.lifetime_tonnes == pytest.approx(carbon.lifetime_kg / 1000)

    pricier = carbon_reduction(solar_system, energy, EngineSettings(carbon_credit_rate_per_tonne=380.0))
    assert pricier.financial_benefit == pytest.approx(2 * carbon.financial_benefit)


def test_disabled_source_adds_no_carbon(solar_system, make_source):
    with_idle = solar_system.with_sources(
        solar_system.energy_sources + (make_source(type="wind", enabled=False, capacity_kw=900.0),)
    )
    base = carbon_reduction(solar_system, project_energy(solar_system))
    other = carbon_reduction(with_idle, project_energy(with_idle))
    assert other.lifetime_kg == pytest.approx(base.lifetime_kg)
