import pytest

from greencalc.sources import EnergySource, FinancialConfiguration, SystemConfiguration


def make_solar(**overrides):
    fields = dict(
        type="solar",
        enabled=True,
        capacity_kw=10.0,
        efficiency_pct=18.5,
        cost_per_kw=15000.0,
        daily_production_hours=5.2,
        degradation_rate_pct=0.5,
        specific_operational_cost=200.0,
    )
    fields.update(overrides)
    return EnergySource(**fields)


@pytest.fixture
def solar_system():
    return SystemConfiguration(
        energy_sources=(make_solar(),),
        grid_emission_factor=0.95,
        operational_lifetime_years=25,
    )


@pytest.fixture
def financial():
    return FinancialConfiguration(
        electricity_price=2.20,
        electricity_price_increase_pct=8.0,
        financing_years=10,
        interest_rate_pct=7.0,
        inflation_rate_pct=5.0,
        discount_rate_pct=8.0,
    )


@pytest.fixture
def scenario_payload():
    return {
        "system": {
            "energy_sources": [
                {
                    "type": "solar",
                    "enabled": True,
                    "capacity_kw": 10,
                    "efficiency_pct": 18.5,
                    "cost_per_kw": 15000,
                    "daily_production_hours": 5.2,
                    "degradation_rate_pct": 0.5,
                    "specific_operational_cost": 200,
                }
            ],
            "grid_emission_factor": 0.95,
            "operational_lifetime_years": 25,
            "location": {"latitude": -33.92, "longitude": 18.42, "city": "Cape Town", "country": "South Africa"},
        },
        "financial": {
            "electricity_price": 2.20,
            "electricity_price_increase_pct": 8,
            "financing_years": 10,
            "interest_rate_pct": 7,
            "inflation_rate_pct": 5,
            "discount_rate_pct": 8,
        },
    }


@pytest.fixture
def make_source():
    return make_solar
