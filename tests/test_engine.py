import json

import pytest

from greencalc.energy.weather import StaticForecastProvider
from greencalc.engine import calculate
from greencalc.errors import ValidationError


def test_scenario_end_to_end(scenario_payload):
    result = calculate(scenario_payload["system"], scenario_payload["financial"])
    metrics = result.financial_metrics

    assert result.energy_generation.daily_kwh == pytest.approx(52.0)
    assert 5.0 < metrics.payback_period_years < 6.5
    assert metrics.npv > 0
    assert result.carbon_reduction.yearly_kg == pytest.approx(52.0 * 365 * 0.95)
    assert result.missing_data_flags == []
    assert result.warnings == []
    assert result.system.location.city == "Cape Town"


def test_price_series(scenario_payload):
    result = calculate(scenario_payload["system"], scenario_payload["financial"])
    prices = result.electricity_prices
    assert len(prices) == 25
    assert prices[0].price == pytest.approx(2.20)
    assert prices[1].price == pytest.approx(2.376)
    assert result.to_dict()["average_price_increase_pct"] == pytest.approx(8.0)


def test_result_serializes_to_strict_json(scenario_payload):
    data = calculate(scenario_payload["system"], scenario_payload["financial"]).to_dict()
    decoded = json.loads(json.dumps(data, allow_nan=False))
    assert len(decoded["financial_metrics"]["yearly_cash_flows"]) == 26
    assert decoded["energy_by_type_kwh"]["solar"] == pytest.approx(decoded["energy_generation"]["total_kwh"])


def test_unavailable_metrics_still_serialize(scenario_payload):
    system = scenario_payload["system"]
    system["energy_sources"][0]["daily_production_hours"] = 0
    data = calculate(system, scenario_payload["financial"]).to_dict()
    decoded = json.loads(json.dumps(data, allow_nan=False))
    assert decoded["financial_metrics"]["lcoe_per_kwh"] is None
    assert decoded["financial_metrics"]["unavailable"]["lcoe_per_kwh"].startswith("unavailable:")


def test_confidence_and_recommendations_without_forecast(scenario_payload):
    result = calculate(scenario_payload["system"], scenario_payload["financial"])
    assert result.confidence_score == pytest.approx(0.72)
    assert any("diversifying" in note for note in result.recommendations)
    assert not any("interest rate" in note for note in result.recommendations)


def test_provider_factors_are_applied(scenario_payload):
    provider = StaticForecastProvider({"solar": 0.8})
    result = calculate(scenario_payload["system"], scenario_payload["financial"], provider=provider)
    assert result.energy_generation.daily_kwh == pytest.approx(52.0 * 0.8)
    assert result.weather_factors["solar"] == 0.8
    assert result.confidence_score == pytest.approx(0.9)


def test_explicit_factors_win_over_provider(scenario_payload):
    result = calculate(
        scenario_payload["system"],
        scenario_payload["financial"],
        provider=StaticForecastProvider({"solar": 0.8}),
        weather_factors={"solar": 0.5},
    )
    assert result.energy_generation.daily_kwh == pytest.approx(26.0)


def test_imputed_values_are_flagged():
    result = calculate({}, {"electricity_price": 3.0})
    assert result.financial.electricity_price == 3.0
    assert "financing_years not specified - using default 10" in result.missing_data_flags


def test_invalid_input_stops_before_any_figures(scenario_payload):
    system = scenario_payload["system"]
    system["energy_sources"][0]["capacity_kw"] = -5
    with pytest.raises(ValidationError) as excinfo:
        calculate(system, scenario_payload["financial"])
    assert any("energy_sources[0].capacity_kw" in e for e in excinfo.value.errors)


def test_bad_weather_factors_are_a_validation_error(scenario_payload):
    with pytest.raises(ValidationError) as excinfo:
        calculate(scenario_payload["system"], scenario_payload["financial"], weather_factors={"solar": "sunny"})
    assert any("weather_factors.solar" in e for e in excinfo.value.errors)


def test_disabled_zero_capacity_source_still_calculates(scenario_payload):
    system = scenario_payload["system"]
    system["energy_sources"].append({"type": "wind", "enabled": False, "capacity_kw": 0})
    result = calculate(system, scenario_payload["financial"])
    assert result.system.total_capacity_kw == 10.0
    assert result.energy_generation.daily_kwh == pytest.approx(52.0)
