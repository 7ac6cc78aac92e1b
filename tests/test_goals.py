import pytest

from greencalc.energy.production import project_energy
from greencalc.errors import ValidationError
from greencalc.goals import expand_goal, size_from_targets, suggest_system_size, suggested_configuration


def test_daily_goal_is_exact_when_targets_agree():
    suggestion = suggest_system_size("daily", 52.0, grid_emission_factor=0.95, daily_production_hours=5.2)
    assert suggestion.system_size_kw == pytest.approx(10.0)
    assert suggestion.capacity_kw == suggestion.system_size_kw
    for name in ("daily", "monthly", "yearly", "carbon"):
        assert suggestion.estimates[name] == pytest.approx(10.0)


def test_monthly_goal_blends_inconsistent_months():
    targets = expand_goal("monthly", 1560.0)
    assert targets.daily_kwh == pytest.approx(52.0)
    assert targets.yearly_kwh == pytest.approx(1560.0 * 12)
    estimates = size_from_targets(targets, 0.95, 5.0)
    assert estimates["daily"] == pytest.approx(10.4)
    assert estimates["yearly"] < estimates["daily"]
    assert estimates["average"] == pytest.approx(sum(estimates[k] for k in ("daily", "monthly", "yearly", "carbon")) / 4)


@pytest.mark.parametrize(
    "metric,value",
    [("daily", 52.0), ("monthly", 1560.0), ("yearly", 18980.0), ("carbon", 18031.0)],
)
def test_round_trip_through_energy_model(metric, value):
    suggestion = suggest_system_size(metric, value, grid_emission_factor=0.95, daily_production_hours=5.2)
    energy = project_energy(suggested_configuration(suggestion))
    produced = {
        "daily": energy.daily_kwh,
        "monthly": energy.monthly_kwh,
        "yearly": energy.yearly_kwh,
        "carbon": energy.yearly_kwh * 0.95,
    }[metric]
    assert produced == pytest.approx(value, rel=0.2)


def test_suggested_configuration_feeds_forward(solar_system):
    suggestion = suggest_system_size("yearly", 36500.0, daily_production_hours=5.0)
    config = suggested_configuration(suggestion, source_type="wind", base=solar_system)
    (source,) = config.energy_sources
    assert source.type == "wind"
    assert source.capacity_kw == pytest.approx(suggestion.capacity_kw)
    assert source.daily_production_hours == 5.0
    assert config.operational_lifetime_years == solar_system.operational_lifetime_years


def test_unknown_metric_rejected():
    with pytest.raises(ValidationError):
        suggest_system_size("weekly", 10.0)


@pytest.mark.parametrize("value", [0.0, -5.0, float("nan")])
def test_non_positive_goal_rejected(value):
    with pytest.raises(ValidationError):
        suggest_system_size("daily", value)


def test_non_positive_hours_rejected():
    with pytest.raises(ValidationError):
        suggest_system_size("daily", 52.0, daily_production_hours=0.0)
