import pytest

from greencalc.energy.weather import (
    ObservationForecastProvider,
    StaticForecastProvider,
    WeatherObservation,
    adjustment_factors,
    parse_weather_factors,
    resolve_weather_factors,
    sanitize_factors,
    wind_factor,
)
from greencalc.errors import ValidationError
from greencalc.sources import DEFAULT_LOCATION


def test_adjustment_factors_for_typical_day():
    factors = adjustment_factors(
        WeatherObservation(solar_irradiance_w_m2=800, cloud_cover_pct=25, wind_speed_mps=6)
    )
    assert factors["solar"] == pytest.approx(0.6)
    assert factors["wind"] == pytest.approx(0.125)
    assert factors["hydro"] == 0.7
    assert factors["wave"] == 0.6


def test_hydro_and_wave_ramp():
    factors = adjustment_factors(
        WeatherObservation(
            solar_irradiance_w_m2=1200,
            cloud_cover_pct=0,
            wind_speed_mps=0,
            water_flow_m3s=55,
            wave_height_m=2.25,
        )
    )
    assert factors["solar"] == 1.0
    assert factors["hydro"] == pytest.approx(0.5)
    assert factors["wave"] == pytest.approx(0.5)


@pytest.mark.parametrize("speed,expected", [(2.0, 0.0), (12.0, 1.0), (15.0, 1.0), (30.0, 0.0)])
def test_wind_power_curve(speed, expected):
    assert wind_factor(speed) == expected


def test_sanitize_clamps_and_fills():
    factors = sanitize_factors({"solar": 1.5, "wind": float("nan"), "hydro": -0.2, "coal": 0.1})
    assert factors == {"solar": 1.0, "wind": 1.0, "hydro": 0.0, "wave": 1.0}


def test_no_provider_is_neutral():
    factors, resolved = resolve_weather_factors(None, DEFAULT_LOCATION)
    assert resolved is False
    assert set(factors.values()) == {1.0}


def test_static_provider():
    factors, resolved = resolve_weather_factors(StaticForecastProvider({"solar": 0.4}), DEFAULT_LOCATION)
    assert resolved is True
    assert factors["solar"] == 0.4
    assert factors["wind"] == 1.0


def test_unavailable_observation_falls_back():
    provider = ObservationForecastProvider(lambda location: None)
    factors, resolved = resolve_weather_factors(provider, DEFAULT_LOCATION)
    assert resolved is False
    assert set(factors.values()) == {1.0}


def test_observation_provider_uses_lookup():
    seen = []

    def lookup(location):
        seen.append(location.city)
        return WeatherObservation(solar_irradiance_w_m2=500, cloud_cover_pct=0, wind_speed_mps=12)

    factors, resolved = resolve_weather_factors(ObservationForecastProvider(lookup), DEFAULT_LOCATION)
    assert resolved is True
    assert seen == ["Johannesburg"]
    assert factors["solar"] == pytest.approx(0.5)
    assert factors["wind"] == 1.0


def test_parse_coerces_caller_factors():
    factors = parse_weather_factors({"solar": "0.5", "wind": 2, "hydro": None})
    assert factors == {"solar": 0.5, "wind": 1.0, "hydro": 1.0, "wave": 1.0}


@pytest.mark.parametrize("value", ["sunny", float("inf"), [0.5]])
def test_parse_rejects_non_numeric_factor(value):
    with pytest.raises(ValidationError) as excinfo:
        parse_weather_factors({"solar": value})
    assert excinfo.value.errors == ["Missing or invalid value for weather_factors.solar: NaN detected"]


@pytest.mark.parametrize("raw", [[0.5], "0.5", 0.5])
def test_parse_rejects_non_mapping(raw):
    with pytest.raises(ValidationError) as excinfo:
        parse_weather_factors(raw)
    assert excinfo.value.field == "weather_factors"


def test_unusable_provider_entry_is_neutral():
    factors, resolved = resolve_weather_factors(StaticForecastProvider({"solar": "sunny"}), DEFAULT_LOCATION)
    assert resolved is True
    assert factors["solar"] == 1.0
