from .production import EnergyByYear, EnergyGeneration, project_energy, source_yearly_series
from .weather import (
    ForecastProvider,
    ObservationForecastProvider,
    StaticForecastProvider,
    WeatherObservation,
    adjustment_factors,
    parse_weather_factors,
    resolve_weather_factors,
)

__all__ = [
    "EnergyByYear",
    "EnergyGeneration",
    "ForecastProvider",
    "ObservationForecastProvider",
    "StaticForecastProvider",
    "WeatherObservation",
    "adjustment_factors",
    "parse_weather_factors",
    "project_energy",
    "resolve_weather_factors",
    "source_yearly_series",
]
