from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional, Protocol, Tuple

from ..errors import ForecastUnavailableError, ValidationError
from ..sources import SOURCE_TYPES, Location
from ..validation import to_number

logger = logging.getLogger(__name__)

MAX_SOLAR_IRRADIANCE = 1000.0  # W/m2
WIND_CUT_IN_MPS = 3.0
WIND_RATED_MPS = 12.0
WIND_CUT_OUT_MPS = 25.0
HYDRO_FLOW_RANGE = (10.0, 100.0)  # m3/s
WAVE_HEIGHT_RANGE = (0.5, 4.0)  # m
HYDRO_FACTOR_UNKNOWN = 0.7
WAVE_FACTOR_UNKNOWN = 0.6


class ForecastProvider(Protocol):
    def get_weather_adjustment_factors(self, location: Location) -> Mapping[str, float]:
        ...


@dataclass(frozen=True)
class WeatherObservation:
    solar_irradiance_w_m2: float
    cloud_cover_pct: float
    wind_speed_mps: float
    water_flow_m3s: Optional[float] = None
    wave_height_m: Optional[float] = None


def _clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


def _ramp(value: Optional[float], bounds: Tuple[float, float], unknown: float) -> float:
    if not value:
        return unknown
    low, high = bounds
    return _clamp((value - low) / (high - low))


def wind_factor(speed_mps: float) -> float:
    """Cubic power-curve approximation between cut-in and rated speed."""
    if speed_mps < WIND_CUT_IN_MPS or speed_mps > WIND_CUT_OUT_MPS:
        return 0.0
    if speed_mps <= WIND_RATED_MPS:
        return (speed_mps / WIND_RATED_MPS) ** 3
    return 1.0


def adjustment_factors(observation: WeatherObservation) -> Dict[str, float]:
    """Heuristic production multipliers for one weather observation.

    This is a fixed rule of thumb, not a trained model: solar scales with
    irradiance and clear sky, wind follows a cubic power curve, hydro and wave
    ramp linearly across a typical flow or wave-height band.
    """
    cloud_reduction = (100.0 - observation.cloud_cover_pct) / 100.0
    solar = observation.solar_irradiance_w_m2 / MAX_SOLAR_IRRADIANCE * cloud_reduction
    return {
        "solar": _clamp(solar),
        "wind": _clamp(wind_factor(observation.wind_speed_mps)),
        "hydro": _ramp(observation.water_flow_m3s, HYDRO_FLOW_RANGE, HYDRO_FACTOR_UNKNOWN),
        "wave": _ramp(observation.wave_height_m, WAVE_HEIGHT_RANGE, WAVE_FACTOR_UNKNOWN),
    }


def neutral_factors() -> Dict[str, float]:
    return {name: 1.0 for name in SOURCE_TYPES}


class StaticForecastProvider:
    """Returns the same factors for every location."""

    def __init__(self, factors: Mapping[str, float]) -> None:
        self.factors = dict(factors)

    def get_weather_adjustment_factors(self, location: Location) -> Mapping[str, float]:
        return self.factors


class ObservationForecastProvider:
    """Applies ``adjustment_factors`` to an observation looked up per location."""

    def __init__(self, lookup: Callable[[Location], Optional[WeatherObservation]]) -> None:
        self.lookup = lookup

    def get_weather_adjustment_factors(self, location: Location) -> Mapping[str, float]:
        observation = self.lookup(location)
        if observation is None:
            raise ForecastUnavailableError(
                f"No weather observation for {location.city or (location.latitude, location.longitude)}"
            )
        return adjustment_factors(observation)


def sanitize_factors(factors: Optional[Mapping[str, float]]) -> Dict[str, float]:
    """Clamp to [0, 1]; absent or unusable entries become 1.0."""
    resolved = neutral_factors()
    for name, value in (factors or {}).items():
        if name not in resolved or value is None:
            continue
        value = to_number(value)
        resolved[name] = 1.0 if math.isnan(value) else _clamp(value)
    return resolved


def parse_weather_factors(raw: Any) -> Dict[str, float]:
    """Caller-supplied factors, as sent over the API.

    Entries are coerced like any other numeric input. Raises ValidationError
    when ``raw`` is not a mapping or an entry is not a number; otherwise
    behaves like ``sanitize_factors``.
    """
    if raw is None:
        return neutral_factors()
    if not isinstance(raw, Mapping):
        raise ValidationError(
            "weather_factors must be an object mapping source type to factor",
            field="weather_factors",
            value=raw,
        )
    parsed: Dict[str, float] = {}
    errors = []
    for name, value in raw.items():
        if name not in SOURCE_TYPES or value is None:
            continue
        number = to_number(value)
        if math.isnan(number):
            errors.append(f"Missing or invalid value for weather_factors.{name}: NaN detected")
        else:
            parsed[name] = number
    if errors:
        raise ValidationError("Weather factors failed validation", errors=errors)
    return sanitize_factors(parsed)


def resolve_weather_factors(
    provider: Optional[ForecastProvider],
    location: Location,
) -> Tuple[Dict[str, float], bool]:
    """Ask the provider for factors.

    Returns ``(factors, resolved)``; ``resolved`` is False when there is no
    provider or it could not answer, in which case every factor is 1.0.
    """
    if provider is None:
        return neutral_factors(), False
    try:
        factors = provider.get_weather_adjustment_factors(location)
    except ForecastUnavailableError as exc:
        logger.warning("Forecast provider unavailable, using neutral factors: %s", exc)
        return neutral_factors(), False
    return sanitize_factors(factors), True
