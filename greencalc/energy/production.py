from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Dict, List, Mapping, Optional

import numpy as np

from ..config import DEFAULT_SETTINGS, EngineSettings
from ..sources import EnergySource, SystemConfiguration
from ..units import Kwh


@dataclass
class EnergyByYear:
    year: int
    energy_kwh: Kwh


@dataclass
class SourceEnergySeries:
    type: str
    daily_kwh: Kwh
    yearly_kwh: List[float]


@dataclass
class EnergyGeneration:
    daily_kwh: Kwh
    monthly_kwh: Kwh
    yearly_kwh: Kwh
    lifetime: List[EnergyByYear]
    per_source: List[SourceEnergySeries] = field(default_factory=list)

    @property
    def yearly_series(self) -> List[float]:
        return [row.energy_kwh for row in self.lifetime]

    @property
    def total_kwh(self) -> Kwh:
        return Kwh(sum(self.yearly_series))

    def to_dict(self) -> dict:
        data = asdict(self)
        data["total_kwh"] = self.total_kwh
        return data


def weather_factor(weather_factors: Optional[Mapping[str, float]], source_type: str) -> float:
    if not weather_factors:
        return 1.0
    factor = weather_factors.get(source_type)
    return 1.0 if factor is None else float(factor)


def source_daily_kwh(source: EnergySource, factor: float = 1.0) -> float:
    return source.capacity_kw * source.daily_production_hours * factor


def source_yearly_series(
    source: EnergySource,
    years: int,
    factor: float = 1.0,
    days_per_year: int = DEFAULT_SETTINGS.days_per_year,
) -> np.ndarray:
    """Annual output of one source for years 1..years.

    Degradation compounds on this source alone: year y carries
    ``(1 - rate/100) ** (y - 1)``.
    """
    base = source_daily_kwh(source, factor) * days_per_year
    retention = 1.0 - source.degradation_rate_pct / 100.0
    return base * retention ** np.arange(years, dtype=float)


def project_energy(
    config: SystemConfiguration,
    weather_factors: Optional[Mapping[str, float]] = None,
    settings: Optional[EngineSettings] = None,
) -> EnergyGeneration:
    settings = settings or DEFAULT_SETTINGS
    years = int(config.operational_lifetime_years)

    daily = 0.0
    total = np.zeros(years, dtype=float)
    per_source: List[SourceEnergySeries] = []
    for source in config.enabled_sources:
        factor = weather_factor(weather_factors, source.type)
        source_daily = source_daily_kwh(source, factor)
        series = source_yearly_series(source, years, factor, settings.days_per_year)
        daily += source_daily
        total += series
        per_source.append(
            SourceEnergySeries(
                type=source.type,
                daily_kwh=Kwh(source_daily),
                yearly_kwh=series.tolist(),
            )
        )

    return EnergyGeneration(
        daily_kwh=Kwh(daily),
        monthly_kwh=Kwh(daily * settings.days_per_month),
        yearly_kwh=Kwh(daily * settings.days_per_year),
        lifetime=[EnergyByYear(year=y, energy_kwh=Kwh(float(e))) for y, e in enumerate(total, start=1)],
        per_source=per_source,
    )


def energy_by_type(energy: EnergyGeneration) -> Dict[str, float]:
    """Lifetime kWh per source type, summed over sources of the same type."""
    totals: Dict[str, float] = {}
    for series in energy.per_source:
        totals[series.type] = totals.get(series.type, 0.0) + sum(series.yearly_kwh)
    return totals
