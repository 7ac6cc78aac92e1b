from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import List, Optional

from .config import DEFAULT_SETTINGS, EngineSettings
from .energy.production import EnergyGeneration
from .sources import SystemConfiguration
from .units import Currency, KgCo2

KG_PER_TONNE = 1000.0


@dataclass
class CarbonByYear:
    year: int
    reduction_kg: KgCo2


@dataclass
class CarbonReduction:
    daily_kg: KgCo2
    monthly_kg: KgCo2
    yearly_kg: KgCo2
    lifetime_kg: KgCo2
    financial_benefit: Currency
    yearly_reduction: List[CarbonByYear]

    @property
    def lifetime_tonnes(self) -> float:
        return self.lifetime_kg / KG_PER_TONNE

    def to_dict(self) -> dict:
        return asdict(self)


def carbon_benefit(lifetime_kg: float, rate_per_tonne: float) -> Currency:
    return Currency(lifetime_kg / KG_PER_TONNE * rate_per_tonne)


def carbon_reduction(
    config: SystemConfiguration,
    energy: EnergyGeneration,
    settings: Optional[EngineSettings] = None,
) -> CarbonReduction:
    """Avoided grid emissions for an energy projection.

    Every figure is the matching energy figure times the grid emission
    factor, so the yearly series carries the same degradation as the energy
    series it came from.
    """
    settings = settings or DEFAULT_SETTINGS
    factor = config.grid_emission_factor
    yearly = [
        CarbonByYear(year=row.year, reduction_kg=KgCo2(row.energy_kwh * factor))
        for row in energy.lifetime
    ]
    lifetime = sum(row.reduction_kg for row in yearly)
    return CarbonReduction(
        daily_kg=KgCo2(energy.daily_kwh * factor),
        monthly_kg=KgCo2(energy.monthly_kwh * factor),
        yearly_kg=KgCo2(energy.yearly_kwh * factor),
        lifetime_kg=KgCo2(lifetime),
        financial_benefit=carbon_benefit(lifetime, settings.carbon_credit_rate_per_tonne),
        yearly_reduction=yearly,
    )
