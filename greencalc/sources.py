from __future__ import annotations

from dataclasses import asdict, dataclass, field, replace
from typing import Dict, Iterable, Tuple

from .units import Currency, Kw, Percent, Years

SOURCE_TYPES = ("solar", "wind", "hydro", "wave")


@dataclass(frozen=True)
class EnergySource:
    type: str
    enabled: bool
    capacity_kw: Kw
    efficiency_pct: Percent
    cost_per_kw: Currency
    daily_production_hours: float
    degradation_rate_pct: Percent
    specific_operational_cost: Currency  # per kW per year

    def __post_init__(self) -> None:
        if self.type not in SOURCE_TYPES:
            raise ValueError(f"Unknown energy source type: {self.type!r}")

    @property
    def installation_cost(self) -> Currency:
        return Currency(self.capacity_kw * self.cost_per_kw)

    @property
    def operational_cost_per_year(self) -> Currency:
        return Currency(self.capacity_kw * self.specific_operational_cost)


@dataclass(frozen=True)
class Location:
    latitude: float
    longitude: float
    city: str = ""
    country: str = ""


@dataclass(frozen=True)
class SystemConfiguration:
    energy_sources: Tuple[EnergySource, ...]
    grid_emission_factor: float  # kg CO2 per kWh
    operational_lifetime_years: Years
    location: Location = field(default_factory=lambda: DEFAULT_LOCATION)

    def __post_init__(self) -> None:
        # Accept any iterable, store a tuple so the snapshot stays immutable.
        object.__setattr__(self, "energy_sources", tuple(self.energy_sources))

    @property
    def enabled_sources(self) -> Tuple[EnergySource, ...]:
        return tuple(s for s in self.energy_sources if s.enabled)

    @property
    def total_capacity_kw(self) -> Kw:
        return Kw(sum(s.capacity_kw for s in self.enabled_sources))

    @property
    def average_efficiency_pct(self) -> Percent:
        enabled = self.enabled_sources
        if not enabled:
            return Percent(0.0)
        return Percent(sum(s.efficiency_pct for s in enabled) / len(enabled))

    @property
    def total_installation_cost(self) -> Currency:
        return Currency(sum(s.installation_cost for s in self.enabled_sources))

    @property
    def total_operational_cost_per_year(self) -> Currency:
        return Currency(sum(s.operational_cost_per_year for s in self.enabled_sources))

    def with_sources(self, sources: Iterable[EnergySource]) -> "SystemConfiguration":
        return replace(self, energy_sources=tuple(sources))

    def to_dict(self) -> dict:
        data = asdict(self)
        data["energy_sources"] = [asdict(s) for s in self.energy_sources]
        data.update(
            total_capacity_kw=self.total_capacity_kw,
            average_efficiency_pct=self.average_efficiency_pct,
            total_installation_cost=self.total_installation_cost,
            total_operational_cost_per_year=self.total_operational_cost_per_year,
        )
        return data


@dataclass(frozen=True)
class FinancialConfiguration:
    electricity_price: float  # currency per kWh
    electricity_price_increase_pct: Percent
    financing_years: Years
    interest_rate_pct: Percent
    inflation_rate_pct: Percent
    discount_rate_pct: Percent

    def to_dict(self) -> dict:
        return asdict(self)


DEFAULT_LOCATION = Location(
    latitude=-26.2041,
    longitude=28.0473,
    city="Johannesburg",
    country="South Africa",
)


SOURCE_CATALOGUE: Dict[str, Dict[str, float]] = {
    "solar": {
        "efficiency_pct": 18.5,
        "cost_per_kw": 15000.0,
        "daily_production_hours": 5.2,
        "degradation_rate_pct": 0.5,
        "specific_operational_cost": 200.0,
    },
    "wind": {
        "efficiency_pct": 35.0,
        "cost_per_kw": 18000.0,
        "daily_production_hours": 8.5,
        "degradation_rate_pct": 0.3,
        "specific_operational_cost": 400.0,
    },
    "hydro": {
        "efficiency_pct": 85.0,
        "cost_per_kw": 25000.0,
        "daily_production_hours": 20.0,
        "degradation_rate_pct": 0.1,
        "specific_operational_cost": 300.0,
    },
    "wave": {
        "efficiency_pct": 25.0,
        "cost_per_kw": 35000.0,
        "daily_production_hours": 16.0,
        "degradation_rate_pct": 0.8,
        "specific_operational_cost": 800.0,
    },
}


def default_source(source_type: str, capacity_kw: float = 10.0, enabled: bool = True) -> EnergySource:
    if source_type not in SOURCE_CATALOGUE:
        raise ValueError(f"Unknown energy source type: {source_type!r}")
    return EnergySource(
        type=source_type,
        enabled=enabled,
        capacity_kw=Kw(capacity_kw),
        **SOURCE_CATALOGUE[source_type],
    )


def catalogue_dict() -> dict:
    return {
        "sources": {name: asdict(default_source(name)) for name in SOURCE_TYPES},
        "location": asdict(DEFAULT_LOCATION),
    }
