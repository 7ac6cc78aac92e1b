from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from .carbon import CarbonReduction, carbon_reduction
from .config import DEFAULT_SETTINGS, EngineSettings
from .economics.metrics import FinancialMetrics, financial_metrics
from .economics.prices import ElectricityPrice, average_annual_increase, electricity_price_series
from .energy.production import EnergyGeneration, energy_by_type, project_energy
from .energy.weather import ForecastProvider, parse_weather_factors, resolve_weather_factors, sanitize_factors
from .insights import confidence_score, recommendations
from .sources import FinancialConfiguration, SystemConfiguration
from .validation import prepare_inputs

logger = logging.getLogger(__name__)


@dataclass
class CalculationResult:
    system: SystemConfiguration
    financial: FinancialConfiguration
    financial_metrics: FinancialMetrics
    energy_generation: EnergyGeneration
    carbon_reduction: CarbonReduction
    electricity_prices: List[ElectricityPrice]
    weather_factors: Dict[str, float]
    warnings: List[str] = field(default_factory=list)
    missing_data_flags: List[str] = field(default_factory=list)
    confidence_score: Optional[float] = None
    recommendations: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "system": self.system.to_dict(),
            "financial": self.financial.to_dict(),
            "financial_metrics": self.financial_metrics.to_dict(),
            "energy_generation": self.energy_generation.to_dict(),
            "energy_by_type_kwh": energy_by_type(self.energy_generation),
            "carbon_reduction": self.carbon_reduction.to_dict(),
            "electricity_prices": [asdict(p) for p in self.electricity_prices],
            "average_price_increase_pct": average_annual_increase(self.electricity_prices),
            "weather_factors": dict(self.weather_factors),
            "warnings": list(self.warnings),
            "missing_data_flags": list(self.missing_data_flags),
            "confidence_score": self.confidence_score,
            "recommendations": list(self.recommendations),
        }


def run_calculation(
    system: SystemConfiguration,
    financial: FinancialConfiguration,
    weather_factors: Optional[Mapping[str, float]] = None,
    settings: Optional[EngineSettings] = None,
) -> CalculationResult:
    """Run the forward pipeline on already-validated snapshots."""
    settings = settings or DEFAULT_SETTINGS
    factors = sanitize_factors(weather_factors)

    energy = project_energy(system, factors, settings)
    metrics = financial_metrics(system, financial, energy.yearly_series, settings)
    carbon = carbon_reduction(system, energy, settings)
    prices = electricity_price_series(financial, int(system.operational_lifetime_years))

    logger.debug(
        "Calculated %d kW over %d years: npv=%s irr=%s payback=%s",
        system.total_capacity_kw,
        system.operational_lifetime_years,
        metrics.npv,
        metrics.irr,
        metrics.payback_period_years,
    )
    return CalculationResult(
        system=system,
        financial=financial,
        financial_metrics=metrics,
        energy_generation=energy,
        carbon_reduction=carbon,
        electricity_prices=prices,
        weather_factors=factors,
    )


def calculate(
    raw_system: Optional[Mapping[str, Any]],
    raw_financial: Optional[Mapping[str, Any]],
    provider: Optional[ForecastProvider] = None,
    weather_factors: Optional[Mapping[str, float]] = None,
    settings: Optional[EngineSettings] = None,
) -> CalculationResult:
    """Validate raw input, resolve weather factors and run the pipeline.

    Explicit ``weather_factors`` win over ``provider``. Raises
    ValidationError before any financial figure is computed when the input
    is unusable.
    """
    settings = settings or DEFAULT_SETTINGS
    prepared = prepare_inputs(raw_system, raw_financial, settings)

    if weather_factors is not None:
        factors, resolved = parse_weather_factors(weather_factors), True
    else:
        factors, resolved = resolve_weather_factors(provider, prepared.system.location)

    result = run_calculation(prepared.system, prepared.financial, factors, settings)
    result.warnings = prepared.warnings
    result.missing_data_flags = prepared.missing_data_flags
    result.confidence_score = confidence_score(prepared.system, prepared.financial, resolved)
    result.recommendations = recommendations(prepared.system, prepared.financial, factors)
    logger.info(
        "Calculation finished: %d warning(s), %d imputed value(s), %d unavailable metric(s)",
        len(result.warnings),
        len(result.missing_data_flags),
        len(result.financial_metrics.unavailable),
    )
    return result
