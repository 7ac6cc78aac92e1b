from __future__ import annotations

import math
from dataclasses import asdict, dataclass, replace
from typing import Dict, Optional

from .config import DEFAULT_SETTINGS
from .errors import ValidationError
from .sources import SystemConfiguration, default_source
from .units import Kw, Years

GOAL_METRICS = ("daily", "monthly", "yearly", "carbon")
MONTHS_PER_YEAR = 12
DEFAULT_GRID_EMISSION_FACTOR = 0.95
DEFAULT_PRODUCTION_HOURS = 5.0


@dataclass(frozen=True)
class GoalTargets:
    daily_kwh: float
    monthly_kwh: float
    yearly_kwh: float
    yearly_carbon_kg: float


@dataclass
class SystemSuggestion:
    capacity_kw: Kw
    system_size_kw: Kw
    estimates: Dict[str, float]
    daily_production_hours: float
    grid_emission_factor: float

    def to_dict(self) -> dict:
        return asdict(self)


def _positive(name: str, value: float) -> float:
    value = float(value)
    if not math.isfinite(value) or value <= 0:
        raise ValidationError(f"{name} must be a positive number", field=name, value=value)
    return value


def expand_goal(metric: str, value: float, grid_emission_factor: float = DEFAULT_GRID_EMISSION_FACTOR) -> GoalTargets:
    """Derive all four targets from one.

    Months count as 30 days when going from daily figures and as 1/12 of a
    year when going from yearly ones, so the four figures are only roughly
    consistent with each other.
    """
    value = _positive("value", value)
    factor = _positive("grid_emission_factor", grid_emission_factor)
    days_per_month = DEFAULT_SETTINGS.days_per_month
    days_per_year = DEFAULT_SETTINGS.days_per_year
    if metric == "daily":
        daily, monthly, yearly = value, value * days_per_month, value * days_per_year
    elif metric == "monthly":
        daily, monthly, yearly = value / days_per_month, value, value * MONTHS_PER_YEAR
    elif metric == "yearly":
        daily, monthly, yearly = value / days_per_year, value / MONTHS_PER_YEAR, value
    elif metric == "carbon":
        yearly = value / factor
        daily, monthly = yearly / days_per_year, yearly / MONTHS_PER_YEAR
        return GoalTargets(daily, monthly, yearly, value)
    else:
        raise ValidationError(
            f"Unknown goal metric {metric!r}, expected one of {', '.join(GOAL_METRICS)}",
            field="metric",
            value=metric,
        )
    return GoalTargets(daily, monthly, yearly, yearly * factor)


def size_from_targets(
    targets: GoalTargets,
    grid_emission_factor: float = DEFAULT_GRID_EMISSION_FACTOR,
    daily_production_hours: float = DEFAULT_PRODUCTION_HOURS,
) -> Dict[str, float]:
    """System size implied by each target, in kW.

    The ``average`` entry is the plain mean of the four estimates. That is a
    smoothing heuristic; inconsistent targets give a blended answer.
    """
    hours = _positive("daily_production_hours", daily_production_hours)
    factor = _positive("grid_emission_factor", grid_emission_factor)
    days_per_month = DEFAULT_SETTINGS.days_per_month
    days_per_year = DEFAULT_SETTINGS.days_per_year
    estimates = {
        "daily": targets.daily_kwh / hours,
        "monthly": targets.monthly_kwh / (hours * days_per_month),
        "yearly": targets.yearly_kwh / (hours * days_per_year),
        "carbon": targets.yearly_carbon_kg / factor / (hours * days_per_year),
    }
    estimates["average"] = sum(estimates.values()) / len(GOAL_METRICS)
    return estimates


def suggest_system_size(
    metric: str,
    value: float,
    grid_emission_factor: float = DEFAULT_GRID_EMISSION_FACTOR,
    daily_production_hours: float = DEFAULT_PRODUCTION_HOURS,
) -> SystemSuggestion:
    targets = expand_goal(metric, value, grid_emission_factor)
    estimates = size_from_targets(targets, grid_emission_factor, daily_production_hours)
    size = Kw(estimates["average"])
    # Capacity equals nameplate size for the source types handled here.
    return SystemSuggestion(
        capacity_kw=size,
        system_size_kw=size,
        estimates=estimates,
        daily_production_hours=daily_production_hours,
        grid_emission_factor=grid_emission_factor,
    )


def suggested_configuration(
    suggestion: SystemSuggestion,
    source_type: str = "solar",
    base: Optional[SystemConfiguration] = None,
    operational_lifetime_years: int = 25,
) -> SystemConfiguration:
    """One catalogue source sized to the suggestion, ready for projection."""
    source = replace(
        default_source(source_type, capacity_kw=suggestion.capacity_kw),
        daily_production_hours=suggestion.daily_production_hours,
    )
    if base is not None:
        return base.with_sources([source])
    return SystemConfiguration(
        energy_sources=(source,),
        grid_emission_factor=suggestion.grid_emission_factor,
        operational_lifetime_years=Years(operational_lifetime_years),
    )
