from __future__ import annotations

from typing import Dict, Sequence

from ..errors import ConfigurationError
from ..sources import SystemConfiguration
from ..units import Currency, CurrencyPerKwh


def lcoe(
    total_installation_cost: Currency,
    operational_cost_per_year: Currency,
    lifetime_years: int,
    lifetime_energy_kwh: Sequence[float],
) -> CurrencyPerKwh:
    """Undiscounted lifetime cost divided by lifetime energy."""
    total_energy = sum(lifetime_energy_kwh)
    if not total_energy > 0:
        raise ConfigurationError("LCOE is undefined: lifetime energy production is zero")
    total_cost = total_installation_cost + operational_cost_per_year * lifetime_years
    return CurrencyPerKwh(total_cost / total_energy)


def lcoe_table(config: SystemConfiguration, lifetime_energy_kwh: Sequence[float]) -> Dict[str, float]:
    lifetime_years = int(config.operational_lifetime_years)
    installation = config.total_installation_cost
    operational = config.total_operational_cost_per_year * lifetime_years
    return {
        "total_installation_cost": installation,
        "lifetime_operational_cost": operational,
        "lifetime_cost": installation + operational,
        "lifetime_energy_kwh": float(sum(lifetime_energy_kwh)),
        "lcoe": lcoe(
            installation,
            config.total_operational_cost_per_year,
            lifetime_years,
            lifetime_energy_kwh,
        ),
    }
