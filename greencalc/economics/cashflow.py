from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence

from ..errors import ConfigurationError
from ..sources import FinancialConfiguration, SystemConfiguration
from .finance import yearly_loan_payment
from .prices import escalated_price


@dataclass
class YearlyCashFlow:
    year: int
    cash_flow: float
    cumulative_cash_flow: float
    energy_kwh: float = 0.0
    electricity_price: float = 0.0
    revenue: float = 0.0
    operational_cost: float = 0.0
    loan_payment: float = 0.0


def build_cash_flows(
    config: SystemConfiguration,
    fin: FinancialConfiguration,
    yearly_energy_kwh: Sequence[float],
) -> List[YearlyCashFlow]:
    """Year 0..lifetime cash-flow schedule.

    Year 0 is the installation outlay alone. Every later year earns
    ``energy * escalated price`` and pays operating cost plus the loan
    instalment while ``year <= financing_years``.
    """
    lifetime = int(config.operational_lifetime_years)
    if len(yearly_energy_kwh) < lifetime:
        raise ConfigurationError(
            f"Energy series covers {len(yearly_energy_kwh)} years, lifetime is {lifetime}"
        )

    installation = config.total_installation_cost
    operating = config.total_operational_cost_per_year
    financing_years = int(fin.financing_years)
    loan = yearly_loan_payment(installation, fin.interest_rate_pct, financing_years)

    cumulative = -installation
    rows = [YearlyCashFlow(year=0, cash_flow=-installation, cumulative_cash_flow=cumulative)]
    for year in range(1, lifetime + 1):
        energy = yearly_energy_kwh[year - 1]
        price = escalated_price(fin.electricity_price, fin.electricity_price_increase_pct, year)
        revenue = energy * price
        loan_payment = loan if year <= financing_years else 0.0
        cash_flow = revenue - operating - loan_payment
        cumulative += cash_flow
        rows.append(
            YearlyCashFlow(
                year=year,
                cash_flow=cash_flow,
                cumulative_cash_flow=cumulative,
                energy_kwh=energy,
                electricity_price=price,
                revenue=revenue,
                operational_cost=operating,
                loan_payment=loan_payment,
            )
        )
    return rows
