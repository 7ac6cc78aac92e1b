from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence

from ..sources import FinancialConfiguration


@dataclass
class ElectricityPrice:
    year: int
    price: float


def escalated_price(base_price: float, increase_pct: float, year: int) -> float:
    """Price in operating ``year`` (1-based); year 1 pays the base price."""
    return base_price * (1 + increase_pct / 100.0) ** (year - 1)


def electricity_price_series(fin: FinancialConfiguration, years: int) -> List[ElectricityPrice]:
    return [
        ElectricityPrice(
            year=y,
            price=escalated_price(fin.electricity_price, fin.electricity_price_increase_pct, y),
        )
        for y in range(1, years + 1)
    ]


def average_annual_increase(prices: Sequence[ElectricityPrice]) -> float:
    """Compound annual growth rate of the series, in percent."""
    if len(prices) < 2 or prices[0].price <= 0:
        return 0.0
    periods = len(prices) - 1
    return ((prices[-1].price / prices[0].price) ** (1 / periods) - 1) * 100.0
