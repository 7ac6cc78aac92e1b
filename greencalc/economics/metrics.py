from __future__ import annotations

import logging
import math
from dataclasses import asdict, dataclass, field
from typing import Callable, Dict, List, Optional, Sequence

from ..config import DEFAULT_SETTINGS, EngineSettings
from ..errors import ConfigurationError, GreencalcError, NumericDivergenceError
from ..sources import FinancialConfiguration, SystemConfiguration
from ..units import Currency, Percent
from .cashflow import YearlyCashFlow, build_cash_flows
from .lcoe import lcoe

logger = logging.getLogger(__name__)

NO_PAYBACK = math.inf


@dataclass
class FinancialMetrics:
    npv: Optional[float]
    irr: Optional[float]
    payback_period_years: Optional[float]
    roi_pct: Optional[float]
    lcoe_per_kwh: Optional[float]
    yearly_cash_flows: List[YearlyCashFlow]
    unavailable: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return asdict(self)


def _discounted_sum(cash_flows: Sequence[float], rate_pct: float) -> float:
    base = 1 + rate_pct / 100.0
    return sum(cf / base**year for year, cf in enumerate(cash_flows))


def _npv_slope(cash_flows: Sequence[float], rate_pct: float) -> float:
    base = 1 + rate_pct / 100.0
    return sum(-year * cf / base ** (year + 1) for year, cf in enumerate(cash_flows) if year)


def npv(cash_flows: Sequence[float], discount_rate_pct: Percent) -> float:
    """Discounted sum of ``cash_flows``, year 0 undiscounted.

    A non-finite term ends the sum early and the partial total is returned.
    """
    if not math.isfinite(discount_rate_pct) or discount_rate_pct < 0:
        raise ConfigurationError(f"Discount rate must be a finite, non-negative percent, got {discount_rate_pct!r}")
    base = 1 + discount_rate_pct / 100.0
    total = 0.0
    for year, cf in enumerate(cash_flows):
        try:
            term = cf / base**year
        except OverflowError:
            term = math.nan
        if not math.isfinite(term):
            logger.warning("NPV stopped at year %d on non-finite term; returning partial sum %.2f", year, total)
            break
        total += term
    return total


def irr(cash_flows: Sequence[float], settings: Optional[EngineSettings] = None) -> Percent:
    """Internal rate of return in percent, by Newton-Raphson from 0 %.

    Stops when the NPV slope is flatter than the derivative tolerance or the
    step is below the step tolerance, and clamps to [-100, 100]. With more
    than one sign change in ``cash_flows`` this returns a root in range, not
    necessarily the economically meaningful one.
    """
    settings = settings or DEFAULT_SETTINGS
    if not cash_flows:
        raise ConfigurationError("IRR needs at least one cash flow")

    rate = 0.0
    flat = False
    try:
        value = _discounted_sum(cash_flows, rate)
        for _ in range(settings.irr_max_iterations):
            slope = _npv_slope(cash_flows, rate)
            if abs(slope) < settings.irr_derivative_tolerance:
                flat = True
                break
            next_rate = rate - value * 100.0 / slope
            if not math.isfinite(next_rate):
                raise NumericDivergenceError("IRR iterate became non-finite")
            if abs(next_rate - rate) < settings.irr_step_tolerance:
                break
            rate = next_rate
            value = _discounted_sum(cash_flows, rate)
        else:
            raise NumericDivergenceError(
                f"IRR did not converge within {settings.irr_max_iterations} iterations"
            )
    except (OverflowError, ZeroDivisionError) as exc:
        raise NumericDivergenceError(f"IRR iterate left the real domain near {rate:.4g}%") from exc

    if not math.isfinite(value):
        raise NumericDivergenceError("IRR produced a non-finite NPV")
    # A vanishing slope far from NPV = 0 means the iterate ran off to infinity.
    scale = max(abs(cf) for cf in cash_flows)
    if flat and abs(value) > settings.irr_step_tolerance * max(scale, 1.0):
        raise NumericDivergenceError(f"IRR is indeterminate: NPV slope vanished at {rate:.4g}%")
    return Percent(max(-100.0, min(100.0, rate)))


def payback_period(cumulative_cash_flows: Sequence[float]) -> float:
    """Fractional years until the cumulative cash flow turns non-negative.

    Returns ``NO_PAYBACK`` (infinity) when it never does, and also when the
    first row is already non-negative.
    """
    index = next((i for i, value in enumerate(cumulative_cash_flows) if value >= 0), None)
    if not index:
        return NO_PAYBACK
    previous = cumulative_cash_flows[index - 1]
    current = cumulative_cash_flows[index]
    return (index - 1) + abs(previous) / (current - previous)


def roi(cash_flows: Sequence[float], total_installation_cost: Currency) -> Percent:
    """Return on investment counting only the positive cash flows."""
    if not total_installation_cost > 0:
        raise ConfigurationError("ROI is undefined: total installation cost is zero")
    returns = sum(cf for cf in cash_flows if cf > 0)
    return Percent((returns - total_installation_cost) / total_installation_cost * 100.0)


def _attempt(name: str, compute: Callable[[], float], unavailable: Dict[str, str]) -> Optional[float]:
    try:
        value = compute()
    except GreencalcError as exc:
        logger.info("%s unavailable: %s", name, exc)
        unavailable[name] = f"unavailable: {exc}"
        return None
    if not math.isfinite(value):
        unavailable[name] = f"unavailable: {name} is not a finite number"
        return None
    return value


def financial_metrics(
    config: SystemConfiguration,
    fin: FinancialConfiguration,
    yearly_energy_kwh: Sequence[float],
    settings: Optional[EngineSettings] = None,
) -> FinancialMetrics:
    rows = build_cash_flows(config, fin, yearly_energy_kwh)
    flows = [row.cash_flow for row in rows]
    cumulative = [row.cumulative_cash_flow for row in rows]
    lifetime = int(config.operational_lifetime_years)
    energy = list(yearly_energy_kwh)[:lifetime]

    unavailable: Dict[str, str] = {}
    payback = payback_period(cumulative)
    if math.isinf(payback):
        if cumulative[0] >= 0:
            reason = "unavailable: cumulative cash flow is already non-negative in year 0"
        else:
            reason = "unavailable: cumulative cash flow does not recover within the operational lifetime"
        unavailable["payback_period_years"] = reason
        payback = None

    return FinancialMetrics(
        npv=_attempt("npv", lambda: npv(flows, fin.discount_rate_pct), unavailable),
        irr=_attempt("irr", lambda: irr(flows, settings), unavailable),
        payback_period_years=payback,
        roi_pct=_attempt("roi_pct", lambda: roi(flows, config.total_installation_cost), unavailable),
        lcoe_per_kwh=_attempt(
            "lcoe_per_kwh",
            lambda: lcoe(
                config.total_installation_cost,
                config.total_operational_cost_per_year,
                lifetime,
                energy,
            ),
            unavailable,
        ),
        yearly_cash_flows=rows,
        unavailable=unavailable,
    )
