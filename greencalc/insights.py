from __future__ import annotations

from typing import List, Mapping

from .sources import FinancialConfiguration, SystemConfiguration

# Fixed rules of thumb; none of these are fitted to data.
LARGE_SYSTEM_KW = 1000.0
SMALL_SYSTEM_KW = 5.0
HIGH_INTEREST_PCT = 10.0
UNUSUAL_INTEREST_PCT = 15.0
EXCELLENT_FACTOR = 0.8


def confidence_score(
    config: SystemConfiguration,
    fin: FinancialConfiguration,
    weather_resolved: bool,
) -> float:
    confidence = 1.0
    if not weather_resolved:
        confidence *= 0.8

    enabled = len(config.enabled_sources)
    if enabled == 1:
        confidence *= 0.9
    elif enabled > 3:
        confidence *= 1.1

    if config.total_capacity_kw > LARGE_SYSTEM_KW:
        confidence *= 0.9
    if fin.interest_rate_pct > UNUSUAL_INTEREST_PCT:
        confidence *= 0.8
    return max(0.1, min(1.0, confidence))


def recommendations(
    config: SystemConfiguration,
    fin: FinancialConfiguration,
    weather_factors: Mapping[str, float],
) -> List[str]:
    notes: List[str] = []

    if weather_factors:
        best, factor = max(weather_factors.items(), key=lambda item: item[1])
        if factor > EXCELLENT_FACTOR:
            notes.append(f"Excellent conditions for {best} energy ({factor * 100:.1f}% of nominal output)")

    if len(config.enabled_sources) == 1:
        notes.append("Consider diversifying with additional energy sources to reduce weather dependency")

    if fin.interest_rate_pct > HIGH_INTEREST_PCT:
        notes.append("High interest rate detected - consider alternative financing options")

    if config.total_capacity_kw < SMALL_SYSTEM_KW:
        notes.append("Small system size may result in higher per-kW costs - consider scaling up")

    return notes
