from __future__ import annotations

import csv
from io import StringIO
from typing import TYPE_CHECKING, Dict, Iterable, List

import pandas as pd

if TYPE_CHECKING:
    from ..engine import CalculationResult

YEARLY_COLUMNS = [
    "year",
    "energy_kwh",
    "electricity_price",
    "revenue",
    "operational_cost",
    "loan_payment",
    "cash_flow",
    "cumulative_cash_flow",
    "carbon_reduction_kg",
]


def dicts_to_csv(rows: Iterable[Dict[str, object]], fieldnames: List[str]) -> str:
    buffer = StringIO()
    writer = csv.DictWriter(buffer, fieldnames=fieldnames)
    writer.writeheader()
    for row in rows:
        writer.writerow(row)
    return buffer.getvalue()


def yearly_table(result: "CalculationResult") -> pd.DataFrame:
    """One row per year 0..lifetime; year 0 carries only the outlay."""
    cash = pd.DataFrame(
        [
            {
                "year": row.year,
                "energy_kwh": row.energy_kwh,
                "electricity_price": row.electricity_price,
                "revenue": row.revenue,
                "operational_cost": row.operational_cost,
                "loan_payment": row.loan_payment,
                "cash_flow": row.cash_flow,
                "cumulative_cash_flow": row.cumulative_cash_flow,
            }
            for row in result.financial_metrics.yearly_cash_flows
        ]
    )
    carbon = pd.DataFrame(
        [
            {"year": row.year, "carbon_reduction_kg": row.reduction_kg}
            for row in result.carbon_reduction.yearly_reduction
        ],
        columns=["year", "carbon_reduction_kg"],
    )
    table = cash.merge(carbon, on="year", how="left")
    table["carbon_reduction_kg"] = table["carbon_reduction_kg"].fillna(0.0)
    return table[YEARLY_COLUMNS]


def yearly_csv(result: "CalculationResult") -> str:
    return dicts_to_csv(yearly_table(result).to_dict(orient="records"), YEARLY_COLUMNS)


SUMMARY_COLUMNS = ["metric", "value"]


def summary_rows(result: "CalculationResult") -> List[Dict[str, object]]:
    """Scalar metrics as (metric, value) rows; unavailable ones carry the reason."""
    metrics = result.financial_metrics
    carbon = result.carbon_reduction
    energy = result.energy_generation
    values = {
        "npv": metrics.npv,
        "irr": metrics.irr,
        "payback_period_years": metrics.payback_period_years,
        "roi_pct": metrics.roi_pct,
        "lcoe_per_kwh": metrics.lcoe_per_kwh,
        "daily_energy_kwh": energy.daily_kwh,
        "yearly_energy_kwh": energy.yearly_kwh,
        "lifetime_energy_kwh": energy.total_kwh,
        "lifetime_carbon_reduction_kg": carbon.lifetime_kg,
        "carbon_financial_benefit": carbon.financial_benefit,
    }
    return [
        {"metric": name, "value": metrics.unavailable.get(name, "") if value is None else value}
        for name, value in values.items()
    ]


def summary_csv(result: "CalculationResult") -> str:
    return dicts_to_csv(summary_rows(result), SUMMARY_COLUMNS)

