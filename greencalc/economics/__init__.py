from .cashflow import YearlyCashFlow, build_cash_flows
from .finance import monthly_loan_payment, yearly_loan_payment
from .lcoe import lcoe, lcoe_table
from .metrics import FinancialMetrics, financial_metrics, irr, npv, payback_period, roi
from .prices import ElectricityPrice, average_annual_increase, electricity_price_series

__all__ = [
    "ElectricityPrice",
    "FinancialMetrics",
    "YearlyCashFlow",
    "average_annual_increase",
    "build_cash_flows",
    "electricity_price_series",
    "financial_metrics",
    "irr",
    "lcoe",
    "lcoe_table",
    "monthly_loan_payment",
    "npv",
    "payback_period",
    "roi",
    "yearly_loan_payment",
]
