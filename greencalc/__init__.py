"""Renewable-energy investment calculator.

Turns a description of generation assets and financing terms into yearly
energy, cash-flow and avoided-emission series plus NPV, IRR, payback, ROI and
LCOE.
"""

from .config import EngineSettings
from .engine import CalculationResult, calculate, run_calculation
from .errors import (
    ConfigurationError,
    ForecastUnavailableError,
    GreencalcError,
    NumericDivergenceError,
    ValidationError,
)
from .sources import EnergySource, FinancialConfiguration, Location, SystemConfiguration, default_source

__version__ = "0.1.0"

__all__ = [
    "CalculationResult",
    "ConfigurationError",
    "EnergySource",
    "EngineSettings",
    "FinancialConfiguration",
    "ForecastUnavailableError",
    "GreencalcError",
    "Location",
    "NumericDivergenceError",
    "SystemConfiguration",
    "ValidationError",
    "calculate",
    "default_source",
    "run_calculation",
]
