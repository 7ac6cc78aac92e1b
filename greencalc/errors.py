from __future__ import annotations

from typing import Any, List, Optional


class GreencalcError(Exception):
    """Base class for every error raised by the engine."""


class ValidationError(GreencalcError):
    """Bad, missing or out-of-range input, caught at the input boundary."""

    def __init__(
        self,
        message: str,
        errors: Optional[List[str]] = None,
        field: Optional[str] = None,
        value: Any = None,
    ) -> None:
        super().__init__(message)
        self.errors = list(errors) if errors else [message]
        self.field = field
        self.value = value


class ConfigurationError(GreencalcError):
    """Input that passed validation but describes an impossible calculation."""


class NumericDivergenceError(GreencalcError):
    """An iterative solver did not settle on a finite answer."""


class ForecastUnavailableError(GreencalcError):
    """A forecast provider could not produce weather adjustment factors."""
