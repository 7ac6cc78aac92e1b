from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields
from typing import Mapping, Optional

ENV_PREFIX = "GREENCALC_"


@dataclass(frozen=True)
class EngineSettings:
    carbon_credit_rate_per_tonne: float = 190.0
    days_per_month: int = 30
    days_per_year: int = 365
    irr_max_iterations: int = 100
    irr_derivative_tolerance: float = 1e-10
    irr_step_tolerance: float = 1e-6
    capacity_warning_kw: float = 1000.0
    price_warning_per_kwh: float = 10.0
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "EngineSettings":
        """Build settings from ``GREENCALC_<FIELD>`` variables.

        Unset variables keep their defaults; values are cast to the type of
        the default.
        """
        environ = os.environ if environ is None else environ
        values = {}
        for f in fields(cls):
            raw = environ.get(ENV_PREFIX + f.name.upper())
            if raw in (None, ""):
                continue
            cast = type(f.default)
            try:
                values[f.name] = cast(raw)
            except ValueError as exc:
                raise ValueError(f"{ENV_PREFIX}{f.name.upper()}={raw!r}: {exc}") from exc
        return cls(**values)


DEFAULT_SETTINGS = EngineSettings()


def configure_logging(level: str = DEFAULT_SETTINGS.log_level) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
