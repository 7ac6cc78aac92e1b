from __future__ import annotations

import logging
import math
import re
from dataclasses import asdict, dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from .config import DEFAULT_SETTINGS, EngineSettings
from .errors import ValidationError
from .sources import (
    DEFAULT_LOCATION,
    SOURCE_CATALOGUE,
    SOURCE_TYPES,
    EnergySource,
    FinancialConfiguration,
    Location,
    SystemConfiguration,
    default_source,
)

logger = logging.getLogger(__name__)

NAN = float("nan")
_NON_NUMERIC = re.compile(r"[^\d.\-]")

TEXT_FIELDS = frozenset({"type", "city", "country"})
FLAG_FIELDS = frozenset({"enabled"})
LIST_FIELDS = frozenset({"energy_sources"})
RECORD_FIELDS = frozenset({"location"})

SYSTEM_FIELDS = ("grid_emission_factor", "operational_lifetime_years")
SOURCE_FIELDS = (
    "capacity_kw",
    "efficiency_pct",
    "cost_per_kw",
    "daily_production_hours",
    "degradation_rate_pct",
    "specific_operational_cost",
)
LOCATION_FIELDS = ("latitude", "longitude")
FINANCIAL_FIELDS = (
    "electricity_price",
    "electricity_price_increase_pct",
    "financing_years",
    "interest_rate_pct",
    "inflation_rate_pct",
    "discount_rate_pct",
)

DEFAULT_VALUES: Dict[str, float] = {
    "capacity_kw": 10.0,
    "efficiency_pct": 18.0,
    "electricity_price": 2.20,
    "interest_rate_pct": 7.0,
    "operational_lifetime_years": 25.0,
    "grid_emission_factor": 0.95,
    "cost_per_kw": 15000.0,
    "daily_production_hours": 5.0,
    "degradation_rate_pct": 0.5,
    "specific_operational_cost": 200.0,
    "electricity_price_increase_pct": 8.0,
    "financing_years": 10.0,
    "inflation_rate_pct": 5.0,
    "discount_rate_pct": 8.0,
}


def _whole(v: float) -> bool:
    return float(v).is_integer()


RULES: Dict[str, Tuple[Callable[[float], bool], str]] = {
    "capacity_kw": (lambda v: v > 0, "must be greater than 0"),
    "efficiency_pct": (lambda v: 0 < v <= 100, "must be greater than 0 and at most 100"),
    "electricity_price": (lambda v: v > 0, "must be greater than 0"),
    "interest_rate_pct": (lambda v: 0 <= v <= 100, "must be between 0 and 100"),
    "operational_lifetime_years": (
        lambda v: 0 < v <= 50 and _whole(v),
        "must be a whole number of years between 1 and 50",
    ),
    "cost_per_kw": (lambda v: v >= 0, "must not be negative"),
    "daily_production_hours": (lambda v: 0 <= v <= 24, "must be between 0 and 24"),
    "degradation_rate_pct": (lambda v: 0 <= v < 100, "must be at least 0 and below 100"),
    "specific_operational_cost": (lambda v: v >= 0, "must not be negative"),
    "grid_emission_factor": (lambda v: v > 0, "must be greater than 0"),
    "financing_years": (lambda v: v >= 0 and _whole(v), "must be a whole number of years, at least 0"),
    "discount_rate_pct": (lambda v: v >= 0, "must not be negative"),
}


@dataclass
class ValidationReport:
    is_valid: bool
    errors: List[str]
    warnings: List[str]
    normalized: Dict[str, Any]

    def to_dict(self) -> dict:
        return {
            "is_valid": self.is_valid,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
        }


@dataclass
class PreparedInputs:
    system: SystemConfiguration
    financial: FinancialConfiguration
    warnings: List[str] = field(default_factory=list)
    missing_data_flags: List[str] = field(default_factory=list)


def to_number(value: Any) -> float:
    """Coerce one raw value to a float, ``nan`` when empty or unparseable."""
    if value is None or value == "":
        return NAN
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else NAN
    if isinstance(value, str):
        try:
            return float(_NON_NUMERIC.sub("", value))
        except ValueError:
            return NAN
    return NAN


def to_flag(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip().lower() not in ("false", "0", "no", "off", "")
    return bool(value)


def normalize(raw: Mapping[str, Any]) -> Dict[str, Any]:
    normalized: Dict[str, Any] = {}
    for key, value in raw.items():
        if key in TEXT_FIELDS:
            normalized[key] = value
        elif key in FLAG_FIELDS:
            normalized[key] = to_flag(value)
        elif isinstance(value, Mapping):
            normalized[key] = normalize(value)
        elif isinstance(value, (list, tuple)):
            normalized[key] = [normalize(v) if isinstance(v, Mapping) else to_number(v) for v in value]
        else:
            normalized[key] = to_number(value)
    return normalized


def _is_nan(value: Any) -> bool:
    return isinstance(value, float) and math.isnan(value)


def _check(
    record: Mapping[str, Any],
    path: str,
    errors: List[str],
    warnings: List[str],
    settings: EngineSettings,
    ranges: bool = True,
) -> None:
    for key, value in record.items():
        name = f"{path}{key}"
        if key in LIST_FIELDS and not isinstance(value, list):
            errors.append(f"Invalid value for {name}: must be a list of objects")
            continue
        if key in RECORD_FIELDS and not isinstance(value, Mapping):
            errors.append(f"Invalid value for {name}: must be an object")
            continue
        if isinstance(value, Mapping):
            _check(value, f"{name}.", errors, warnings, settings, ranges)
            continue
        if isinstance(value, list):
            for i, item in enumerate(value):
                if isinstance(item, Mapping):
                    # Disabled sources skip range rules and warnings.
                    enabled = item.get("enabled", True) is not False
                    _check(item, f"{name}[{i}].", errors, warnings, settings, ranges and enabled)
                elif key in LIST_FIELDS:
                    errors.append(f"Invalid value for {name}[{i}]: must be an object")
                elif _is_nan(item):
                    errors.append(f"Missing or invalid value for {name}[{i}]: NaN detected")
            continue
        if key == "type" and value not in SOURCE_TYPES:
            errors.append(f"Invalid value for {name}: {value!r} is not one of {', '.join(SOURCE_TYPES)}")
            continue
        if not isinstance(value, float):
            continue
        if math.isnan(value):
            errors.append(f"Missing or invalid value for {name}: NaN detected")
            continue
        if not ranges:
            continue
        rule = RULES.get(key)
        if rule is not None and not rule[0](value):
            errors.append(f"Invalid value for {name}: {value:g} {rule[1]}")
        if key == "capacity_kw" and value > settings.capacity_warning_kw:
            warnings.append(f"Unusually high capacity value for {name}: {value:g} kW")
        if key == "electricity_price" and value > settings.price_warning_per_kwh:
            warnings.append(f"Unusually high electricity price: {value:g}/kWh")


def validate(data: Mapping[str, Any], settings: Optional[EngineSettings] = None) -> ValidationReport:
    settings = settings or DEFAULT_SETTINGS
    normalized = normalize(data)
    errors: List[str] = []
    warnings: List[str] = []
    _check(normalized, "", errors, warnings, settings)
    return ValidationReport(
        is_valid=not errors,
        errors=errors,
        warnings=warnings,
        normalized=normalized,
    )


def _missing(record: Mapping[str, Any], key: str) -> bool:
    value = record.get(key)
    return value is None or (isinstance(value, str) and not value.strip())


def impute(
    raw: Mapping[str, Any],
    keys: Tuple[str, ...],
    defaults: Optional[Mapping[str, float]] = None,
    path: str = "",
) -> Tuple[Dict[str, Any], List[str]]:
    """Fill absent or empty ``keys`` from the default table.

    Returns the filled copy and one flag per filled value. Values that are
    present but unparseable are left alone so validation still rejects them.
    """
    defaults = DEFAULT_VALUES if defaults is None else defaults
    filled = dict(raw)
    flags: List[str] = []
    for key in keys:
        if not _missing(filled, key) or key not in defaults:
            continue
        filled[key] = defaults[key]
        flags.append(f"{path}{key} not specified - using default {defaults[key]:g}")
    return filled, flags


def require_record(name: str, raw: Any) -> Mapping[str, Any]:
    """Return ``raw`` as a mapping; absent or empty input becomes ``{}``."""
    if not raw:
        return {}
    if not isinstance(raw, Mapping):
        raise ValidationError(f"Invalid value for {name}: must be an object", field=name, value=raw)
    return raw


def impute_system(raw: Mapping[str, Any]) -> Tuple[Dict[str, Any], List[str]]:
    filled, flags = impute(raw, SYSTEM_FIELDS)

    sources = filled.get("energy_sources")
    if not sources:
        filled["energy_sources"] = [asdict(default_source("solar"))]
        flags.append("energy_sources not specified - using default solar configuration")
    elif isinstance(sources, (list, tuple)):
        filled_sources = []
        for i, source in enumerate(sources):
            if not isinstance(source, Mapping):
                filled_sources.append(source)
                continue
            if _missing(source, "type"):
                source = {**source, "type": "solar"}
                flags.append(f"energy_sources[{i}].type not specified - using solar")
            catalogue = dict(DEFAULT_VALUES)
            catalogue.update(SOURCE_CATALOGUE.get(source.get("type"), {}))
            source, source_flags = impute(source, SOURCE_FIELDS, catalogue, f"energy_sources[{i}].")
            filled_sources.append(source)
            flags.extend(source_flags)
        filled["energy_sources"] = filled_sources

    location = filled.get("location")
    if not location:
        filled["location"] = asdict(DEFAULT_LOCATION)
        flags.append(
            f"location not specified - using {DEFAULT_LOCATION.city}, {DEFAULT_LOCATION.country} as default"
        )
    elif isinstance(location, Mapping):
        filled["location"], location_flags = impute(
            location, LOCATION_FIELDS, asdict(DEFAULT_LOCATION), "location."
        )
        flags.extend(location_flags)
    return filled, flags


def build_system(record: Mapping[str, Any]) -> SystemConfiguration:
    """Build a configuration from a validated, normalized record."""
    sources = tuple(
        EnergySource(
            type=s["type"],
            enabled=s.get("enabled", True),
            **{key: s[key] for key in SOURCE_FIELDS},
        )
        for s in record["energy_sources"]
    )
    loc = record["location"]
    return SystemConfiguration(
        energy_sources=sources,
        grid_emission_factor=record["grid_emission_factor"],
        operational_lifetime_years=int(record["operational_lifetime_years"]),
        location=Location(
            latitude=loc["latitude"],
            longitude=loc["longitude"],
            city=loc.get("city") or "",
            country=loc.get("country") or "",
        ),
    )


def build_financial(record: Mapping[str, Any]) -> FinancialConfiguration:
    values = {key: record[key] for key in FINANCIAL_FIELDS}
    values["financing_years"] = int(values["financing_years"])
    return FinancialConfiguration(**values)


def prepare_inputs(
    raw_system: Optional[Mapping[str, Any]],
    raw_financial: Optional[Mapping[str, Any]],
    settings: Optional[EngineSettings] = None,
) -> PreparedInputs:
    """Impute, normalize and validate raw input into configuration snapshots.

    Raises ValidationError listing every problem when the imputed input is
    still invalid.
    """
    system_raw, system_flags = impute_system(require_record("system", raw_system))
    financial_raw, financial_flags = impute(require_record("financial", raw_financial), FINANCIAL_FIELDS)
    flags = system_flags + financial_flags
    for flag in flags:
        logger.info("Imputed input: %s", flag)

    system_report = validate(system_raw, settings)
    financial_report = validate(financial_raw, settings)
    errors = system_report.errors + financial_report.errors
    if errors:
        logger.warning("Rejected input with %d validation error(s)", len(errors))
        raise ValidationError("Input failed validation", errors=errors)

    return PreparedInputs(
        system=build_system(system_report.normalized),
        financial=build_financial(financial_report.normalized),
        warnings=system_report.warnings + financial_report.warnings,
        missing_data_flags=flags,
    )
