"""
Domain validity rules for production records.

Both functions are total: they never raise, whatever the field values are.
"""
import math
from datetime import date
from typing import List

MIN_TEMPERATURE = -50.0
MAX_TEMPERATURE = 200.0


def _non_empty(value) -> bool:
    return isinstance(value, str) and bool(value.strip())


def _non_negative(value) -> bool:
    try:
        return value >= 0 and math.isfinite(value)
    except TypeError:
        return False


def validation_errors(record) -> List[str]:
    """Return the names of the rules the record violates (empty when valid)."""
    errors = []
    if not _non_empty(getattr(record, "well_id", None)):
        errors.append("well_id")

    production_date = getattr(record, "production_date", None)
    if not isinstance(production_date, date) or production_date == date.min:
        errors.append("production_date")

    for field in ("oil_production", "gas_production", "water_production", "wellhead_pressure"):
        if not _non_negative(getattr(record, field, None)):
            errors.append(field)

    temperature = getattr(record, "temperature", None)
    try:
        in_range = MIN_TEMPERATURE <= temperature <= MAX_TEMPERATURE
    except TypeError:
        in_range = False
    if not in_range:
        errors.append("temperature")

    if not _non_empty(getattr(record, "status", None)):
        errors.append("status")
    return errors


def is_valid(record) -> bool:
    """True iff the record is well-formed and within domain bounds."""
    return not validation_errors(record)
