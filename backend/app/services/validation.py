"""
Intake gate for POST /analyze: presence and positivity checks on a raw JSON object.
Returns a BiometricRecord or raises ValidationError with a caller-facing message.
"""
from __future__ import annotations

import math
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from app.core.errors import (
    INVALID_BODY_METRICS_MESSAGE,
    INVALID_LIFESTYLE_MESSAGE,
    INVALID_REQUEST_BODY_MESSAGE,
    MISSING_FIELDS_MESSAGE,
    ValidationError,
    invalid_field_message,
)
from app.schemas.health import BiometricRecord
from app.services.health_metrics import ACTIVITY_MULTIPLIERS

# field name -> key used by the browser client
WIRE_NAMES: dict[str, str] = {
    "age": "age",
    "height": "height",
    "weight": "weight",
    "gender": "gender",
    "activity_level": "activityLevel",
    "sleep_hours": "sleepHours",
    "water_intake": "waterIntake",
}
REQUIRED_FIELDS = tuple(WIRE_NAMES)
NUMERIC_FIELDS = ("age", "height", "weight", "sleep_hours", "water_intake")


def _lookup(raw: dict[str, Any], name: str) -> Any:
    wire = WIRE_NAMES.get(name, name)
    if wire in raw:
        return raw[wire]
    return raw.get(name)


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


def validate_biometric_record(raw: Any) -> BiometricRecord:
    """
    Check required fields are present, typed and in range.
    Order: missing fields, then per-field type errors, then age/height/weight > 0,
    then sleep/water >= 0. The first failing check wins.
    """
    if not isinstance(raw, dict):
        raise ValidationError(INVALID_REQUEST_BODY_MESSAGE)

    data = {name: _lookup(raw, name) for name in REQUIRED_FIELDS}
    missing = [WIRE_NAMES[name] for name, value in data.items() if _is_missing(value)]
    if missing:
        raise ValidationError(MISSING_FIELDS_MESSAGE, field=missing[0])

    for name in NUMERIC_FIELDS:
        # JSON true/false would otherwise coerce to 1/0
        if isinstance(data[name], bool):
            raise ValidationError(invalid_field_message(WIRE_NAMES[name]), field=WIRE_NAMES[name])

    symptoms = _lookup(raw, "symptoms")
    if symptoms is not None:
        data["symptoms"] = symptoms

    try:
        record = BiometricRecord.model_validate(data)
    except PydanticValidationError as e:
        loc = e.errors()[0]["loc"]
        name = str(loc[0]) if loc else "body"
        wire = WIRE_NAMES.get(name, name)
        raise ValidationError(invalid_field_message(wire), field=wire) from e

    for name in ("height", "weight", "sleep_hours", "water_intake"):
        if not math.isfinite(getattr(record, name)):
            raise ValidationError(invalid_field_message(WIRE_NAMES[name]), field=WIRE_NAMES[name])

    if record.age <= 0 or record.height <= 0 or record.weight <= 0:
        raise ValidationError(INVALID_BODY_METRICS_MESSAGE)
    if record.sleep_hours < 0 or record.water_intake < 0:
        raise ValidationError(INVALID_LIFESTYLE_MESSAGE)
    if not _derived_values_finite(record):
        raise ValidationError(INVALID_BODY_METRICS_MESSAGE)
    return record


def _derived_values_finite(record: BiometricRecord) -> bool:
    """BMI, BMR and the largest calorie target must be finite floats for this record."""
    try:
        height_m = record.height / 100
        bmi = record.weight / (height_m * height_m)
        bmr = 10 * record.weight + 6.25 * record.height - 5 * record.age
        maintenance = bmr * max(ACTIVITY_MULTIPLIERS.values())
    except (ZeroDivisionError, OverflowError):
        return False
    return all(math.isfinite(v) for v in (bmi, bmr, maintenance))
