"""Conversion de alturas y pesos a unidades canonicas (m, kg)."""

from __future__ import annotations

import math
import re
from decimal import Decimal

from bmi_tracker.model import CanonicalMeasurement, Measurement, RawValue, UnitSystem

CM_PER_METER = 100
METERS_PER_INCH = 0.0254
KILOGRAMS_PER_POUND = 0.45359237

# Decimal literals a numeric form field accepts; no underscores, no inf/nan.
_NUMBER_RE = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?|[+-]?Infinity")


def parse_number(raw: RawValue) -> float:
    """Coerce a raw field value the way a numeric form field does.

    Blank text counts as zero and unparseable text becomes NaN, so the
    downstream checks decide what to do with it.

    Args:
        raw: Number or text as typed by the user.

    Returns:
        The parsed float (possibly NaN or negative).
    """
    if isinstance(raw, bool):
        return float(raw)
    if isinstance(raw, int | float):
        return float(raw)
    text = str(raw).strip()
    if not text:
        return 0.0
    if _NUMBER_RE.fullmatch(text) is None:
        return math.nan
    return float(text)


def to_meters(value: float, system: UnitSystem) -> float:
    """Convert a height in cm (metric) or inches (imperial) to meters."""
    if system is UnitSystem.IMPERIAL:
        return value * METERS_PER_INCH
    return value / CM_PER_METER


def to_kilograms(value: float, system: UnitSystem) -> float:
    """Convert a weight in kg (metric) or pounds (imperial) to kilograms."""
    if system is UnitSystem.IMPERIAL:
        return value * KILOGRAMS_PER_POUND
    return value


def canonicalize(measurement: Measurement) -> CanonicalMeasurement:
    """Parse and convert a raw measurement; no validation happens here."""
    system = UnitSystem(measurement.unit_system)
    return CanonicalMeasurement(
        meters=to_meters(parse_number(measurement.height_value), system),
        kilograms=to_kilograms(parse_number(measurement.weight_value), system),
    )


def format_number(value: RawValue) -> str:
    """Render a value without a trailing ``.0`` or scientific notation."""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, int):
        return str(value)
    if not math.isfinite(value):
        return str(value)
    if value.is_integer():
        return str(int(value))
    # Shortest round-tripping digits, no fixed precision.
    text = format(Decimal(repr(value)), "f").rstrip("0").rstrip(".")
    return text if text else "0"
