"""Chequeos de plausibilidad de altura y peso."""

from __future__ import annotations

import math
from dataclasses import dataclass

from bmi_tracker.model import Measurement, UnitSystem
from bmi_tracker.tiers import Capabilities
from bmi_tracker.units import parse_number

ValidationErrors = dict[str, str]


@dataclass(frozen=True)
class PlausibleRange:
    """Inclusive range a raw field value is expected to fall in."""

    low: float
    high: float
    message: str

    def contains(self, value: float) -> bool:
        # NaN compares false both ways and keeps the positivity message.
        return not (value < self.low or value > self.high)


_HEIGHT_RANGES: dict[UnitSystem, PlausibleRange] = {
    UnitSystem.METRIC: PlausibleRange(50, 250, "Height (cm) looks unusual (50–250)."),
    UnitSystem.IMPERIAL: PlausibleRange(
        20, 100, "Height (in) looks unusual (20–100)."
    ),
}

_WEIGHT_RANGES: dict[UnitSystem, PlausibleRange] = {
    UnitSystem.METRIC: PlausibleRange(20, 350, "Weight (kg) looks unusual (20–350)."),
    UnitSystem.IMPERIAL: PlausibleRange(
        44, 770, "Weight (lb) looks unusual (44–770)."
    ),
}


def _check_field(
    field: str, value: float, plausible: PlausibleRange
) -> str | None:
    message = None
    if not math.isfinite(value) or value <= 0:
        message = f"Enter a positive number for {field}."
    if not plausible.contains(value):
        message = plausible.message
    return message


def validate(measurement: Measurement, capabilities: Capabilities) -> ValidationErrors:
    """Check a raw measurement for the active unit system.

    At most one message is produced per field; the range message wins over
    the positivity message.

    Args:
        measurement: Raw input to check.
        capabilities: Capabilities of the active tier.

    Returns:
        Mapping of ``"height"``/``"weight"`` to a message. Empty when valid,
        and always empty when the tier does not validate.
    """
    if not capabilities.validates:
        return {}

    system = UnitSystem(measurement.unit_system)
    checks = (
        ("height", parse_number(measurement.height_value), _HEIGHT_RANGES[system]),
        ("weight", parse_number(measurement.weight_value), _WEIGHT_RANGES[system]),
    )
    errors: ValidationErrors = {}
    for field, value, plausible in checks:
        message = _check_field(field, value, plausible)
        if message is not None:
            errors[field] = message
    return errors
