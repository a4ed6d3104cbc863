"""Calculo del indice de masa corporal."""

from __future__ import annotations

import math

from bmi_tracker.model import Measurement
from bmi_tracker.units import canonicalize


def compute_bmi(meters: float, kilograms: float) -> float | None:
    """Return ``kilograms / meters**2``.

    Args:
        meters: Height in meters.
        kilograms: Weight in kilograms.

    Returns:
        The unrounded BMI, or None when either input is non-finite or not
        strictly positive.
    """
    if not (math.isfinite(meters) and math.isfinite(kilograms)):
        return None
    if meters <= 0 or kilograms <= 0:
        return None
    return kilograms / (meters * meters)


def bmi_for(measurement: Measurement) -> float | None:
    """Convert a raw measurement and compute its BMI."""
    canonical = canonicalize(measurement)
    return compute_bmi(canonical.meters, canonical.kilograms)
