"""Modelos tipados para mediciones, categorias e historial de IMC."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class UnitSystem(str, Enum):
    """Unit system the raw fields are typed in."""

    METRIC = "metric"
    IMPERIAL = "imperial"


class Category(str, Enum):
    """Closed set of BMI bands."""

    UNDERWEIGHT = "Underweight"
    NORMAL = "Normal"
    OVERWEIGHT = "Overweight"
    OBESITY = "Obesity"


RawValue = float | int | str


@dataclass(frozen=True)
class Measurement:
    """Raw, unvalidated user input."""

    height_value: RawValue
    weight_value: RawValue
    unit_system: UnitSystem = UnitSystem.METRIC


@dataclass(frozen=True)
class CanonicalMeasurement:
    """Height in meters and weight in kilograms."""

    meters: float
    kilograms: float


@dataclass(frozen=True)
class HistoryEntry:
    """One saved snapshot of a measurement and its result."""

    entry_id: str
    timestamp: datetime
    height_label: str
    weight_label: str
    bmi: float
    category: Category
    note: str = ""


HistoryLog = tuple[HistoryEntry, ...]
