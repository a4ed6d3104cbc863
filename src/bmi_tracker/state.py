"""Estado de la sesion como valor inmutable y su reductor de acciones."""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from bmi_tracker.calculator import bmi_for
from bmi_tracker.categories import advice_for, categorize
from bmi_tracker.model import Category, Measurement, RawValue, UnitSystem
from bmi_tracker.tiers import FeatureTier, capabilities_for
from bmi_tracker.validation import ValidationErrors, validate


@dataclass(frozen=True)
class TrackerState:
    """Current tier, unit system and raw field values.

    Each unit system keeps its own height/weight fields, so toggling units
    restores what was last typed in that system.
    """

    tier: FeatureTier = FeatureTier.BASIC
    unit_system: UnitSystem = UnitSystem.METRIC
    height_cm: RawValue = 175
    weight_kg: RawValue = 70
    height_in: RawValue = 69
    weight_lb: RawValue = 154
    note: str = ""


@dataclass(frozen=True)
class EditHeight:
    value: RawValue


@dataclass(frozen=True)
class EditWeight:
    value: RawValue


@dataclass(frozen=True)
class EditNote:
    text: str


@dataclass(frozen=True)
class SetUnitSystem:
    unit_system: UnitSystem


@dataclass(frozen=True)
class SelectTier:
    tier: FeatureTier


@dataclass(frozen=True)
class ResetNote:
    pass


Action = EditHeight | EditWeight | EditNote | SetUnitSystem | SelectTier | ResetNote


@dataclass(frozen=True)
class Evaluation:
    """Values derived from a state; recomputed on demand."""

    measurement: Measurement
    bmi: float | None
    category: Category | None = None
    advice: str | None = None
    errors: ValidationErrors = field(default_factory=dict)
    can_save: bool = False


def reduce(state: TrackerState, action: Action) -> TrackerState:
    """Return the state after applying ``action``.

    Raises:
        TypeError: If ``action`` is not a known action type.
    """
    metric = state.unit_system is UnitSystem.METRIC
    if isinstance(action, EditHeight):
        if metric:
            return replace(state, height_cm=action.value)
        return replace(state, height_in=action.value)
    if isinstance(action, EditWeight):
        if metric:
            return replace(state, weight_kg=action.value)
        return replace(state, weight_lb=action.value)
    if isinstance(action, EditNote):
        return replace(state, note=action.text)
    if isinstance(action, SetUnitSystem):
        return replace(state, unit_system=UnitSystem(action.unit_system))
    if isinstance(action, SelectTier):
        return replace(state, tier=FeatureTier(action.tier))
    if isinstance(action, ResetNote):
        return replace(state, note="")
    raise TypeError(f"Unknown action: {action!r}")


def measurement(state: TrackerState) -> Measurement:
    """Raw measurement for the active unit system."""
    if state.unit_system is UnitSystem.METRIC:
        return Measurement(state.height_cm, state.weight_kg, UnitSystem.METRIC)
    return Measurement(state.height_in, state.weight_lb, UnitSystem.IMPERIAL)


def evaluate(state: TrackerState) -> Evaluation:
    """Compute BMI, category, advice, errors and save eligibility."""
    caps = capabilities_for(state.tier)
    current = measurement(state)
    bmi = bmi_for(current)
    errors = validate(current, caps)

    category = None
    advice = None
    if bmi is not None and caps.categorizes:
        category = categorize(bmi)
        advice = advice_for(category)

    return Evaluation(
        measurement=current,
        bmi=bmi,
        category=category,
        advice=advice,
        errors=errors,
        can_save=caps.persists and bmi is not None and not errors,
    )
