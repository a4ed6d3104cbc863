from __future__ import annotations

import math

import pytest

from bmi_tracker.model import Measurement, UnitSystem
from bmi_tracker.units import (
    canonicalize,
    format_number,
    parse_number,
    to_kilograms,
    to_meters,
)


def test_imperial_factors_are_exact() -> None:
    assert to_meters(1, UnitSystem.IMPERIAL) == 0.0254
    assert to_kilograms(1, UnitSystem.IMPERIAL) == 0.45359237


def test_metric_conversion() -> None:
    assert to_meters(175, UnitSystem.METRIC) == pytest.approx(1.75)
    assert to_kilograms(70, UnitSystem.METRIC) == 70


def test_negative_values_pass_through() -> None:
    assert to_meters(-100, UnitSystem.METRIC) == pytest.approx(-1.0)
    assert math.isnan(to_kilograms(math.nan, UnitSystem.IMPERIAL))


@pytest.mark.parametrize(
    ("raw", "expected"),
    [(70, 70.0), (" 70.5 ", 70.5), ("", 0.0), ("   ", 0.0), ("-3", -3.0)],
)
def test_parse_number(raw: object, expected: float) -> None:
    assert parse_number(raw) == expected  # type: ignore[arg-type]


@pytest.mark.parametrize(
    "raw", ["abc", "1_000", "inf", "nan", "-infinity", "1e", "0x10"]
)
def test_parse_number_rejects_non_form_numbers(raw: str) -> None:
    assert math.isnan(parse_number(raw))


def test_parse_number_accepts_form_spellings() -> None:
    assert parse_number("Infinity") == math.inf
    assert parse_number("-Infinity") == -math.inf
    assert parse_number(".5") == 0.5
    assert parse_number("1e3") == 1000.0


def test_canonicalize_imperial() -> None:
    canonical = canonicalize(Measurement(69, 154, UnitSystem.IMPERIAL))
    assert canonical.meters == pytest.approx(1.7526)
    assert canonical.kilograms == pytest.approx(69.85, abs=0.01)


def test_format_number() -> None:
    assert format_number(175.0) == "175"
    assert format_number(70.5) == "70.5"
    assert format_number(22) == "22"
    assert format_number(" 80 ") == "80"
    assert format_number(175.1234567) == "175.1234567"
    assert format_number(1e-7) == "0.0000001"
