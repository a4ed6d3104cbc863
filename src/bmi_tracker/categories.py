"""Clasificacion del IMC en bandas y consejos asociados."""

from __future__ import annotations

import math
from dataclasses import dataclass

from bmi_tracker.model import Category


@dataclass(frozen=True)
class CategoryBand:
    """Half-open range ``[lower, upper)`` mapped to a category."""

    category: Category
    lower: float
    upper: float

    def matches(self, bmi: float) -> bool:
        return self.lower <= bmi < self.upper


# Evaluated top to bottom. [24.9, 25) and [29.9, 30) match nothing and land
# on FALLBACK_CATEGORY; kept as shipped until the intended bounds are known.
CATEGORY_BANDS: tuple[CategoryBand, ...] = (
    CategoryBand(Category.UNDERWEIGHT, 0, 18.5),
    CategoryBand(Category.NORMAL, 18.5, 24.9),
    CategoryBand(Category.OVERWEIGHT, 25, 29.9),
    CategoryBand(Category.OBESITY, 30, math.inf),
)

FALLBACK_CATEGORY = Category.UNDERWEIGHT

ADVICE: dict[Category, str] = {
    Category.UNDERWEIGHT: (
        "Consider nutrient-dense meals and strength training; consult a professional."
    ),
    Category.NORMAL: "Great! Maintain balanced nutrition, regular activity, and sleep.",
    Category.OVERWEIGHT: (
        "Small sustainable changes (whole foods, daily walks) can help."
    ),
    Category.OBESITY: (
        "Work with a clinician; combine nutrition, activity, sleep, stress management."
    ),
}


def categorize(bmi: float) -> Category:
    """Return the first band containing ``bmi``, else the fallback."""
    for band in CATEGORY_BANDS:
        if band.matches(bmi):
            return band.category
    return FALLBACK_CATEGORY


def advice_for(category: Category) -> str:
    """Fixed one-sentence advice for a category."""
    return ADVICE[Category(category)]
