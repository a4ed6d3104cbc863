"""Niveles de funcionalidad y las capacidades que habilitan."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum


class FeatureTier(IntEnum):
    """Active feature level."""

    BASIC = 1
    VALIDATED = 2
    HISTORY = 3


@dataclass(frozen=True)
class Capabilities:
    """Behaviours switched on for a tier."""

    validates: bool = False
    categorizes: bool = False
    persists: bool = False


_CAPABILITIES: dict[FeatureTier, Capabilities] = {
    FeatureTier.BASIC: Capabilities(),
    FeatureTier.VALIDATED: Capabilities(validates=True, categorizes=True),
    FeatureTier.HISTORY: Capabilities(validates=True, categorizes=True, persists=True),
}


def capabilities_for(tier: FeatureTier | int) -> Capabilities:
    """Devuelve las capacidades del nivel.

    Raises:
        ValueError: If ``tier`` is not 1, 2 or 3.
    """
    return _CAPABILITIES[FeatureTier(tier)]
