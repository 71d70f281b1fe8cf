"""Record models shared by the scoring engine, generator and API."""

from .formation import FlexibleTarget, FormationSlot, FormationStats, MatchResult, SingleTarget
from .ideal_build import IdealBuild, StatRange
from .player import (
    Card,
    PhysicalAttributes,
    Player,
    PositionBuild,
    ProgressionBuild,
    is_special_card,
)

__all__ = [
    "Card",
    "FlexibleTarget",
    "FormationSlot",
    "FormationStats",
    "IdealBuild",
    "MatchResult",
    "PhysicalAttributes",
    "Player",
    "PositionBuild",
    "ProgressionBuild",
    "SingleTarget",
    "StatRange",
    "is_special_card",
]
