"""Lineup generation for formations."""

from .service import (
    MIN_AFFINITY_SCORE,
    CandidatePlayer,
    Flexibility,
    Lineup,
    LineupFilters,
    LineupPlayer,
    LineupSlot,
    build_candidates,
    generate_lineup,
)

__all__ = [
    "MIN_AFFINITY_SCORE",
    "CandidatePlayer",
    "Flexibility",
    "Lineup",
    "LineupFilters",
    "LineupPlayer",
    "LineupSlot",
    "build_candidates",
    "generate_lineup",
]
