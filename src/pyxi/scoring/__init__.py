"""Scoring engine: progression, ideal build lookup, affinity and general score."""

from .affinity import AffinityResult, BreakdownEntry, SkillBreakdownEntry, compute_affinity
from .composite import (
    PerformanceFlags,
    PlayerPerformance,
    affinity_staleness,
    compute_general_score,
    compute_performance,
    effective_live_form,
)
from .progression import (
    build_cost,
    level_for_points,
    next_level_cost,
    points_for_level,
    project_stats,
    projected_stats_for_card,
)
from .resolver import ResolvedBuild, resolve_ideal_build
from .stats import RatingStats, average, compute_stats, std_dev
from .suggestions import suggest_progression

__all__ = [
    "AffinityResult",
    "BreakdownEntry",
    "PerformanceFlags",
    "PlayerPerformance",
    "RatingStats",
    "ResolvedBuild",
    "SkillBreakdownEntry",
    "affinity_staleness",
    "average",
    "build_cost",
    "compute_affinity",
    "compute_general_score",
    "compute_performance",
    "compute_stats",
    "effective_live_form",
    "level_for_points",
    "next_level_cost",
    "points_for_level",
    "project_stats",
    "projected_stats_for_card",
    "resolve_ideal_build",
    "std_dev",
    "suggest_progression",
]
