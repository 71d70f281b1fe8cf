"""Configuration helpers for positions, styles and attributes."""

from .attributes import (
    ALL_STATS,
    CATEGORIES,
    CATEGORY_STATS,
    UnknownStatError,
    categories_for,
    normalize_stat_keys,
    stats_for,
)
from .positions import (
    POSITIONS,
    STYLES,
    PositionRules,
    UnknownPositionError,
    UnknownStyleError,
    active_styles,
    archetype_for,
    get_rules,
    iter_rules,
    normalize_style,
)

__all__ = [
    "ALL_STATS",
    "CATEGORIES",
    "CATEGORY_STATS",
    "POSITIONS",
    "STYLES",
    "PositionRules",
    "UnknownPositionError",
    "UnknownStatError",
    "UnknownStyleError",
    "active_styles",
    "archetype_for",
    "categories_for",
    "get_rules",
    "iter_rules",
    "normalize_stat_keys",
    "normalize_style",
    "stats_for",
]
