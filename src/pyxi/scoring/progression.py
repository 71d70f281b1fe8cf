"""Progression model: category levels projected onto attribute stats."""

from __future__ import annotations

from typing import Dict, Mapping, Optional

from pyxi.config.attributes import (
    CATEGORY_STATS,
    MAX_CATEGORY_LEVEL,
    MAX_STAT_VALUE,
    MIN_STAT_VALUE,
    categories_for,
)
from pyxi.config.positions import GOALKEEPER
from pyxi.models.player import Card, ProgressionBuild


def _clamp(value: int) -> int:
    return max(MIN_STAT_VALUE, min(MAX_STAT_VALUE, value))


def project_stats(
    base_stats: Mapping[str, int],
    build: Optional[ProgressionBuild],
    is_goalkeeper: bool = False,
) -> Dict[str, int]:
    """Return the in-game stats of a card once ``build`` is applied.

    Outfield players train the seven outfield categories; goalkeepers train
    gk1, gk2, gk3 and defending. ``jump`` belongs to both aerial_strength and
    gk1, so an outfield projection raises it through aerial_strength only and
    a goalkeeper projection through gk1 only, ignoring any aerial points.

    Stats missing from ``base_stats`` stay missing. Every value is clamped to
    the 0-99 stat range.
    """

    projected = {stat: _clamp(value) for stat, value in base_stats.items()}
    if build is None:
        return projected

    for category in categories_for(is_goalkeeper):
        level = build.level(category)
        if level <= 0:
            continue
        for stat in CATEGORY_STATS[category]:
            if stat in base_stats:
                projected[stat] = _clamp(base_stats[stat] + level)
    return projected


def projected_stats_for_card(card: Card, position: str) -> Dict[str, int]:
    """Stats used to score ``card`` at ``position``.

    Special cards and positions without a saved build use the base stats.
    """

    build = card.build_for(position)
    if card.is_special or build is None:
        return project_stats(card.attribute_stats, None)
    return project_stats(card.attribute_stats, build, is_goalkeeper=position == GOALKEEPER)


def points_for_level(level: int) -> int:
    """Cumulative progression points needed to reach ``level`` from zero."""

    if level < 0 or level > MAX_CATEGORY_LEVEL:
        raise ValueError(f"level must be between 0 and {MAX_CATEGORY_LEVEL}, got {level}")
    if level <= 4:
        return level
    if level <= 8:
        return 4 + (level - 4) * 2
    if level <= 12:
        return 12 + (level - 8) * 3
    return 24 + (level - 12) * 4


def level_for_points(points: int) -> int:
    """Highest level affordable with ``points``."""

    if points <= 0:
        return 0
    if points <= 4:
        level = points
    elif points <= 12:
        level = 4 + (points - 4) // 2
    elif points <= 24:
        level = 8 + (points - 12) // 3
    else:
        level = 12 + (points - 24) // 4
    return min(MAX_CATEGORY_LEVEL, level)


def next_level_cost(level: int) -> int:
    return points_for_level(level + 1) - points_for_level(level)


def build_cost(build: ProgressionBuild) -> int:
    return sum(points_for_level(level) for level in build.levels().values())
