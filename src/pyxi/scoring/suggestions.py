"""Greedy allocation of progression points towards an ideal build."""

from __future__ import annotations

import logging
from typing import Dict, Mapping, Optional

from pyxi.config.attributes import CATEGORY_STATS, MAX_CATEGORY_LEVEL, categories_for
from pyxi.models.ideal_build import RELEVANT_TARGET, IdealBuild
from pyxi.models.player import ProgressionBuild
from pyxi.scoring.progression import next_level_cost, project_stats


logger = logging.getLogger(__name__)


def target_weight(target: int) -> int:
    if target >= 90:
        return 3
    if target >= 80:
        return 2
    return 1


def _category_value(
    category: str,
    projected: Mapping[str, int],
    ideal_build: IdealBuild,
) -> int:
    value = 0
    for stat in CATEGORY_STATS[category]:
        target = ideal_build.target(stat)
        current = projected.get(stat)
        if target is None or target < RELEVANT_TARGET or current is None:
            continue
        if current < target:
            value += target_weight(target)
    return value


def suggest_progression(
    base_stats: Mapping[str, int],
    ideal_build: Optional[IdealBuild],
    is_goalkeeper: bool,
    budget: int,
) -> ProgressionBuild:
    """Spend ``budget`` progression points to close the gap to ``ideal_build``.

    The first pass repeatedly buys the next level of the category with the best
    value per point, where value counts the unmet relevant targets of the
    category (weighted 3, 2 or 1 for targets of 90+, 80+ and 70+). Once no
    category adds value, leftover points go to the cheapest affordable category
    until nothing else fits. Ties go to the first category in enumeration order.
    """

    if ideal_build is None or budget <= 0:
        return ProgressionBuild()

    categories = categories_for(is_goalkeeper)
    levels: Dict[str, int] = {category: 0 for category in categories}
    remaining = budget

    def affordable(category: str) -> bool:
        level = levels[category]
        return level < MAX_CATEGORY_LEVEL and next_level_cost(level) <= remaining

    while True:
        projected = project_stats(base_stats, ProgressionBuild(**levels), is_goalkeeper=is_goalkeeper)
        best: Optional[str] = None
        best_ratio = 0.0
        for category in categories:
            if not affordable(category):
                continue
            value = _category_value(category, projected, ideal_build)
            if value <= 0:
                continue
            ratio = value / next_level_cost(levels[category])
            if ratio > best_ratio:
                best, best_ratio = category, ratio
        if best is None:
            break
        remaining -= next_level_cost(levels[best])
        levels[best] += 1

    while True:
        cheapest: Optional[str] = None
        cheapest_cost = 0
        for category in categories:
            if not affordable(category):
                continue
            cost = next_level_cost(levels[category])
            if cheapest is None or cost < cheapest_cost:
                cheapest, cheapest_cost = category, cost
        if cheapest is None:
            break
        remaining -= cheapest_cost
        levels[cheapest] += 1

    logger.debug("Suggested build %s with %d of %d points left", levels, remaining, budget)
    return ProgressionBuild(**levels)
