"""Affinity between a card's projected profile and an ideal build."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping, Optional, Tuple

from pyxi.config.attributes import STAT_LABELS, UNSCORED_STATS, stats_for
from pyxi.models.ideal_build import RELEVANT_TARGET, IdealBuild, StatRange
from pyxi.models.player import PhysicalAttributes


BASE_AFFINITY = 100.0
SURPLUS_FACTOR = 0.25
ELITE_TARGET = 90
KEY_TARGET = 80
ELITE_DEFICIT_FACTOR = 0.5
KEY_DEFICIT_FACTOR = 0.3
BASE_DEFICIT_FACTOR = 0.2
MAX_STAT_PENALTY = -10.0

IN_RANGE_BONUS = 2.5
BELOW_MIN_FACTOR = 0.5
ABOVE_MAX_FACTOR = 0.25

PRIMARY_SKILL_BONUS = 1.0
PRIMARY_SKILL_PENALTY = -0.5
SECONDARY_SKILL_BONUS = 0.5
SECONDARY_SKILL_PENALTY = -0.25


@dataclass(frozen=True)
class BreakdownEntry:
    stat: str
    label: str
    player_value: Optional[int]
    ideal_value: Optional[int]
    score: float


@dataclass(frozen=True)
class SkillBreakdownEntry:
    skill: str
    primary: bool
    present: bool
    score: float


@dataclass(frozen=True)
class AffinityResult:
    score: float
    breakdown: Tuple[BreakdownEntry, ...] = ()
    skills_breakdown: Tuple[SkillBreakdownEntry, ...] = ()


def stat_contribution(player_value: int, ideal_value: int) -> float:
    diff = player_value - ideal_value
    if diff >= 0:
        return diff * SURPLUS_FACTOR
    if ideal_value >= ELITE_TARGET:
        penalty = diff * ELITE_DEFICIT_FACTOR
    elif ideal_value >= KEY_TARGET:
        penalty = diff * KEY_DEFICIT_FACTOR
    else:
        penalty = diff * BASE_DEFICIT_FACTOR
    return max(MAX_STAT_PENALTY, penalty)


def physical_contribution(value: int, bounds: StatRange) -> float:
    if bounds.minimum is not None and value < bounds.minimum:
        return -(bounds.minimum - value) * BELOW_MIN_FACTOR
    if bounds.maximum is not None and value > bounds.maximum:
        return -(value - bounds.maximum) * ABOVE_MAX_FACTOR
    return IN_RANGE_BONUS


def compute_affinity(
    projected_stats: Mapping[str, int],
    ideal_build: Optional[IdealBuild],
    physical: Optional[PhysicalAttributes] = None,
    skills: Iterable[str] = (),
) -> AffinityResult:
    """Score how well a projected card matches ``ideal_build``.

    The score starts at 100. Each stat with a target of 70 or more adds a
    quarter point per point of surplus or loses up to 10 points for a deficit,
    weighted by how demanding the target is. Height and weight ranges and the
    primary/secondary skill lists add smaller bonuses and penalties. The total
    is not clamped. Without an ideal build the score is 0.
    """

    if ideal_build is None:
        return AffinityResult(score=0.0)

    score = BASE_AFFINITY
    breakdown: list[BreakdownEntry] = []

    for stat in stats_for(ideal_build.is_goalkeeper):
        if stat in UNSCORED_STATS:
            continue
        ideal_value = ideal_build.target(stat)
        player_value = projected_stats.get(stat)
        if ideal_value is None or ideal_value < RELEVANT_TARGET or player_value is None:
            continue
        contribution = stat_contribution(player_value, ideal_value)
        score += contribution
        breakdown.append(BreakdownEntry(stat, STAT_LABELS[stat], player_value, ideal_value, contribution))

    physical = physical or PhysicalAttributes()
    for attribute in ("height", "weight"):
        bounds: Optional[StatRange] = getattr(ideal_build, attribute)
        value: Optional[int] = getattr(physical, attribute)
        if bounds is None or not bounds.is_defined or value is None:
            continue
        contribution = physical_contribution(value, bounds)
        score += contribution
        ideal_value = bounds.minimum if bounds.minimum is not None else bounds.maximum
        breakdown.append(BreakdownEntry(attribute, STAT_LABELS[attribute], value, ideal_value, contribution))

    owned = set(skills)
    skills_breakdown: list[SkillBreakdownEntry] = []
    for skill_list, primary in ((ideal_build.primary_skills, True), (ideal_build.secondary_skills, False)):
        for skill in skill_list:
            present = skill in owned
            if primary:
                contribution = PRIMARY_SKILL_BONUS if present else PRIMARY_SKILL_PENALTY
            else:
                contribution = SECONDARY_SKILL_BONUS if present else SECONDARY_SKILL_PENALTY
            score += contribution
            skills_breakdown.append(SkillBreakdownEntry(skill, primary, present, contribution))

    return AffinityResult(score=score, breakdown=tuple(breakdown), skills_breakdown=tuple(skills_breakdown))
