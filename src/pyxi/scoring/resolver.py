"""Ideal build lookup for a card's style, position and tactic."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Sequence

from pyxi.config.positions import (
    GENERAL_TACTIC,
    NO_STYLE,
    archetype_for,
    ensure_position,
    is_style_active,
    normalize_style,
)
from pyxi.models.ideal_build import IdealBuild


logger = logging.getLogger(__name__)

HEIGHT_PROFILE_STYLE = "Cazagoles"
HEIGHT_PROFILE_THRESHOLD_CM = 187
TALL_PROFILE = "alto"
SHORT_PROFILE = "bajo"


@dataclass(frozen=True)
class ResolvedBuild:
    build: Optional[IdealBuild]
    resolved_style: Optional[str]
    profile: Optional[str] = None


def height_profile(style: str, height: Optional[int]) -> Optional[str]:
    """Sub-profile used for build matching when a style is split by height."""

    if style != HEIGHT_PROFILE_STYLE or height is None:
        return None
    return TALL_PROFILE if height >= HEIGHT_PROFILE_THRESHOLD_CM else SHORT_PROFILE


def _lookup_sequence(
    builds: Sequence[IdealBuild],
    position: str,
    archetype: Optional[str],
    style: str,
    profile: Optional[str],
) -> Optional[IdealBuild]:
    def first(predicate: Callable[[IdealBuild], bool]) -> Optional[IdealBuild]:
        for build in builds:
            if predicate(build):
                return build
        return None

    def matches(build: IdealBuild, build_position: Optional[str], build_style: str, build_profile: Optional[str]) -> bool:
        return (
            build_position is not None
            and build.position == build_position
            and normalize_style(build.style) == build_style
            and build.profile == build_profile
        )

    steps: List[Callable[[IdealBuild], bool]] = [
        lambda b: matches(b, position, style, profile),
        lambda b: matches(b, archetype, style, profile),
    ]
    if profile is not None:
        steps.append(lambda b: matches(b, position, style, None))
        steps.append(lambda b: matches(b, archetype, style, None))
    if style != NO_STYLE:
        steps.append(lambda b: matches(b, position, NO_STYLE, None))
        steps.append(lambda b: matches(b, archetype, NO_STYLE, None))

    for step in steps:
        found = first(step)
        if found is not None:
            return found

    # Last resort: anything filed under the position, then under its archetype,
    # in a pinned order so repeated lookups agree.
    for build_position in (position, archetype):
        if build_position is None:
            continue
        pool = sorted(
            (b for b in builds if b.position == build_position),
            key=lambda b: (normalize_style(b.style), b.profile or ""),
        )
        if pool:
            return pool[0]
    return None


def resolve_ideal_build(
    style: str,
    position: str,
    ideal_builds: Iterable[IdealBuild],
    tactic: Optional[str] = None,
    height: Optional[int] = None,
) -> ResolvedBuild:
    """Find the most specific ideal build for a card.

    Lookup order: (position, style), (archetype, style), (position, Ninguno),
    (archetype, Ninguno), then any build for the position or its archetype.
    Styles split by height try their profile first and then the unprofiled
    build of the same style before falling back to Ninguno.
    Only builds of ``tactic`` take part; when none resolves under a specific
    tactic the lookup is repeated with the General builds. A style that is not
    active at the position is treated as Ninguno.
    """

    ensure_position(position)
    normalized = normalize_style(style)
    profile = height_profile(normalized, height)
    if normalized != NO_STYLE and not is_style_active(normalized, position):
        normalized = NO_STYLE
        profile = None
    archetype = archetype_for(position)

    tactic = tactic or GENERAL_TACTIC
    builds = list(ideal_builds)
    tactics = [tactic] if tactic == GENERAL_TACTIC else [tactic, GENERAL_TACTIC]
    for current_tactic in tactics:
        pool = [build for build in builds if build.tactic == current_tactic]
        found = _lookup_sequence(pool, position, archetype, normalized, profile)
        if found is not None:
            return ResolvedBuild(build=found, resolved_style=normalize_style(found.style), profile=found.profile)

    logger.debug("No ideal build for style=%s position=%s tactic=%s", style, position, tactic)
    return ResolvedBuild(build=None, resolved_style=None)
