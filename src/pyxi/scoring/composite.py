"""Performance badges and the general score used to rank candidates."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Iterable, Mapping, Optional

from pyxi.config.settings import live_form_ttl_days
from pyxi.models.player import Card, Player, PositionBuild
from pyxi.scoring.stats import RatingStats, average, compute_stats


LIVE_FORM_BONUS: Mapping[str, float] = {"A": 8.0, "B": 4.0, "C": 0.0, "D": -5.0, "E": -10.0}
TRUMP_CARD_SKILL = "Revulsivo"
TRUMP_CARD_BONUS = 1.0
MATCH_WEIGHT_CEILING = 100

HOT_STREAK_MIN_MATCHES = 3
HOT_STREAK_MARGIN = 0.5
CONSISTENT_MIN_MATCHES = 5
CONSISTENT_MAX_STD_DEV = 0.5
PROMISING_MAX_MATCHES = 9
GOOD_AVERAGE = 7.0
VERSATILE_MIN_POSITIONS = 3
GAME_CHANGER_MIN_MATCHES = 5
GAME_CHANGER_RATING = 9.0
GAME_CHANGER_MIN_RATINGS = 3
STALWART_MIN_MATCHES = 30
SPECIALIST_MIN_AVERAGE = 8.5
SPECIALIST_MARGIN = 1.5

AFFINITY_NEVER_UPDATED = "never"
AFFINITY_FRESH = "fresh"
AFFINITY_STALE = "stale"
AFFINITY_OUTDATED = "outdated"
STALE_AFTER_DAYS = 7
OUTDATED_AFTER_DAYS = 14


@dataclass(frozen=True)
class PerformanceFlags:
    hot_streak: bool = False
    consistent: bool = False
    versatile: bool = False
    promising: bool = False
    game_changer: bool = False
    stalwart: bool = False
    specialist: bool = False

    @property
    def bonus(self) -> float:
        total = 0.0
        if self.hot_streak:
            total += 3
        if self.consistent:
            total += 2
        if self.versatile:
            total += 1
        if self.promising:
            total += 1
        if self.game_changer:
            total += 2
        if self.stalwart:
            total += 2
        if self.specialist:
            total += 3
        return total


@dataclass(frozen=True)
class PlayerPerformance:
    stats: RatingStats
    flags: PerformanceFlags


def compute_performance(card: Card, position: str) -> PlayerPerformance:
    """Rating stats and badges for ``card`` at ``position``."""

    ratings = list(card.ratings_by_position.get(position, []))
    stats = compute_stats(ratings)
    position_averages = {
        rated: average(card.ratings_by_position[rated]) for rated in card.rated_positions()
    }

    hot_streak = (
        stats.matches >= HOT_STREAK_MIN_MATCHES
        and average(ratings[-3:]) > stats.average + HOT_STREAK_MARGIN
    )
    consistent = stats.matches >= CONSISTENT_MIN_MATCHES and stats.std_dev < CONSISTENT_MAX_STD_DEV
    promising = 1 <= stats.matches <= PROMISING_MAX_MATCHES and stats.average >= GOOD_AVERAGE
    versatile = (
        sum(1 for value in position_averages.values() if value >= GOOD_AVERAGE) >= VERSATILE_MIN_POSITIONS
    )
    game_changer = (
        stats.matches >= GAME_CHANGER_MIN_MATCHES
        and sum(1 for rating in ratings if rating >= GAME_CHANGER_RATING) >= GAME_CHANGER_MIN_RATINGS
    )
    stalwart = stats.matches >= STALWART_MIN_MATCHES and stats.average >= GOOD_AVERAGE

    others = [value for rated, value in position_averages.items() if rated != position]
    specialist = (
        stats.matches > 0
        and len(position_averages) >= 2
        and stats.average >= SPECIALIST_MIN_AVERAGE
        and all(stats.average - value >= SPECIALIST_MARGIN for value in others)
    )

    flags = PerformanceFlags(
        hot_streak=hot_streak,
        consistent=consistent,
        versatile=versatile,
        promising=promising,
        game_changer=game_changer,
        stalwart=stalwart,
        specialist=specialist,
    )
    return PlayerPerformance(stats=stats, flags=flags)


def compute_general_score(
    affinity: float,
    average: float,
    matches: int,
    flags: Optional[PerformanceFlags] = None,
    live_form: Optional[str] = None,
    skills: Iterable[str] = (),
    is_substitute: bool = False,
) -> float:
    """Blend rating history with affinity, then add badges and form.

    The rating average weighs in proportionally to the match count and takes
    over completely at 100 matches. The result never drops below 0.
    """

    weight = min(MATCH_WEIGHT_CEILING, matches) / MATCH_WEIGHT_CEILING
    score = (average * 10 + 50) * weight + affinity * (1 - weight)
    if flags is not None:
        score += flags.bonus
    if live_form:
        rating = live_form.strip().upper()
        if rating not in LIVE_FORM_BONUS:
            raise ValueError(f"live form rating must be one of {', '.join(LIVE_FORM_BONUS)}, got {live_form!r}")
        score += LIVE_FORM_BONUS[rating]
    if is_substitute and TRUMP_CARD_SKILL in set(skills):
        score += TRUMP_CARD_BONUS
    return max(0.0, score)


def _as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def effective_live_form(player: Player, as_of: Optional[datetime] = None) -> Optional[str]:
    """Live form rating in effect at ``as_of``; expired ratings count as absent."""

    if player.live_form is None:
        return None
    if player.live_form_permanent or as_of is None or player.live_form_updated_at is None:
        return player.live_form
    age = _as_utc(as_of) - _as_utc(player.live_form_updated_at)
    if age > timedelta(days=live_form_ttl_days()):
        return None
    return player.live_form


def affinity_staleness(build: Optional[PositionBuild], as_of: Optional[datetime] = None) -> str:
    """Classify how old a build's cached affinity is, in calendar days (UTC).

    Builds never stamped are ``never``; 14 or more days is ``outdated``, 7 or
    more ``stale`` and anything newer ``fresh``. ``as_of`` defaults to now.
    """

    if build is None or build.updated_at is None:
        return AFFINITY_NEVER_UPDATED
    today = _as_utc(as_of or datetime.now(timezone.utc)).date()
    days = (today - _as_utc(build.updated_at).date()).days
    if days >= OUTDATED_AFTER_DAYS:
        return AFFINITY_OUTDATED
    if days >= STALE_AFTER_DAYS:
        return AFFINITY_STALE
    return AFFINITY_FRESH
