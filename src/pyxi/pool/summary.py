"""Formation match records and roster distributions."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Iterable, List, Tuple

from pyxi.models import FormationStats, MatchResult, Player


WIN = "V"
DRAW = "E"
LOSS = "D"


@dataclass(frozen=True)
class FormationRecord:
    total: int
    wins: int
    draws: int
    losses: int
    goals_for: int
    goals_against: int
    goal_difference: int
    effectiveness: float
    goals_for_per_match: float


def match_outcome(match: MatchResult) -> str:
    if match.goals_for > match.goals_against:
        return WIN
    if match.goals_for < match.goals_against:
        return LOSS
    return DRAW


def summarize_formation(formation: FormationStats) -> FormationRecord:
    """Win/draw/loss record; effectiveness is the share of available points won, in percent."""

    matches = formation.matches
    total = len(matches)
    if total == 0:
        return FormationRecord(0, 0, 0, 0, 0, 0, 0, 0.0, 0.0)
    outcomes = Counter(match_outcome(match) for match in matches)
    goals_for = sum(match.goals_for for match in matches)
    goals_against = sum(match.goals_against for match in matches)
    return FormationRecord(
        total=total,
        wins=outcomes[WIN],
        draws=outcomes[DRAW],
        losses=outcomes[LOSS],
        goals_for=goals_for,
        goals_against=goals_against,
        goal_difference=goals_for - goals_against,
        effectiveness=(outcomes[WIN] * 3 + outcomes[DRAW]) / (total * 3) * 100,
        goals_for_per_match=goals_for / total,
    )


def nationality_distribution(players: Iterable[Player]) -> List[Tuple[str, int]]:
    """Player count per nationality, most common first."""

    counts = Counter(player.nationality or "Sin Nacionalidad" for player in players)
    return sorted(counts.items(), key=lambda item: -item[1])
