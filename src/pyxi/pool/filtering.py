"""Per-position player tables with search, filters and ranking."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, List, Literal, Optional, Sequence

from pyxi.config.positions import ensure_position, normalize_style
from pyxi.models import Card, IdealBuild, Player
from pyxi.optimizer.service import build_candidates
from pyxi.roster.operations import normalize_text
from pyxi.scoring.composite import AFFINITY_NEVER_UPDATED, PerformanceFlags


@dataclass(frozen=True)
class TableCriteria:
    """Filtering configuration for a position table."""

    search: str = ""
    style: Optional[str] = None
    card_name: Optional[str] = None
    sort_by: Literal["general", "average"] = "general"
    limit: Optional[int] = None
    offset: int = 0


@dataclass(frozen=True)
class FlatPlayer:
    """One card rated at one position, with its derived scores."""

    player: Player
    card: Card
    position: str
    ratings: tuple[float, ...]
    average: float
    matches: int
    affinity: float
    general_score: float
    flags: PerformanceFlags
    affinity_status: str = AFFINITY_NEVER_UPDATED


def flatten_position(
    players: Iterable[Player],
    position: str,
    ideal_builds: Sequence[IdealBuild] = (),
    tactic: Optional[str] = None,
    as_of: Optional[datetime] = None,
) -> List[FlatPlayer]:
    ensure_position(position)
    rows: List[FlatPlayer] = []
    for candidate in build_candidates(players, ideal_builds, tactic=tactic, as_of=as_of):
        if candidate.position != position:
            continue
        rows.append(
            FlatPlayer(
                player=candidate.player,
                card=candidate.card,
                position=position,
                ratings=tuple(candidate.card.ratings_by_position[position]),
                average=candidate.average,
                matches=candidate.matches,
                affinity=candidate.affinity,
                general_score=candidate.general_score,
                flags=candidate.flags,
                affinity_status=candidate.affinity_status,
            )
        )
    return rows


def _matches(row: FlatPlayer, criteria: TableCriteria) -> bool:
    if criteria.search and normalize_text(criteria.search) not in normalize_text(row.player.name):
        return False
    if criteria.style and normalize_style(row.card.style) != normalize_style(criteria.style):
        return False
    if criteria.card_name and row.card.name != criteria.card_name:
        return False
    return True


def _sort_key(row: FlatPlayer, sort_by: str) -> tuple:
    if sort_by == "general":
        return (-row.general_score, -row.average, -row.matches)
    return (-row.average, -row.matches)


def position_table(
    players: Iterable[Player],
    position: str,
    criteria: Optional[TableCriteria] = None,
    ideal_builds: Sequence[IdealBuild] = (),
    tactic: Optional[str] = None,
    as_of: Optional[datetime] = None,
) -> List[FlatPlayer]:
    """Rank every card rated at ``position``.

    ``general`` orders by general score, then average, then matches;
    ``average`` skips the general score.
    """

    criteria = criteria or TableCriteria()
    if criteria.sort_by not in ("general", "average"):
        raise ValueError(f"Unsupported sort {criteria.sort_by!r}")
    rows = [row for row in flatten_position(players, position, ideal_builds, tactic, as_of) if _matches(row, criteria)]
    rows.sort(key=lambda row: _sort_key(row, criteria.sort_by))
    start = max(0, criteria.offset)
    if criteria.limit is not None:
        return rows[start : start + max(0, criteria.limit)]
    return rows[start:]
