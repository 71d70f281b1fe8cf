"""Greedy lineup generation over rated player cards."""

from __future__ import annotations

from dataclasses import dataclass, field
import functools
import logging
from datetime import datetime
from typing import Callable, Iterable, List, Optional, Sequence, Set, Tuple

from pyxi.config.positions import (
    FULLBACK_PAIR,
    NO_STYLE,
    WINGER_PAIR,
    active_styles,
    normalize_style,
)
from pyxi.models import Card, FormationSlot, FormationStats, IdealBuild, Player
from pyxi.scoring.affinity import compute_affinity
from pyxi.scoring.composite import (
    AFFINITY_NEVER_UPDATED,
    PerformanceFlags,
    affinity_staleness,
    compute_general_score,
    compute_performance,
    effective_live_form,
)
from pyxi.scoring.progression import projected_stats_for_card
from pyxi.scoring.resolver import resolve_ideal_build


logger = logging.getLogger(__name__)

MIN_AFFINITY_SCORE = 80.0
SORT_BY_GENERAL = "general"
SORT_BY_AVERAGE = "average"
SORT_OPTIONS = (SORT_BY_GENERAL, SORT_BY_AVERAGE)

AVERAGE_TOLERANCE = 0.01
SCORE_TOLERANCE = 0.01
AFFINITY_TOLERANCE = 0.1

AVERAGE_SORT_FORMS = frozenset({"A", "B"})
GENERAL_SORT_EXCLUDED_FORMS = frozenset({"D", "E"})

SUBSTITUTE_MATCH_TIERS: Tuple[Optional[int], ...] = (5, 10, None)
EXTRA_SUBSTITUTE_MATCH_TIERS: Tuple[Optional[int], ...] = (10, None)

STARTER_ROLE = "S"
SUBSTITUTE_ROLE = "SUB"


@dataclass(frozen=True)
class LineupFilters:
    league: Optional[str] = None
    nationality: Optional[str] = None

    def accepts(self, player: Player, card: Card) -> bool:
        if self.league and card.league != self.league:
            return False
        if self.nationality and player.nationality != self.nationality:
            return False
        return True


@dataclass(frozen=True)
class Flexibility:
    """Let mirrored full-backs or wingers cover each other's slots."""

    fullbacks: bool = False
    wingers: bool = False


@dataclass(frozen=True)
class CandidatePlayer:
    player: Player
    card: Card
    position: str
    affinity: float
    average: float
    matches: int
    general_score: float
    substitute_score: float
    flags: PerformanceFlags
    live_form: Optional[str] = None
    ideal_build: Optional[IdealBuild] = None
    affinity_status: str = AFFINITY_NEVER_UPDATED

    def score_for(self, role: str) -> float:
        return self.substitute_score if role == SUBSTITUTE_ROLE else self.general_score


@dataclass(frozen=True)
class LineupPlayer:
    player_id: str
    player_name: str
    card_id: str
    card_name: str
    position: str
    style: str = NO_STYLE
    affinity: float = 0.0
    average: float = 0.0
    matches: int = 0
    general_score: float = 0.0
    live_form: Optional[str] = None
    is_placeholder: bool = False
    affinity_status: str = AFFINITY_NEVER_UPDATED

    @classmethod
    def from_candidate(cls, candidate: CandidatePlayer, role: str) -> "LineupPlayer":
        return cls(
            player_id=candidate.player.id,
            player_name=candidate.player.name,
            card_id=candidate.card.id,
            card_name=candidate.card.name,
            position=candidate.position,
            style=normalize_style(candidate.card.style),
            affinity=candidate.affinity,
            average=candidate.average,
            matches=candidate.matches,
            general_score=candidate.score_for(role),
            live_form=candidate.live_form,
            affinity_status=candidate.affinity_status,
        )

    @classmethod
    def placeholder(cls, role: str, index: int, position: str) -> "LineupPlayer":
        return cls(
            player_id=f"placeholder-{role}-{index}",
            player_name="",
            card_id=f"placeholder-card-{role}-{index}",
            card_name="",
            position=position,
            is_placeholder=True,
        )


@dataclass(frozen=True)
class LineupSlot:
    index: int
    slot: FormationSlot
    starter: LineupPlayer
    substitute: LineupPlayer


@dataclass(frozen=True)
class Lineup:
    formation_id: str
    sort_by: str
    tactic: str
    slots: Tuple[LineupSlot, ...]
    extra_substitute: Optional[LineupPlayer] = None

    @property
    def starters(self) -> Tuple[LineupPlayer, ...]:
        return tuple(slot.starter for slot in self.slots)

    @property
    def substitutes(self) -> Tuple[LineupPlayer, ...]:
        """Regular substitutes in slot order, then the extra substitute when one was found."""

        subs = tuple(slot.substitute for slot in self.slots)
        if self.extra_substitute is not None:
            subs += (self.extra_substitute,)
        return subs

    def assigned_card_ids(self) -> List[str]:
        return [player.card_id for player in self.starters + self.substitutes if not player.is_placeholder]


def build_candidates(
    players: Iterable[Player],
    ideal_builds: Sequence[IdealBuild],
    tactic: Optional[str] = None,
    filters: Optional[LineupFilters] = None,
    as_of: Optional[datetime] = None,
) -> List[CandidatePlayer]:
    """Every rated (player, card, position) join with live affinity and scores."""

    filters = filters or LineupFilters()
    candidates: List[CandidatePlayer] = []
    for player in players:
        live_form = effective_live_form(player, as_of)
        for card in player.cards:
            if not filters.accepts(player, card):
                continue
            for position in card.rated_positions():
                resolved = resolve_ideal_build(
                    card.style,
                    position,
                    ideal_builds,
                    tactic=tactic,
                    height=card.physical_attributes.height,
                )
                affinity = compute_affinity(
                    projected_stats_for_card(card, position),
                    resolved.build,
                    card.physical_attributes,
                    card.skills,
                ).score
                performance = compute_performance(card, position)
                stats = performance.stats
                scores = [
                    compute_general_score(
                        affinity,
                        stats.average,
                        stats.matches,
                        performance.flags,
                        live_form,
                        card.skills,
                        is_substitute=is_substitute,
                    )
                    for is_substitute in (False, True)
                ]
                candidates.append(
                    CandidatePlayer(
                        player=player,
                        card=card,
                        position=position,
                        affinity=affinity,
                        average=stats.average,
                        matches=stats.matches,
                        general_score=scores[0],
                        substitute_score=scores[1],
                        flags=performance.flags,
                        live_form=live_form,
                        ideal_build=resolved.build,
                        affinity_status=affinity_staleness(card.build_for(position), as_of),
                    )
                )
    return candidates


def _descending(a: float, b: float, tolerance: float = 0.0) -> int:
    if abs(a - b) <= tolerance:
        return 0
    return -1 if a > b else 1


def candidate_sort_key(sort_by: str, role: str) -> Callable[[CandidatePlayer], object]:
    # Tolerant comparisons are not transitive: near-ties keep an order that
    # depends on input order, which is fixed for a given roster.
    def compare(a: CandidatePlayer, b: CandidatePlayer) -> int:
        if sort_by == SORT_BY_AVERAGE:
            return (
                _descending(a.average, b.average, AVERAGE_TOLERANCE)
                or _descending(a.score_for(role), b.score_for(role))
                or _descending(a.matches, b.matches)
            )
        return (
            _descending(a.score_for(role), b.score_for(role), SCORE_TOLERANCE)
            or _descending(a.affinity, b.affinity, AFFINITY_TOLERANCE)
            or _descending(a.matches, b.matches)
        )

    return functools.cmp_to_key(compare)


def _expand_positions(positions: Sequence[str], flexibility: Flexibility) -> Tuple[str, ...]:
    expanded = list(positions)
    for enabled, pair in ((flexibility.fullbacks, FULLBACK_PAIR), (flexibility.wingers, WINGER_PAIR)):
        if enabled and any(position in pair for position in positions):
            expanded.extend(pair)
    return tuple(dict.fromkeys(expanded))


def style_allowed(candidate: CandidatePlayer, styles: Sequence[str], positions: Sequence[str]) -> bool:
    """Check a candidate against a slot's allowed styles.

    Listing "Ninguno" admits cards whose style is not active at any of the
    target positions.
    """

    if not styles:
        return True
    allowed = {normalize_style(style) for style in styles}
    card_style = normalize_style(candidate.card.style)
    if card_style != NO_STYLE and card_style in allowed:
        return True
    if NO_STYLE in allowed:
        active = {style for position in positions for style in active_styles(position)}
        return card_style not in active
    return False


@dataclass
class _RunState:
    """Per-run bookkeeping; never shared between generations."""

    sort_by: str
    discarded: Set[str]
    used_cards: Set[str] = field(default_factory=set)
    used_players: Set[str] = field(default_factory=set)

    def eligible(self, candidate: CandidatePlayer) -> bool:
        if candidate.affinity < MIN_AFFINITY_SCORE:
            return False
        if candidate.card.id in self.discarded or candidate.card.id in self.used_cards:
            return False
        if candidate.player.id in self.used_players:
            return False
        if self.sort_by == SORT_BY_AVERAGE:
            return candidate.live_form in AVERAGE_SORT_FORMS
        return candidate.live_form not in GENERAL_SORT_EXCLUDED_FORMS

    def claim(self, candidate: CandidatePlayer) -> None:
        self.used_cards.add(candidate.card.id)
        self.used_players.add(candidate.player.id)


def _pick(
    pool: Iterable[CandidatePlayer],
    state: _RunState,
    role: str,
    max_matches: Optional[int] = None,
) -> Optional[CandidatePlayer]:
    ranked = sorted(pool, key=candidate_sort_key(state.sort_by, role))
    for candidate in ranked:
        if max_matches is not None and candidate.matches >= max_matches:
            continue
        if state.eligible(candidate):
            state.claim(candidate)
            return candidate
    return None


def _pick_tiered(
    pool: Sequence[CandidatePlayer],
    state: _RunState,
    role: str,
    tiers: Sequence[Optional[int]],
) -> Optional[CandidatePlayer]:
    for max_matches in tiers:
        found = _pick(pool, state, role, max_matches)
        if found is not None:
            return found
    return None


def _slot_pool(
    candidates: Sequence[CandidatePlayer],
    positions: Sequence[str],
    styles: Sequence[str],
) -> List[CandidatePlayer]:
    return [
        candidate
        for candidate in candidates
        if candidate.position in positions and style_allowed(candidate, styles, positions)
    ]


def generate_lineup(
    players: Sequence[Player],
    formation: FormationStats,
    ideal_builds: Sequence[IdealBuild],
    discarded_card_ids: Iterable[str] = (),
    filters: Optional[LineupFilters] = None,
    sort_by: str = SORT_BY_GENERAL,
    flexibility: Optional[Flexibility] = None,
    tactic_id: Optional[str] = None,
    as_of: Optional[datetime] = None,
) -> Lineup:
    """Assign the best available card to every starter and substitute slot.

    Starters are filled in slot order, then one substitute per slot, then an
    optional extra substitute. A card or a player is used at most once, cards
    in ``discarded_card_ids`` are never used and nobody below an affinity of
    80 is assigned. Slots nobody can fill hold placeholders.
    """

    if sort_by not in SORT_OPTIONS:
        raise ValueError(f"sort_by must be one of {', '.join(SORT_OPTIONS)}, got {sort_by!r}")
    flexibility = flexibility or Flexibility()
    tactic = tactic_id or formation.play_style

    candidates = build_candidates(players, ideal_builds, tactic=tactic, filters=filters, as_of=as_of)
    state = _RunState(sort_by=sort_by, discarded=set(discarded_card_ids))
    logger.info(
        "Generating lineup for %s (%s, sort=%s) from %d candidates, %d discarded",
        formation.name,
        tactic,
        sort_by,
        len(candidates),
        len(state.discarded),
    )

    starters: List[Optional[CandidatePlayer]] = []
    for index, slot in enumerate(formation.slots):
        positions = _expand_positions(slot.positions, flexibility)
        found = _pick(_slot_pool(candidates, positions, slot.styles), state, STARTER_ROLE)
        if found is None and slot.styles:
            found = _pick(_slot_pool(candidates, positions, ()), state, STARTER_ROLE)
        if found is None:
            logger.debug("No starter for slot %d (%s)", index, "/".join(positions))
        starters.append(found)

    substitutes: List[Optional[CandidatePlayer]] = []
    for index, slot in enumerate(formation.slots):
        starter = starters[index]
        if starter is not None and starter.position not in slot.positions:
            positions = (starter.position,)
        else:
            positions = slot.positions
        found = _pick_tiered(_slot_pool(candidates, positions, slot.styles), state, SUBSTITUTE_ROLE, SUBSTITUTE_MATCH_TIERS)
        if found is None and slot.styles:
            found = _pick_tiered(_slot_pool(candidates, positions, ()), state, SUBSTITUTE_ROLE, SUBSTITUTE_MATCH_TIERS)
        if found is None:
            logger.debug("No substitute for slot %d (%s)", index, "/".join(positions))
        substitutes.append(found)

    extra = _pick_tiered(candidates, state, SUBSTITUTE_ROLE, EXTRA_SUBSTITUTE_MATCH_TIERS)

    slots: List[LineupSlot] = []
    for index, slot in enumerate(formation.slots):
        starter, substitute = starters[index], substitutes[index]
        slots.append(
            LineupSlot(
                index=index,
                slot=slot,
                starter=(
                    LineupPlayer.from_candidate(starter, STARTER_ROLE)
                    if starter is not None
                    else LineupPlayer.placeholder(STARTER_ROLE, index, slot.nominal_position)
                ),
                substitute=(
                    LineupPlayer.from_candidate(substitute, SUBSTITUTE_ROLE)
                    if substitute is not None
                    else LineupPlayer.placeholder(SUBSTITUTE_ROLE, index, slot.nominal_position)
                ),
            )
        )

    lineup = Lineup(
        formation_id=formation.id,
        sort_by=sort_by,
        tactic=tactic,
        slots=tuple(slots),
        extra_substitute=LineupPlayer.from_candidate(extra, SUBSTITUTE_ROLE) if extra is not None else None,
    )
    logger.info(
        "Lineup for %s: %d/%d starters, %d/%d substitutes, extra substitute %s",
        formation.name,
        sum(1 for player in lineup.starters if not player.is_placeholder),
        len(slots),
        sum(1 for slot in slots if not slot.substitute.is_placeholder),
        len(slots),
        "found" if extra is not None else "not found",
    )
    return lineup
