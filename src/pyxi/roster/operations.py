"""Record transformations for the roster lifecycle.

Every function here takes records and returns new ones; inputs are never
mutated. Persisting the result is the caller's concern.
"""

from __future__ import annotations

import logging
import math
import unicodedata
import uuid
from datetime import datetime
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from pydantic import BaseModel, Field, field_validator

from pyxi.config.attributes import normalize_stat_keys
from pyxi.config.positions import GOALKEEPER, NO_STYLE, ensure_position, normalize_style, style_for_position
from pyxi.models import Card, IdealBuild, Player, PositionBuild, ProgressionBuild
from pyxi.models.player import RECORD_CONFIG
from pyxi.scoring.affinity import compute_affinity
from pyxi.scoring.progression import project_stats
from pyxi.scoring.resolver import resolve_ideal_build
from pyxi.scoring.suggestions import suggest_progression


logger = logging.getLogger(__name__)

DEFAULT_LEAGUE = "Sin Liga"
DEFAULT_NATIONALITY = "Sin Nacionalidad"


class RecordNotFoundError(LookupError):
    """Raised when a player, card or rating referenced by id does not exist."""


class RatingEntry(BaseModel):
    player_name: str = Field(..., min_length=1)
    card_name: str = Field(..., min_length=1)
    position: str
    rating: float = Field(..., ge=0.0, le=10.0)
    style: str = NO_STYLE
    league: Optional[str] = None
    nationality: Optional[str] = None
    player_id: Optional[str] = None

    model_config = RECORD_CONFIG

    @field_validator("position")
    @classmethod
    def _known_position(cls, value: str) -> str:
        return ensure_position(value)

    @field_validator("style")
    @classmethod
    def _known_style(cls, value: str) -> str:
        normalize_style(value)
        return value


def normalize_text(text: str) -> str:
    """Accent- and case-insensitive form used to match names."""

    if not text:
        return ""
    decomposed = unicodedata.normalize("NFD", text)
    stripped = "".join(char for char in decomposed if not unicodedata.combining(char))
    return " ".join(stripped.lower().split())


def _new_id() -> str:
    return str(uuid.uuid4())


def _find_player(players: Sequence[Player], player_id: str) -> Tuple[int, Player]:
    for index, player in enumerate(players):
        if player.id == player_id:
            return index, player
    raise RecordNotFoundError(f"Player {player_id!r} not found")


def _find_card(player: Player, card_id: str) -> Tuple[int, Card]:
    for index, card in enumerate(player.cards):
        if card.id == card_id:
            return index, card
    raise RecordNotFoundError(f"Card {card_id!r} not found for player {player.id!r}")


def _replace(items: Sequence, index: int, item) -> list:
    updated = list(items)
    updated[index] = item
    return updated


def _replace_card(players: Sequence[Player], player_index: int, card_index: int, card: Card) -> List[Player]:
    player = players[player_index]
    return _replace(players, player_index, player.model_copy(update={"cards": _replace(player.cards, card_index, card)}))


def _drop_empty(players: Sequence[Player], player_index: int, card_index: int, card: Card) -> List[Player]:
    """Store ``card`` and cascade removals: a card without ratings goes, then a player without cards."""

    player = players[player_index]
    if card.rated_positions():
        return _replace_card(players, player_index, card_index, card)
    cards = [existing for index, existing in enumerate(player.cards) if index != card_index]
    if cards:
        logger.info("Removed card %s of %s: no ratings left", card.name, player.name)
        return _replace(players, player_index, player.model_copy(update={"cards": cards}))
    logger.info("Removed player %s: no cards left", player.name)
    return [existing for index, existing in enumerate(players) if index != player_index]


def _new_card(entry: RatingEntry, style: str, new_id: Callable[[], str]) -> Card:
    return Card(
        id=new_id(),
        name=entry.card_name,
        style=style,
        league=entry.league or DEFAULT_LEAGUE,
        ratings_by_position={entry.position: [entry.rating]},
        builds_by_position={entry.position: PositionBuild(cached_affinity=0.0)},
    )


def add_rating(
    players: Sequence[Player],
    entry: RatingEntry,
    new_id: Callable[[], str] = _new_id,
) -> List[Player]:
    """Record one match rating, creating the player and card when needed.

    The player is matched by id, then by normalized name; the card by
    normalized name. A style not active at the rated position is stored as
    Ninguno on new cards.
    """

    style = style_for_position(entry.style, entry.position)
    players = list(players)

    player_index: Optional[int] = None
    if entry.player_id:
        player_index, _ = _find_player(players, entry.player_id)
    else:
        wanted = normalize_text(entry.player_name)
        for index, player in enumerate(players):
            if normalize_text(player.name) == wanted:
                player_index = index
                break

    if player_index is None:
        card = _new_card(entry, style, new_id)
        player = Player(
            id=new_id(),
            name=entry.player_name,
            nationality=entry.nationality or DEFAULT_NATIONALITY,
            cards=[card],
        )
        logger.info("Created player %s with card %s", player.name, card.name)
        return players + [player]

    player = players[player_index]
    wanted_card = normalize_text(entry.card_name)
    for card_index, card in enumerate(player.cards):
        if normalize_text(card.name) != wanted_card:
            continue
        ratings = dict(card.ratings_by_position)
        ratings[entry.position] = list(ratings.get(entry.position, [])) + [entry.rating]
        builds = dict(card.builds_by_position)
        builds.setdefault(entry.position, PositionBuild(cached_affinity=0.0))
        updated = card.model_copy(
            update={
                "ratings_by_position": ratings,
                "builds_by_position": builds,
                "league": entry.league or card.league or DEFAULT_LEAGUE,
            }
        )
        return _replace_card(players, player_index, card_index, updated)

    card = _new_card(entry, style, new_id)
    logger.info("Added card %s to %s", card.name, player.name)
    return _replace(players, player_index, player.model_copy(update={"cards": list(player.cards) + [card]}))


def delete_rating(
    players: Sequence[Player],
    player_id: str,
    card_id: str,
    position: str,
    rating_index: int,
) -> List[Player]:
    players = list(players)
    player_index, player = _find_player(players, player_id)
    card_index, card = _find_card(player, card_id)
    ratings = list(card.ratings_by_position.get(position, []))
    if not 0 <= rating_index < len(ratings):
        raise RecordNotFoundError(f"No rating #{rating_index} for {card.name} at {position}")
    del ratings[rating_index]
    by_position = dict(card.ratings_by_position)
    if ratings:
        by_position[position] = ratings
    else:
        del by_position[position]
    return _drop_empty(players, player_index, card_index, card.model_copy(update={"ratings_by_position": by_position}))


def delete_position_ratings(
    players: Sequence[Player],
    player_id: str,
    card_id: str,
    position: str,
) -> List[Player]:
    """Drop every rating of a card at ``position``, cascading to card and player."""

    players = list(players)
    player_index, player = _find_player(players, player_id)
    card_index, card = _find_card(player, card_id)
    if position not in card.ratings_by_position:
        raise RecordNotFoundError(f"No ratings for {card.name} at {position}")
    by_position = {key: value for key, value in card.ratings_by_position.items() if key != position}
    return _drop_empty(players, player_index, card_index, card.model_copy(update={"ratings_by_position": by_position}))


def edit_card(
    players: Sequence[Player],
    player_id: str,
    card_id: str,
    name: Optional[str] = None,
    style: Optional[str] = None,
    league: Optional[str] = None,
    image_url: Optional[str] = None,
) -> List[Player]:
    players = list(players)
    player_index, player = _find_player(players, player_id)
    card_index, card = _find_card(player, card_id)
    update: Dict[str, object] = {}
    if name is not None:
        update["name"] = name
    if style is not None:
        normalize_style(style)
        update["style"] = style
    if league is not None:
        update["league"] = league or DEFAULT_LEAGUE
    if image_url is not None:
        update["image_url"] = image_url or None
    return _replace_card(players, player_index, card_index, card.model_copy(update=update))


def edit_player(
    players: Sequence[Player],
    player_id: str,
    name: Optional[str] = None,
    nationality: Optional[str] = None,
) -> List[Player]:
    players = list(players)
    player_index, player = _find_player(players, player_id)
    update: Dict[str, object] = {}
    if name is not None:
        update["name"] = name
    if nationality is not None:
        update["nationality"] = nationality or DEFAULT_NATIONALITY
    return _replace(players, player_index, player.model_copy(update=update))


def set_live_form(
    players: Sequence[Player],
    player_id: str,
    live_form: Optional[str],
    permanent: bool = False,
    updated_at: Optional[datetime] = None,
) -> List[Player]:
    """Set or clear a player's live form rating."""

    players = list(players)
    player_index, player = _find_player(players, player_id)
    payload = player.model_dump()
    payload.update(live_form=live_form, live_form_permanent=permanent, live_form_updated_at=updated_at)
    return _replace(players, player_index, Player.model_validate(payload))


def _stamped_build(
    card: Card,
    position: str,
    levels: ProgressionBuild,
    attribute_stats: Mapping[str, int],
    ideal_builds: Sequence[IdealBuild],
    computed_at: datetime,
    tactic: Optional[str] = None,
) -> PositionBuild:
    is_goalkeeper = position == GOALKEEPER
    projected = project_stats(attribute_stats, None if card.is_special else levels, is_goalkeeper=is_goalkeeper)
    resolved = resolve_ideal_build(
        card.style,
        position,
        ideal_builds,
        tactic=tactic,
        height=card.physical_attributes.height,
    )
    affinity = compute_affinity(projected, resolved.build, card.physical_attributes, card.skills).score
    return PositionBuild(**levels.levels(), cached_affinity=affinity, updated_at=computed_at)


def save_build(
    card: Card,
    position: str,
    build: ProgressionBuild,
    ideal_builds: Sequence[IdealBuild],
    computed_at: datetime,
    total_progression_points: Optional[int] = None,
    tactic: Optional[str] = None,
) -> Card:
    """Store ``build`` for ``position`` with its affinity stamped at ``computed_at``."""

    ensure_position(position)
    builds = dict(card.builds_by_position)
    builds[position] = _stamped_build(
        card, position, build.progression(), card.attribute_stats, ideal_builds, computed_at, tactic
    )
    update: Dict[str, object] = {"builds_by_position": builds}
    if total_progression_points is not None and not card.is_special:
        update["total_progression_points"] = total_progression_points
    logger.debug("Saved %s build for %s: affinity %.2f", position, card.name, builds[position].cached_affinity)
    return card.model_copy(update=update)


def save_attribute_stats(
    card: Card,
    stats: Mapping[str, object],
    ideal_builds: Sequence[IdealBuild],
    computed_at: datetime,
    tactic: Optional[str] = None,
) -> Card:
    """Replace the card's base stats and re-stamp the affinity of every saved build."""

    base = normalize_stat_keys(stats)
    builds = {
        position: _stamped_build(card, position, build.progression(), base, ideal_builds, computed_at, tactic)
        for position, build in card.builds_by_position.items()
    }
    return Card.model_validate(
        {**card.model_dump(), "attribute_stats": base, "builds_by_position": builds}
    )


def recalculate_affinities(
    players: Sequence[Player],
    ideal_builds: Sequence[IdealBuild],
    computed_at: datetime,
    tactic: Optional[str] = None,
) -> List[Player]:
    """Refresh cached affinities; only builds whose value changed get a new timestamp."""

    updated_players: List[Player] = []
    changed_players = 0
    for player in players:
        cards: List[Card] = []
        changed = False
        for card in player.cards:
            builds = dict(card.builds_by_position)
            for position, build in card.builds_by_position.items():
                if not card.attribute_stats:
                    continue
                stamped = _stamped_build(
                    card, position, build.progression(), card.attribute_stats, ideal_builds, computed_at, tactic
                )
                if stamped.cached_affinity != build.cached_affinity:
                    builds[position] = stamped
                    changed = True
            cards.append(card.model_copy(update={"builds_by_position": builds}))
        if changed:
            changed_players += 1
            updated_players.append(player.model_copy(update={"cards": cards}))
        else:
            updated_players.append(player)
    logger.info("Recalculated affinities: %d of %d players changed", changed_players, len(updated_players))
    return updated_players


def suggest_all_builds(
    players: Sequence[Player],
    ideal_builds: Sequence[IdealBuild],
    computed_at: datetime,
    tactic: Optional[str] = None,
) -> List[Player]:
    """Replace every saved build with a suggested one.

    Only regular cards with progression points take part; positions without a
    resolvable ideal build keep their current build.
    """

    updated_players: List[Player] = []
    for player in players:
        cards: List[Card] = []
        changed = False
        for card in player.cards:
            points = card.total_progression_points or 0
            if card.is_special or points <= 0 or not card.builds_by_position:
                cards.append(card)
                continue
            builds = dict(card.builds_by_position)
            for position in card.builds_by_position:
                is_goalkeeper = position == GOALKEEPER
                resolved = resolve_ideal_build(
                    card.style,
                    position,
                    ideal_builds,
                    tactic=tactic,
                    height=card.physical_attributes.height,
                )
                if resolved.build is None:
                    continue
                suggestion = suggest_progression(card.attribute_stats, resolved.build, is_goalkeeper, points)
                builds[position] = _stamped_build(
                    card, position, suggestion, card.attribute_stats, ideal_builds, computed_at, tactic
                )
                changed = True
            cards.append(card.model_copy(update={"builds_by_position": builds}))
        updated_players.append(player.model_copy(update={"cards": cards}) if changed else player)
    return updated_players


def merge_ideal_build(existing: Optional[IdealBuild], incoming: IdealBuild) -> IdealBuild:
    """Combine a newly saved ideal build with the stored one for the same key.

    Positive incoming targets are averaged with positive stored targets and
    rounded; stored targets the incoming build leaves out are kept. Skills and
    ranges come from the incoming build.
    """

    if existing is None:
        return incoming
    merged = dict(existing.build)
    for stat, value in incoming.build.items():
        if value <= 0:
            continue
        current = merged.get(stat, 0)
        merged[stat] = math.floor((current + value) / 2 + 0.5) if current > 0 else value
    return incoming.model_copy(update={"id": incoming.id or existing.id, "build": merged})
