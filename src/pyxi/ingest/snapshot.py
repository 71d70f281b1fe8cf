"""Load and export the JSON backup of players, formations and ideal builds."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from pydantic import ValidationError

from pyxi.config.attributes import MAX_CATEGORY_LEVEL, canonical_stat
from pyxi.models import Card, FormationStats, IdealBuild, Player
from pyxi.roster.operations import normalize_text


logger = logging.getLogger(__name__)

_DROPPED_CARD_KEYS = ("legLength", "selectablePositions")
_LEGACY_PLAYER_KEYS = {
    "liveUpdateRating": "liveForm",
    "permanentLiveUpdateRating": "liveFormPermanent",
}
_BASE_PREFIX = "base"


class SnapshotError(ValueError):
    """Raised when a backup document cannot be read into records."""


@dataclass(frozen=True)
class Snapshot:
    players: Tuple[Player, ...] = ()
    formations: Tuple[FormationStats, ...] = ()
    ideal_builds: Tuple[IdealBuild, ...] = ()


def _base_stat_name(key: str) -> Optional[str]:
    suffix = key[len(_BASE_PREFIX):]
    if key.startswith(_BASE_PREFIX) and suffix[:1].isupper():
        return suffix[0].lower() + suffix[1:]
    return None


def _upgrade_stats(raw: Mapping[str, Any]) -> Dict[str, Any]:
    """Canonical stat mapping; ``base*`` copies win over the plain keys."""

    plain: Dict[str, Any] = {}
    base: Dict[str, Any] = {}
    for key, value in raw.items():
        if value is None:
            continue
        base_name = _base_stat_name(key)
        if base_name is not None:
            base[canonical_stat(base_name)] = value
        else:
            plain[canonical_stat(key)] = value
    plain.update(base)
    return plain


def _upgrade_build(raw: Mapping[str, Any], card_name: str, position: str) -> Dict[str, Any]:
    build = dict(raw)
    manual = build.pop("manualAffinity", None)
    if "cachedAffinity" not in build and manual is not None:
        build["cachedAffinity"] = manual
    for key, value in list(build.items()):
        if isinstance(value, (int, float)) and key != "cachedAffinity" and value > MAX_CATEGORY_LEVEL:
            logger.warning(
                "Clamping %s level %s to %d on %s (%s)", key, value, MAX_CATEGORY_LEVEL, card_name, position
            )
            build[key] = MAX_CATEGORY_LEVEL
    return build


def _upgrade_card(raw: Mapping[str, Any]) -> Dict[str, Any]:
    card = {key: value for key, value in raw.items() if key not in _DROPPED_CARD_KEYS}
    if not card.get("imageUrl"):
        card.pop("imageUrl", None)
    if card.get("attributeStats"):
        card["attributeStats"] = _upgrade_stats(card["attributeStats"])
    builds = card.get("buildsByPosition") or {}
    card["buildsByPosition"] = {
        position: _upgrade_build(build, str(card.get("name", "")), position)
        for position, build in builds.items()
        if build is not None
    }
    card["ratingsByPosition"] = {
        position: ratings for position, ratings in (card.get("ratingsByPosition") or {}).items() if ratings
    }
    return card


def _upgrade_player(raw: Mapping[str, Any]) -> Dict[str, Any]:
    player = dict(raw)
    for legacy, current in _LEGACY_PLAYER_KEYS.items():
        if legacy in player:
            value = player.pop(legacy)
            if value is not None:
                player.setdefault(current, value)
    player["cards"] = [_upgrade_card(card) for card in player.get("cards") or []]
    return player


def _upgrade_ideal_build(raw: Mapping[str, Any]) -> Dict[str, Any]:
    build = {key: value for key, value in raw.items() if key != "legLength"}
    if build.get("build"):
        build["build"] = _upgrade_stats(build["build"])
    return build


def _merge_cards(first: Card, second: Card) -> Card:
    ratings = {position: list(values) for position, values in first.ratings_by_position.items()}
    for position, values in second.ratings_by_position.items():
        ratings.setdefault(position, []).extend(values)
    builds = dict(second.builds_by_position)
    builds.update(first.builds_by_position)
    return first.model_copy(
        update={
            "ratings_by_position": ratings,
            "builds_by_position": builds,
            "attribute_stats": first.attribute_stats or second.attribute_stats,
            "skills": list(dict.fromkeys(first.skills + second.skills)),
        }
    )


def _merge_players(first: Player, second: Player) -> Player:
    cards: List[Card] = list(first.cards)
    for card in second.cards:
        for index, existing in enumerate(cards):
            if existing.id == card.id or normalize_text(existing.name) == normalize_text(card.name):
                cards[index] = _merge_cards(existing, card)
                break
        else:
            cards.append(card)
    return first.model_copy(update={"cards": cards})


def merge_duplicate_players(players: Sequence[Player]) -> List[Player]:
    """Fold player documents sharing a normalized name into the first one seen."""

    merged: Dict[str, Player] = {}
    for player in players:
        key = normalize_text(player.name)
        if key in merged:
            logger.info("Merging duplicate player document %s into %s", player.id, merged[key].id)
            merged[key] = _merge_players(merged[key], player)
        else:
            merged[key] = player
    return list(merged.values())


def _record_id(raw: Any) -> str:
    if isinstance(raw, Mapping):
        return str(raw.get("id") or raw.get("name") or "<unknown>")
    return "<unknown>"


def parse_snapshot(payload: Any) -> Snapshot:
    """Build records from a decoded backup document.

    Accepts the ``{players, formations}`` shape with an optional
    ``idealBuilds`` list, including the older key spellings.
    """

    if not isinstance(payload, Mapping):
        raise SnapshotError("Snapshot must be a JSON object with players and formations")

    players: List[Player] = []
    for raw in payload.get("players") or []:
        try:
            players.append(Player.model_validate(_upgrade_player(raw)))
        except (ValidationError, ValueError, TypeError, AttributeError) as exc:
            raise SnapshotError(f"Invalid player record {_record_id(raw)}: {exc}") from exc

    formations: List[FormationStats] = []
    for raw in payload.get("formations") or []:
        try:
            formations.append(FormationStats.model_validate(raw))
        except (ValidationError, ValueError, TypeError) as exc:
            raise SnapshotError(f"Invalid formation record {_record_id(raw)}: {exc}") from exc

    ideal_builds: List[IdealBuild] = []
    for raw in payload.get("idealBuilds") or []:
        try:
            ideal_builds.append(IdealBuild.model_validate(_upgrade_ideal_build(raw)))
        except (ValidationError, ValueError, TypeError, AttributeError) as exc:
            raise SnapshotError(f"Invalid ideal build record {_record_id(raw)}: {exc}") from exc

    merged = merge_duplicate_players(players)
    logger.info(
        "Loaded snapshot: %d players (%d documents), %d formations, %d ideal builds",
        len(merged),
        len(players),
        len(formations),
        len(ideal_builds),
    )
    return Snapshot(players=tuple(merged), formations=tuple(formations), ideal_builds=tuple(ideal_builds))


def load_snapshot(path: Path | str) -> Snapshot:
    path = Path(path)
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise SnapshotError(f"{path} is not valid JSON: {exc}") from exc
    return parse_snapshot(payload)


def export_snapshot(snapshot: Snapshot) -> Dict[str, Any]:
    """Serialize records back to the backup shape with camelCase keys."""

    document: Dict[str, Any] = {
        "players": [player.model_dump(mode="json", by_alias=True, exclude_none=True) for player in snapshot.players],
        "formations": [
            formation.model_dump(mode="json", by_alias=True, exclude_none=True) for formation in snapshot.formations
        ],
    }
    if snapshot.ideal_builds:
        document["idealBuilds"] = [
            build.model_dump(mode="json", by_alias=True, exclude_none=True) for build in snapshot.ideal_builds
        ]
    return document
