"""Attribute and progression-category tables."""

from __future__ import annotations

import re
from typing import Dict, Mapping, Tuple


class UnknownStatError(ValueError):
    """Raised when an attribute or progression category name is not recognised."""


MIN_STAT_VALUE = 0
MAX_STAT_VALUE = 99
MAX_CATEGORY_LEVEL = 16

ATTACKING_STATS: Tuple[str, ...] = (
    "offensive_awareness",
    "ball_control",
    "dribbling",
    "tight_possession",
    "low_pass",
    "lofted_pass",
    "finishing",
    "heading",
    "place_kicking",
    "curl",
)
DEFENDING_STATS: Tuple[str, ...] = (
    "defensive_awareness",
    "defensive_engagement",
    "tackling",
    "aggression",
)
GOALKEEPING_STATS: Tuple[str, ...] = (
    "goalkeeping",
    "gk_catching",
    "gk_parrying",
    "gk_reflexes",
    "gk_reach",
)
ATHLETIC_STATS: Tuple[str, ...] = (
    "speed",
    "acceleration",
    "kicking_power",
    "jump",
    "physical_contact",
    "balance",
    "stamina",
)

OUTFIELD_STATS: Tuple[str, ...] = ATTACKING_STATS + DEFENDING_STATS + ATHLETIC_STATS
GOALKEEPER_STATS: Tuple[str, ...] = DEFENDING_STATS + GOALKEEPING_STATS + ATHLETIC_STATS
ALL_STATS: Tuple[str, ...] = ATTACKING_STATS + DEFENDING_STATS + GOALKEEPING_STATS + ATHLETIC_STATS

# Never scored for affinity, whatever the ideal build says.
UNSCORED_STATS = frozenset({"place_kicking"})

STAT_LABELS: Mapping[str, str] = {
    "offensive_awareness": "Act. Ofensiva",
    "ball_control": "Control de Balón",
    "dribbling": "Regate",
    "tight_possession": "Posesión Estrecha",
    "low_pass": "Pase Raso",
    "lofted_pass": "Pase Bombeado",
    "finishing": "Finalización",
    "heading": "Cabeceo",
    "place_kicking": "Balón Parado",
    "curl": "Efecto",
    "defensive_awareness": "Act. Defensiva",
    "defensive_engagement": "Entrada",
    "tackling": "Segada",
    "aggression": "Agresividad",
    "goalkeeping": "Act. Portero",
    "gk_catching": "Atajar",
    "gk_parrying": "Despejar",
    "gk_reflexes": "Reflejos",
    "gk_reach": "Alcance",
    "speed": "Velocidad",
    "acceleration": "Aceleración",
    "kicking_power": "Potencia de Tiro",
    "jump": "Salto",
    "physical_contact": "Contacto Físico",
    "balance": "Equilibrio",
    "stamina": "Resistencia",
    "height": "Altura",
    "weight": "Peso",
}

OUTFIELD_CATEGORIES: Tuple[str, ...] = (
    "shooting",
    "passing",
    "dribbling",
    "dexterity",
    "lower_body_strength",
    "aerial_strength",
    "defending",
)
GOALKEEPER_CATEGORIES: Tuple[str, ...] = ("gk1", "gk2", "gk3", "defending")
CATEGORIES: Tuple[str, ...] = OUTFIELD_CATEGORIES + ("gk1", "gk2", "gk3")

# ``jump`` sits in both aerial_strength and gk1: it is the same in-game stat,
# trained by whichever category applies to the player's context.
CATEGORY_STATS: Mapping[str, Tuple[str, ...]] = {
    "shooting": ("finishing", "place_kicking", "curl"),
    "passing": ("low_pass", "lofted_pass"),
    "dribbling": ("ball_control", "dribbling", "tight_possession"),
    "dexterity": ("offensive_awareness", "acceleration", "balance"),
    "lower_body_strength": ("speed", "kicking_power", "stamina"),
    "aerial_strength": ("heading", "jump", "physical_contact"),
    "defending": ("defensive_awareness", "defensive_engagement", "tackling", "aggression"),
    "gk1": ("goalkeeping", "jump"),
    "gk2": ("gk_parrying", "gk_reach"),
    "gk3": ("gk_catching", "gk_reflexes"),
}


def categories_for(is_goalkeeper: bool) -> Tuple[str, ...]:
    return GOALKEEPER_CATEGORIES if is_goalkeeper else OUTFIELD_CATEGORIES


def stats_for(is_goalkeeper: bool) -> Tuple[str, ...]:
    """Attribute keys relevant to a goalkeeper or to any position."""

    return GOALKEEPER_STATS if is_goalkeeper else ALL_STATS


_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])([A-Z])")


def to_snake(key: str) -> str:
    return _CAMEL_BOUNDARY.sub(r"_\1", key).lower()


def canonical_stat(key: str) -> str:
    """Return the snake_case attribute name for ``key`` (snake or camelCase)."""

    snake = to_snake(key)
    if snake not in STAT_LABELS or snake in {"height", "weight"}:
        raise UnknownStatError(f"Unknown attribute {key!r}")
    return snake


def normalize_stat_keys(stats: Mapping[str, object]) -> Dict[str, int]:
    """Convert a raw stat mapping to canonical keys with int values; None values are dropped."""

    normalized: Dict[str, int] = {}
    for key, value in stats.items():
        if value is None:
            continue
        normalized[canonical_stat(key)] = int(round(float(value)))
    return normalized
