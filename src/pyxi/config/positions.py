"""Position, play-style and tactic tables for the supported game rules."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Mapping, Optional, Tuple


class UnknownPositionError(ValueError):
    """Raised when a position key is not part of the position table."""


class UnknownStyleError(ValueError):
    """Raised when a play-style name is not part of the style table."""


POSITIONS: Tuple[str, ...] = (
    "PT", "DFC", "LI", "LD", "MCD", "MC", "MDI", "MDD", "MO", "EXI", "EXD", "SD", "DC",
)

ARCHETYPES: Tuple[str, ...] = ("LAT", "INT", "EXT")

BUILD_POSITIONS: Tuple[str, ...] = POSITIONS + ARCHETYPES

GOALKEEPER = "PT"

NO_STYLE = "Ninguno"

STYLES: Tuple[str, ...] = (
    NO_STYLE,
    "Cazagoles",
    "Hombre de área",
    "Señuelo",
    "Hombre objetivo",
    "Creador de juego",
    "Creador de jugadas",
    "El destructor",
    "Portero defensivo",
    "Portero ofensivo",
    "Atacante extra",
    "Lateral defensivo",
    "Lateral ofensivo",
    "Lateral finalizador",
    "Omnipresente",
    "Medio escudo",
    "Organizador",
    "Jugador de huecos",
    "Especialista en centros",
    "Extremo móvil",
    "Extremo prolífico",
    "Diez Clasico",
    "Segundo delantero",
)

# Historical names that were replaced in a game update.
STYLE_ALIASES: Mapping[str, str] = {
    "Señuelo": "Segundo delantero",
}

GENERAL_TACTIC = "General"

TACTICS: Tuple[str, ...] = (
    GENERAL_TACTIC,
    "Contraataque rápido",
    "Contraataque largo",
    "Por las bandas",
    "Balones largos",
    "Posesión",
)

FORMATION_PLAY_STYLES: Tuple[str, ...] = TACTICS[1:]

LIVE_FORM_RATINGS: Tuple[str, ...] = ("A", "B", "C", "D", "E")


@dataclass(frozen=True)
class PositionRules:
    position: str
    label: str
    archetype: Optional[str]
    mirror: Optional[str]
    active_styles: Tuple[str, ...]


_FULLBACK_STYLES = ("Lateral defensivo", "Lateral ofensivo", "Lateral finalizador", "Especialista en centros")
_INTERIOR_STYLES = ("Omnipresente", "Especialista en centros", "Creador de jugadas", "Jugador de huecos")
_WINGER_STYLES = ("Extremo móvil", "Extremo prolífico", "Especialista en centros", "Creador de jugadas")

_POSITION_RULES: Dict[str, PositionRules] = {
    "PT": PositionRules("PT", "Portero", None, None, ("Portero defensivo", "Portero ofensivo")),
    "DFC": PositionRules("DFC", "Defensa Central", None, None, ("El destructor", "Atacante extra", "Creador de juego")),
    "LI": PositionRules("LI", "Lateral Izquierdo", "LAT", "LD", _FULLBACK_STYLES),
    "LD": PositionRules("LD", "Lateral Derecho", "LAT", "LI", _FULLBACK_STYLES),
    "MCD": PositionRules(
        "MCD",
        "Pivote Defensivo",
        None,
        None,
        ("El destructor", "Medio escudo", "Omnipresente", "Organizador", "Creador de jugadas", "Atacante extra"),
    ),
    "MC": PositionRules(
        "MC",
        "Mediocentro",
        None,
        None,
        ("Jugador de huecos", "Omnipresente", "Creador de jugadas", "Organizador", "El destructor", "Medio escudo"),
    ),
    "MDI": PositionRules("MDI", "Interior Izquierdo", "INT", "MDD", _INTERIOR_STYLES),
    "MDD": PositionRules("MDD", "Interior Derecho", "INT", "MDI", _INTERIOR_STYLES),
    "MO": PositionRules(
        "MO", "Mediapunta", None, None, ("Jugador de huecos", "Creador de jugadas", "Diez Clasico", "Extremo móvil")
    ),
    "EXI": PositionRules("EXI", "Extremo Izquierdo", "EXT", "EXD", _WINGER_STYLES),
    "EXD": PositionRules("EXD", "Extremo Derecho", "EXT", "EXI", _WINGER_STYLES),
    "SD": PositionRules(
        "SD",
        "Segundo Delantero",
        None,
        None,
        (
            "Cazagoles",
            "Jugador de huecos",
            "Señuelo",
            "Hombre objetivo",
            "Diez Clasico",
            "Extremo móvil",
            "Creador de jugadas",
        ),
    ),
    "DC": PositionRules(
        "DC",
        "Delantero Centro",
        None,
        None,
        (
            "Cazagoles",
            "Hombre de área",
            "Señuelo",
            "Hombre objetivo",
            "Jugador de huecos",
            "Extremo móvil",
            "Segundo delantero",
        ),
    ),
}

_ARCHETYPE_MEMBERS: Dict[str, Tuple[str, str]] = {
    "LAT": ("LI", "LD"),
    "INT": ("MDI", "MDD"),
    "EXT": ("EXI", "EXD"),
}

FULLBACK_PAIR: Tuple[str, str] = _ARCHETYPE_MEMBERS["LAT"]
WINGER_PAIR: Tuple[str, str] = _ARCHETYPE_MEMBERS["EXT"]


def iter_rules() -> Iterable[PositionRules]:
    """Return an iterator over the rules of every pitch position."""

    return _POSITION_RULES.values()


def ensure_position(position: str) -> str:
    if position not in _POSITION_RULES:
        raise UnknownPositionError(f"Unknown position {position!r}; expected one of {', '.join(POSITIONS)}")
    return position


def ensure_build_position(position: str) -> str:
    if position in _ARCHETYPE_MEMBERS:
        return position
    return ensure_position(position)


def get_rules(position: str) -> PositionRules:
    """Fetch rules for a pitch position, raising UnknownPositionError if missing."""

    return _POSITION_RULES[ensure_position(position)]


def archetype_for(position: str) -> Optional[str]:
    return get_rules(position).archetype


def normalize_style(style: str) -> str:
    """Return the canonical name of a play style, applying the alias table."""

    if style not in STYLES:
        raise UnknownStyleError(f"Unknown play style {style!r}")
    return STYLE_ALIASES.get(style, style)


def active_styles(position: str) -> Tuple[str, ...]:
    """Named styles currently active for a position, alias-normalized."""

    if position in _ARCHETYPE_MEMBERS:
        position = _ARCHETYPE_MEMBERS[position][0]
    return tuple(normalize_style(style) for style in get_rules(position).active_styles)


def is_style_active(style: str, position: str) -> bool:
    return normalize_style(style) in active_styles(position)


def style_for_position(style: str, position: str) -> str:
    """Return the style to store for a card rated at ``position``."""

    if is_style_active(style, position):
        return style
    return NO_STYLE
