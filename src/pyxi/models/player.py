"""Canonical player and card models shared across scoring and generator layers."""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel
from pydantic.config import ConfigDict

from pyxi.config.attributes import CATEGORIES, MAX_CATEGORY_LEVEL, UnknownStatError, normalize_stat_keys
from pyxi.config.positions import LIVE_FORM_RATINGS, NO_STYLE, ensure_position, normalize_style


RECORD_CONFIG = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

SPECIAL_CARD_MARKERS = ("potw", "potm", "pots")


def is_special_card(card_name: str) -> bool:
    """Player of the week/month/season cards come fully trained."""

    if not card_name:
        return False
    lowered = card_name.lower()
    return any(marker in lowered for marker in SPECIAL_CARD_MARKERS)


class PhysicalAttributes(BaseModel):
    height: Optional[int] = Field(default=None, gt=0)
    weight: Optional[int] = Field(default=None, gt=0)

    model_config = RECORD_CONFIG


class ProgressionBuild(BaseModel):
    """Levels allocated per progression category."""

    shooting: int = Field(default=0, ge=0, le=MAX_CATEGORY_LEVEL)
    passing: int = Field(default=0, ge=0, le=MAX_CATEGORY_LEVEL)
    dribbling: int = Field(default=0, ge=0, le=MAX_CATEGORY_LEVEL)
    dexterity: int = Field(default=0, ge=0, le=MAX_CATEGORY_LEVEL)
    lower_body_strength: int = Field(default=0, ge=0, le=MAX_CATEGORY_LEVEL)
    aerial_strength: int = Field(default=0, ge=0, le=MAX_CATEGORY_LEVEL)
    defending: int = Field(default=0, ge=0, le=MAX_CATEGORY_LEVEL)
    gk1: int = Field(default=0, ge=0, le=MAX_CATEGORY_LEVEL)
    gk2: int = Field(default=0, ge=0, le=MAX_CATEGORY_LEVEL)
    gk3: int = Field(default=0, ge=0, le=MAX_CATEGORY_LEVEL)

    model_config = RECORD_CONFIG

    def level(self, category: str) -> int:
        if category not in CATEGORIES:
            raise UnknownStatError(f"Unknown progression category {category!r}")
        return getattr(self, category)

    def levels(self) -> Dict[str, int]:
        return {category: getattr(self, category) for category in CATEGORIES}

    def has_points(self) -> bool:
        return any(level > 0 for level in self.levels().values())

    def progression(self) -> "ProgressionBuild":
        return ProgressionBuild(**self.levels())


class PositionBuild(ProgressionBuild):
    """Build saved on a card for one position.

    ``cached_affinity`` and ``updated_at`` are stamped when the build is saved
    and only feed staleness indicators; lineup generation recomputes affinity.
    """

    cached_affinity: Optional[float] = None
    updated_at: Optional[datetime] = None


class Card(BaseModel):
    id: str = Field(..., min_length=1)
    name: str
    style: str = NO_STYLE
    league: str = "Sin Liga"
    image_url: Optional[str] = None
    ratings_by_position: Dict[str, List[float]] = Field(default_factory=dict)
    builds_by_position: Dict[str, PositionBuild] = Field(default_factory=dict)
    attribute_stats: Dict[str, int] = Field(default_factory=dict)
    physical_attributes: PhysicalAttributes = Field(default_factory=PhysicalAttributes)
    skills: List[str] = Field(default_factory=list)
    total_progression_points: Optional[int] = Field(default=None, ge=0)

    model_config = RECORD_CONFIG

    @field_validator("style")
    @classmethod
    def _known_style(cls, value: str) -> str:
        normalize_style(value)
        return value

    @field_validator("ratings_by_position")
    @classmethod
    def _valid_ratings(cls, value: Dict[str, List[float]]) -> Dict[str, List[float]]:
        for position, ratings in value.items():
            ensure_position(position)
            for rating in ratings:
                if not 0.0 <= rating <= 10.0:
                    raise ValueError(f"rating {rating} for {position} is outside 0-10")
        return value

    @field_validator("builds_by_position")
    @classmethod
    def _valid_build_positions(cls, value: Dict[str, PositionBuild]) -> Dict[str, PositionBuild]:
        for position in value:
            ensure_position(position)
        return value

    @field_validator("attribute_stats", mode="before")
    @classmethod
    def _canonical_stats(cls, value: object) -> object:
        if isinstance(value, dict):
            return normalize_stat_keys(value)
        return value

    @field_validator("skills")
    @classmethod
    def _unique_skills(cls, value: List[str]) -> List[str]:
        return list(dict.fromkeys(skill.strip() for skill in value if skill.strip()))

    @property
    def is_special(self) -> bool:
        return is_special_card(self.name)

    def rated_positions(self) -> List[str]:
        """Positions with at least one rating, in insertion order."""

        return [position for position, ratings in self.ratings_by_position.items() if ratings]

    def build_for(self, position: str) -> Optional[PositionBuild]:
        return self.builds_by_position.get(position)


class Player(BaseModel):
    id: str = Field(..., min_length=1)
    name: str
    nationality: str = "Sin Nacionalidad"
    cards: List[Card] = Field(default_factory=list)
    live_form: Optional[str] = None
    live_form_permanent: bool = False
    live_form_updated_at: Optional[datetime] = None

    model_config = RECORD_CONFIG

    @field_validator("live_form")
    @classmethod
    def _known_live_form(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        rating = value.strip().upper()
        if rating not in LIVE_FORM_RATINGS:
            raise ValueError(f"live form rating must be one of {', '.join(LIVE_FORM_RATINGS)}, got {value!r}")
        return rating

    def card(self, card_id: str) -> Optional[Card]:
        for card in self.cards:
            if card.id == card_id:
                return card
        return None
