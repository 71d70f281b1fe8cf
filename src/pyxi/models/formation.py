"""Formation records and their slot targets."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, Field, field_validator, model_validator

from pyxi.config.positions import FORMATION_PLAY_STYLES, ensure_position, normalize_style
from pyxi.models.player import RECORD_CONFIG


class SingleTarget(BaseModel):
    kind: Literal["single"] = "single"
    position: str

    model_config = RECORD_CONFIG

    @field_validator("position")
    @classmethod
    def _known_position(cls, value: str) -> str:
        return ensure_position(value)

    @property
    def positions(self) -> Tuple[str, ...]:
        return (self.position,)


class FlexibleTarget(BaseModel):
    kind: Literal["flexible"] = "flexible"
    positions: Tuple[str, ...] = Field(..., min_length=1)

    model_config = RECORD_CONFIG

    @field_validator("positions")
    @classmethod
    def _known_positions(cls, value: Tuple[str, ...]) -> Tuple[str, ...]:
        return tuple(dict.fromkeys(ensure_position(position) for position in value))


SlotTarget = Annotated[Union[SingleTarget, FlexibleTarget], Field(discriminator="kind")]


def _coerce_target(raw: Any) -> Any:
    if isinstance(raw, str):
        return {"kind": "single", "position": raw}
    if isinstance(raw, (list, tuple)):
        if len(raw) == 1:
            return {"kind": "single", "position": raw[0]}
        return {"kind": "flexible", "positions": list(raw)}
    if isinstance(raw, dict) and "kind" not in raw:
        if "positions" in raw:
            return {"kind": "flexible", **raw}
        return {"kind": "single", **raw}
    return raw


class FormationSlot(BaseModel):
    target: SlotTarget
    styles: List[str] = Field(default_factory=list)
    top: Optional[float] = None
    left: Optional[float] = None

    model_config = RECORD_CONFIG

    @model_validator(mode="before")
    @classmethod
    def _legacy_position(cls, data: Any) -> Any:
        if isinstance(data, dict):
            data = dict(data)
            if "target" not in data and "position" in data:
                data["target"] = data.pop("position")
            if "target" in data:
                data["target"] = _coerce_target(data["target"])
        return data

    @field_validator("styles")
    @classmethod
    def _known_styles(cls, value: List[str]) -> List[str]:
        for style in value:
            normalize_style(style)
        return value

    @property
    def positions(self) -> Tuple[str, ...]:
        return self.target.positions

    @property
    def nominal_position(self) -> str:
        return self.target.positions[0]


class MatchResult(BaseModel):
    id: str
    goals_for: int = Field(..., ge=0)
    goals_against: int = Field(..., ge=0)
    date: datetime

    model_config = RECORD_CONFIG


class FormationStats(BaseModel):
    id: str = Field(..., min_length=1)
    name: str
    creator: Optional[str] = None
    play_style: str
    slots: List[FormationSlot]
    matches: List[MatchResult] = Field(default_factory=list)
    image_url: Optional[str] = None
    secondary_image_url: Optional[str] = None
    source_url: Optional[str] = None

    model_config = RECORD_CONFIG

    @field_validator("play_style")
    @classmethod
    def _known_play_style(cls, value: str) -> str:
        if value not in FORMATION_PLAY_STYLES:
            raise ValueError(f"Unknown formation play style {value!r}")
        return value
