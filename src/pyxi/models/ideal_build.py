"""Ideal build records: target profiles per tactic, position and style."""

from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, Field, field_validator, model_validator

from pyxi.config.attributes import normalize_stat_keys
from pyxi.config.positions import (
    GENERAL_TACTIC,
    GOALKEEPER,
    TACTICS,
    ensure_build_position,
    normalize_style,
)
from pyxi.models.player import RECORD_CONFIG


RELEVANT_TARGET = 70


class StatRange(BaseModel):
    minimum: Optional[int] = Field(default=None, alias="min", gt=0)
    maximum: Optional[int] = Field(default=None, alias="max", gt=0)

    model_config = RECORD_CONFIG

    @model_validator(mode="after")
    def _ordered(self) -> "StatRange":
        if self.minimum is not None and self.maximum is not None and self.minimum > self.maximum:
            raise ValueError(f"range min {self.minimum} is above max {self.maximum}")
        return self

    @property
    def is_defined(self) -> bool:
        return self.minimum is not None or self.maximum is not None


class IdealBuild(BaseModel):
    id: Optional[str] = None
    tactic: str = GENERAL_TACTIC
    position: str
    style: str
    profile: Optional[str] = None
    build: Dict[str, int] = Field(default_factory=dict)
    primary_skills: List[str] = Field(default_factory=list)
    secondary_skills: List[str] = Field(default_factory=list)
    height: Optional[StatRange] = None
    weight: Optional[StatRange] = None

    model_config = RECORD_CONFIG

    @field_validator("tactic")
    @classmethod
    def _known_tactic(cls, value: str) -> str:
        if value not in TACTICS:
            raise ValueError(f"Unknown tactic {value!r}")
        return value

    @field_validator("position")
    @classmethod
    def _known_position(cls, value: str) -> str:
        return ensure_build_position(value)

    @field_validator("style")
    @classmethod
    def _known_style(cls, value: str) -> str:
        normalize_style(value)
        return value

    @field_validator("build", mode="before")
    @classmethod
    def _canonical_stats(cls, value: object) -> object:
        if isinstance(value, dict):
            return normalize_stat_keys(value)
        return value

    @property
    def key(self) -> Tuple[str, str, str, Optional[str]]:
        return (self.tactic, self.position, normalize_style(self.style), self.profile)

    @property
    def is_goalkeeper(self) -> bool:
        return self.position == GOALKEEPER

    def target(self, stat: str) -> Optional[int]:
        return self.build.get(stat)

    def relevant_targets(self) -> Dict[str, int]:
        """Targets at or above the threshold that makes a stat matter."""

        return {stat: value for stat, value in self.build.items() if value >= RELEVANT_TARGET}
