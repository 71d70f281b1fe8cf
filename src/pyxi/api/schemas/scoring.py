from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from pyxi.config.positions import LIVE_FORM_RATINGS
from pyxi.models import IdealBuild, PhysicalAttributes, ProgressionBuild


class StatsRequest(BaseModel):
    ratings: List[float] = Field(default_factory=list)


class StatsResponse(BaseModel):
    average: float
    matches: int
    std_dev: float


class ProjectRequest(BaseModel):
    base_stats: Dict[str, int]
    build: Optional[ProgressionBuild] = None
    is_goalkeeper: bool = False
    card_name: Optional[str] = None


class ProjectResponse(BaseModel):
    stats: Dict[str, int]


class SuggestRequest(BaseModel):
    base_stats: Dict[str, int]
    ideal_build: Optional[IdealBuild] = None
    is_goalkeeper: bool = False
    budget: int = Field(default=0, ge=0)


class SuggestResponse(BaseModel):
    build: ProgressionBuild
    points_used: int


class ResolveRequest(BaseModel):
    style: str
    position: str
    ideal_builds: List[IdealBuild] = Field(default_factory=list)
    tactic: Optional[str] = None
    height: Optional[int] = Field(default=None, gt=0)


class ResolveResponse(BaseModel):
    build: Optional[IdealBuild]
    resolved_style: Optional[str]
    profile: Optional[str] = None


class AffinityRequest(BaseModel):
    projected_stats: Dict[str, int]
    ideal_build: Optional[IdealBuild] = None
    physical: Optional[PhysicalAttributes] = None
    skills: List[str] = Field(default_factory=list)


class BreakdownEntryResponse(BaseModel):
    stat: str
    label: str
    player_value: Optional[int]
    ideal_value: Optional[int]
    score: float


class SkillBreakdownEntryResponse(BaseModel):
    skill: str
    primary: bool
    present: bool
    score: float


class AffinityResponse(BaseModel):
    score: float
    breakdown: List[BreakdownEntryResponse]
    skills_breakdown: List[SkillBreakdownEntryResponse]


class PerformanceFlagsPayload(BaseModel):
    hot_streak: bool = False
    consistent: bool = False
    versatile: bool = False
    promising: bool = False
    game_changer: bool = False
    stalwart: bool = False
    specialist: bool = False


class GeneralScoreRequest(BaseModel):
    affinity: float
    average: float = Field(default=0.0, ge=0.0, le=10.0)
    matches: int = Field(default=0, ge=0)
    flags: Optional[PerformanceFlagsPayload] = None
    live_form: Optional[str] = None
    skills: List[str] = Field(default_factory=list)
    is_substitute: bool = False

    @field_validator("live_form")
    @classmethod
    def _known_live_form(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        rating = value.strip().upper()
        if rating not in LIVE_FORM_RATINGS:
            raise ValueError(f"live form rating must be one of {', '.join(LIVE_FORM_RATINGS)}, got {value!r}")
        return rating


class GeneralScoreResponse(BaseModel):
    score: float
