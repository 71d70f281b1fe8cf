from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from pyxi.models import FormationStats, IdealBuild, Player


class LineupRequest(BaseModel):
    players: List[Player] = Field(default_factory=list)
    formation: FormationStats
    ideal_builds: List[IdealBuild] = Field(default_factory=list)
    discarded_card_ids: List[str] = Field(default_factory=list)
    league: Optional[str] = None
    nationality: Optional[str] = None
    sort_by: Literal["general", "average"] = "general"
    fullback_flexibility: bool = False
    winger_flexibility: bool = False
    tactic_id: Optional[str] = None
    as_of: Optional[datetime] = None


class LineupPlayerResponse(BaseModel):
    player_id: str
    player_name: str
    card_id: str
    card_name: str
    position: str
    style: str
    affinity: float
    average: float
    matches: int
    general_score: float
    live_form: Optional[str] = None
    is_placeholder: bool = False
    affinity_status: str = "never"


class LineupSlotResponse(BaseModel):
    index: int
    positions: List[str]
    styles: List[str]
    starter: LineupPlayerResponse
    substitute: LineupPlayerResponse


class LineupResponse(BaseModel):
    formation_id: str
    sort_by: str
    tactic: str
    slots: List[LineupSlotResponse]
    extra_substitute: Optional[LineupPlayerResponse] = None
