"""Pydantic models for API I/O."""

from .lineup import LineupPlayerResponse, LineupRequest, LineupResponse, LineupSlotResponse
from .scoring import (
    AffinityRequest,
    AffinityResponse,
    BreakdownEntryResponse,
    GeneralScoreRequest,
    GeneralScoreResponse,
    PerformanceFlagsPayload,
    ProjectRequest,
    ProjectResponse,
    ResolveRequest,
    ResolveResponse,
    SkillBreakdownEntryResponse,
    StatsRequest,
    StatsResponse,
    SuggestRequest,
    SuggestResponse,
)

__all__ = [
    "AffinityRequest",
    "AffinityResponse",
    "BreakdownEntryResponse",
    "GeneralScoreRequest",
    "GeneralScoreResponse",
    "LineupPlayerResponse",
    "LineupRequest",
    "LineupResponse",
    "LineupSlotResponse",
    "PerformanceFlagsPayload",
    "ProjectRequest",
    "ProjectResponse",
    "ResolveRequest",
    "ResolveResponse",
    "SkillBreakdownEntryResponse",
    "StatsRequest",
    "StatsResponse",
    "SuggestRequest",
    "SuggestResponse",
]
