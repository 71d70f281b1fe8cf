"""REST API over the pyxi scoring engine and lineup generator."""

from __future__ import annotations

import logging
from dataclasses import asdict

from fastapi import FastAPI, HTTPException
from fastapi.responses import Response

from pyxi.api.schemas import (
    AffinityRequest,
    AffinityResponse,
    BreakdownEntryResponse,
    GeneralScoreRequest,
    GeneralScoreResponse,
    LineupPlayerResponse,
    LineupRequest,
    LineupResponse,
    LineupSlotResponse,
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
from pyxi.config.attributes import normalize_stat_keys
from pyxi.models import is_special_card
from pyxi.optimizer import Flexibility, Lineup, LineupFilters, LineupPlayer, generate_lineup
from pyxi.pool import LineupExportError, export_lineup_to_csv
from pyxi.scoring import (
    PerformanceFlags,
    build_cost,
    compute_affinity,
    compute_general_score,
    compute_stats,
    project_stats,
    resolve_ideal_build,
    suggest_progression,
)


logger = logging.getLogger(__name__)


def _player_response(player: LineupPlayer) -> LineupPlayerResponse:
    return LineupPlayerResponse(**asdict(player))


def _lineup_response(lineup: Lineup) -> LineupResponse:
    return LineupResponse(
        formation_id=lineup.formation_id,
        sort_by=lineup.sort_by,
        tactic=lineup.tactic,
        slots=[
            LineupSlotResponse(
                index=slot.index,
                positions=list(slot.slot.positions),
                styles=list(slot.slot.styles),
                starter=_player_response(slot.starter),
                substitute=_player_response(slot.substitute),
            )
            for slot in lineup.slots
        ],
        extra_substitute=_player_response(lineup.extra_substitute) if lineup.extra_substitute else None,
    )


def _run_generation(request: LineupRequest) -> Lineup:
    try:
        return generate_lineup(
            request.players,
            request.formation,
            request.ideal_builds,
            discarded_card_ids=request.discarded_card_ids,
            filters=LineupFilters(league=request.league, nationality=request.nationality),
            sort_by=request.sort_by,
            flexibility=Flexibility(fullbacks=request.fullback_flexibility, wingers=request.winger_flexibility),
            tactic_id=request.tactic_id,
            as_of=request.as_of,
        )
    except ValueError as exc:
        logger.warning("Lineup generation rejected: %s", exc)
        raise HTTPException(status_code=400, detail=str(exc)) from exc


def create_app() -> FastAPI:
    app = FastAPI(title="pyxi lineup engine")

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/stats", response_model=StatsResponse)
    async def stats(request: StatsRequest) -> StatsResponse:
        result = compute_stats(request.ratings)
        return StatsResponse(average=result.average, matches=result.matches, std_dev=result.std_dev)

    @app.post("/progression/project", response_model=ProjectResponse)
    async def project(request: ProjectRequest) -> ProjectResponse:
        build = None if request.card_name and is_special_card(request.card_name) else request.build
        try:
            projected = project_stats(normalize_stat_keys(request.base_stats), build, is_goalkeeper=request.is_goalkeeper)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        return ProjectResponse(stats=projected)

    @app.post("/progression/suggest", response_model=SuggestResponse)
    async def suggest(request: SuggestRequest) -> SuggestResponse:
        try:
            build = suggest_progression(
                normalize_stat_keys(request.base_stats),
                request.ideal_build,
                request.is_goalkeeper,
                request.budget,
            )
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        return SuggestResponse(build=build, points_used=build_cost(build))

    @app.post("/ideal-builds/resolve", response_model=ResolveResponse)
    async def resolve(request: ResolveRequest) -> ResolveResponse:
        try:
            resolved = resolve_ideal_build(
                request.style,
                request.position,
                request.ideal_builds,
                tactic=request.tactic,
                height=request.height,
            )
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        return ResolveResponse(build=resolved.build, resolved_style=resolved.resolved_style, profile=resolved.profile)

    @app.post("/affinity", response_model=AffinityResponse)
    async def affinity(request: AffinityRequest) -> AffinityResponse:
        try:
            projected = normalize_stat_keys(request.projected_stats)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        result = compute_affinity(projected, request.ideal_build, request.physical, request.skills)
        return AffinityResponse(
            score=result.score,
            breakdown=[BreakdownEntryResponse(**asdict(entry)) for entry in result.breakdown],
            skills_breakdown=[SkillBreakdownEntryResponse(**asdict(entry)) for entry in result.skills_breakdown],
        )

    @app.post("/general-score", response_model=GeneralScoreResponse)
    async def general_score(request: GeneralScoreRequest) -> GeneralScoreResponse:
        flags = PerformanceFlags(**request.flags.model_dump()) if request.flags else None
        try:
            score = compute_general_score(
                request.affinity,
                request.average,
                request.matches,
                flags,
                request.live_form,
                request.skills,
                is_substitute=request.is_substitute,
            )
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        return GeneralScoreResponse(score=score)

    @app.post("/lineups", response_model=LineupResponse)
    async def lineups(request: LineupRequest) -> LineupResponse:
        lineup = _run_generation(request)
        return _lineup_response(lineup)

    @app.post("/lineups/export.csv")
    async def export_lineup(request: LineupRequest):
        lineup = _run_generation(request)
        try:
            csv_text = export_lineup_to_csv(lineup)
        except LineupExportError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        return Response(
            content=csv_text,
            media_type="text/csv",
            headers={"Content-Disposition": f"attachment; filename={lineup.formation_id}.csv"},
        )

    return app


__all__ = ["create_app"]
