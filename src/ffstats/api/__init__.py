"""REST API for uploads and season dashboards."""

from __future__ import annotations

import logging
from dataclasses import asdict
from typing import List, Optional

from fastapi import FastAPI, File, Form, Header, HTTPException, Query, UploadFile
from fastapi.responses import JSONResponse

from ffstats.api.schemas import (
    GameweekLineResponse,
    PlayerSummaryResponse,
    SeasonTotalsResponse,
    TeamCardResponse,
    UpcomingFixtureResponse,
    UploadResponse,
)
from ffstats.config import Settings
from ffstats.ingest import ingest_fixture_file, ingest_gameweek_file, ingest_team_file, team_code
from ffstats.models import IngestResult
from ffstats.persistence import StatsStore, StoreError
from ffstats.summary import (
    decorate_gameweeks,
    display_position,
    next_fixtures,
    summarize_player_season,
    summarize_teams,
    team_name_map,
)


logger = logging.getLogger("uvicorn.error")

IDENTITY_HEADER = "X-User-Email"


def _upload_response(result: IngestResult) -> JSONResponse:
    if result.success:
        status = 200
    elif result.failure_kind == "store":
        status = 500
    else:
        status = 400
    return JSONResponse(status_code=status, content=result.model_dump(by_alias=True))


def _denied(status: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status, content=IngestResult.failure(message).model_dump(by_alias=True))


async def _read_upload(upload: UploadFile | None) -> tuple[bytes, str]:
    if upload is None:
        return b"", ""
    return await upload.read(), upload.filename or ""


def create_app(settings: Settings | None = None, store: StatsStore | None = None) -> FastAPI:
    settings = settings or Settings.from_env()
    store = store or StatsStore(settings.db_path)
    app = FastAPI(title="ffstats")
    app.state.settings = settings
    app.state.store = store

    def admin_gate(email: Optional[str]) -> JSONResponse | None:
        if not email:
            return _denied(401, "Unauthorized")
        if not settings.is_admin(email):
            return _denied(403, "Forbidden")
        return None

    def premium_gate(email: Optional[str]) -> None:
        if not email:
            raise HTTPException(status_code=401, detail="Unauthorized")
        if not settings.is_premium(email):
            raise HTTPException(status_code=403, detail="Premium membership required")

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/admin/upload", response_model=UploadResponse)
    async def upload_gameweek(
        file: UploadFile | None = File(None),
        upload_type: str | None = Form(None, alias="type"),
        season: str | None = Form(None),
        gameweek: str | None = Form(None),
        user_email: str | None = Header(None, alias=IDENTITY_HEADER),
    ):
        denied = admin_gate(user_email)
        if denied is not None:
            return denied
        content, filename = await _read_upload(file)
        if not content:
            return _upload_response(IngestResult.failure("Missing CSV file"))
        result = ingest_gameweek_file(
            content,
            filename=filename,
            upload_type=upload_type,
            season=season,
            gameweek=gameweek,
            store=store,
        )
        logger.info(
            "Gameweek upload by %s: success=%s rows=%s warnings=%s",
            user_email,
            result.success,
            result.rows_processed,
            len(result.errors),
        )
        return _upload_response(result)

    @app.post("/admin/fixtures", response_model=UploadResponse)
    async def upload_fixtures(
        file: UploadFile | None = File(None),
        season: str | None = Form(None),
        user_email: str | None = Header(None, alias=IDENTITY_HEADER),
    ):
        denied = admin_gate(user_email)
        if denied is not None:
            return denied
        content, filename = await _read_upload(file)
        return _upload_response(ingest_fixture_file(content, filename=filename, season=season, store=store))

    @app.post("/admin/teams", response_model=UploadResponse)
    async def upload_teams(
        file: UploadFile | None = File(None),
        user_email: str | None = Header(None, alias=IDENTITY_HEADER),
    ):
        denied = admin_gate(user_email)
        if denied is not None:
            return denied
        content, filename = await _read_upload(file)
        return _upload_response(ingest_team_file(content, filename=filename, store=store))

    @app.get("/players/{player_id}/summary", response_model=PlayerSummaryResponse)
    async def player_summary(
        player_id: str,
        season: str | None = Query(None),
        user_email: str | None = Header(None, alias=IDENTITY_HEADER),
    ) -> PlayerSummaryResponse:
        premium_gate(user_email)
        season = season or settings.season
        try:
            player = store.get_player(player_id)
            if player is None:
                raise HTTPException(status_code=404, detail="Player not found")
            rows = store.list_player_gameweeks(season, player_id=player_id)
            fixtures = store.load_fixtures(season)
            teams = store.list_teams()
        except StoreError as exc:
            raise HTTPException(status_code=500, detail=str(exc)) from exc

        names = team_name_map(teams)
        decorated = decorate_gameweeks(rows, player.team, fixtures)
        summary = summarize_player_season(decorated)
        upcoming = next_fixtures(player.team, fixtures, summary.current_gameweek, names)
        return PlayerSummaryResponse(
            player_id=player.player_id,
            name=player.name,
            team=player.team,
            team_name=names.get(team_code(player.team), player.team),
            position=display_position(player.position),
            season=season,
            summary=SeasonTotalsResponse(**asdict(summary)),
            gameweeks=[
                GameweekLineResponse(
                    gameweek=item.gameweek,
                    opponent=item.opponent,
                    is_home=item.is_home,
                    games_played=item.row.games_played,
                    games_started=item.row.games_started,
                    minutes_played=item.row.minutes_played,
                    raw_fantrax_pts=item.row.raw_fantrax_pts,
                    ghost_pts=item.row.ghost_pts,
                    attack_pts=item.attack_pts,
                )
                for item in decorated
            ],
            next_fixtures=[UpcomingFixtureResponse(**asdict(fixture)) for fixture in upcoming],
        )

    @app.get("/teams/summary", response_model=List[TeamCardResponse])
    async def team_summary(
        season: str | None = Query(None),
        user_email: str | None = Header(None, alias=IDENTITY_HEADER),
    ) -> List[TeamCardResponse]:
        premium_gate(user_email)
        season = season or settings.season
        try:
            teams = store.list_teams()
            players = store.list_players()
            gameweeks = store.list_player_gameweeks(season, played_only=True)
            fixtures = store.load_fixtures(season)
        except StoreError as exc:
            raise HTTPException(status_code=500, detail=str(exc)) from exc
        cards = summarize_teams(teams, players, gameweeks, fixtures)
        return [TeamCardResponse(**asdict(card)) for card in cards]

    @app.get("/teams/{team}/next-fixtures", response_model=List[UpcomingFixtureResponse])
    async def team_next_fixtures(
        team: str,
        season: str | None = Query(None),
        after: int = Query(0, ge=0, le=38),
        limit: int = Query(5, ge=1, le=38),
    ) -> List[UpcomingFixtureResponse]:
        season = season or settings.season
        try:
            fixtures = store.load_fixtures(season)
            teams = store.list_teams()
        except StoreError as exc:
            raise HTTPException(status_code=500, detail=str(exc)) from exc
        upcoming = next_fixtures(team, fixtures, after, team_name_map(teams), limit=limit)
        return [UpcomingFixtureResponse(**asdict(fixture)) for fixture in upcoming]

    return app
