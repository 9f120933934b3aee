import pytest
from httpx import ASGITransport, AsyncClient

from ffstats.api import create_app
from ffstats.config import Settings
from ffstats.models import Fixture, Team
from ffstats.persistence import StatsStore, StoreError


SEASON = "2025-26"
ADMIN = {"X-User-Email": "admin@example.com"}
FAN = {"X-User-Email": "fan@example.com"}
STRANGER = {"X-User-Email": "someone@example.com"}


def _gameweek_csv() -> bytes:
    return (
        "ID,Player,Team,Position,GW,FPts,GP,GS,MIN,G,CS,KP,SOT,TkW,YC,H/A,Opponent\n"
        "d1,Gabriel,ARS,D,1,24,1,1,90,1,1,3,1,2,1,H,CHE\n"
        "m1,Saka,ARS,M,1,50,1,1,90,1,1,0,0,0,0,H,CHE\n"
        "c1,Palmer,CHE,M,1,0,0,0,0,0,0,0,0,0,0,A,@ARS\n"
    ).encode("utf-8")


class LockedStore:
    def upsert_players(self, players):
        raise StoreError("database is locked")


@pytest.fixture
def store(tmp_path):
    store = StatsStore(tmp_path / "stats.sqlite")
    store.upsert_teams(
        [
            Team(abbrev="ARS", short_name="Arsenal", full_name="Arsenal FC"),
            Team(abbrev="CHE", short_name="Chelsea", full_name="Chelsea FC"),
        ]
    )
    store.upsert_fixtures(
        [
            Fixture(season=SEASON, gameweek=1, home_team="ARS", away_team="CHE"),
            Fixture(season=SEASON, gameweek=2, home_team="CHE", away_team="ARS"),
            Fixture(season=SEASON, gameweek=3, home_team="ARS", away_team="LIV"),
        ]
    )
    return store


@pytest.fixture
def settings(tmp_path):
    return Settings(
        db_path=tmp_path / "stats.sqlite",
        season=SEASON,
        admin_emails=frozenset({"admin@example.com"}),
        premium_emails=frozenset({"fan@example.com"}),
    )


@pytest.fixture
async def client(settings, store):
    app = create_app(settings, store)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as async_client:
        yield async_client


async def _upload(client: AsyncClient, headers=ADMIN, **data):
    form = {"type": "player", "season": SEASON, "gameweek": "1"}
    form.update(data)
    return await client.post(
        "/admin/upload",
        files={"file": ("gw1.csv", _gameweek_csv(), "text/csv")},
        data=form,
        headers=headers,
    )


@pytest.mark.anyio
async def test_health(client: AsyncClient):
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


@pytest.mark.anyio
async def test_upload_requires_admin(client: AsyncClient):
    anonymous = await _upload(client, headers={})
    assert anonymous.status_code == 401
    assert anonymous.json() == {"success": False, "rowsProcessed": 0, "errors": ["Unauthorized"]}

    forbidden = await _upload(client, headers=FAN)
    assert forbidden.status_code == 403
    assert forbidden.json()["errors"] == ["Forbidden"]


@pytest.mark.anyio
async def test_upload_reports_warnings_and_persists(client: AsyncClient, store: StatsStore):
    resp = await _upload(client)

    assert resp.status_code == 200
    payload = resp.json()
    assert payload["success"] is True
    assert payload["rowsProcessed"] == 3
    assert payload["errors"] == ["Row 2 (Saka): FPts mismatch, expected 10.00 got 50.00"]
    assert len(store.list_player_gameweeks(SEASON)) == 3


@pytest.mark.anyio
async def test_upload_validation_errors(client: AsyncClient):
    bad_type = await _upload(client, type="coach")
    assert bad_type.status_code == 400
    assert bad_type.json()["errors"] == ["Invalid type"]

    bad_week = await _upload(client, gameweek="40")
    assert bad_week.status_code == 400
    assert bad_week.json()["errors"] == ["Gameweek must be an integer between 1 and 38"]

    empty = await client.post(
        "/admin/upload",
        files={"file": ("gw1.csv", b"", "text/csv")},
        data={"type": "player", "season": SEASON, "gameweek": "1"},
        headers=ADMIN,
    )
    assert empty.status_code == 400
    assert empty.json()["errors"] == ["Missing CSV file"]


@pytest.mark.anyio
async def test_upload_store_failure_is_server_error(settings):
    app = create_app(settings, LockedStore())
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as client:
        resp = await _upload(client)

    assert resp.status_code == 500
    assert resp.json() == {
        "success": False,
        "rowsProcessed": 0,
        "errors": ["Players upsert failed: database is locked"],
    }


@pytest.mark.anyio
async def test_reference_uploads(client: AsyncClient, store: StatsStore):
    fixtures = await client.post(
        "/admin/fixtures",
        files={"file": ("fixtures.csv", b"Gameweek,HomeAbbrev,AwayAbbrev\n4,LIV,ARS\n", "text/csv")},
        data={"season": SEASON},
        headers=ADMIN,
    )
    assert fixtures.status_code == 200
    assert fixtures.json()["rowsProcessed"] == 1
    assert len(store.load_fixtures(SEASON)) == 4

    teams = await client.post(
        "/admin/teams",
        files={"file": ("teams.csv", b"TeamAbbrev,TeamName,TeamFullName\nLIV,Liverpool,Liverpool FC\n", "text/csv")},
        headers=ADMIN,
    )
    assert teams.status_code == 200
    assert "LIV" in {team.abbrev for team in store.list_teams()}

    missing_season = await client.post(
        "/admin/fixtures",
        files={"file": ("fixtures.csv", b"Gameweek,HomeAbbrev,AwayAbbrev\n4,LIV,ARS\n", "text/csv")},
        headers=ADMIN,
    )
    assert missing_season.status_code == 400
    assert missing_season.json()["errors"] == ["Season is required"]


@pytest.mark.anyio
async def test_player_summary(client: AsyncClient, store: StatsStore):
    await _upload(client)
    saka = next(player for player in store.list_players() if player.name == "Saka")

    denied = await client.get(f"/players/{saka.player_id}/summary", headers=STRANGER)
    assert denied.status_code == 403

    resp = await client.get(f"/players/{saka.player_id}/summary", params={"season": SEASON}, headers=FAN)
    assert resp.status_code == 200
    body = resp.json()
    assert body["name"] == "Saka"
    assert body["team_name"] == "Arsenal FC"
    assert body["position"] == "MID"
    assert body["summary"]["season_total_pts"] == 50
    assert body["summary"]["games_played"] == 1
    assert body["summary"]["total_ghost_pts"] == 50 - 9 - 1
    assert body["summary"]["home_pct"] == 100
    assert body["gameweeks"][0]["opponent"] == "CHE"
    assert body["gameweeks"][0]["is_home"] is True
    assert [f["gameweek"] for f in body["next_fixtures"]] == [2, 3]
    assert body["next_fixtures"][0]["opponent_name"] == "Chelsea FC"

    missing = await client.get("/players/nope/summary", headers=FAN)
    assert missing.status_code == 404


@pytest.mark.anyio
async def test_team_summary(client: AsyncClient):
    await _upload(client)

    anonymous = await client.get("/teams/summary")
    assert anonymous.status_code == 401

    resp = await client.get("/teams/summary", headers=ADMIN)
    assert resp.status_code == 200
    cards = {card["team"]: card for card in resp.json()}
    assert cards["ARS"]["total_points"] == 74
    assert cards["ARS"]["top_scorer"] == "Saka"
    assert cards["ARS"]["avg_points_per_player_per_game"] == 37
    assert cards["CHE"]["total_points"] == 0
    assert cards["CHE"]["top_scorer"] == "Palmer"


@pytest.mark.anyio
async def test_team_next_fixtures(client: AsyncClient):
    resp = await client.get("/teams/ars/next-fixtures", params={"after": 1, "limit": 1})
    assert resp.status_code == 200
    assert resp.json() == [
        {"gameweek": 2, "is_home": False, "opponent_code": "CHE", "opponent_name": "Chelsea FC"}
    ]
