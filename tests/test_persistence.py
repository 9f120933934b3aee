import sqlite3

import pytest

from ffstats.models import Fixture, GameweekPayload, PlayerUpsert, Team
from ffstats.persistence import StatsStore, StoreError


def _player(external_id: str, **overrides) -> PlayerUpsert:
    values = dict(external_id=external_id, name=f"Player {external_id}", team="ARS", position="M")
    values.update(overrides)
    return PlayerUpsert(**values)


def test_upsert_players_keeps_internal_ids_stable(tmp_path):
    store = StatsStore(tmp_path / "stats.sqlite")

    first = store.upsert_players([_player("a"), _player("b")])
    ids = {ref.external_id: ref.internal_id for ref in first}
    second = store.upsert_players([_player("a", team="CHE", ownership_pct="45%", is_keeper=True)])

    assert set(ids) == {"a", "b"}
    assert second[0].internal_id == ids["a"]
    stored = store.get_player(ids["a"])
    assert stored is not None
    assert stored.team == "CHE"
    assert stored.ownership_pct == "45%"
    assert stored.is_keeper is True
    assert [p.external_id for p in store.list_players(team="ARS")] == ["b"]
    assert store.get_player("missing") is None


def test_upsert_players_resolves_large_batches(tmp_path):
    store = StatsStore(tmp_path / "stats.sqlite")
    refs = store.upsert_players([_player(f"p{index}") for index in range(1200)])
    assert len(refs) == 1200
    assert len({ref.internal_id for ref in refs}) == 1200


def test_gameweek_upsert_is_keyed_on_player_season_gameweek(tmp_path):
    store = StatsStore(tmp_path / "stats.sqlite")
    [ref] = store.upsert_players([_player("a")])

    store.upsert_gameweeks(
        [
            GameweekPayload(player_id=ref.internal_id, season="2025-26", gameweek=1, raw_fantrax_pts=5, games_played=1),
            GameweekPayload(player_id=ref.internal_id, season="2025-26", gameweek=2, raw_fantrax_pts=0),
        ]
    )
    store.upsert_gameweeks(
        [GameweekPayload(player_id=ref.internal_id, season="2025-26", gameweek=1, raw_fantrax_pts=9, games_played=1, ghost_pts=2)]
    )

    rows = store.list_player_gameweeks("2025-26", player_id=ref.internal_id)
    assert [(row.gameweek, row.raw_fantrax_pts) for row in rows] == [(1, 9), (2, 0)]
    assert rows[0].ghost_pts == 2
    assert len(store.list_player_gameweeks("2025-26", played_only=True)) == 1
    assert store.list_player_gameweeks("2024-25") == []


def test_fixture_and_team_upserts(tmp_path):
    store = StatsStore(tmp_path / "stats.sqlite")
    store.upsert_fixtures([Fixture(season="2025-26", gameweek=1, home_team="ARS", away_team="CHE")])
    store.upsert_fixtures([Fixture(season="2025-26", gameweek=1, home_team="ARS", away_team="LIV")])
    store.upsert_teams([Team(abbrev="ARS", short_name="Arsenal", full_name="Arsenal")])
    store.upsert_teams([Team(abbrev="ARS", short_name="Arsenal", full_name="Arsenal FC")])

    assert store.load_fixtures("2025-26") == [
        Fixture(season="2025-26", gameweek=1, home_team="ARS", away_team="LIV")
    ]
    assert store.list_teams() == [Team(abbrev="ARS", short_name="Arsenal", full_name="Arsenal FC")]
    assert store.upsert_fixtures([]) == 0
    assert store.upsert_players([]) == []


def test_database_errors_surface_as_store_error(tmp_path):
    store = StatsStore(tmp_path / "stats.sqlite")
    with sqlite3.connect(store.db_path) as conn:
        conn.execute("DROP TABLE fixtures")
    conn.close()

    with pytest.raises(StoreError):
        store.load_fixtures("2025-26")
