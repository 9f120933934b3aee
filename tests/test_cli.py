import json

from ffstats.cli import main
from ffstats.persistence import StatsStore, StoreError


def test_cli_loads_reference_data_and_gameweek(tmp_path, capsys):
    db = tmp_path / "cli.sqlite"
    teams = tmp_path / "teams.csv"
    teams.write_text("TeamAbbrev,TeamName,TeamFullName\nARS,Arsenal,Arsenal FC\n")
    fixtures = tmp_path / "fixtures.csv"
    fixtures.write_text("Gameweek,HomeAbbrev,AwayAbbrev\n1,ARS,CHE\n")
    gameweek = tmp_path / "gw1.csv"
    gameweek.write_text("ID,Player,Team,Position,GP,FPts,G,H/A\np1,Saka,ARS,M,1,9,1,H\n")

    assert main(["--db", str(db), "teams", str(teams)]) == 0
    assert main(["--db", str(db), "fixtures", str(fixtures), "--season", "2025-26"]) == 0
    capsys.readouterr()

    assert main(["--db", str(db), "upload", str(gameweek), "--season", "2025-26", "--gameweek", "1"]) == 0
    result = json.loads(capsys.readouterr().out)
    assert result == {"success": True, "rowsProcessed": 1, "errors": []}

    [player] = StatsStore(db).list_players()
    assert main(["--db", str(db), "player-summary", player.player_id, "--season", "2025-26"]) == 0
    summary = json.loads(capsys.readouterr().out)
    assert summary["player"] == "Saka"
    assert summary["season_total_pts"] == 9


def test_cli_reports_failures(tmp_path, capsys):
    db = tmp_path / "cli.sqlite"
    gameweek = tmp_path / "gw1.csv"
    gameweek.write_text("ID,Player,Team\n")

    assert main(["--db", str(db), "upload", str(gameweek), "--season", "2025-26", "--gameweek", "1"]) == 1
    assert json.loads(capsys.readouterr().out)["errors"] == ["No valid rows found in CSV"]

    assert main(["--db", str(db), "player-summary", "missing"]) == 1
    assert "not found" in capsys.readouterr().err


def test_cli_reports_unreadable_files(tmp_path, capsys):
    db = tmp_path / "cli.sqlite"
    missing = tmp_path / "nope.csv"

    for command in (["upload", str(missing), "--gameweek", "1"], ["fixtures", str(missing)], ["teams", str(missing)]):
        assert main(["--db", str(db), *command]) == 1
        assert "Unable to read" in capsys.readouterr().err


def test_cli_reports_store_errors_on_summary(tmp_path, capsys, monkeypatch):
    def broken(self, player_id):
        raise StoreError("database disk image is malformed")

    monkeypatch.setattr(StatsStore, "get_player", broken)

    assert main(["--db", str(tmp_path / "cli.sqlite"), "player-summary", "p1"]) == 1
    assert "database disk image is malformed" in capsys.readouterr().err
