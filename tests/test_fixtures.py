from ffstats.ingest import resolve_opponent
from ffstats.models import Fixture


FIXTURES = [
    Fixture(season="2025-26", gameweek=3, home_team="ARS", away_team="CHE"),
    Fixture(season="2025-26", gameweek=3, home_team="LIV", away_team="MUN"),
    Fixture(season="2025-26", gameweek=4, home_team="CHE", away_team="ARS"),
]


def test_home_hint_matches_home_side_only():
    resolution = resolve_opponent(FIXTURES, "ARS", 3, "H")
    assert resolution.opponent == "CHE"
    assert resolution.is_home is True

    assert resolve_opponent(FIXTURES, "CHE", 3, "H") == (None, None)


def test_away_hint_matches_away_side_only():
    resolution = resolve_opponent(FIXTURES, "CHE", 3, "A")
    assert resolution == ("ARS", False)

    assert resolve_opponent(FIXTURES, "ARS", 3, "A") == (None, None)


def test_blank_hint_matches_either_side():
    assert resolve_opponent(FIXTURES, "ARS", 3, "") == ("CHE", True)
    assert resolve_opponent(FIXTURES, "CHE", 3, None) == ("ARS", False)
    assert resolve_opponent(FIXTURES, "MUN", 3, "?") == ("LIV", False)


def test_resolution_is_symmetric():
    home = resolve_opponent(FIXTURES, "LIV", 3, "H")
    away = resolve_opponent(FIXTURES, "MUN", 3)
    assert home == ("MUN", True)
    assert away == ("LIV", False)


def test_team_and_hint_comparison_is_case_insensitive():
    assert resolve_opponent(FIXTURES, " ars ", 4, "a") == ("CHE", False)


def test_gameweek_must_match():
    assert resolve_opponent(FIXTURES, "LIV", 4, "") == (None, None)
    assert resolve_opponent([], "ARS", 3, "H") == (None, None)
