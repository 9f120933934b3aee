"""Command-line interface for loading exports into a local store."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict, replace
from pathlib import Path

from ffstats.config import Settings
from ffstats.ingest import ingest_fixture_file, ingest_gameweek_file, ingest_team_file
from ffstats.models import IngestResult, UploadType
from ffstats.persistence import StatsStore, StoreError
from ffstats.summary import decorate_gameweeks, summarize_player_season


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Ingest fantasy exports and inspect season summaries")
    parser.add_argument("--db", type=Path, default=None, help="SQLite database path (overrides FFSTATS_DB_PATH)")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    commands = parser.add_subparsers(dest="command", required=True)

    upload = commands.add_parser("upload", help="Ingest a weekly player or keeper export")
    upload.add_argument("path", type=Path, help="CSV or XLSX export")
    upload.add_argument(
        "--type",
        dest="upload_type",
        choices=[kind.value for kind in UploadType],
        default=UploadType.PLAYER.value,
        help="Export format",
    )
    upload.add_argument("--season", default=None, help="Season key, e.g. 2025-26")
    upload.add_argument("--gameweek", required=True, help="Target gameweek (1-38)")

    fixtures = commands.add_parser("fixtures", help="Load the season fixture list")
    fixtures.add_argument("path", type=Path, help="Fixture workbook or CSV")
    fixtures.add_argument("--season", default=None, help="Season key, e.g. 2025-26")

    teams = commands.add_parser("teams", help="Load the team map")
    teams.add_argument("path", type=Path, help="Team workbook or CSV")

    summary = commands.add_parser("player-summary", help="Print a player's season summary")
    summary.add_argument("player_id", help="Internal player id")
    summary.add_argument("--season", default=None, help="Season key, e.g. 2025-26")

    serve = commands.add_parser("serve", help="Run the REST API")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)

    return parser.parse_args(argv)


def _print_result(result: IngestResult) -> int:
    print(json.dumps(result.model_dump(by_alias=True), indent=2))
    return 0 if result.success else 1


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    settings = Settings.from_env()
    if args.db is not None:
        settings = replace(settings, db_path=args.db)

    if args.command == "serve":
        import uvicorn

        from ffstats.api import create_app

        uvicorn.run(create_app(settings), host=args.host, port=args.port)
        return 0

    try:
        store = StatsStore(settings.db_path)
    except StoreError as exc:
        print(f"Unable to open store: {exc}", file=sys.stderr)
        return 1
    season = getattr(args, "season", None) or settings.season

    if args.command in ("upload", "fixtures", "teams"):
        try:
            content = args.path.read_bytes()
        except OSError as exc:
            print(f"Unable to read {args.path}: {exc}", file=sys.stderr)
            return 1

    if args.command == "upload":
        result = ingest_gameweek_file(
            content,
            filename=args.path.name,
            upload_type=args.upload_type,
            season=season,
            gameweek=args.gameweek,
            store=store,
        )
        return _print_result(result)

    if args.command == "fixtures":
        return _print_result(ingest_fixture_file(content, filename=args.path.name, season=season, store=store))

    if args.command == "teams":
        return _print_result(ingest_team_file(content, filename=args.path.name, store=store))

    try:
        player = store.get_player(args.player_id)
        if player is None:
            print(f"Player {args.player_id} not found", file=sys.stderr)
            return 1
        rows = store.list_player_gameweeks(season, player_id=player.player_id)
        fixtures = store.load_fixtures(season)
    except StoreError as exc:
        print(f"Unable to read store: {exc}", file=sys.stderr)
        return 1
    decorated = decorate_gameweeks(rows, player.team, fixtures)
    payload = {"player": player.name, "team": player.team, "season": season}
    payload.update(asdict(summarize_player_season(decorated)))
    print(json.dumps(payload, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
