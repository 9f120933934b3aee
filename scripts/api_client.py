"""Lightweight REST client for the ffstats API."""

from __future__ import annotations

import argparse
import json
from pathlib import Path

import httpx


def _content_type(path: Path) -> str:
    if path.suffix.lower() in {".xlsx", ".xlsm"}:
        return "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    return "text/csv"


def main() -> None:
    parser = argparse.ArgumentParser(description="Interact with the ffstats REST API")
    parser.add_argument("base_url", help="Base URL of the API, e.g. http://localhost:8000")
    parser.add_argument("--email", required=True, help="Caller identity sent as X-User-Email")
    parser.add_argument("--gameweek-file", type=Path, help="Weekly player/keeper export to upload")
    parser.add_argument("--type", dest="upload_type", default="player", choices=["player", "keeper"])
    parser.add_argument("--season", default="2025-26", help="Season key")
    parser.add_argument("--gameweek", type=int, help="Target gameweek for --gameweek-file")
    parser.add_argument("--fixtures-file", type=Path, help="Fixture workbook to upload")
    parser.add_argument("--teams-file", type=Path, help="Team map workbook to upload")
    parser.add_argument("--player-summary", metavar="PLAYER_ID", help="Fetch a player's season summary")
    parser.add_argument("--team-summary", action="store_true", help="Fetch team summary cards")
    args = parser.parse_args()

    headers = {"X-User-Email": args.email}
    with httpx.Client(base_url=args.base_url, headers=headers) as client:
        if args.teams_file:
            resp = client.post(
                "/admin/teams",
                files={"file": (args.teams_file.name, args.teams_file.read_bytes(), _content_type(args.teams_file))},
            )
            print("Teams:", json.dumps(resp.json(), indent=2))

        if args.fixtures_file:
            resp = client.post(
                "/admin/fixtures",
                files={
                    "file": (args.fixtures_file.name, args.fixtures_file.read_bytes(), _content_type(args.fixtures_file))
                },
                data={"season": args.season},
            )
            print("Fixtures:", json.dumps(resp.json(), indent=2))

        if args.gameweek_file:
            if args.gameweek is None:
                raise SystemExit("--gameweek is required with --gameweek-file")
            resp = client.post(
                "/admin/upload",
                files={
                    "file": (args.gameweek_file.name, args.gameweek_file.read_bytes(), _content_type(args.gameweek_file))
                },
                data={"type": args.upload_type, "season": args.season, "gameweek": str(args.gameweek)},
            )
            payload = resp.json()
            print(f"Upload: success={payload['success']} rows={payload['rowsProcessed']}")
            for error in payload["errors"]:
                print(f"  - {error}")

        if args.player_summary:
            resp = client.get(f"/players/{args.player_summary}/summary", params={"season": args.season})
            if resp.status_code == 404:
                raise SystemExit(f"player {args.player_summary} not found")
            resp.raise_for_status()
            print(json.dumps(resp.json(), indent=2))

        if args.team_summary:
            resp = client.get("/teams/summary", params={"season": args.season})
            resp.raise_for_status()
            print(json.dumps(resp.json(), indent=2))


if __name__ == "__main__":
    main()
