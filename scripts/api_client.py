"""Lightweight REST client for the artist helper API."""

from __future__ import annotations

import argparse
import json
from pathlib import Path

import httpx


def build_artist(payload: str) -> dict:
    try:
        return json.loads(payload)
    except json.JSONDecodeError as exc:
        raise SystemExit(f"Invalid artist JSON: {exc}") from exc


def main() -> None:
    parser = argparse.ArgumentParser(description="Interact with the artist helper REST API")
    parser.add_argument("base_url", help="Base URL of the API, e.g. http://localhost:8000")
    parser.add_argument("--search", default="", help="Search text for listing")
    parser.add_argument("--genre", default="", help="Genre filter for listing")
    parser.add_argument("--grade", default="", help="Grade filter for listing")
    parser.add_argument("--options", action="store_true", help="Print filter options and exit")
    parser.add_argument("--add", metavar="JSON", help="Send an ADD_ARTIST message with this artist payload")
    parser.add_argument("--export-path", type=Path, help="Download the artist list JSON to this path")
    args = parser.parse_args()

    with httpx.Client(base_url=args.base_url) as client:
        if args.options:
            resp = client.get("/options")
            resp.raise_for_status()
            print(json.dumps(resp.json(), indent=2))
            return

        if args.add:
            resp = client.post("/messages", json={"type": "ADD_ARTIST", "artist": build_artist(args.add)})
            if resp.status_code == 422:
                raise SystemExit(f"artist rejected: {resp.json().get('detail')}")
            resp.raise_for_status()
            print(json.dumps(resp.json(), indent=2))
            return

        if args.export_path:
            resp = client.get("/export.json")
            resp.raise_for_status()
            args.export_path.write_text(resp.text, encoding="utf-8")
            print(f"Artist export saved to {args.export_path}")
            return

        params = {key: value for key, value in {"search": args.search, "genre": args.genre, "grade": args.grade}.items() if value}
        resp = client.get("/artists", params=params)
        resp.raise_for_status()
        payload = resp.json()
        print(f"{payload['matched']} of {payload['total']} artists")
        for artist in payload["artists"]:
            print(f"{artist['id']:>4} {artist['name']:<12} {artist['genre']:<11} {artist['grade']} ({artist['score']})")


if __name__ == "__main__":
    main()
