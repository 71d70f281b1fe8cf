"""Lightweight REST client for the pyxi API."""

from __future__ import annotations

import argparse
import json
from pathlib import Path

import httpx


def load_json(path: Path) -> dict:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise SystemExit(f"Invalid JSON in {path}: {exc}") from exc


def main() -> None:
    parser = argparse.ArgumentParser(description="Interact with the pyxi REST API")
    parser.add_argument("base_url", help="Base URL of the API, e.g. http://localhost:8000")
    parser.add_argument("snapshot", type=Path, nargs="?", help="Backup JSON with players, formations and idealBuilds")
    parser.add_argument("--formation", help="Formation id to generate a lineup for")
    parser.add_argument("--sort-by", choices=("general", "average"), default="general")
    parser.add_argument("--discard", nargs="*", default=[], help="Card IDs to leave out")
    parser.add_argument("--stats", nargs="*", type=float, metavar="RATING", help="Compute rating stats and exit")
    parser.add_argument("--export-path", type=Path, help="Download the lineup CSV to this path")
    args = parser.parse_args()

    with httpx.Client(base_url=args.base_url) as client:
        if args.stats is not None:
            resp = client.post("/stats", json={"ratings": args.stats})
            resp.raise_for_status()
            print(json.dumps(resp.json(), indent=2))
            return

        if args.snapshot is None or args.formation is None:
            raise SystemExit("snapshot and --formation are required unless using --stats")

        snapshot = load_json(args.snapshot)
        formations = [item for item in snapshot.get("formations", []) if item.get("id") == args.formation]
        if not formations:
            raise SystemExit(f"formation {args.formation} not found in {args.snapshot}")

        request = {
            "players": snapshot.get("players", []),
            "formation": formations[0],
            "ideal_builds": snapshot.get("idealBuilds", []),
            "discarded_card_ids": args.discard,
            "sort_by": args.sort_by,
        }
        resp = client.post("/lineups", json=request)
        if resp.status_code == 400:
            raise SystemExit(f"lineup request rejected: {resp.json().get('detail')}")
        resp.raise_for_status()
        payload = resp.json()
        filled = sum(1 for slot in payload["slots"] if not slot["starter"]["is_placeholder"])
        print(f"Filled {filled}/{len(payload['slots'])} starter slots")
        print(json.dumps(payload, indent=2))

        if args.export_path:
            resp = client.post("/lineups/export.csv", json=request)
            resp.raise_for_status()
            args.export_path.write_text(resp.text)
            print(f"CSV export saved to {args.export_path}")


if __name__ == "__main__":
    main()
