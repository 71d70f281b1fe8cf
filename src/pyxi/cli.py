"""Command-line interface for generating a lineup from a backup snapshot."""

from __future__ import annotations

import argparse
import json
from datetime import datetime
from pathlib import Path
from typing import Optional, Sequence

from pyxi.config_loader import GenerationProfile
from pyxi.ingest import Snapshot, load_snapshot
from pyxi.models import FormationStats
from pyxi.optimizer import Flexibility, Lineup, LineupFilters, generate_lineup
from pyxi.pool import export_lineup_to_csv, summarize_formation


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate a lineup for a formation from a JSON snapshot")
    parser.add_argument("snapshot", type=Path, help="Path to the backup JSON ({players, formations, idealBuilds})")
    parser.add_argument("--formation", required=True, help="Formation id or name")
    parser.add_argument("--sort-by", choices=("general", "average"), default=None, help="Ranking policy")
    parser.add_argument("--league", default=None, help="Only use cards from this league")
    parser.add_argument("--nationality", default=None, help="Only use players of this nationality")
    parser.add_argument("--tactic", default=None, help="Tactic for ideal builds (defaults to the formation's play style)")
    parser.add_argument(
        "--discard",
        nargs="*",
        default=None,
        help="Card IDs to leave out of the lineup",
    )
    parser.add_argument("--flex-fullbacks", action="store_true", help="Let LI and LD cover each other")
    parser.add_argument("--flex-wingers", action="store_true", help="Let EXI and EXD cover each other")
    parser.add_argument(
        "--as-of",
        type=datetime.fromisoformat,
        default=None,
        help="ISO timestamp used to expire live form ratings",
    )
    parser.add_argument("--load-profile", type=Path, help="Load generation options JSON", default=None)
    parser.add_argument("--save-profile", type=Path, help="Save generation options JSON", default=None)
    parser.add_argument("--output", type=Path, default=Path("lineup.csv"), help="Output CSV path")
    parser.add_argument(
        "--report",
        type=Path,
        default=None,
        help="Optional path to write the lineup and formation record as JSON",
    )
    return parser.parse_args(argv)


def _find_formation(snapshot: Snapshot, key: str) -> FormationStats:
    for formation in snapshot.formations:
        if formation.id == key:
            return formation
    for formation in snapshot.formations:
        if formation.name.lower() == key.lower():
            return formation
    raise SystemExit(f"Formation {key!r} not found in snapshot")


def _profile_from_args(args: argparse.Namespace) -> GenerationProfile:
    profile = GenerationProfile.load(args.load_profile) if args.load_profile else GenerationProfile()
    if args.sort_by:
        profile.sort_by = args.sort_by
    if args.league:
        profile.league = args.league
    if args.nationality:
        profile.nationality = args.nationality
    if args.tactic:
        profile.tactic_id = args.tactic
    if args.discard is not None:
        profile.discarded_card_ids = list(dict.fromkeys(profile.discarded_card_ids + args.discard))
    profile.fullback_flexibility = profile.fullback_flexibility or args.flex_fullbacks
    profile.winger_flexibility = profile.winger_flexibility or args.flex_wingers
    return profile


def _report_payload(lineup: Lineup, formation: FormationStats) -> dict:
    record = summarize_formation(formation)
    return {
        "formation": {"id": formation.id, "name": formation.name, "play_style": formation.play_style},
        "record": {
            "matches": record.total,
            "wins": record.wins,
            "draws": record.draws,
            "losses": record.losses,
            "effectiveness": round(record.effectiveness, 2),
        },
        "tactic": lineup.tactic,
        "sort_by": lineup.sort_by,
        "starters": [player.card_id for player in lineup.starters],
        "substitutes": [player.card_id for player in lineup.substitutes],
        "filled_starters": sum(1 for player in lineup.starters if not player.is_placeholder),
    }


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    snapshot = load_snapshot(args.snapshot)
    formation = _find_formation(snapshot, args.formation)
    profile = _profile_from_args(args)

    if args.save_profile:
        profile.save(args.save_profile)
        print(f"Saved generation profile to {args.save_profile}")

    lineup = generate_lineup(
        snapshot.players,
        formation,
        snapshot.ideal_builds,
        discarded_card_ids=profile.discarded_card_ids,
        filters=LineupFilters(league=profile.league, nationality=profile.nationality),
        sort_by=profile.sort_by,
        flexibility=Flexibility(fullbacks=profile.fullback_flexibility, wingers=profile.winger_flexibility),
        tactic_id=profile.tactic_id,
        as_of=args.as_of,
    )

    args.output.write_text(export_lineup_to_csv(lineup), encoding="utf-8")
    filled = sum(1 for player in lineup.starters if not player.is_placeholder)
    print(f"Filled {filled}/{len(lineup.slots)} starter slots for {formation.name}; wrote {args.output}")

    if args.report:
        args.report.write_text(json.dumps(_report_payload(lineup, formation), indent=2), encoding="utf-8")
        print(f"Wrote lineup report to {args.report}")


if __name__ == "__main__":
    main()
