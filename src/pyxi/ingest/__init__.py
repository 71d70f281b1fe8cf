"""Input adapters for backup documents."""

from .snapshot import (
    Snapshot,
    SnapshotError,
    export_snapshot,
    load_snapshot,
    merge_duplicate_players,
    parse_snapshot,
)

__all__ = [
    "Snapshot",
    "SnapshotError",
    "export_snapshot",
    "load_snapshot",
    "merge_duplicate_players",
    "parse_snapshot",
]
