"""CSV export for generated lineups."""

from __future__ import annotations

import csv
from io import StringIO
from typing import Iterable, List, Tuple

from pyxi.optimizer.service import Lineup, LineupPlayer


class LineupExportError(RuntimeError):
    """Raised when a lineup cannot be written out."""


HEADERS: Tuple[str, ...] = (
    "Role",
    "Slot",
    "Position",
    "PlayerId",
    "Player",
    "CardId",
    "Card",
    "Style",
    "Affinity",
    "Average",
    "Matches",
    "GeneralScore",
)


def _row(role: str, slot: str, player: LineupPlayer) -> List[str]:
    if player.is_placeholder:
        return [role, slot, player.position, player.player_id, "", player.card_id, "", "", "", "", "", ""]
    return [
        role,
        slot,
        player.position,
        player.player_id,
        player.player_name,
        player.card_id,
        player.card_name,
        player.style,
        f"{player.affinity:.2f}",
        f"{player.average:.2f}",
        str(player.matches),
        f"{player.general_score:.2f}",
    ]


def _rows(lineup: Lineup) -> Iterable[List[str]]:
    for slot in lineup.slots:
        yield _row("starter", str(slot.index + 1), slot.starter)
    for slot in lineup.slots:
        yield _row("substitute", str(slot.index + 1), slot.substitute)
    if lineup.extra_substitute is not None:
        yield _row("extra", str(len(lineup.slots) + 1), lineup.extra_substitute)


def export_lineup_to_csv(lineup: Lineup) -> str:
    """Starters, then substitutes, then the extra substitute, one row each."""

    if not lineup.slots:
        raise LineupExportError(f"Lineup for formation {lineup.formation_id} has no slots")
    buffer = StringIO()
    writer = csv.writer(buffer)
    writer.writerow(HEADERS)
    for row in _rows(lineup):
        writer.writerow(row)
    return buffer.getvalue()


__all__ = [
    "HEADERS",
    "LineupExportError",
    "export_lineup_to_csv",
]
