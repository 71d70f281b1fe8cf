"""Roster views and lineup output (tables, summaries, export)."""

from .export import LineupExportError, export_lineup_to_csv
from .filtering import FlatPlayer, TableCriteria, flatten_position, position_table
from .summary import FormationRecord, match_outcome, nationality_distribution, summarize_formation

__all__ = [
    "FlatPlayer",
    "FormationRecord",
    "LineupExportError",
    "TableCriteria",
    "export_lineup_to_csv",
    "flatten_position",
    "match_outcome",
    "nationality_distribution",
    "position_table",
    "summarize_formation",
]
