"""Roster lifecycle operations over player and card records."""

from .operations import (
    RatingEntry,
    RecordNotFoundError,
    add_rating,
    delete_position_ratings,
    delete_rating,
    edit_card,
    edit_player,
    merge_ideal_build,
    normalize_text,
    recalculate_affinities,
    save_attribute_stats,
    save_build,
    set_live_form,
    suggest_all_builds,
)

__all__ = [
    "RatingEntry",
    "RecordNotFoundError",
    "add_rating",
    "delete_position_ratings",
    "delete_rating",
    "edit_card",
    "edit_player",
    "merge_ideal_build",
    "normalize_text",
    "recalculate_affinities",
    "save_attribute_stats",
    "save_build",
    "set_live_form",
    "suggest_all_builds",
]
