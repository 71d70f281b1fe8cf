import pytest

from pyxi.config import (
    POSITIONS,
    UnknownPositionError,
    UnknownStatError,
    UnknownStyleError,
    active_styles,
    archetype_for,
    categories_for,
    iter_rules,
    normalize_stat_keys,
    normalize_style,
)
from pyxi.config.positions import is_style_active, style_for_position


def test_every_position_has_rules():
    assert [rules.position for rules in iter_rules()] == list(POSITIONS)
    with pytest.raises(UnknownPositionError):
        archetype_for("CB")


def test_archetypes_group_mirrored_positions():
    assert archetype_for("LI") == archetype_for("LD") == "LAT"
    assert archetype_for("MDI") == "INT"
    assert archetype_for("EXD") == "EXT"
    assert archetype_for("DC") is None


def test_style_aliases():
    assert normalize_style("Señuelo") == "Segundo delantero"
    assert normalize_style("Cazagoles") == "Cazagoles"
    with pytest.raises(UnknownStyleError):
        normalize_style("Falso nueve")


def test_active_styles_per_position():
    assert active_styles("PT") == ("Portero defensivo", "Portero ofensivo")
    assert "Segundo delantero" in active_styles("SD")
    assert active_styles("LAT") == active_styles("LI")
    assert is_style_active("Señuelo", "DC")
    assert not is_style_active("Cazagoles", "MC")


def test_inactive_styles_are_stored_as_none():
    assert style_for_position("Cazagoles", "DC") == "Cazagoles"
    assert style_for_position("Cazagoles", "PT") == "Ninguno"


def test_categories_and_stat_keys():
    assert categories_for(True) == ("gk1", "gk2", "gk3", "defending")
    assert "aerial_strength" in categories_for(False)
    assert normalize_stat_keys({"gkReflexes": 81.6, "speed": None}) == {"gk_reflexes": 82}
    with pytest.raises(UnknownStatError):
        normalize_stat_keys({"height": 180})
