import pytest

from pyxi.config import UnknownPositionError, UnknownStyleError
from pyxi.models import IdealBuild
from pyxi.scoring import resolve_ideal_build
from pyxi.scoring.resolver import height_profile


def _builds() -> list[IdealBuild]:
    return [
        IdealBuild(id="dc-none", position="DC", style="Ninguno", build={"finishing": 80}),
        IdealBuild(id="dc-alto", position="DC", style="Cazagoles", profile="alto", build={"heading": 85}),
        IdealBuild(id="dc-bajo", position="DC", style="Cazagoles", profile="bajo", build={"speed": 85}),
        IdealBuild(id="dc-segundo", position="DC", style="Segundo delantero", build={"low_pass": 80}),
        IdealBuild(id="lat-ofensivo", position="LAT", style="Lateral ofensivo", build={"speed": 85}),
        IdealBuild(id="dc-posesion", tactic="Posesión", position="DC", style="Ninguno", build={"low_pass": 85}),
    ]


def test_exact_style_and_position_wins():
    resolved = resolve_ideal_build("Segundo delantero", "DC", _builds())

    assert resolved.build.id == "dc-segundo"
    assert resolved.resolved_style == "Segundo delantero"


def test_legacy_style_name_resolves_through_alias():
    resolved = resolve_ideal_build("Señuelo", "DC", _builds())

    assert resolved.build.id == "dc-segundo"


def test_archetype_build_covers_both_sides():
    assert resolve_ideal_build("Lateral ofensivo", "LI", _builds()).build.id == "lat-ofensivo"
    assert resolve_ideal_build("Lateral ofensivo", "LD", _builds()).build.id == "lat-ofensivo"


def test_inactive_style_falls_back_to_position_default():
    resolved = resolve_ideal_build("Portero defensivo", "DC", _builds())

    assert resolved.build.id == "dc-none"
    assert resolved.resolved_style == "Ninguno"


def test_goal_poacher_profile_follows_height():
    assert height_profile("Cazagoles", 187) == "alto"
    assert height_profile("Cazagoles", 180) == "bajo"
    assert height_profile("Hombre objetivo", 195) is None

    assert resolve_ideal_build("Cazagoles", "DC", _builds(), height=190).build.id == "dc-alto"
    assert resolve_ideal_build("Cazagoles", "DC", _builds(), height=175).profile == "bajo"


def test_tactic_builds_take_priority_then_fall_back_to_general():
    assert resolve_ideal_build("Ninguno", "DC", _builds(), tactic="Posesión").build.id == "dc-posesion"
    assert resolve_ideal_build("Cazagoles", "DC", _builds(), tactic="Posesión", height=190).build.id == "dc-posesion"
    assert resolve_ideal_build("Lateral ofensivo", "LI", _builds(), tactic="Posesión").build.id == "lat-ofensivo"


def test_last_resort_lookup_is_order_independent():
    builds = [
        IdealBuild(id="objetivo", position="DC", style="Hombre objetivo"),
        IdealBuild(id="bajo", position="DC", style="Cazagoles", profile="bajo"),
        IdealBuild(id="alto", position="DC", style="Cazagoles", profile="alto"),
    ]

    first = resolve_ideal_build("Extremo móvil", "DC", builds)
    second = resolve_ideal_build("Extremo móvil", "DC", list(reversed(builds)))

    assert first.build.id == second.build.id == "alto"


def test_missing_builds_resolve_to_none():
    resolved = resolve_ideal_build("Cazagoles", "PT", _builds())

    assert resolved.build is None
    assert resolved.resolved_style is None


def test_unknown_inputs_raise():
    with pytest.raises(UnknownPositionError):
        resolve_ideal_build("Ninguno", "XX", _builds())
    with pytest.raises(UnknownStyleError):
        resolve_ideal_build("Falso nueve", "DC", _builds())


def test_height_split_style_falls_back_to_unprofiled_build():
    builds = [
        IdealBuild(id="dc-none", position="DC", style="Ninguno"),
        IdealBuild(id="dc-cazagoles", position="DC", style="Cazagoles"),
    ]

    assert resolve_ideal_build("Cazagoles", "DC", builds, height=192).build.id == "dc-cazagoles"
    assert resolve_ideal_build("Cazagoles", "DC", builds, height=172).build.id == "dc-cazagoles"
    assert resolve_ideal_build("Cazagoles", "DC", builds).build.id == "dc-cazagoles"
