from datetime import datetime

import pytest

from pyxi.config.positions import POSITIONS
from pyxi.models import Card, FormationSlot, FormationStats, IdealBuild, Player, PositionBuild
from pyxi.optimizer import Flexibility, LineupFilters, build_candidates, generate_lineup


OPEN_BUILDS = [IdealBuild(position=position, style="Ninguno") for position in POSITIONS]


def _player(player_id: str, ratings: dict[str, list[float]], style: str = "Ninguno", **kwargs) -> Player:
    live_form = kwargs.pop("live_form", None)
    nationality = kwargs.pop("nationality", "España")
    card = Card(id=f"{player_id}-card", name="Base", style=style, ratings_by_position=ratings, **kwargs)
    return Player(id=player_id, name=f"Player {player_id}", nationality=nationality, cards=[card], live_form=live_form)


def _formation(*slots) -> FormationStats:
    return FormationStats(
        id="f1",
        name="Test",
        play_style="Posesión",
        slots=[FormationSlot.model_validate(slot if isinstance(slot, dict) else {"position": slot}) for slot in slots],
    )


def _ids(players) -> list[str]:
    return [player.player_id for player in players]


def test_generate_lineup_fills_starters_then_substitutes():
    players = [_player("a", {"DC": [8.0, 8.0]}), _player("b", {"DC": [6.0, 6.0]}), _player("c", {"PT": [7.0]})]

    lineup = generate_lineup(players, _formation("DC", "PT"), OPEN_BUILDS)

    assert _ids(lineup.starters) == ["a", "c"]
    assert lineup.slots[0].substitute.player_id == "b"
    goalkeeper_sub = lineup.slots[1].substitute
    assert goalkeeper_sub.is_placeholder
    assert goalkeeper_sub.player_id == "placeholder-SUB-1"
    assert goalkeeper_sub.card_id == "placeholder-card-SUB-1"
    assert goalkeeper_sub.position == "PT"
    assert lineup.extra_substitute is None
    assert len(lineup.substitutes) == 2
    assert lineup.tactic == "Posesión"


def test_generation_is_idempotent():
    players = [_player(str(index), {"DC": [6.0 + index * 0.5]}) for index in range(5)]
    formation = _formation("DC", "DC")

    first = generate_lineup(players, formation, OPEN_BUILDS)
    second = generate_lineup(players, formation, OPEN_BUILDS)

    assert first == second


def test_discarded_cards_are_never_assigned():
    players = [_player("a", {"DC": [8.0, 8.0]}), _player("b", {"DC": [6.0, 6.0]})]
    formation = _formation("DC")

    lineup = generate_lineup(players, formation, OPEN_BUILDS, discarded_card_ids=["a-card"])

    assert "a-card" not in lineup.assigned_card_ids()
    assert lineup.starters[0].player_id == "b"


def test_affinity_just_below_threshold_leaves_placeholder():
    builds = [IdealBuild(position="DC", style="Ninguno", build={"finishing": 95, "speed": 85, "heading": 75})]
    player = _player("a", {"DC": [9.0]}, attribute_stats={"finishing": 50, "speed": 52, "heading": 74})

    candidates = build_candidates([player], builds)
    lineup = generate_lineup([player], _formation("DC"), builds)

    assert candidates[0].affinity == pytest.approx(79.9)
    assert lineup.starters[0].is_placeholder
    assert lineup.starters[0].player_id == "placeholder-S-0"
    assert lineup.assigned_card_ids() == []


def test_missing_ideal_build_makes_card_ineligible():
    lineup = generate_lineup([_player("a", {"DC": [9.0]})], _formation("DC"), [])

    assert lineup.starters[0].is_placeholder


def test_mirrored_fullback_flexibility():
    players = [_player("lb", {"LD": [8.0]})]
    formation = _formation("LI", "LD")

    rigid = generate_lineup(players, formation, OPEN_BUILDS)
    flexible = generate_lineup(players, formation, OPEN_BUILDS, flexibility=Flexibility(fullbacks=True))

    assert rigid.starters[0].is_placeholder
    assert rigid.starters[1].player_id == "lb"
    assert flexible.starters[0].player_id == "lb"
    assert flexible.starters[0].position == "LD"
    assert flexible.starters[1].is_placeholder
    assert flexible.assigned_card_ids() == ["lb-card"]


def test_a_player_is_used_once():
    cards = [
        Card(id="gold", name="Gold", ratings_by_position={"DC": [9.0]}),
        Card(id="base", name="Base", ratings_by_position={"DC": [8.0]}),
    ]
    player = Player(id="p1", name="Striker", cards=cards)

    lineup = generate_lineup([player], _formation("DC", "DC"), OPEN_BUILDS)

    assert lineup.assigned_card_ids() == ["gold"]
    assert lineup.starters[1].is_placeholder


def test_average_sort_requires_good_live_form():
    players = [_player("a", {"DC": [9.0]}), _player("b", {"DC": [6.0]}, live_form="B")]

    lineup = generate_lineup(players, _formation("DC"), OPEN_BUILDS, sort_by="average")

    assert lineup.starters[0].player_id == "b"
    assert lineup.slots[0].substitute.is_placeholder


def test_general_sort_skips_poor_live_form():
    players = [_player("a", {"DC": [9.0]}, live_form="D"), _player("b", {"DC": [6.0]}, live_form="C")]

    lineup = generate_lineup(players, _formation("DC"), OPEN_BUILDS)

    assert lineup.starters[0].player_id == "b"
    assert "a-card" not in lineup.assigned_card_ids()


def test_slot_styles_filter_candidates():
    players = [_player("poacher", {"DC": [6.0]}, style="Cazagoles"), _player("plain", {"DC": [9.0]})]

    styled = generate_lineup(players, _formation({"position": "DC", "styles": ["Cazagoles"]}), OPEN_BUILDS)
    unstyled = generate_lineup(players, _formation({"position": "DC", "styles": ["Ninguno"]}), OPEN_BUILDS)

    assert styled.starters[0].player_id == "poacher"
    assert styled.starters[0].style == "Cazagoles"
    assert unstyled.starters[0].player_id == "plain"


def test_slot_styles_relax_when_nobody_matches():
    players = [_player("plain", {"DC": [7.0]})]

    lineup = generate_lineup(players, _formation({"position": "DC", "styles": ["Cazagoles"]}), OPEN_BUILDS)

    assert lineup.starters[0].player_id == "plain"


def test_substitutes_prefer_players_with_few_matches():
    players = [
        _player("star", {"DC": [9.0] * 20}),
        _player("regular", {"DC": [8.5] * 12}),
        _player("rookie", {"DC": [6.0] * 3}),
    ]

    lineup = generate_lineup(players, _formation("DC"), OPEN_BUILDS)

    assert lineup.starters[0].player_id == "star"
    assert lineup.slots[0].substitute.player_id == "rookie"
    assert lineup.extra_substitute.player_id == "regular"
    assert _ids(lineup.substitutes) == ["rookie", "regular"]


def test_empty_pool_yields_placeholders_for_every_slot():
    formation = _formation("PT", "LI", "DFC", "DFC", "LD", "MCD", "MC", "MC", "EXI", "EXD", "DC")

    lineup = generate_lineup([], formation, OPEN_BUILDS)

    assert len(lineup.slots) == 11
    assert all(player.is_placeholder for player in lineup.starters + lineup.substitutes)
    assert lineup.starters[10].player_id == "placeholder-S-10"
    assert lineup.extra_substitute is None


def test_filters_limit_league_and_nationality():
    players = [
        _player("es", {"DC": [9.0]}, league="LaLiga"),
        _player("fr", {"DC": [6.0]}, league="Ligue 1", nationality="Francia"),
    ]
    formation = _formation("DC")

    by_league = generate_lineup(players, formation, OPEN_BUILDS, filters=LineupFilters(league="Ligue 1"))
    by_nation = generate_lineup(players, formation, OPEN_BUILDS, filters=LineupFilters(nationality="España"))

    assert by_league.assigned_card_ids() == ["fr-card"]
    assert by_nation.assigned_card_ids() == ["es-card"]


def test_unknown_sort_is_rejected():
    with pytest.raises(ValueError):
        generate_lineup([], _formation("DC"), OPEN_BUILDS, sort_by="salary")


def test_substitute_covers_the_position_the_starter_plays():
    players = [
        _player("ld1", {"LD": [8.0, 8.0, 8.0]}),
        _player("ld2", {"LD": [7.0]}),
        _player("li", {"LI": [9.0]}),
    ]

    lineup = generate_lineup(players, _formation("LI"), OPEN_BUILDS, flexibility=Flexibility(fullbacks=True))

    slot = lineup.slots[0]
    assert slot.starter.player_id == "ld1"
    assert slot.starter.position == "LD"
    assert slot.substitute.player_id == "ld2"
    assert slot.substitute.position == "LD"
    assert lineup.extra_substitute.player_id == "li"


def test_lineup_players_report_affinity_staleness():
    builds = {"DC": PositionBuild(cached_affinity=100.0, updated_at=datetime(2024, 3, 1, 10, 0))}
    players = [_player("a", {"DC": [8.0]}, builds_by_position=builds), _player("b", {"DC": [7.0]})]

    lineup = generate_lineup(players, _formation("DC"), OPEN_BUILDS, as_of=datetime(2024, 3, 9, 10, 0))

    assert lineup.starters[0].player_id == "a"
    assert lineup.starters[0].affinity_status == "stale"
    assert lineup.slots[0].substitute.affinity_status == "never"
