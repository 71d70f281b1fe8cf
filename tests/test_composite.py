from datetime import datetime, timedelta

import pytest

from pyxi.models import Card, Player, PositionBuild
from pyxi.scoring import (
    PerformanceFlags,
    affinity_staleness,
    compute_general_score,
    compute_performance,
    effective_live_form,
)


def _card(ratings: dict[str, list[float]], **kwargs) -> Card:
    return Card(id="c1", name="Base", ratings_by_position=ratings, **kwargs)


def test_general_score_blends_average_and_affinity():
    assert compute_general_score(90.0, 8.0, 0) == pytest.approx(90.0)
    assert compute_general_score(90.0, 8.0, 50) == pytest.approx(110.0)
    assert compute_general_score(50.0, 7.0, 100) == pytest.approx(120.0)
    assert compute_general_score(150.0, 7.0, 140) == pytest.approx(120.0)


def test_general_score_adds_badges_and_live_form():
    flags = PerformanceFlags(hot_streak=True, consistent=True, versatile=True, promising=True,
                             game_changer=True, stalwart=True, specialist=True)

    assert flags.bonus == 14
    assert compute_general_score(90.0, 0.0, 0, flags, "A") == pytest.approx(112.0)
    assert compute_general_score(90.0, 0.0, 0, live_form="e") == pytest.approx(80.0)


def test_general_score_never_negative():
    assert compute_general_score(5.0, 0.0, 0, live_form="E") == 0.0


def test_trump_card_skill_only_counts_for_substitutes():
    skills = ["Revulsivo"]

    assert compute_general_score(90.0, 0.0, 0, skills=skills) == pytest.approx(90.0)
    assert compute_general_score(90.0, 0.0, 0, skills=skills, is_substitute=True) == pytest.approx(91.0)


def test_hot_streak_and_promising():
    streak = compute_performance(_card({"DC": [6.0, 6.0, 6.0, 9.0, 9.0, 9.0]}), "DC")
    newcomer = compute_performance(_card({"DC": [8.0, 7.5, 9.0]}), "DC")

    assert streak.flags.hot_streak
    assert not streak.flags.consistent
    assert newcomer.flags.promising
    assert not newcomer.flags.hot_streak
    assert newcomer.stats.matches == 3


def test_consistent_game_changer_and_stalwart():
    steady = compute_performance(_card({"DC": [7.0, 7.0, 7.0, 7.0, 7.2]}), "DC")
    decisive = compute_performance(_card({"DC": [9.0, 9.0, 9.0, 6.0, 6.0]}), "DC")
    veteran = compute_performance(_card({"DC": [7.0] * 30}), "DC")

    assert steady.flags.consistent
    assert decisive.flags.game_changer
    assert veteran.flags.stalwart
    assert veteran.flags.consistent
    assert not veteran.flags.promising


def test_versatile_and_specialist():
    versatile = _card({"DC": [8.0], "SD": [7.5], "EXI": [7.0], "MO": [6.0]})
    specialist = _card({"DC": [9.0, 9.0], "SD": [7.0]})

    assert compute_performance(versatile, "MO").flags.versatile
    assert compute_performance(specialist, "DC").flags.specialist
    assert not compute_performance(specialist, "SD").flags.specialist
    assert not compute_performance(_card({"DC": [9.5]}), "DC").flags.specialist


def test_unrated_position_has_no_badges():
    performance = compute_performance(_card({"DC": [8.0]}), "PT")

    assert performance.stats.matches == 0
    assert performance.flags.bonus == 0


def test_live_form_expires_after_ttl(monkeypatch):
    monkeypatch.delenv("PYXI_LIVE_FORM_TTL_DAYS", raising=False)
    now = datetime(2024, 5, 20, 12, 0)
    stale = Player(id="p1", name="Striker", live_form="A", live_form_updated_at=now - timedelta(days=10))
    fresh = stale.model_copy(update={"live_form_updated_at": now - timedelta(days=3)})
    permanent = stale.model_copy(update={"live_form_permanent": True})

    assert effective_live_form(stale, now) is None
    assert effective_live_form(stale) == "A"
    assert effective_live_form(fresh, now) == "A"
    assert effective_live_form(permanent, now) == "A"

    monkeypatch.setenv("PYXI_LIVE_FORM_TTL_DAYS", "30")
    assert effective_live_form(stale, now) == "A"


def test_unknown_live_form_is_rejected():
    with pytest.raises(ValueError):
        compute_general_score(90.0, 7.0, 10, live_form="Z")


def test_affinity_staleness_counts_calendar_days():
    build = PositionBuild(updated_at=datetime(2024, 6, 1, 23, 0))

    assert affinity_staleness(None) == "never"
    assert affinity_staleness(PositionBuild(), datetime(2024, 6, 1)) == "never"
    assert affinity_staleness(build, datetime(2024, 6, 7, 23, 59)) == "fresh"
    assert affinity_staleness(build, datetime(2024, 6, 8, 0, 30)) == "stale"
    assert affinity_staleness(build, datetime(2024, 6, 14, 12, 0)) == "stale"
    assert affinity_staleness(build, datetime(2024, 6, 15, 0, 0)) == "outdated"
