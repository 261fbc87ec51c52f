"""Integration tests: evaluate mixes and feed them through progression."""

from __future__ import annotations

from datetime import timedelta

import pytest

from alchemy.core.app.factory import AlchemyCore, create_app
from alchemy.core.config.settings import Settings
from alchemy.domains.safety.models import ConsumableCategory, SafetyLevel
from conftest import NOW, make_consumable, make_profile


@pytest.fixture
def core() -> AlchemyCore:
    return create_app(settings=Settings(_env_file=None))


def _fruit():
    return [make_consumable("apple"), make_consumable("banana")]


def test_three_day_run(core: AlchemyCore):
    """Three experiments on consecutive days build a streak and accumulate XP."""
    profile = make_profile()
    history = []
    total_xp = 0

    for days_ago in (2, 1, 0):
        result, progression = core.run_experiment(
            profile, _fruit(), history, now=NOW - timedelta(days=days_ago)
        )
        assert 0 <= result.overall_score <= 100
        total_xp += progression.xp_gained
        history.append(progression.events[0].data["experiment"])
        profile = progression.profile

    assert profile.stats.experiments == 3
    assert profile.stats.experience == total_xp
    assert profile.stats.streak == 3
    assert profile.stats.total_play_time == 3 * 180_000
    assert profile.stats.favorite_categories == ["food"]
    assert [a.id for a in profile.stats.achievements] == ["first_experiment"]
    assert profile.last_active == NOW


def test_recorded_experiment_matches_evaluation(core: AlchemyCore):
    result, progression = core.run_experiment(make_profile(), _fruit(), [], now=NOW)
    experiment = progression.events[0].data["experiment"]

    assert experiment.results == [result]
    assert experiment.combination == "apple + banana"
    assert experiment.timestamp == NOW
    assert experiment.success == (result.overall_score > 50)


def test_dangerous_mix(core: AlchemyCore):
    beer = make_consumable("beer", ConsumableCategory.ALCOHOL)
    aspirin = make_consumable("aspirin", ConsumableCategory.MEDICATION)

    result, progression = core.run_experiment(make_profile(), [beer, aspirin], [], now=NOW)

    assert result.safety_score < 60
    assert result.interactions
    assert result.warnings[0].startswith("⚠️ MEDICAL DISCLAIMER")
    assert result.safety_level.rank > SafetyLevel.CAUTION.rank
    # low safety earns less than a safe mix of the same size
    _, safe = core.run_experiment(make_profile(), _fruit(), [], now=NOW)
    assert progression.xp_gained < safe.xp_gained


def test_raw_dict_input(core: AlchemyCore):
    result, progression = core.run_experiment(
        make_profile(),
        [
            {"id": "1", "name": "Green Tea", "category": "beverage"},
            {"id": "2", "name": "Honey", "category": "food",
             "nutritionalInfo": {"calories": 64, "sugar": 17}},
        ],
        [],
        now=NOW,
    )
    assert [c.name for c in result.combination.consumables] == ["Green Tea", "Honey"]
    assert progression.profile.stats.favorite_categories == ["beverage", "food"]


def test_level_up_through_app(core: AlchemyCore):
    _, progression = core.run_experiment(make_profile(experience=99), _fruit(), [], now=NOW)
    assert progression.leveled_up
    assert progression.profile.stats.level == 2
    assert "level_up" in [e.type for e in progression.events]
