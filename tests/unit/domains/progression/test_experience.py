"""Unit tests for experience awarded per experiment."""

from __future__ import annotations

import itertools

from alchemy.domains.progression.experience import xp_for
from conftest import make_consumable, make_experiment, make_result


def _items(n: int):
    return [make_consumable(f"item {i}") for i in range(n)]


class TestXpFor:
    def test_plain_safe_experiment(self):
        # base 10 + safety >= 90 (20)
        assert xp_for(make_experiment()) == 30

    def test_all_bonuses(self):
        exp = make_experiment(
            consumables=_items(5),
            results=[make_result(95, 95, 95)],
            success=True,
        )
        # 10 + 20 + 15 + 15 + 10 + 5 + 25
        assert xp_for(exp) == 100

    def test_mid_bands(self):
        exp = make_experiment(
            consumables=_items(3),
            results=[make_result(85, 85, 85)],
        )
        # 10 + 10 + 8 + 8 + 5 + 15
        assert xp_for(exp) == 56

    def test_low_safety_penalty(self):
        exp = make_experiment(
            consumables=_items(5),
            results=[make_result(40, 95, 95, overall=95)],
            success=True,
        )
        assert xp_for(exp) == 60

    def test_very_low_safety_penalty_is_net_35(self):
        exp = make_experiment(
            consumables=_items(5),
            results=[make_result(20, 95, 95, overall=95)],
            success=True,
        )
        assert xp_for(exp) == 45

    def test_uses_mean_across_results(self):
        exp = make_experiment(results=[make_result(100, 50, 0), make_result(70, 50, 0)])
        # mean safety 85 -> +10, mean overall 45 -> nothing
        assert xp_for(exp) == 20

    def test_overall_band_70(self):
        exp = make_experiment(results=[make_result(60, 60, 60, overall=70)])
        assert xp_for(exp) == 20

    def test_no_results_earns_count_and_success_only(self):
        exp = make_experiment(consumables=_items(3), results=[], success=True)
        assert xp_for(exp) == 20

    def test_floor_is_one(self):
        exp = make_experiment(results=[make_result(0, 0, 0)])
        assert xp_for(exp) == 1

    def test_never_below_one(self):
        scores = (0, 29, 30, 49, 50, 79, 80, 89, 90, 100)
        for safety, effectiveness, novelty in itertools.product(scores, repeat=3):
            for size in (0, 1, 3, 5):
                exp = make_experiment(
                    consumables=_items(size),
                    results=[make_result(safety, effectiveness, novelty)],
                )
                assert xp_for(exp) >= 1
