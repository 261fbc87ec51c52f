"""Unit tests for the level table."""

from __future__ import annotations

import pytest

from alchemy.domains.progression.levels import DEFAULT_XP_THRESHOLDS, LevelTable


class TestLevelFor:
    @pytest.mark.parametrize(
        "xp,level",
        [(-5, 1), (0, 1), (99, 1), (100, 2), (249, 2), (250, 3), (10449, 19), (10450, 20), (99999, 20)],
    )
    def test_thresholds(self, level_table: LevelTable, xp, level):
        assert level_table.level_for(xp) == level

    def test_monotonic(self, level_table: LevelTable):
        levels = [level_table.level_for(xp) for xp in range(0, 12000, 7)]
        assert levels == sorted(levels)

    def test_max_level(self, level_table: LevelTable):
        assert level_table.max_level == len(DEFAULT_XP_THRESHOLDS) == 20


class TestProgressToNext:
    def test_halfway_through_level_1(self, level_table: LevelTable):
        progress = level_table.progress_to_next(50, 1)
        assert progress.current_level_xp == 0
        assert progress.next_level_xp == 100
        assert progress.progress == 50
        assert progress.xp_needed == 50

    def test_halfway_through_level_2(self, level_table: LevelTable):
        progress = level_table.progress_to_next(175, 2)
        assert progress.progress == 50
        assert progress.xp_needed == 75

    def test_max_level_is_complete(self, level_table: LevelTable):
        for xp in (10450, 12000, 500000):
            progress = level_table.progress_to_next(xp, 20)
            assert progress.progress == 100
            assert progress.xp_needed == 0
            assert progress.next_level_xp == progress.current_level_xp == 10450

    def test_progress_is_clamped(self, level_table: LevelTable):
        assert level_table.progress_to_next(500, 1).progress == 100
        assert level_table.progress_to_next(500, 1).xp_needed == 0
        assert level_table.progress_to_next(0, 3).progress == 0

    def test_xp_for_next_level(self, level_table: LevelTable):
        assert level_table.xp_for_next_level(1) == 100
        assert level_table.xp_for_next_level(19) == 10450
        assert level_table.xp_for_next_level(20) == 0


class TestCustomTable:
    def test_short_table(self):
        table = LevelTable([0, 10, 30])
        assert table.level_for(35) == 3
        assert table.progress_to_next(20, 2).progress == 50

    @pytest.mark.parametrize("thresholds", [[], [5, 10], [0, 10, 10], [0, 20, 10]])
    def test_rejects_bad_thresholds(self, thresholds):
        with pytest.raises(ValueError):
            LevelTable(thresholds)


class TestLevelRewards:
    def test_milestone_levels(self):
        assert LevelTable.rewards_for(1).title == "Novice Alchemist"
        assert LevelTable.rewards_for(5).bonus_xp == 50
        assert LevelTable.rewards_for(20).unlocks == ["Synthesis", "All techniques"]

    def test_other_levels_get_legendary_default(self):
        reward = LevelTable.rewards_for(7)
        assert reward.level == 7
        assert reward.title == "Legendary Alchemist"
        assert reward.bonus_xp == 1000
