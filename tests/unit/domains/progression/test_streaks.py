"""Unit tests for streak counting and milestone projection."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from alchemy.domains.progression.levels import LevelTable
from alchemy.domains.progression.models import UserStats
from alchemy.domains.progression.streaks import compute_streak, next_milestone
from conftest import NOW, make_daily_history, make_experiment


class TestComputeStreak:
    def test_empty_history(self):
        assert compute_streak([], NOW) == 0

    def test_today_and_yesterday(self):
        assert compute_streak(make_daily_history([0, 1]), NOW) == 2

    def test_stops_at_gap(self):
        assert compute_streak(make_daily_history([0, 3, 4]), NOW) == 1

    def test_long_run_then_gap(self):
        assert compute_streak(make_daily_history([0, 1, 2, 3, 7, 8]), NOW) == 4

    def test_streak_can_start_yesterday(self):
        assert compute_streak(make_daily_history([1, 2]), NOW) == 2

    def test_stale_history_is_zero(self):
        assert compute_streak(make_daily_history([2, 3]), NOW) == 0

    def test_same_day_counts_once(self):
        assert compute_streak(make_daily_history([0, 0, 0, 1]), NOW) == 2

    def test_order_of_history_does_not_matter(self):
        assert compute_streak(make_daily_history([2, 0, 1]), NOW) == 3

    def test_future_entries_ignored(self):
        assert compute_streak(make_daily_history([-1, 0]), NOW) == 1

    def test_uses_calendar_days_not_24h(self):
        late = datetime(2025, 6, 15, 0, 5, tzinfo=timezone.utc)
        history = [make_experiment(timestamp=late - timedelta(minutes=10))]
        assert compute_streak(history, late) == 1

    def test_aware_timestamps_are_converted(self):
        tz = timezone(timedelta(hours=-5))
        now = datetime(2025, 6, 15, 12, 0, tzinfo=tz)
        # 02:00 UTC on the 16th is still the 15th at UTC-5
        history = [make_experiment(timestamp=datetime(2025, 6, 16, 2, 0, tzinfo=timezone.utc))]
        assert compute_streak(history, now) == 1


class TestNextMilestone:
    def test_level_milestone_first(self, level_table: LevelTable):
        milestone = next_milestone(UserStats(level=4, experience=575), level_table)
        assert milestone.type == "level"
        assert milestone.description == "Reach Level 5"
        assert milestone.progress == 50
        assert milestone.max_progress == 100
        assert milestone.reward == "Unlock new techniques and 50 bonus XP"

    def test_experiment_milestone_at_max_level(self, level_table: LevelTable):
        stats = UserStats(level=20, experience=10450, experiments=12)
        milestone = next_milestone(stats, level_table)
        assert milestone.type == "experiments"
        assert milestone.description == "Complete 25 experiments"
        assert milestone.progress == pytest.approx(48)
        assert milestone.reward == "50 bonus XP"

    def test_streak_milestone_after_experiments(self, level_table: LevelTable):
        stats = UserStats(level=20, experience=10450, experiments=1000, streak=5)
        milestone = next_milestone(stats, level_table)
        assert milestone.type == "streak"
        assert milestone.description == "Maintain 7-day streak"
        assert milestone.reward == "35 bonus XP"

    def test_all_exhausted(self, level_table: LevelTable):
        stats = UserStats(level=20, experience=10450, experiments=5000, streak=365)
        assert next_milestone(stats, level_table) is None
