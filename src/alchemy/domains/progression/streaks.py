"""Consecutive-day streaks and next-milestone projection."""

from __future__ import annotations

from datetime import date, datetime, timedelta, tzinfo
from typing import Sequence

from alchemy.domains.progression.levels import LevelTable
from alchemy.domains.progression.models import Experiment, Milestone, UserStats

EXPERIMENT_MILESTONES = (10, 25, 50, 100, 250, 500, 1000)
STREAK_MILESTONES = (3, 7, 14, 30, 60, 100)


def _calendar_day(ts: datetime, tz: tzinfo | None) -> date:
    if tz is not None and ts.tzinfo is not None:
        return ts.astimezone(tz).date()
    return ts.date()


def compute_streak(history: Sequence[Experiment], now: datetime) -> int:
    """Count consecutive active days walking back from ``now``.

    Each distinct day (newest first) that is 0 or 1 days behind the cursor
    extends the streak and moves the cursor back one day; a larger gap ends
    the walk. Several experiments on one day count once, and experiments
    dated after ``now`` are ignored.
    """
    today = now.date()
    days = sorted(
        {_calendar_day(exp.timestamp, now.tzinfo) for exp in history},
        reverse=True,
    )

    streak = 0
    cursor = today
    for day in days:
        if day > today:
            continue
        if (cursor - day).days > 1:
            break
        streak += 1
        cursor -= timedelta(days=1)

    return streak


def _threshold_milestone(
    kind: str, current: int, thresholds: Sequence[int], describe: str, reward_per_unit: int
) -> Milestone | None:
    target = next((t for t in thresholds if current < t), None)
    if target is None:
        return None
    return Milestone(
        type=kind,
        description=describe.format(target),
        progress=current / target * 100,
        max_progress=100,
        reward=f"{target * reward_per_unit} bonus XP",
    )


def next_milestone(stats: UserStats, level_table: LevelTable) -> Milestone | None:
    """Next unmet goal: level, then experiment count, then streak length."""
    level_progress = level_table.progress_to_next(stats.experience, stats.level)
    if level_progress.xp_needed > 0:
        bonus = level_table.rewards_for(stats.level + 1).bonus_xp
        return Milestone(
            type="level",
            description=f"Reach Level {stats.level + 1}",
            progress=level_progress.progress,
            max_progress=100,
            reward=f"Unlock new techniques and {bonus} bonus XP",
        )

    return _threshold_milestone(
        "experiments", stats.experiments, EXPERIMENT_MILESTONES, "Complete {} experiments", 2
    ) or _threshold_milestone(
        "streak", stats.streak, STREAK_MILESTONES, "Maintain {}-day streak", 5
    )
