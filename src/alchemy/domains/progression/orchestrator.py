"""Progression orchestrator: turns a completed evaluation into updated stats.

Composes the experience calculator, level table, achievement tracker and
streak walk. Every call returns new values; the caller's profile and
history are left untouched.
"""

from __future__ import annotations

import logging
import uuid
from collections import Counter
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Sequence

from alchemy.domains.progression.achievements import AchievementTracker
from alchemy.domains.progression.experience import xp_for
from alchemy.domains.progression.levels import LevelTable
from alchemy.domains.progression.models import (
    Experiment,
    Milestone,
    ProgressionEvent,
    ProgressionResult,
    UserProfile,
)
from alchemy.domains.progression.streaks import compute_streak, next_milestone
from alchemy.domains.safety.models import EvaluationResult

logger = logging.getLogger(__name__)

BASE_EXPERIMENT_TIME_MS = 2 * 60 * 1000
PER_CONSUMABLE_TIME_MS = 30 * 1000
DEFAULT_FAVORITE_LIMIT = 3
SUCCESS_SCORE_THRESHOLD = 50


def record_experiment(
    result: EvaluationResult,
    *,
    timestamp: datetime,
    experiment_id: str | None = None,
) -> Experiment:
    """Build a history entry from one evaluation; it succeeds above an overall 50."""
    consumables = list(result.combination.consumables)
    return Experiment(
        id=experiment_id or uuid.uuid4().hex,
        timestamp=timestamp,
        consumables=consumables,
        combination=" + ".join(c.name for c in consumables),
        results=[result],
        success=result.overall_score > SUCCESS_SCORE_THRESHOLD,
        score=result.overall_score,
    )


def experiment_time(experiment: Experiment) -> int:
    """Play time credited for one experiment, in milliseconds."""
    return BASE_EXPERIMENT_TIME_MS + len(experiment.consumables) * PER_CONSUMABLE_TIME_MS


def favorite_categories(history: Sequence[Experiment], limit: int) -> list[str]:
    """Most used categories across the history, most frequent first."""
    counts = Counter(
        c.category.value
        for exp in history
        for c in exp.consumables
        if c.category is not None
    )
    return [category for category, _ in counts.most_common(limit)]


class ProgressionOrchestrator:
    """Processes completed evaluations into progression updates.

    Usage::

        orchestrator = ProgressionOrchestrator(LevelTable(), tracker)
        result = orchestrator.process_completed_evaluation(profile, experiment, history)
        result.profile.stats.level, result.new_achievements
    """

    def __init__(
        self,
        level_table: LevelTable,
        tracker: AchievementTracker,
        *,
        favorite_limit: int = DEFAULT_FAVORITE_LIMIT,
    ) -> None:
        self._levels = level_table
        self._tracker = tracker
        self._favorite_limit = favorite_limit

    @property
    def level_table(self) -> LevelTable:
        return self._levels

    def process_completed_evaluation(
        self,
        profile: UserProfile,
        experiment: Experiment,
        history: Sequence[Experiment],
        *,
        now: datetime | None = None,
    ) -> ProgressionResult:
        """Apply one completed experiment to a profile.

        ``history`` holds the user's earlier experiments; the new experiment
        is added for favorite categories, streak and achievement scans unless
        a record with the same id is already present.
        """
        now = now or datetime.now(timezone.utc)
        stats = profile.stats

        full_history = list(history)
        if all(exp.id != experiment.id for exp in full_history):
            full_history.append(experiment)

        xp_gained = xp_for(experiment)
        new_xp = stats.experience + xp_gained
        old_level = stats.level
        new_level = self._levels.level_for(new_xp)
        leveled_up = new_level > old_level

        updated_stats = replace(
            stats,
            experience=new_xp,
            level=new_level,
            experiments=stats.experiments + 1,
            total_play_time=stats.total_play_time + experiment_time(experiment),
            favorite_categories=favorite_categories(full_history, self._favorite_limit),
            streak=compute_streak(full_history, now),
        )

        new_achievements = self._tracker.check(updated_stats, full_history, now=now)
        if new_achievements:
            updated_stats = replace(
                updated_stats,
                achievements=[*updated_stats.achievements, *new_achievements],
            )

        events = [
            ProgressionEvent(
                type="experiment_completed",
                timestamp=now,
                data={
                    "experiment": experiment,
                    "xp_gained": xp_gained,
                    "new_level": new_level,
                    "level_up": leveled_up,
                },
            )
        ]
        if leveled_up:
            logger.debug("Level up for %s: %d -> %d", profile.id, old_level, new_level)
            events.append(
                ProgressionEvent(
                    type="level_up",
                    timestamp=now,
                    data={
                        "old_level": old_level,
                        "new_level": new_level,
                        "rewards": self._levels.rewards_for(new_level),
                    },
                )
            )
        if new_achievements:
            events.append(
                ProgressionEvent(
                    type="achievement_unlocked",
                    timestamp=now,
                    data={"achievements": new_achievements},
                )
            )

        logger.debug(
            "Processed experiment %s for %s: +%d XP, %d achievements",
            experiment.id,
            profile.id,
            xp_gained,
            len(new_achievements),
        )

        return ProgressionResult(
            profile=replace(profile, stats=updated_stats, last_active=now),
            new_achievements=new_achievements,
            leveled_up=leveled_up,
            xp_gained=xp_gained,
            events=events,
        )

    def progression_summary(self, profile: UserProfile) -> dict[str, Any]:
        """Headline progression numbers for display."""
        stats = profile.stats
        by_rarity = Counter(a.rarity.value for a in stats.achievements)

        return {
            "level": stats.level,
            "experience": stats.experience,
            "level_progress": self._levels.progress_to_next(stats.experience, stats.level),
            "achievements": {
                "total": len(self._tracker.registry),
                "unlocked": len(stats.achievements),
                "by_rarity": dict(by_rarity),
            },
            "stats": {
                "experiments": stats.experiments,
                "streak": stats.streak,
                "total_play_time": stats.total_play_time,
                "favorite_categories": list(stats.favorite_categories),
            },
        }

    def next_milestone(self, profile: UserProfile) -> Milestone | None:
        return next_milestone(profile.stats, self._levels)
