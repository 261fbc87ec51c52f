"""Level resolution from cumulative experience."""

from __future__ import annotations

from typing import Sequence

from alchemy.domains.progression.models import LevelProgress, LevelReward

# Cumulative XP required to reach each level; index 0 is level 1.
DEFAULT_XP_THRESHOLDS: tuple[int, ...] = (
    0, 100, 250, 450, 700, 1000, 1350, 1750, 2200, 2700,
    3250, 3850, 4500, 5200, 5950, 6750, 7600, 8500, 9450, 10450,
)

LEVEL_REWARDS: dict[int, LevelReward] = {
    1: LevelReward(
        level=1,
        title="Novice Alchemist",
        description="Welcome to the world of consumable alchemy!",
        unlocks=["Basic mixing", "Safety guidelines"],
        bonus_xp=0,
    ),
    5: LevelReward(
        level=5,
        title="Apprentice Alchemist",
        description="You're getting the hang of this!",
        unlocks=["Advanced mixing", "Temperature control"],
        bonus_xp=50,
    ),
    10: LevelReward(
        level=10,
        title="Journeyman Alchemist",
        description="Your skills are growing!",
        unlocks=["Complex combinations", "Fermentation"],
        bonus_xp=100,
    ),
    15: LevelReward(
        level=15,
        title="Expert Alchemist",
        description="You've mastered the basics!",
        unlocks=["Distillation", "Extraction"],
        bonus_xp=200,
    ),
    20: LevelReward(
        level=20,
        title="Master Alchemist",
        description="You are a true master!",
        unlocks=["Synthesis", "All techniques"],
        bonus_xp=500,
    ),
}


class LevelTable:
    """Maps cumulative experience onto levels 1..max_level.

    Usage::

        table = LevelTable()
        table.level_for(260)             # 3
        table.progress_to_next(175, 2)   # LevelProgress(100, 250, 50.0, 75)
    """

    def __init__(self, thresholds: Sequence[int] = DEFAULT_XP_THRESHOLDS) -> None:
        thresholds = tuple(int(t) for t in thresholds)
        if not thresholds or thresholds[0] != 0:
            raise ValueError("Level thresholds must start at 0 XP for level 1")
        if any(b <= a for a, b in zip(thresholds, thresholds[1:])):
            raise ValueError("Level thresholds must be strictly increasing")
        self._thresholds = thresholds

    @property
    def max_level(self) -> int:
        return len(self._thresholds)

    @property
    def thresholds(self) -> tuple[int, ...]:
        return self._thresholds

    def level_for(self, xp: int) -> int:
        """Highest level whose threshold is <= ``xp`` (level 1 for negative input)."""
        for index in range(len(self._thresholds) - 1, -1, -1):
            if xp >= self._thresholds[index]:
                return index + 1
        return 1

    def xp_for_next_level(self, level: int) -> int:
        """Threshold of ``level + 1``, or 0 once the maximum level is reached."""
        if level >= self.max_level:
            return 0
        return self._thresholds[max(level, 1)]

    def progress_to_next(self, xp: int, level: int) -> LevelProgress:
        """Progress from ``level`` toward the next one.

        A ``level`` below ``level_for(xp)`` reports 100% and no XP needed.
        """
        level = max(1, min(level, self.max_level))
        current = self._thresholds[level - 1]
        nxt = self.xp_for_next_level(level)

        if nxt == 0:
            return LevelProgress(
                current_level_xp=current,
                next_level_xp=current,
                progress=100.0,
                xp_needed=0,
            )

        progress = (xp - current) / (nxt - current) * 100
        return LevelProgress(
            current_level_xp=current,
            next_level_xp=nxt,
            progress=min(100.0, max(0.0, progress)),
            xp_needed=max(0, nxt - xp),
        )

    @staticmethod
    def rewards_for(level: int) -> LevelReward:
        reward = LEVEL_REWARDS.get(level)
        if reward is not None:
            return reward
        return LevelReward(
            level=level,
            title="Legendary Alchemist",
            description="You have reached the pinnacle!",
            unlocks=["All techniques mastered"],
            bonus_xp=1000,
        )
