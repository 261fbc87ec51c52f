"""Data models for experiments, user stats and progression output.

All records are frozen: the progression functions return new values and
never modify the caller's profile or history.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from alchemy.domains.safety.models import Consumable, EvaluationResult


class Rarity(str, Enum):
    COMMON = "common"
    RARE = "rare"
    EPIC = "epic"
    LEGENDARY = "legendary"


@dataclass(frozen=True)
class AchievementDefinition:
    """A catalogue entry: what must happen for an achievement to unlock.

    ``condition`` names a progress function in the achievement condition
    registry (e.g. ``experiment_count``).
    """

    id: str
    name: str
    description: str
    rarity: Rarity
    condition: str
    max_progress: int

    def unlock(self, at: datetime) -> Achievement:
        return Achievement(
            id=self.id,
            name=self.name,
            description=self.description,
            rarity=self.rarity,
            progress=self.max_progress,
            max_progress=self.max_progress,
            unlocked_at=at,
        )


@dataclass(frozen=True)
class Achievement:
    """An achievement as held by a user. ``unlocked_at`` is None while locked."""

    id: str
    name: str
    description: str
    rarity: Rarity
    progress: int
    max_progress: int
    unlocked_at: datetime | None = None

    @property
    def unlocked(self) -> bool:
        return self.unlocked_at is not None


@dataclass(frozen=True)
class Experiment:
    """One completed evaluation as recorded in a user's history."""

    id: str
    timestamp: datetime
    consumables: list[Consumable] = field(default_factory=list)
    combination: str = ""
    results: list[EvaluationResult] = field(default_factory=list)
    success: bool = False
    score: float = 0.0


@dataclass(frozen=True)
class UserStats:
    level: int = 1
    experience: int = 0
    experiments: int = 0
    discoveries: int = 0
    achievements: list[Achievement] = field(default_factory=list)
    streak: int = 0
    total_play_time: int = 0  # milliseconds
    favorite_categories: list[str] = field(default_factory=list)

    def has_achievement(self, achievement_id: str) -> bool:
        return any(a.id == achievement_id for a in self.achievements)


@dataclass(frozen=True)
class UserProfile:
    id: str
    username: str = ""
    stats: UserStats = field(default_factory=UserStats)
    last_active: datetime | None = None


@dataclass(frozen=True)
class LevelProgress:
    current_level_xp: int
    next_level_xp: int
    progress: float  # percent, 0-100
    xp_needed: int


@dataclass(frozen=True)
class LevelReward:
    level: int
    title: str
    description: str
    unlocks: list[str] = field(default_factory=list)
    bonus_xp: int = 0


@dataclass(frozen=True)
class Milestone:
    type: str  # 'level' | 'experiments' | 'streak'
    description: str
    progress: float
    max_progress: int
    reward: str


@dataclass(frozen=True)
class ProgressionEvent:
    type: str  # 'experiment_completed' | 'level_up' | 'achievement_unlocked'
    timestamp: datetime
    data: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ProgressionResult:
    """Everything produced by processing one completed evaluation."""

    profile: UserProfile
    new_achievements: list[Achievement]
    leveled_up: bool
    xp_gained: int
    events: list[ProgressionEvent] = field(default_factory=list)
