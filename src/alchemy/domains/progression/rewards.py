"""Reward lookups: level unlocks, daily streak rewards and bonus multipliers.

Read-only tables. Nothing here adds experience on its own; callers decide
whether and when a reward is granted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from alchemy.domains.progression.models import Achievement, Rarity, UserStats
from alchemy.domains.safety.models import ConsumableCategory


@dataclass(frozen=True)
class LevelUnlocks:
    features: list[str] = field(default_factory=list)
    categories: list[ConsumableCategory] = field(default_factory=list)
    techniques: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class DailyReward:
    day: int
    xp: int
    title: str
    description: str
    special_reward: str | None = None


@dataclass(frozen=True)
class AchievementReward:
    xp: int
    title: str
    consumables: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class LevelUpReward:
    xp: int
    consumables: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class SpecialConsumable:
    id: str
    name: str
    description: str
    rarity: Rarity
    category: ConsumableCategory
    unlock_condition: str


# ---------------------------------------------------------------------------
# Tables
# ---------------------------------------------------------------------------

_C = ConsumableCategory

LEVEL_UNLOCKS: dict[int, LevelUnlocks] = {
    1: LevelUnlocks(
        features=["basic_mixing", "safety_guidelines"],
        categories=[_C.FOOD, _C.BEVERAGE],
        techniques=["mix"],
    ),
    5: LevelUnlocks(
        features=["temperature_control", "advanced_mixing"],
        categories=[_C.SUPPLEMENT],
        techniques=["blend", "heat", "cool"],
    ),
    10: LevelUnlocks(
        features=["complex_combinations", "fermentation"],
        categories=[_C.HERB],
        techniques=["ferment"],
    ),
    15: LevelUnlocks(
        features=["distillation", "extraction"],
        categories=[_C.MEDICATION],
        techniques=["distill", "extract"],
    ),
    20: LevelUnlocks(
        features=["synthesis", "all_techniques"],
        categories=[_C.ALCOHOL, _C.DRUG, _C.CHEMICAL],
        techniques=["synthesize"],
    ),
}

DAILY_REWARDS: tuple[DailyReward, ...] = (
    DailyReward(1, 50, "Welcome Back!", "50 XP bonus"),
    DailyReward(2, 75, "Getting Started", "75 XP bonus"),
    DailyReward(3, 100, "Building Momentum", "100 XP bonus"),
    DailyReward(7, 200, "Week Warrior", "200 XP bonus + Special consumable"),
    DailyReward(14, 300, "Two Week Champion", "300 XP bonus + Rare consumable"),
    DailyReward(30, 500, "Monthly Master", "500 XP bonus + Epic consumable"),
)

SPECIAL_DAY_REWARDS = {
    7: "Rare consumable: Golden Apple",
    30: "Epic consumable: Philosopher's Stone",
}

ACHIEVEMENT_XP = {
    Rarity.COMMON: 25,
    Rarity.RARE: 50,
    Rarity.EPIC: 100,
    Rarity.LEGENDARY: 250,
}

LEVEL_UP_CONSUMABLES = {
    5: "Rare consumable: Energy Elixir",
    10: "Epic consumable: Wisdom Potion",
    20: "Legendary consumable: Master's Brew",
}

SPECIAL_CONSUMABLES: tuple[SpecialConsumable, ...] = (
    SpecialConsumable(
        "golden_apple", "Golden Apple", "A mythical fruit that enhances all combinations",
        Rarity.RARE, _C.FOOD, "7-day streak",
    ),
    SpecialConsumable(
        "philosophers_stone", "Philosopher's Stone", "The ultimate alchemical ingredient",
        Rarity.LEGENDARY, _C.CHEMICAL, "30-day streak",
    ),
    SpecialConsumable(
        "elixir_of_life", "Elixir of Life", "A potion that grants perfect safety scores",
        Rarity.EPIC, _C.BEVERAGE, "Level 15",
    ),
    SpecialConsumable(
        "mystical_herb", "Mystical Herb", "A rare herb with unknown properties",
        Rarity.RARE, _C.HERB, "100 experiments",
    ),
    SpecialConsumable(
        "crystal_powder", "Crystal Powder", "A crystalline substance that amplifies effects",
        Rarity.EPIC, _C.CHEMICAL, "Level 10",
    ),
)


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------

def unlocks_for_level(level: int) -> LevelUnlocks:
    """Everything unlocked at or below ``level``, in level order."""
    features: list[str] = []
    categories: list[ConsumableCategory] = []
    techniques: list[str] = []
    for required, unlocks in sorted(LEVEL_UNLOCKS.items()):
        if level >= required:
            features.extend(unlocks.features)
            categories.extend(unlocks.categories)
            techniques.extend(unlocks.techniques)
    return LevelUnlocks(features=features, categories=categories, techniques=techniques)


def is_feature_unlocked(level: int, feature: str) -> bool:
    return feature in unlocks_for_level(level).features


def is_category_unlocked(level: int, category: ConsumableCategory) -> bool:
    return category in unlocks_for_level(level).categories


def is_technique_unlocked(level: int, technique: str) -> bool:
    return technique in unlocks_for_level(level).techniques


def daily_reward(streak: int) -> DailyReward:
    """Highest daily tier reached by ``streak``; days 7 and 30 carry a special reward."""
    reward = DAILY_REWARDS[0]
    for tier in DAILY_REWARDS:
        if streak < tier.day:
            break
        reward = tier

    special = SPECIAL_DAY_REWARDS.get(streak)
    if special is None:
        return reward
    return DailyReward(reward.day, reward.xp, reward.title, reward.description, special)


def achievement_reward(achievement: Achievement) -> AchievementReward:
    return AchievementReward(
        xp=ACHIEVEMENT_XP.get(achievement.rarity, ACHIEVEMENT_XP[Rarity.COMMON]),
        title=achievement.name,
        consumables=["Special consumable"] if achievement.rarity == Rarity.LEGENDARY else [],
    )


def level_up_reward(level: int) -> LevelUpReward:
    consumable = LEVEL_UP_CONSUMABLES.get(level)
    return LevelUpReward(xp=level * 10, consumables=[consumable] if consumable else [])


def streak_multiplier(streak: int) -> float:
    """XP multiplier for a streak; 0 means no streak bonus applies."""
    if streak < 2:
        return 0
    if streak < 7:
        return 1.1
    if streak < 30:
        return 1.25
    return 1.5


def daily_bonus(last_experiment: datetime, now: datetime) -> float:
    """Return bonus for coming back the same day (1.2) or the next day (1.1)."""
    days = (now - last_experiment).days
    if days == 0:
        return 1.2
    if days == 1:
        return 1.1
    return 1.0


def special_consumable_unlocks(stats: UserStats) -> list[SpecialConsumable]:
    """Special consumables whose unlock condition ``stats`` satisfies."""
    reached = {
        "7-day streak": stats.streak >= 7,
        "30-day streak": stats.streak >= 30,
        "Level 15": stats.level >= 15,
        "Level 10": stats.level >= 10,
        "100 experiments": stats.experiments >= 100,
    }
    return [c for c in SPECIAL_CONSUMABLES if reached.get(c.unlock_condition, False)]
