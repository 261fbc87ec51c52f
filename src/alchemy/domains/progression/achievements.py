"""Achievement catalogue, progress conditions and unlock tracking.

Definitions are loaded from YAML into an ``AchievementRegistry`` once at
startup. ``AchievementTracker.check`` scans the experiment history and
returns achievements that newly crossed their threshold; achievements
already held are never re-evaluated.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Sequence

import yaml

from alchemy.domains.progression.models import (
    Achievement,
    AchievementDefinition,
    Experiment,
    Rarity,
    UserStats,
)

logger = logging.getLogger(__name__)

DEFAULT_ACHIEVEMENTS_PATH = Path(__file__).resolve().parent / "data" / "achievements.yaml"

SAFE_SCORE_THRESHOLD = 80
PERFECT_SCORE = 100
NOVEL_SCORE_THRESHOLD = 90
DANGEROUS_SCORE_THRESHOLD = 30


class AchievementDefinitionError(Exception):
    """Raised when an achievement catalogue cannot be loaded."""


# ---------------------------------------------------------------------------
# Progress conditions
# ---------------------------------------------------------------------------

ProgressCondition = Callable[[Sequence[Experiment]], int]


def _experiment_count(history: Sequence[Experiment]) -> int:
    return len(history)


def _safe_experiments(history: Sequence[Experiment]) -> int:
    return sum(
        1 for exp in history
        if any(r.safety_score > SAFE_SCORE_THRESHOLD for r in exp.results)
    )


def _unique_consumables(history: Sequence[Experiment]) -> int:
    return len({c.id for exp in history for c in exp.consumables})


def _perfect_safety_experiments(history: Sequence[Experiment]) -> int:
    return sum(
        1 for exp in history
        if exp.results and all(r.safety_score == PERFECT_SCORE for r in exp.results)
    )


def _unique_categories(history: Sequence[Experiment]) -> int:
    return len({c.category for exp in history for c in exp.consumables if c.category is not None})


def _perfect_experiments(history: Sequence[Experiment]) -> int:
    return sum(
        1 for exp in history
        if exp.results and all(r.overall_score == PERFECT_SCORE for r in exp.results)
    )


def _novel_experiments(history: Sequence[Experiment]) -> int:
    return sum(
        1 for exp in history
        if any(r.novelty_score >= NOVEL_SCORE_THRESHOLD for r in exp.results)
    )


def _dangerous_experiments(history: Sequence[Experiment]) -> int:
    return sum(
        1 for exp in history
        if any(r.safety_score < DANGEROUS_SCORE_THRESHOLD for r in exp.results)
    )


ACHIEVEMENT_CONDITIONS: dict[str, ProgressCondition] = {
    "experiment_count": _experiment_count,
    "safe_experiments": _safe_experiments,
    "unique_consumables": _unique_consumables,
    "perfect_safety_experiments": _perfect_safety_experiments,
    "unique_categories": _unique_categories,
    "perfect_experiments": _perfect_experiments,
    "novel_experiments": _novel_experiments,
    "dangerous_experiments": _dangerous_experiments,
}


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

class AchievementRegistry:
    """Ordered, in-memory index of achievement definitions."""

    def __init__(self, definitions: Sequence[AchievementDefinition] = ()) -> None:
        self._definitions: dict[str, AchievementDefinition] = {}
        for definition in definitions:
            self.register(definition)

    def register(self, definition: AchievementDefinition) -> None:
        if definition.id in self._definitions:
            raise ValueError(f"Duplicate achievement id registered: {definition.id!r}")
        self._definitions[definition.id] = definition

    def get(self, achievement_id: str) -> AchievementDefinition | None:
        return self._definitions.get(achievement_id)

    def all(self) -> list[AchievementDefinition]:
        return list(self._definitions.values())

    def __len__(self) -> int:
        return len(self._definitions)


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------

def _parse_definition(raw: dict[str, Any]) -> AchievementDefinition:
    achievement_id = raw["id"]

    condition = raw["condition"]
    if condition not in ACHIEVEMENT_CONDITIONS:
        raise AchievementDefinitionError(
            f"Achievement {achievement_id!r} uses unknown condition {condition!r}"
        )

    try:
        rarity = Rarity(raw["rarity"])
    except ValueError:
        raise AchievementDefinitionError(
            f"Achievement {achievement_id!r} has unknown rarity {raw['rarity']!r}"
        ) from None

    max_progress = int(raw["max_progress"])
    if max_progress <= 0:
        raise AchievementDefinitionError(
            f"Achievement {achievement_id!r} must have a positive max_progress"
        )

    return AchievementDefinition(
        id=str(achievement_id),
        name=str(raw.get("name", achievement_id)),
        description=str(raw.get("description", "")).strip(),
        rarity=rarity,
        condition=condition,
        max_progress=max_progress,
    )


def load_achievement_file(path: str | Path) -> list[AchievementDefinition]:
    """Parse a YAML achievement catalogue."""
    path = Path(path)
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as exc:
        raise AchievementDefinitionError(f"Cannot read achievements from {path}: {exc}") from exc

    if not isinstance(data, dict) or not isinstance(data.get("achievements"), list):
        raise AchievementDefinitionError(f"{path.name}: expected an 'achievements' list")

    try:
        definitions = [_parse_definition(raw) for raw in data["achievements"]]
    except (KeyError, TypeError, ValueError) as exc:
        raise AchievementDefinitionError(f"{path.name}: malformed achievement ({exc})") from exc

    logger.info("Loaded %d achievement definitions from %s", len(definitions), path)
    return definitions


def load_achievement_registry(path: str | Path) -> AchievementRegistry:
    """Load a catalogue file into a fresh registry (duplicate ids raise ValueError)."""
    return AchievementRegistry(load_achievement_file(path))


def load_default_achievements() -> AchievementRegistry:
    return load_achievement_registry(DEFAULT_ACHIEVEMENTS_PATH)


def validate_achievement_file(path: str | Path) -> tuple[AchievementRegistry | None, list[str]]:
    """Validate an achievement catalogue without raising.

    Returns: (registry_or_none, errors)
    """
    path = Path(path)
    if not path.is_file():
        return None, [f"Achievement file not found: {path}"]

    try:
        registry = load_achievement_registry(path)
    except (AchievementDefinitionError, ValueError) as exc:
        return None, [f"{path.name}: Failed to load: {exc}"]

    errors = [
        f"{path.name}: Achievement '{d.id}' has no description"
        for d in registry.all()
        if not d.description
    ]
    return registry, errors


# ---------------------------------------------------------------------------
# Tracking
# ---------------------------------------------------------------------------

class AchievementTracker:
    """Evaluates locked achievements against a user's experiment history.

    Usage::

        tracker = AchievementTracker(load_default_achievements())
        unlocked = tracker.check(stats, history)
    """

    def __init__(self, registry: AchievementRegistry) -> None:
        self._registry = registry

    @property
    def registry(self) -> AchievementRegistry:
        return self._registry

    def _locked(self, stats: UserStats) -> list[AchievementDefinition]:
        return [d for d in self._registry.all() if not stats.has_achievement(d.id)]

    @staticmethod
    def progress_for(definition: AchievementDefinition, history: Sequence[Experiment]) -> int:
        return ACHIEVEMENT_CONDITIONS[definition.condition](history)

    def check(
        self,
        stats: UserStats,
        history: Sequence[Experiment],
        *,
        now: datetime | None = None,
    ) -> list[Achievement]:
        """Return achievements that unlock with this history, in catalogue order."""
        now = now or datetime.now(timezone.utc)
        unlocked: list[Achievement] = []

        for definition in self._locked(stats):
            if self.progress_for(definition, history) >= definition.max_progress:
                unlocked.append(definition.unlock(now))
                logger.debug("Achievement unlocked: %s", definition.id)

        return unlocked

    def progress_report(
        self, stats: UserStats, history: Sequence[Experiment]
    ) -> list[Achievement]:
        """Current progress for every achievement the user does not hold yet."""
        return [
            Achievement(
                id=d.id,
                name=d.name,
                description=d.description,
                rarity=d.rarity,
                progress=min(self.progress_for(d, history), d.max_progress),
                max_progress=d.max_progress,
            )
            for d in self._locked(stats)
        ]
