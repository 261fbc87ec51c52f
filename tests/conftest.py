"""Shared test fixtures for alchemy core tests."""

from __future__ import annotations

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

import pytest

# ---------------------------------------------------------------------------
# Test hermeticity
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _force_hermetic_test_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ALCHEMY_LOG_LEVEL", "info")
    monkeypatch.setenv("KNOWLEDGE_BASE_PATH", "")
    monkeypatch.setenv("ACHIEVEMENTS_PATH", "")
    monkeypatch.delenv("FAVORITE_CATEGORY_LIMIT", raising=False)
    monkeypatch.delenv("INVALID_CONSUMABLE_PENALTY", raising=False)

# Allow running tests without `pip install -e .` by making `src/` importable.
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_SRC_DIR = _PROJECT_ROOT / "src"
if str(_SRC_DIR) not in sys.path:
    sys.path.insert(0, str(_SRC_DIR))

from alchemy.domains.progression.achievements import (  # noqa: E402
    AchievementRegistry,
    AchievementTracker,
    load_default_achievements,
)
from alchemy.domains.progression.levels import LevelTable  # noqa: E402
from alchemy.domains.progression.models import Experiment, UserProfile, UserStats  # noqa: E402
from alchemy.domains.progression.orchestrator import ProgressionOrchestrator  # noqa: E402
from alchemy.domains.safety.knowledge.loader import load_default_knowledge_base  # noqa: E402
from alchemy.domains.safety.knowledge.models import KnowledgeBase  # noqa: E402
from alchemy.domains.safety.models import (  # noqa: E402
    Combination,
    Consumable,
    ConsumableCategory,
    EvaluationResult,
    NutritionalInfo,
    SafetyLevel,
)
from alchemy.domains.safety.scoring import SafetyScoringEngine  # noqa: E402

# Fixed wall clock for streak and timestamp assertions.
NOW = datetime(2025, 6, 15, 14, 30, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Record factories
# ---------------------------------------------------------------------------

def make_consumable(
    name: str = "apple",
    category: ConsumableCategory | str | None = ConsumableCategory.FOOD,
    *,
    id: str | None = None,
    safety_level: SafetyLevel = SafetyLevel.SAFE,
    nutrition: dict[str, Any] | None = None,
    **kwargs: Any,
) -> Consumable:
    """Create a consumable with sensible defaults (foods get nutrition facts)."""
    if isinstance(category, str):
        category = ConsumableCategory(category)
    if nutrition is None and category == ConsumableCategory.FOOD:
        nutrition = {"calories": 95, "protein": 0.5, "carbs": 25, "fat": 0.3}
    return Consumable(
        id=id or name.replace(" ", "-"),
        name=name,
        category=category,
        safety_level=safety_level,
        nutritional_info=NutritionalInfo.from_dict(nutrition) if nutrition else None,
        **kwargs,
    )


def make_result(
    safety: int = 90,
    effectiveness: int = 60,
    novelty: int = 30,
    overall: int | None = None,
) -> EvaluationResult:
    """Create an evaluation result with chosen scores."""
    if overall is None:
        overall = round((safety + effectiveness + novelty) / 3)
    return EvaluationResult(
        id=f"result-{safety}-{effectiveness}-{novelty}",
        combination=Combination(consumables=()),
        safety_score=safety,
        effectiveness_score=effectiveness,
        novelty_score=novelty,
        overall_score=overall,
        safety_level=SafetyScoringEngine.safety_level_for_score(safety),
        description="",
    )


def make_experiment(
    id: str = "exp-1",
    *,
    timestamp: datetime = NOW,
    consumables: list[Consumable] | None = None,
    results: list[EvaluationResult] | None = None,
    success: bool = False,
) -> Experiment:
    """Create a history entry; defaults to two foods and one safe result."""
    if consumables is None:
        consumables = [make_consumable("apple"), make_consumable("banana")]
    if results is None:
        results = [make_result()]
    return Experiment(
        id=id,
        timestamp=timestamp,
        consumables=consumables,
        combination=" + ".join(c.name for c in consumables),
        results=results,
        success=success,
        score=results[0].overall_score if results else 0,
    )


def make_daily_history(days_ago: list[int], *, now: datetime = NOW) -> list[Experiment]:
    """One experiment per entry, ``days_ago`` days before ``now``."""
    return [
        make_experiment(id=f"exp-{i}", timestamp=now - timedelta(days=d))
        for i, d in enumerate(days_ago)
    ]


def make_profile(**stats: Any) -> UserProfile:
    return UserProfile(id="user-1", username="tester", stats=UserStats(**stats))


# ---------------------------------------------------------------------------
# Component fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def knowledge_base() -> KnowledgeBase:
    """The bundled interaction knowledge base."""
    return load_default_knowledge_base()


@pytest.fixture
def scoring_engine(knowledge_base: KnowledgeBase) -> SafetyScoringEngine:
    return SafetyScoringEngine(knowledge_base)


@pytest.fixture
def level_table() -> LevelTable:
    return LevelTable()


@pytest.fixture
def achievement_registry() -> AchievementRegistry:
    """The bundled achievement catalogue."""
    return load_default_achievements()


@pytest.fixture
def tracker(achievement_registry: AchievementRegistry) -> AchievementTracker:
    return AchievementTracker(achievement_registry)


@pytest.fixture
def orchestrator(level_table: LevelTable, tracker: AchievementTracker) -> ProgressionOrchestrator:
    return ProgressionOrchestrator(level_table, tracker)
