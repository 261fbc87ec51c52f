"""Alchemy core — application factory.

This module provides:
- create_app() to build the scoring and progression components once
- configure_logging() for hosts that want the settings-driven log level
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Sequence

from alchemy.core.config.settings import Settings, get_settings
from alchemy.domains.progression.achievements import (
    AchievementRegistry,
    AchievementTracker,
    load_achievement_registry,
    load_default_achievements,
)
from alchemy.domains.progression.levels import LevelTable
from alchemy.domains.progression.models import Experiment, ProgressionResult, UserProfile
from alchemy.domains.progression.orchestrator import ProgressionOrchestrator, record_experiment
from alchemy.domains.safety.knowledge.loader import (
    load_default_knowledge_base,
    load_knowledge_base,
)
from alchemy.domains.safety.knowledge.models import KnowledgeBase
from alchemy.domains.safety.models import EvaluationResult
from alchemy.domains.safety.scoring import SafetyScoringEngine

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(level=getattr(logging, settings.alchemy_log_level.upper(), logging.INFO))


@dataclass(frozen=True)
class AlchemyCore:
    """The wired components, shared read-only across callers."""

    settings: Settings
    knowledge_base: KnowledgeBase
    scoring_engine: SafetyScoringEngine
    level_table: LevelTable
    achievements: AchievementRegistry
    tracker: AchievementTracker
    orchestrator: ProgressionOrchestrator

    def run_experiment(
        self,
        profile: UserProfile,
        consumables: Sequence[Any],
        history: Sequence[Experiment],
        *,
        now: datetime | None = None,
    ) -> tuple[EvaluationResult, ProgressionResult]:
        """Evaluate a mix and apply it to the profile in one step."""
        now = now or datetime.now(timezone.utc)
        result = self.scoring_engine.evaluate(consumables)
        experiment = record_experiment(result, timestamp=now)
        progression = self.orchestrator.process_completed_evaluation(
            profile, experiment, history, now=now
        )
        return result, progression


def create_app(
    *,
    settings: Settings | None = None,
    knowledge_base_override: KnowledgeBase | None = None,
    achievements_override: AchievementRegistry | None = None,
    level_table_override: LevelTable | None = None,
) -> AlchemyCore:
    """Create and wire the alchemy core.

    This is the main application factory. It:
    1. Loads the interaction knowledge base (bundled or KNOWLEDGE_BASE_PATH)
    2. Creates the safety scoring engine
    3. Loads the achievement catalogue (bundled or ACHIEVEMENTS_PATH)
    4. Creates the level table, achievement tracker and progression orchestrator
    """
    settings = settings or get_settings()

    # --- Knowledge base ---
    if knowledge_base_override is not None:
        knowledge_base = knowledge_base_override
    elif settings.knowledge_base_path:
        knowledge_base = load_knowledge_base(settings.knowledge_base_path)
    else:
        knowledge_base = load_default_knowledge_base()

    engine = SafetyScoringEngine(
        knowledge_base,
        invalid_penalty=settings.invalid_consumable_penalty,
    )

    # --- Achievements ---
    if achievements_override is not None:
        achievements = achievements_override
    elif settings.achievements_path:
        achievements = load_achievement_registry(settings.achievements_path)
    else:
        achievements = load_default_achievements()
    logger.info("Achievement catalogue ready: %d definitions", len(achievements))

    # --- Progression ---
    level_table = level_table_override or LevelTable()
    tracker = AchievementTracker(achievements)
    orchestrator = ProgressionOrchestrator(
        level_table,
        tracker,
        favorite_limit=settings.favorite_category_limit,
    )

    return AlchemyCore(
        settings=settings,
        knowledge_base=knowledge_base,
        scoring_engine=engine,
        level_table=level_table,
        achievements=achievements,
        tracker=tracker,
        orchestrator=orchestrator,
    )
