"""Deterministic safety scoring: consumable sets -> scores, warnings, advice.

Every score is an integer clamped to [0, 100]. Malformed records degrade
the safety score instead of raising; the empty set scores
safety 100 / effectiveness 50 / novelty 0.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any, Iterable, Sequence

from alchemy.domains.safety.knowledge.matcher import (
    check_dangerous_interactions,
    find_safe_pairs,
    medical_recommendations,
    medical_safety_level,
)
from alchemy.domains.safety.knowledge.models import KnowledgeBase
from alchemy.domains.safety.models import (
    Combination,
    Consumable,
    ConsumableCategory,
    DataSource,
    Effect,
    EvaluationResult,
    SafetyLevel,
)
from alchemy.domains.safety.validator import validate_consumable

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Scoring constants
# ---------------------------------------------------------------------------

INVALID_CONSUMABLE_PENALTY = 20
DANGEROUS_INTERACTION_PENALTY = 50

SAFETY_PENALTIES = {
    SafetyLevel.SAFE: 0,
    SafetyLevel.CAUTION: 10,
    SafetyLevel.WARNING: 25,
    SafetyLevel.DANGER: 50,
    SafetyLevel.CRITICAL: 75,
    SafetyLevel.LETHAL: 100,
}

ALCOHOL_WITH_MEDICATION_PENALTY = 40
ALCOHOL_ALONE_PENALTY = 15
MULTIPLE_MEDICATIONS_PENALTY = 25
SINGLE_MEDICATION_PENALTY = 10

BASE_EFFECTIVENESS = 50
DIVERSITY_POINTS, DIVERSITY_CAP = 5, 20
SYNERGY_BONUS = 15
COMPATIBILITY_POINTS, COMPATIBILITY_CAP = 3, 15

NOVELTY_POINTS_PER_CATEGORY = 15
RARE_PAIRING_BONUS = 20
UNEXPECTED_PAIRING_BONUS = 15

PROTEIN_HINTS = ("protein", "meat")
CARB_HINTS = ("bread", "rice")
SWEET_HINTS = ("sweet", "sugar")
SAVORY_HINTS = ("salt", "spicy")
STIMULANT_HINTS = ("caffeine", "coffee", "energy")

# Declared levels that trigger the DANGER warning. ``critical`` is penalized
# in the score but deliberately not listed here.
DANGER_WARNING_LEVELS = (SafetyLevel.DANGER, SafetyLevel.LETHAL)

DANGER_WARNING = "🚨 DANGER: Contains potentially dangerous substances - DO NOT CONSUME"
STIMULANT_WARNING = "⚠️ WARNING: Multiple stimulants may cause overstimulation"
LOW_CONFIDENCE_WARNING = "⚠️ CAUTION: Some substances have limited safety data"

CATEGORY_ADVICE = {
    ConsumableCategory.ALCOHOL: "Drink responsibly and avoid operating machinery",
    ConsumableCategory.SUPPLEMENT: (
        "Consider consulting a healthcare provider before taking supplements"
    ),
    ConsumableCategory.MEDICATION: "Consult your doctor before mixing with other substances",
}

LOW_SCORE_ADVICE = "This combination has a low safety score and may cause adverse effects"


def _clamp(value: float, lo: int = 0, hi: int = 100) -> int:
    return int(max(lo, min(hi, value)))


def _any_name(consumables: Iterable[Consumable], hints: Sequence[str]) -> bool:
    return any(h in c.lowered_name for c in consumables for h in hints)


def _categories(consumables: Iterable[Consumable]) -> set[ConsumableCategory]:
    return {c.category for c in consumables if c.category is not None}


def _coerce(items: Iterable[Any]) -> list[Consumable]:
    """Accept records or raw dicts; anything else becomes an invalid placeholder."""
    coerced: list[Consumable] = []
    for item in items:
        if isinstance(item, Consumable):
            coerced.append(item)
        elif isinstance(item, dict):
            coerced.append(Consumable.from_dict(item))
        else:
            logger.debug("Unrecognized consumable record of type %s", type(item).__name__)
            coerced.append(Consumable(id="", name="", category=None))
    return coerced


class SafetyScoringEngine:
    """Scores consumable combinations against a shared knowledge base.

    Usage::

        engine = SafetyScoringEngine(load_default_knowledge_base())
        result = engine.evaluate([beer, aspirin])
        result.safety_score, result.warnings
    """

    def __init__(
        self,
        knowledge_base: KnowledgeBase,
        *,
        invalid_penalty: int = INVALID_CONSUMABLE_PENALTY,
    ) -> None:
        self._kb = knowledge_base
        self._invalid_penalty = invalid_penalty

    @property
    def knowledge_base(self) -> KnowledgeBase:
        return self._kb

    # ---------------------------------------------------------------
    # Scores
    # ---------------------------------------------------------------

    def safety_score(self, consumables: Sequence[Any]) -> int:
        """100 minus validation, level, interaction and category penalties."""
        items = _coerce(consumables)
        score = 100

        for consumable in items:
            if not validate_consumable(consumable).is_valid:
                score -= self._invalid_penalty

        for consumable in items:
            level = SafetyLevel.more_restrictive(
                medical_safety_level(self._kb, consumable), consumable.safety_level
            )
            score -= SAFETY_PENALTIES[level]

        if check_dangerous_interactions(self._kb, items).has_dangerous_interaction:
            score -= DANGEROUS_INTERACTION_PENALTY

        score -= self._alcohol_penalty(items)
        score -= self._medication_penalty(items)

        return _clamp(score)

    @staticmethod
    def _alcohol_penalty(items: Sequence[Consumable]) -> int:
        categories = _categories(items)
        if ConsumableCategory.ALCOHOL not in categories:
            return 0
        if ConsumableCategory.MEDICATION in categories:
            return ALCOHOL_WITH_MEDICATION_PENALTY
        return ALCOHOL_ALONE_PENALTY

    @staticmethod
    def _medication_penalty(items: Sequence[Consumable]) -> int:
        count = sum(1 for c in items if c.category == ConsumableCategory.MEDICATION)
        if count > 1:
            return MULTIPLE_MEDICATIONS_PENALTY
        if count == 1:
            return SINGLE_MEDICATION_PENALTY
        return 0

    def effectiveness_score(self, consumables: Sequence[Any]) -> int:
        items = _coerce(consumables)
        unique = len(_categories(items))

        score = BASE_EFFECTIVENESS
        score += min(DIVERSITY_CAP, unique * DIVERSITY_POINTS)
        if _any_name(items, PROTEIN_HINTS) and _any_name(items, CARB_HINTS):
            score += SYNERGY_BONUS
        score += min(COMPATIBILITY_CAP, unique * COMPATIBILITY_POINTS)

        return _clamp(score)

    def novelty_score(self, consumables: Sequence[Any]) -> int:
        items = _coerce(consumables)
        categories = _categories(items)

        score = len(categories) * NOVELTY_POINTS_PER_CATEGORY
        if {ConsumableCategory.ALCOHOL, ConsumableCategory.SUPPLEMENT} <= categories:
            score += RARE_PAIRING_BONUS
        if _any_name(items, SWEET_HINTS) and _any_name(items, SAVORY_HINTS):
            score += UNEXPECTED_PAIRING_BONUS

        return _clamp(score)

    # ---------------------------------------------------------------
    # Text
    # ---------------------------------------------------------------

    def generate_warnings(self, consumables: Sequence[Any]) -> list[str]:
        """Disclaimer and interaction text, then level, stimulant and confidence warnings."""
        items = _coerce(consumables)
        warnings = medical_recommendations(self._kb, items)

        if any(c.safety_level in DANGER_WARNING_LEVELS for c in items):
            warnings.append(DANGER_WARNING)

        stimulants = [c for c in items if any(h in c.lowered_name for h in STIMULANT_HINTS)]
        if len(stimulants) > 1:
            warnings.append(STIMULANT_WARNING)

        if any(c.safety_level == SafetyLevel.CAUTION or c.source == DataSource.MANUAL for c in items):
            warnings.append(LOW_CONFIDENCE_WARNING)

        return warnings

    def generate_recommendations(self, consumables: Sequence[Any], safety_score: float) -> list[str]:
        items = _coerce(consumables)
        recommendations: list[str] = []

        if safety_score < 30:
            recommendations.append("NOT RECOMMENDED: This combination may be harmful")
            recommendations.append(LOW_SCORE_ADVICE)
            recommendations.append("Seek professional advice before consuming this combination")
        elif safety_score < 60:
            recommendations.append("CAUTION: Monitor for adverse effects")
            recommendations.append(LOW_SCORE_ADVICE)
        elif safety_score >= 80:
            recommendations.append(
                "SAFE: This combination appears relatively safe for consumption"
            )
            recommendations.append("This combination shows promising results and appears safe")

        categories = _categories(items)
        for category, advice in CATEGORY_ADVICE.items():
            if category in categories:
                recommendations.append(advice)

        return recommendations

    def generate_effects(self, consumables: Sequence[Any]) -> list[Effect]:
        items = _coerce(consumables)
        categories = _categories(items)
        effects: list[Effect] = []

        if ConsumableCategory.ALCOHOL in categories:
            effects.append(Effect(
                id="alcohol-effect",
                name="Intoxication",
                description="May cause dizziness, impaired judgment, and coordination issues",
                intensity="moderate",
                duration=120,
                category="neurological",
                positive=False,
            ))
        if ConsumableCategory.SUPPLEMENT in categories:
            effects.append(Effect(
                id="supplement-effect",
                name="Nutrient Boost",
                description="Provides additional vitamins and minerals for better health",
                intensity="mild",
                duration=180,
                category="metabolic",
                positive=True,
            ))
        if _any_name(items, ("coffee", "coca")):
            effects.append(Effect(
                id="caffeine-effect",
                name="Stimulation",
                description="Increases alertness and energy levels",
                intensity="moderate",
                duration=240,
                category="neurological",
                positive=True,
            ))
        if _any_name(items, SWEET_HINTS):
            effects.append(Effect(
                id="sugar-effect",
                name="Energy Spike",
                description="Provides quick energy boost followed by potential crash",
                intensity="mild",
                duration=60,
                category="metabolic",
                positive=False,
            ))

        return effects

    @staticmethod
    def safety_level_for_score(safety_score: float) -> SafetyLevel:
        if safety_score >= 80:
            return SafetyLevel.SAFE
        if safety_score >= 60:
            return SafetyLevel.CAUTION
        if safety_score >= 40:
            return SafetyLevel.WARNING
        if safety_score >= 20:
            return SafetyLevel.DANGER
        return SafetyLevel.CRITICAL

    @staticmethod
    def describe(level: SafetyLevel, effects: Sequence[Effect], warnings: Sequence[str]) -> str:
        effect_text = ", ".join(e.description for e in effects)
        warning_text = f" Warning: {', '.join(warnings)}" if warnings else ""

        if level == SafetyLevel.SAFE:
            return f"Safe combination with effects: {effect_text}.{warning_text}"
        if level == SafetyLevel.CAUTION:
            return f"Use with caution. Effects: {effect_text}.{warning_text}"
        if level == SafetyLevel.WARNING:
            return (
                "Warning: This combination may cause adverse effects. "
                f"{effect_text}.{warning_text}"
            )
        if level == SafetyLevel.DANGER:
            return f"Dangerous combination! Avoid consumption. {effect_text}.{warning_text}"
        if level == SafetyLevel.CRITICAL:
            return (
                f"CRITICAL DANGER! Do not consume this combination. {effect_text}.{warning_text}"
            )
        return f"Unknown safety level. Effects: {effect_text}.{warning_text}"

    # ---------------------------------------------------------------
    # Full evaluation
    # ---------------------------------------------------------------

    def evaluate(
        self,
        consumables: Sequence[Any],
        *,
        method: str = "mix",
        result_id: str | None = None,
    ) -> EvaluationResult:
        """Score a set of consumables and assemble a fresh EvaluationResult."""
        items = _coerce(consumables)

        safety = self.safety_score(items)
        effectiveness = self.effectiveness_score(items)
        novelty = self.novelty_score(items)
        overall = round((safety + effectiveness + novelty) / 3)

        effects = self.generate_effects(items)
        warnings = self.generate_warnings(items)
        recommendations = self.generate_recommendations(items, safety)
        level = self.safety_level_for_score(safety)

        ratio = {c.id: 100 / len(items) for c in items} if items else {}

        logger.debug(
            "Evaluated %d consumables: safety=%d effectiveness=%d novelty=%d overall=%d",
            len(items),
            safety,
            effectiveness,
            novelty,
            overall,
        )

        return EvaluationResult(
            id=result_id or uuid.uuid4().hex,
            combination=Combination(consumables=tuple(items), ratio=ratio, method=method),
            safety_score=safety,
            effectiveness_score=effectiveness,
            novelty_score=novelty,
            overall_score=overall,
            safety_level=level,
            description=self.describe(level, effects, warnings),
            warnings=warnings,
            recommendations=recommendations,
            effects=effects,
            interactions=list(check_dangerous_interactions(self._kb, items).interactions),
            safe_pairs=find_safe_pairs(self._kb, items),
        )
