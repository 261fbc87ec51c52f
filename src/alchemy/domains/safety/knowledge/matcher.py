"""Substance matching against the knowledge base.

A consumable matches a substance key when the key occurs in its lowercased
name. Otherwise a key with an alias list matches on the aliases alone, and
a key without one matches a consumable whose category equals the key.
"""

from __future__ import annotations

import logging
from itertools import combinations
from typing import Sequence

from alchemy.domains.safety.knowledge.models import InteractionCheck, KnowledgeBase
from alchemy.domains.safety.models import Consumable, ConsumableCategory, SafetyLevel

logger = logging.getLogger(__name__)


def substance_matches(kb: KnowledgeBase, name: str, category: str, substance: str) -> bool:
    """True if a (lowercased) name/category pair identifies ``substance``."""
    if substance in name:
        return True
    aliases = kb.aliases.get(substance)
    if aliases is not None:
        return any(alias in name for alias in aliases)
    return category == substance


def _mentions(kb: KnowledgeBase, consumable: Consumable, substance: str) -> bool:
    name = consumable.lowered_name
    return any(form in name for form in kb.surface_forms(substance))


def medical_safety_level(kb: KnowledgeBase, consumable: Consumable) -> SafetyLevel:
    """Resolve a consumable's level from reference data alone.

    Lookup order: substance table (first surface form found in the name),
    name rules, category defaults, then the knowledge base default.
    """
    name = consumable.lowered_name
    category = consumable.category_value

    for substance in kb.substances:
        if any(form in name for form in substance.surface_forms):
            return substance.level

    for rule in kb.name_rules:
        if category in rule.categories or any(form in name for form in rule.surface_forms):
            return rule.level

    return kb.category_defaults.get(category, kb.default_level)


def find_interaction(kb: KnowledgeBase, first: Consumable, second: Consumable) -> str | None:
    """Return a ``"substance + substance"`` label for the first dangerous match, else None."""
    name1, category1 = first.lowered_name, first.category_value
    name2, category2 = second.lowered_name, second.category_value

    for substance, dangerous_with in kb.interactions.items():
        if substance_matches(kb, name1, category1, substance):
            for other in dangerous_with:
                if substance_matches(kb, name2, category2, other):
                    return f"{substance} + {other}"

        if substance_matches(kb, name2, category2, substance):
            for other in dangerous_with:
                if substance_matches(kb, name1, category1, other):
                    return f"{substance} + {other}"

    return None


def _warning_for(kb: KnowledgeBase, label: str) -> str | None:
    for rule in kb.interaction_warnings:
        if all(term in label for term in rule.when):
            return rule.message
    return None


def check_dangerous_interactions(
    kb: KnowledgeBase, consumables: Sequence[Consumable]
) -> InteractionCheck:
    """Scan every unordered pair for a dangerous interaction."""
    interactions: list[str] = []
    warnings: list[str] = []

    for first, second in combinations(consumables, 2):
        label = find_interaction(kb, first, second)
        if label is None:
            continue
        interactions.append(label)
        message = _warning_for(kb, label)
        if message:
            warnings.append(message)

    if interactions:
        logger.debug("Dangerous interactions detected: %s", ", ".join(interactions))

    return InteractionCheck(
        has_dangerous_interaction=bool(interactions),
        interactions=tuple(interactions),
        warnings=tuple(warnings),
    )


def find_safe_pairs(kb: KnowledgeBase, consumables: Sequence[Consumable]) -> list[str]:
    """Labels for pairs on the known-safe allow-list, matched by surface forms only."""
    pairs: list[str] = []
    for first, second in combinations(consumables, 2):
        for substance, partners in kb.safe_combinations.items():
            for a, b in ((first, second), (second, first)):
                if not _mentions(kb, a, substance):
                    continue
                for partner in partners:
                    if _mentions(kb, b, partner):
                        pairs.append(f"{substance} + {partner}")
    return list(dict.fromkeys(pairs))


def medical_recommendations(kb: KnowledgeBase, consumables: Sequence[Consumable]) -> list[str]:
    """Advisory text: disclaimer, interaction warnings, then per-category notices."""
    recommendations = [kb.notices.disclaimer] if kb.notices.disclaimer else []

    check = check_dangerous_interactions(kb, consumables)
    if check.has_dangerous_interaction:
        recommendations.extend(check.warnings)
        if kb.notices.do_not_combine:
            recommendations.append(kb.notices.do_not_combine)

    present = {c.category for c in consumables}
    for category in (
        ConsumableCategory.ALCOHOL,
        ConsumableCategory.MEDICATION,
        ConsumableCategory.SUPPLEMENT,
    ):
        notice = kb.notices.categories.get(category.value)
        if category in present and notice:
            recommendations.append(notice)

    return recommendations
