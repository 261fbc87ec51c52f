"""Knowledge base YAML validator: checks reference data is internally consistent."""

from __future__ import annotations

import logging
from pathlib import Path

from alchemy.domains.safety.knowledge.loader import KnowledgeBaseError, load_knowledge_base
from alchemy.domains.safety.knowledge.models import KnowledgeBase
from alchemy.domains.safety.models import ConsumableCategory

logger = logging.getLogger(__name__)

_CATEGORY_VALUES = {c.value for c in ConsumableCategory}


def check_knowledge_base(kb: KnowledgeBase, *, label: str = "knowledge base") -> list[str]:
    """Return consistency errors for an already-loaded knowledge base."""
    errors: list[str] = []

    if not kb.notices.disclaimer:
        errors.append(f"{label}: No medical disclaimer defined")

    seen: set[str] = set()
    for substance in kb.substances:
        if substance.key in seen:
            errors.append(f"{label}: Duplicate substance key '{substance.key}'")
        seen.add(substance.key)
        if not substance.surface_forms:
            errors.append(f"{label}: Substance '{substance.key}' has no surface forms")

    for category in kb.category_defaults:
        if category not in _CATEGORY_VALUES:
            errors.append(f"{label}: category_defaults has unknown category '{category}'")

    # A target is resolvable if it is a declared substance or a consumable category.
    known = kb.known_substances() | _CATEGORY_VALUES
    for substance, targets in kb.interactions.items():
        if not targets:
            errors.append(f"{label}: Interaction '{substance}' lists no substances")
        if substance in targets:
            errors.append(f"{label}: Interaction '{substance}' references itself")

    for rule in kb.interaction_warnings:
        for term in rule.when:
            if term not in known:
                errors.append(f"{label}: Interaction warning references unknown substance '{term}'")
        if not rule.message:
            errors.append(f"{label}: Interaction warning for {list(rule.when)} has no message")

    for substance, aliases in kb.aliases.items():
        if not aliases:
            errors.append(f"{label}: Alias list for '{substance}' is empty")

    return errors


def validate_knowledge_base_file(path: str | Path) -> tuple[KnowledgeBase | None, list[str]]:
    """Validate a knowledge base YAML file.

    Returns: (knowledge_base_or_none, errors)
    """
    path = Path(path)
    if not path.is_file():
        return None, [f"Knowledge base file not found: {path}"]

    try:
        kb = load_knowledge_base(path)
    except KnowledgeBaseError as exc:
        return None, [f"{path.name}: Failed to load: {exc}"]

    return kb, check_knowledge_base(kb, label=path.name)


def validate_knowledge_base(path: str | Path) -> int:
    """Log every problem found in ``path`` and return the error count."""
    _, errors = validate_knowledge_base_file(path)
    for err in errors:
        logger.error("%s", err)
    return len(errors)
