"""Knowledge base loader: reads the substance reference tables from YAML."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from alchemy.domains.safety.knowledge.models import (
    InteractionWarning,
    KnowledgeBase,
    NameRule,
    Notices,
    SubstanceLevel,
    frozen_map,
)
from alchemy.domains.safety.models import SafetyLevel

logger = logging.getLogger(__name__)

DEFAULT_KNOWLEDGE_BASE_PATH = (
    Path(__file__).resolve().parent.parent / "data" / "knowledge_base.yaml"
)


class KnowledgeBaseError(Exception):
    """Raised when knowledge base data cannot be parsed into reference tables."""


def _level(raw: Any, where: str) -> SafetyLevel:
    level = SafetyLevel.parse(raw)
    if level is None:
        raise KnowledgeBaseError(f"{where}: unknown safety level {raw!r}")
    return level


def _forms(raw: Any) -> tuple[str, ...]:
    return tuple(str(f).lower() for f in (raw or []))


def load_knowledge_base(path: str | Path) -> KnowledgeBase:
    """Parse a YAML file into a KnowledgeBase instance."""
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as exc:
        raise KnowledgeBaseError(f"Failed to read knowledge base {path}: {exc}") from exc

    kb = parse_knowledge_base(data, source=str(path))
    logger.info(
        "Loaded knowledge base v%s from %s (%d substances, %d interaction keys)",
        kb.version,
        path,
        len(kb.substances),
        len(kb.interactions),
    )
    return kb


def load_default_knowledge_base() -> KnowledgeBase:
    """Load the knowledge base bundled with the package."""
    return load_knowledge_base(DEFAULT_KNOWLEDGE_BASE_PATH)


def parse_knowledge_base(data: Any, *, source: str = "<memory>") -> KnowledgeBase:
    """Build a KnowledgeBase from an already-parsed mapping."""
    if not isinstance(data, dict):
        raise KnowledgeBaseError(f"{source}: top level must be a mapping")
    try:
        return _parse(data, source)
    except (KeyError, TypeError, AttributeError) as exc:
        raise KnowledgeBaseError(f"{source}: malformed entry ({exc!r})") from exc


def _parse(data: dict[str, Any], source: str) -> KnowledgeBase:
    substances = []
    for i, entry in enumerate(data.get("substances", [])):
        key = str(entry["key"]).lower()
        forms = _forms(entry.get("surface_forms")) or (key,)
        substances.append(
            SubstanceLevel(
                key=key,
                level=_level(entry.get("level"), f"{source}: substances[{i}]"),
                surface_forms=forms,
            )
        )

    name_rules = [
        NameRule(
            level=_level(rule.get("level"), f"{source}: name_rules[{i}]"),
            surface_forms=_forms(rule.get("surface_forms")),
            categories=_forms(rule.get("categories")),
        )
        for i, rule in enumerate(data.get("name_rules", []))
    ]

    category_defaults = {
        str(category).lower(): _level(level, f"{source}: category_defaults.{category}")
        for category, level in (data.get("category_defaults") or {}).items()
    }

    notices_data = data.get("notices") or {}
    notices = Notices(
        disclaimer=notices_data.get("disclaimer", ""),
        do_not_combine=notices_data.get("do_not_combine", ""),
        categories=frozen_map(notices_data.get("categories")),
    )

    return KnowledgeBase(
        version=str(data.get("version", "")),
        substances=tuple(substances),
        name_rules=tuple(name_rules),
        category_defaults=frozen_map(category_defaults),
        default_level=_level(data.get("default_level", "caution"), f"{source}: default_level"),
        interactions=frozen_map(
            {str(k).lower(): _forms(v) for k, v in (data.get("interactions") or {}).items()}
        ),
        aliases=frozen_map(
            {str(k).lower(): _forms(v) for k, v in (data.get("aliases") or {}).items()}
        ),
        safe_combinations=frozen_map(
            {str(k).lower(): _forms(v) for k, v in (data.get("safe_combinations") or {}).items()}
        ),
        interaction_warnings=tuple(
            InteractionWarning(
                when=_forms(w.get("when")),
                severity=str(w.get("severity", "warning")),
                message=str(w.get("message", "")),
            )
            for w in data.get("interaction_warnings", [])
        ),
        notices=notices,
    )
