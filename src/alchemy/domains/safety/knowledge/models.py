"""Data models for the interaction knowledge base."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from alchemy.domains.safety.models import SafetyLevel


def frozen_map(data: Mapping | None = None) -> Mapping:
    return MappingProxyType(dict(data or {}))


@dataclass(frozen=True)
class SubstanceLevel:
    """Medical classification for one substance key."""

    key: str
    level: SafetyLevel
    surface_forms: tuple[str, ...] = ()


@dataclass(frozen=True)
class NameRule:
    """Fallback level assigned when a name or category hints at a substance class."""

    level: SafetyLevel
    surface_forms: tuple[str, ...] = ()
    categories: tuple[str, ...] = ()


@dataclass(frozen=True)
class InteractionWarning:
    """Text emitted when an interaction label mentions every term in ``when``."""

    when: tuple[str, ...]
    severity: str
    message: str


@dataclass(frozen=True)
class Notices:
    disclaimer: str = ""
    do_not_combine: str = ""
    categories: Mapping[str, str] = field(default_factory=frozen_map)


@dataclass(frozen=True)
class InteractionCheck:
    """Outcome of scanning every unordered pair for dangerous interactions."""

    has_dangerous_interaction: bool
    interactions: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()


@dataclass(frozen=True)
class KnowledgeBase:
    """Read-only substance reference data.

    Built once (see ``loader``) and shared by every scoring call; nothing in
    the engine writes to it.
    """

    version: str
    substances: tuple[SubstanceLevel, ...]
    name_rules: tuple[NameRule, ...]
    category_defaults: Mapping[str, SafetyLevel]
    default_level: SafetyLevel
    interactions: Mapping[str, tuple[str, ...]]
    aliases: Mapping[str, tuple[str, ...]]
    safe_combinations: Mapping[str, tuple[str, ...]]
    interaction_warnings: tuple[InteractionWarning, ...] = ()
    notices: Notices = field(default_factory=Notices)

    def surface_forms(self, substance: str) -> tuple[str, ...]:
        """All lowercase name fragments that identify ``substance``."""
        forms = [substance, substance.replace("_", " ")]
        forms.extend(self.aliases.get(substance, ()))
        return tuple(dict.fromkeys(forms))

    def known_substances(self) -> set[str]:
        """Every substance key mentioned anywhere in the graph or tables."""
        keys = {s.key for s in self.substances}
        keys.update(self.interactions)
        for targets in self.interactions.values():
            keys.update(targets)
        keys.update(self.aliases)
        return keys
