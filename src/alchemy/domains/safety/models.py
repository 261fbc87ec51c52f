"""Consumable and evaluation models for the safety scoring engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class SafetyLevel(str, Enum):
    """Ordered risk classification, least to most restrictive."""

    SAFE = "safe"
    CAUTION = "caution"
    WARNING = "warning"
    DANGER = "danger"
    CRITICAL = "critical"
    LETHAL = "lethal"

    @property
    def rank(self) -> int:
        return _SAFETY_RANK[self]

    @classmethod
    def more_restrictive(cls, a: SafetyLevel, b: SafetyLevel) -> SafetyLevel:
        """Return whichever of the two levels ranks higher (ties keep ``b``)."""
        return a if a.rank > b.rank else b

    @classmethod
    def parse(cls, value: Any, default: SafetyLevel | None = None) -> SafetyLevel | None:
        """Lenient conversion from a raw value; unknown values yield ``default``."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                return default
        return default


_SAFETY_RANK = {level: rank for rank, level in enumerate(SafetyLevel)}


class ConsumableCategory(str, Enum):
    FOOD = "food"
    BEVERAGE = "beverage"
    SUPPLEMENT = "supplement"
    MEDICATION = "medication"
    ALCOHOL = "alcohol"
    DRUG = "drug"
    HERB = "herb"
    CHEMICAL = "chemical"
    OTHER = "other"

    @classmethod
    def parse(cls, value: Any) -> ConsumableCategory | None:
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                return None
        return None


class ConsumableType(str, Enum):
    SOLID = "solid"
    LIQUID = "liquid"
    GAS = "gas"
    POWDER = "powder"
    CAPSULE = "capsule"
    TABLET = "tablet"
    INJECTION = "injection"
    TOPICAL = "topical"


class DataSource(str, Enum):
    """Provenance of a consumable record."""

    OPENFOODFACTS = "openfoodfacts"
    FOODB = "foodb"
    OPENDATA = "opendata"
    MANUAL = "manual"
    USER = "user"
    MOCK = "mock"


# ---------------------------------------------------------------------------
# Consumable records
# ---------------------------------------------------------------------------

def _num(val: Any) -> float | None:
    """Convert to float, returning None for None or non-numeric."""
    if val is None or isinstance(val, bool):
        return None
    try:
        return float(val)
    except (TypeError, ValueError):
        return None


def _strings(raw: Any) -> tuple[str, ...]:
    if not isinstance(raw, (list, tuple)):
        return ()
    return tuple(str(item) for item in raw)


@dataclass(frozen=True)
class NutritionalInfo:
    """Per-serving nutrition facts. Every field is optional."""

    calories: float | None = None
    protein: float | None = None
    carbs: float | None = None
    fat: float | None = None
    fiber: float | None = None
    sugar: float | None = None
    sodium: float | None = None
    vitamins: dict[str, float] = field(default_factory=dict)
    minerals: dict[str, float] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> NutritionalInfo:
        def _micros(raw: Any) -> dict[str, float]:
            if not isinstance(raw, dict):
                return {}
            return {str(k): v for k, v in ((k, _num(v)) for k, v in raw.items()) if v is not None}

        return cls(
            calories=_num(data.get("calories")),
            protein=_num(data.get("protein")),
            carbs=_num(data.get("carbs")),
            fat=_num(data.get("fat")),
            fiber=_num(data.get("fiber")),
            sugar=_num(data.get("sugar")),
            sodium=_num(data.get("sodium")),
            vitamins=_micros(data.get("vitamins")),
            minerals=_micros(data.get("minerals")),
        )


@dataclass(frozen=True)
class Consumable:
    """A food, drink, supplement, medication or other substance record.

    ``category`` is None only when the source record had no usable category;
    the validator reports that as an error. A record without a declared
    safety level is treated as ``safe`` so the knowledge base classification
    decides. ``source`` is None when provenance is unknown.
    """

    id: str
    name: str
    category: ConsumableCategory | None
    safety_level: SafetyLevel = SafetyLevel.SAFE
    type: ConsumableType = ConsumableType.SOLID
    nutritional_info: NutritionalInfo | None = None
    source: DataSource | None = None
    description: str = ""
    ingredients: tuple[str, ...] = ()
    tags: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        # Plain strings are accepted for the enum fields; unknown values fall
        # back the same way as in from_dict.
        if not isinstance(self.name, str):
            object.__setattr__(self, "name", "")
        object.__setattr__(self, "category", ConsumableCategory.parse(self.category))
        object.__setattr__(
            self, "safety_level", SafetyLevel.parse(self.safety_level, default=SafetyLevel.SAFE)
        )

    @property
    def lowered_name(self) -> str:
        return (self.name or "").lower()

    @property
    def category_value(self) -> str:
        return self.category.value if self.category else ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Consumable:
        """Build a record from a loosely typed dict (catalog or storage output)."""
        nutrition = data.get("nutritional_info", data.get("nutritionalInfo"))
        raw_type = data.get("type")
        try:
            ctype = ConsumableType(raw_type) if raw_type else ConsumableType.SOLID
        except ValueError:
            ctype = ConsumableType.SOLID
        raw_source = data.get("source")
        try:
            source = DataSource(raw_source) if raw_source else None
        except ValueError:
            source = None
        name = data.get("name")

        return cls(
            id=str(data.get("id", "")),
            name=name if isinstance(name, str) else "",
            category=ConsumableCategory.parse(data.get("category")),
            safety_level=SafetyLevel.parse(
                data.get("safety_level", data.get("safetyLevel")),
                default=SafetyLevel.SAFE,
            ),
            type=ctype,
            nutritional_info=(
                NutritionalInfo.from_dict(nutrition) if isinstance(nutrition, dict) else None
            ),
            source=source,
            description=str(data.get("description") or ""),
            ingredients=_strings(data.get("ingredients")),
            tags=_strings(data.get("tags")),
        )


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class Effect:
    """A predicted physiological effect of a combination."""

    id: str
    name: str
    description: str
    intensity: str          # 'mild' | 'moderate' | 'strong' | 'severe'
    duration: int           # minutes
    category: str           # 'neurological' | 'metabolic' | ...
    positive: bool


@dataclass(frozen=True)
class Combination:
    consumables: tuple[Consumable, ...]
    ratio: dict[str, float] = field(default_factory=dict)
    method: str = "mix"


@dataclass(frozen=True)
class EvaluationResult:
    """Scores, warnings and recommendations for one set of consumables.

    Created fresh by every ``SafetyScoringEngine.evaluate`` call.
    """

    id: str
    combination: Combination
    safety_score: int
    effectiveness_score: int
    novelty_score: int
    overall_score: int
    safety_level: SafetyLevel
    description: str
    warnings: list[str] = field(default_factory=list)
    recommendations: list[str] = field(default_factory=list)
    effects: list[Effect] = field(default_factory=list)
    interactions: list[str] = field(default_factory=list)
    safe_pairs: list[str] = field(default_factory=list)
