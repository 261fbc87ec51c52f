"""Structural and semantic checks for a single consumable record.

Errors make a record invalid (the scoring engine penalizes it); warnings
flag implausible but usable data. The input is never modified.
"""

from __future__ import annotations

from alchemy.domains.safety.models import (
    Consumable,
    ConsumableCategory,
    SafetyLevel,
    ValidationResult,
)

# Per-serving plausibility ceilings
MAX_CALORIES = 1000
MAX_PROTEIN_G = 100
MAX_CARBS_G = 100
MAX_FAT_G = 100


def validate_consumable(consumable: Consumable) -> ValidationResult:
    errors: list[str] = []
    warnings: list[str] = []

    if not consumable.name or not consumable.name.strip():
        errors.append("Consumable name is required")

    if consumable.category is None:
        errors.append("Consumable category is required")

    is_food = consumable.category == ConsumableCategory.FOOD

    if is_food and consumable.safety_level == SafetyLevel.LETHAL:
        warnings.append(
            "Food items should not be marked as lethal unless they are actually poisonous"
        )

    if is_food and consumable.nutritional_info is None:
        warnings.append("Food items should have nutritional information")

    info = consumable.nutritional_info
    if info is not None:
        if info.calories and info.calories > MAX_CALORIES:
            warnings.append("Calorie count seems unusually high for a single serving")
        if info.protein and info.protein > MAX_PROTEIN_G:
            warnings.append("Protein content seems unusually high")
        if info.carbs and info.carbs > MAX_CARBS_G:
            warnings.append("Carbohydrate content seems unusually high")
        if info.fat and info.fat > MAX_FAT_G:
            warnings.append("Fat content seems unusually high")

    return ValidationResult(is_valid=not errors, errors=errors, warnings=warnings)
