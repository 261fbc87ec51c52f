"""Experience awarded for a completed experiment."""

from __future__ import annotations

import statistics
from typing import Iterable

from alchemy.domains.progression.models import Experiment

BASE_XP = 10
MIN_XP = 1


def _mean(values: Iterable[float]) -> float | None:
    values = list(values)
    return statistics.fmean(values) if values else None


def _safety_bonus(mean: float | None) -> int:
    if mean is None:
        return 0
    if mean >= 90:
        return 20
    if mean >= 80:
        return 10
    if mean < 30:
        return -35
    if mean < 50:
        return -20
    return 0


def _quality_bonus(mean: float | None) -> int:
    """Shared banding for effectiveness and novelty."""
    if mean is None:
        return 0
    if mean >= 90:
        return 15
    if mean >= 80:
        return 8
    return 0


def _overall_bonus(mean: float | None) -> int:
    if mean is None:
        return 0
    if mean >= 90:
        return 25
    if mean >= 80:
        return 15
    if mean >= 70:
        return 10
    return 0


def _size_bonus(count: int) -> int:
    if count >= 5:
        return 10
    if count >= 3:
        return 5
    return 0


def xp_for(experiment: Experiment) -> int:
    """Experience for one experiment; never less than 1.

    Score bands use the mean across the experiment's results. An experiment
    without results earns only the base, size and success amounts.
    """
    results = experiment.results

    xp = BASE_XP
    xp += _safety_bonus(_mean(r.safety_score for r in results))
    xp += _quality_bonus(_mean(r.effectiveness_score for r in results))
    xp += _quality_bonus(_mean(r.novelty_score for r in results))
    xp += _size_bonus(len(experiment.consumables))
    if experiment.success:
        xp += 5
    xp += _overall_bonus(_mean(r.overall_score for r in results))

    return max(MIN_XP, xp)
