"""Synergy scorer — how well the selected parts work together.

Starts from 100 and walks an ordered rule table. Deductions penalise
mismatches (a flagship GPU on a six-core CPU, an air cooler on a 16-core
chip); bonuses reward balanced tiers. Point values are configurable, the
rule order and the grade bands are not.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Mapping, Optional, Tuple

from pcfinder.engine.metrics import BuildMetrics
from pcfinder.errors import InternalInvariantError
from pcfinder.models.build import Grade
from pcfinder.models.components import CoolingTier, StorageInterface

logger = logging.getLogger(__name__)

SCORE_START = 100
SCORE_MIN = 0
SCORE_MAX = 100

# PSU load band outside which efficiency drops off
PSU_EFFICIENT_LOAD = (0.35, 0.80)
# PSU load band where the unit is most efficient
PSU_SWEET_SPOT = (0.45, 0.70)


# ──────────────────────────────────────────────
# Rule Table
# ──────────────────────────────────────────────

Predicate = Callable[[BuildMetrics], bool]


def _outside_efficiency_window(m: BuildMetrics) -> bool:
    low, high = PSU_EFFICIENT_LOAD
    return m.psu_load_fraction > 0 and (m.psu_load_fraction < low or m.psu_load_fraction > high)


def _in_sweet_spot(m: BuildMetrics) -> bool:
    low, high = PSU_SWEET_SPOT
    return low <= m.psu_load_fraction <= high


# Evaluated top to bottom; every matching rule applies.
RULES: Tuple[Tuple[str, Predicate], ...] = (
    # Deductions
    ("gpu_cpu_bottleneck", lambda m: m.vram_gb >= 16 and m.cores < 8),
    ("extreme_gpu_core_shortfall", lambda m: m.vram_gb >= 20 and m.cores < 12),
    ("ram_below_vram_tier", lambda m: m.ram_capacity_gb < 32 and m.vram_gb >= 12),
    ("excessive_ram_for_cores", lambda m: m.ram_capacity_gb > 64 and m.cores < 8),
    ("psu_outside_efficiency_window", _outside_efficiency_window),
    ("sata_with_high_vram", lambda m: m.storage_interface == StorageInterface.SATA and m.vram_gb >= 16),
    ("missing_cooler_high_cores", lambda m: m.cooling_tier == CoolingTier.NONE and m.cores >= 12),
    ("air_cooling_high_cores", lambda m: m.cooling_tier == CoolingTier.AIR and m.cores >= 16),
    # Bonuses
    ("high_end_balance", lambda m: m.vram_gb >= 16 and m.cores >= 12 and m.ram_capacity_gb >= 64),
    ("mid_high_balance", lambda m: m.vram_gb >= 12 and m.cores >= 8 and m.ram_capacity_gb >= 32),
    ("psu_sweet_spot", _in_sweet_spot),
)

DEFAULT_RULE_POINTS: Dict[str, int] = {
    "gpu_cpu_bottleneck": -12,
    "extreme_gpu_core_shortfall": -10,
    "ram_below_vram_tier": -8,
    "excessive_ram_for_cores": -6,
    "psu_outside_efficiency_window": -6,
    "sata_with_high_vram": -5,
    "missing_cooler_high_cores": -8,
    "air_cooling_high_cores": -10,
    "high_end_balance": 8,
    "mid_high_balance": 5,
    "psu_sweet_spot": 4,
}


# ──────────────────────────────────────────────
# Grade Bands
# ──────────────────────────────────────────────

# (inclusive lower bound, grade), best first
GRADE_BANDS: Tuple[Tuple[int, Grade], ...] = (
    (90, Grade.A),
    (75, Grade.B),
    (60, Grade.C),
    (45, Grade.D),
    (30, Grade.E),
    (0, Grade.F),
)


def _check_bands(bands: Tuple[Tuple[int, Grade], ...]) -> None:
    """Bands must cover [0, 100] with strictly falling bounds, A through F."""
    bounds = [b for b, _ in bands]
    grades = [g for _, g in bands]
    if grades != list(Grade):
        raise InternalInvariantError(f"Grade bands out of order: {grades}")
    if bounds[-1] != SCORE_MIN or bounds[0] > SCORE_MAX:
        raise InternalInvariantError(f"Grade bands do not cover {SCORE_MIN}-{SCORE_MAX}")
    if any(hi <= lo for hi, lo in zip(bounds, bounds[1:])):
        raise InternalInvariantError(f"Grade band bounds overlap: {bounds}")


_check_bands(GRADE_BANDS)


def grade_for_score(score: int) -> Grade:
    """Map a clamped score to its letter grade."""
    if not SCORE_MIN <= score <= SCORE_MAX:
        raise InternalInvariantError(f"Synergy score {score} outside {SCORE_MIN}-{SCORE_MAX}")
    for lower, grade in GRADE_BANDS:
        if score >= lower:
            return grade
    raise InternalInvariantError(f"No grade band covers score {score}")


# ──────────────────────────────────────────────
# Scoring
# ──────────────────────────────────────────────


@dataclass(frozen=True)
class SynergyOutcome:
    score: int
    grade: Grade
    triggered_rules: Tuple[str, ...] = ()


def resolve_points(overrides: Optional[Mapping[str, int]] = None) -> Dict[str, int]:
    """Merge point overrides over the defaults. Unknown rule names are rejected."""
    points = dict(DEFAULT_RULE_POINTS)
    if overrides:
        unknown = sorted(set(overrides) - set(points))
        if unknown:
            raise ValueError(f"Unknown synergy rules: {', '.join(unknown)}")
        points.update({k: int(v) for k, v in overrides.items()})
    return points


def score_synergy(
    metrics: BuildMetrics,
    points: Optional[Mapping[str, int]] = None,
) -> SynergyOutcome:
    """Score a build's balance from its metrics.

    Args:
        metrics: Derived build metrics.
        points: Optional per-rule point overrides.

    Returns:
        SynergyOutcome with the clamped score, its grade, and the names
        of every rule that fired, in table order.
    """
    table = resolve_points(points)
    score = SCORE_START
    triggered = []

    for name, predicate in RULES:
        if predicate(metrics):
            score += table[name]
            triggered.append(name)

    score = max(SCORE_MIN, min(SCORE_MAX, score))
    grade = grade_for_score(score)

    logger.debug("Synergy %d (%s), rules: %s", score, grade.value, triggered)

    return SynergyOutcome(score=score, grade=grade, triggered_rules=tuple(triggered))
