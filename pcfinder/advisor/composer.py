"""Advisory composer — turns a graded build into an ordered list of CTAs.

Which advisories fire, and their order, depends only on the grade, the
metrics, and the context. The random source only chooses between
equivalent phrasings, so a seeded `random.Random` gives fully reproducible
output.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional, Sequence, Tuple

from pcfinder.advisor import templates
from pcfinder.engine.metrics import BuildMetrics
from pcfinder.models.build import Grade
from pcfinder.models.components import StorageInterface
from pcfinder.models.profile import Purpose

logger = logging.getLogger(__name__)

MIN_RAM_SPEED_MHZ = 3200

# Price bands (GBP) for the price-to-performance advisory
DIMINISHING_RETURNS_PRICE = 2500
SWEET_SPOT_PRICE = (800, 1200)
STRETCH_BUDGET_PRICE = 700

LAUNCH_SEASON_MONTHS = (1, 2, 3)
SALE_MONTH = 11
BACK_TO_SCHOOL_MONTH = 8


@dataclass(frozen=True)
class AdvisoryContext:
    """Everything the composer needs beyond the grade and metrics."""

    total_price: float = 0.0
    use_case: Optional[str] = None
    storage_interface: Optional[StorageInterface] = None
    cpu_bottleneck: bool = False
    gpu_bottleneck: bool = False
    ram_speed_mhz: int = 0
    today: date = field(default_factory=date.today)


# ──────────────────────────────────────────────
# Use Case Resolution
# ──────────────────────────────────────────────


def detect_use_case(vram: int, cores: int, ram: int) -> str:
    """Guess the workload from the parts when the caller did not say."""
    if cores >= 12 and ram >= 32:
        return "content-creation"
    if cores >= 8 and ram >= 32 and vram >= 12:
        return "streaming"
    if vram >= 10 and cores >= 6:
        return "gaming"
    if vram >= 6:
        return "gaming-budget"
    return "general"


def use_case_for_purpose(purpose: Purpose, vram: int) -> str:
    """Map the questionnaire purpose onto a reallocation strategy key."""
    if purpose == Purpose.GAMING:
        return "gaming" if vram >= 10 else "gaming-budget"
    if purpose in (Purpose.CREATIVE, Purpose.CONTENT_CREATION, Purpose.PROFESSIONAL):
        return "content-creation"
    return "general"


def reallocation_strategy(use_case: str, vram: int) -> str:
    if use_case == "gaming" and vram >= 16:
        use_case = "gaming-flagship"
    return templates.REALLOCATION_STRATEGIES.get(
        use_case, templates.REALLOCATION_STRATEGIES["general"]
    )


# ──────────────────────────────────────────────
# Individual Advisories
# ──────────────────────────────────────────────


def _pick(rng: random.Random, pool: Sequence[str], **values) -> str:
    return rng.choice(pool).format(**values)


def _storage_advice(ctx: AdvisoryContext, rng: random.Random) -> Optional[str]:
    # HDD first: a hard drive is worse than any SSD
    if ctx.storage_interface == StorageInterface.HDD:
        return _pick(rng, templates.STORAGE_HDD)
    if ctx.storage_interface == StorageInterface.SATA:
        return _pick(rng, templates.STORAGE_SATA)
    return None


def _bottleneck_advice(
    metrics: BuildMetrics, ctx: AdvisoryContext, rng: random.Random
) -> List[str]:
    advice: List[str] = []
    if ctx.cpu_bottleneck and metrics.cores < 8:
        advice.append(_pick(rng, templates.CPU_BOTTLENECK, cores=metrics.cores))
    if ctx.gpu_bottleneck and metrics.vram_gb < 8:
        advice.append(_pick(rng, templates.GPU_BOTTLENECK, vram=metrics.vram_gb))
    return advice


def _reallocation_tip(
    grade: Grade, metrics: BuildMetrics, ctx: AdvisoryContext, rng: random.Random
) -> str:
    use_case = ctx.use_case or detect_use_case(
        metrics.vram_gb, metrics.cores, metrics.ram_capacity_gb
    )
    intro_key = "acceptable" if grade == Grade.C else "improve"
    return templates.REALLOCATION_TIP.format(
        intro=rng.choice(templates.REALLOCATION_INTRO[intro_key]),
        strategy=reallocation_strategy(use_case, metrics.vram_gb),
    )


def _price_advice(
    grade: Grade, metrics: BuildMetrics, ctx: AdvisoryContext, rng: random.Random
) -> Optional[str]:
    price = ctx.total_price
    if not price:
        return None
    low, high = SWEET_SPOT_PRICE
    if price > DIMINISHING_RETURNS_PRICE and metrics.vram_gb >= 20:
        return _pick(rng, templates.DIMINISHING_RETURNS)
    if low <= price <= high and grade.at_least(Grade.B):
        return _pick(rng, templates.SWEET_SPOT)
    if price < STRETCH_BUDGET_PRICE and grade.at_most(Grade.D):
        return _pick(rng, templates.STRETCH_BUDGET)
    return None


def _timing_advice(
    grade: Grade, ctx: AdvisoryContext, rng: random.Random
) -> Optional[str]:
    month = ctx.today.month
    if month in LAUNCH_SEASON_MONTHS and grade.at_most(Grade.C):
        return _pick(rng, templates.LAUNCH_SEASON)
    if month == SALE_MONTH:
        return _pick(rng, templates.SALE_SEASON)
    if month == BACK_TO_SCHOOL_MONTH:
        return _pick(rng, templates.BACK_TO_SCHOOL)
    return None


# ──────────────────────────────────────────────
# Public API
# ──────────────────────────────────────────────


def grade_feedback(grade: Grade, rng: Optional[random.Random] = None) -> str:
    rng = rng or random.Random()
    return rng.choice(templates.GRADE_FEEDBACK[grade])


def compose_advisories(
    grade: Grade,
    metrics: BuildMetrics,
    context: AdvisoryContext,
    rng: Optional[random.Random] = None,
) -> Tuple[str, ...]:
    """Build the ordered advisory list for a graded build.

    Order: storage → bottlenecks → budget reallocation (grade C or worse)
    → RAM speed → price-to-performance → market timing → confidence
    booster (grade B or better).
    """
    rng = rng or random.Random()
    ctas: List[str] = []

    storage = _storage_advice(context, rng)
    if storage:
        ctas.append(storage)

    ctas.extend(_bottleneck_advice(metrics, context, rng))

    if grade.at_most(Grade.C):
        ctas.append(_reallocation_tip(grade, metrics, context, rng))

    if 0 < context.ram_speed_mhz < MIN_RAM_SPEED_MHZ:
        ctas.append(_pick(rng, templates.LOW_RAM_SPEED, speed=context.ram_speed_mhz))

    price = _price_advice(grade, metrics, context, rng)
    if price:
        ctas.append(price)

    timing = _timing_advice(grade, context, rng)
    if timing:
        ctas.append(timing)

    if grade.at_least(Grade.B):
        ctas.append(_pick(rng, templates.CONFIDENCE_BOOSTER))

    logger.debug("Composed %d advisories for grade %s", len(ctas), grade.value)
    return tuple(ctas)
