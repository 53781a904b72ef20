"""Budget share tables and intent-driven share shifts.

Each category gets a percentage of the budget. The profile then moves share
between categories; every shift preserves the total.
Higher share = more budget allocated = higher-tier component selected.
"""

from __future__ import annotations

from typing import Dict, Iterable, Tuple

from pcfinder.models.components import ComponentType
from pcfinder.models.profile import (
    Aesthetics,
    BuildProfile,
    PerformanceAmbition,
    PriorityComponent,
    Purpose,
)

# ──────────────────────────────────────────────
# Base Share Table
# ──────────────────────────────────────────────

# Percentage of budget per category. Sums to 1.0.
BASE_SHARES: Dict[ComponentType, float] = {
    ComponentType.GPU: 0.32,
    ComponentType.CPU: 0.22,
    ComponentType.MOTHERBOARD: 0.10,
    ComponentType.RAM: 0.08,
    ComponentType.STORAGE: 0.08,
    ComponentType.PSU: 0.07,
    ComponentType.COOLER: 0.05,
    ComponentType.CASE: 0.05,
    ComponentType.FAN: 0.03,
}

# No donor is drained below this share
MIN_SHARE: float = 0.01

AESTHETIC_CATEGORIES: Tuple[ComponentType, ...] = (ComponentType.CASE, ComponentType.FAN)

PRIORITY_CATEGORY: Dict[PriorityComponent, ComponentType] = {
    PriorityComponent.GPU: ComponentType.GPU,
    PriorityComponent.CPU: ComponentType.CPU,
    PriorityComponent.MEMORY: ComponentType.RAM,
    PriorityComponent.STORAGE: ComponentType.STORAGE,
}

PRIORITY_SHIFT: float = 0.03
MAXIMUM_GPU_SHIFT: float = 0.03
MAXIMUM_CPU_SHIFT: float = 0.01
EFFICIENT_PSU_SHIFT: float = 0.02
RGB_MAX_SHIFT: float = 0.02

# (target, amount, donors) per purpose
PURPOSE_SHIFTS: Dict[Purpose, Tuple[Tuple[ComponentType, float, Tuple[ComponentType, ...]], ...]] = {
    Purpose.GAMING: (
        (ComponentType.GPU, 0.03, (ComponentType.CPU, ComponentType.MOTHERBOARD)),
    ),
    Purpose.CREATIVE: (
        (ComponentType.RAM, 0.03, (ComponentType.GPU,)),
        (ComponentType.CPU, 0.02, (ComponentType.GPU,)),
    ),
    Purpose.CONTENT_CREATION: (
        (ComponentType.RAM, 0.04, (ComponentType.GPU,)),
        (ComponentType.STORAGE, 0.02, (ComponentType.GPU,)),
    ),
    Purpose.PROFESSIONAL: (
        (ComponentType.CPU, 0.05, (ComponentType.GPU,)),
        (ComponentType.RAM, 0.03, (ComponentType.GPU,)),
    ),
    Purpose.DEVELOPMENT: (
        (ComponentType.CPU, 0.04, (ComponentType.GPU,)),
        (ComponentType.RAM, 0.04, (ComponentType.GPU,)),
    ),
    Purpose.HOME: (
        (ComponentType.STORAGE, 0.03, (ComponentType.GPU,)),
    ),
}


# ──────────────────────────────────────────────
# Share Shifting
# ──────────────────────────────────────────────


def shift_share(
    shares: Dict[ComponentType, float],
    target: ComponentType,
    amount: float,
    donors: Iterable[ComponentType],
) -> Dict[ComponentType, float]:
    """Move up to `amount` of share into `target`, taken from `donors`.

    Donors give in proportion to what they hold above MIN_SHARE, so the
    total is preserved and no donor drops below the floor. Returns a new dict.
    """
    result = dict(shares)
    donors = [d for d in donors if d != target]
    spare = {d: max(0.0, result.get(d, 0.0) - MIN_SHARE) for d in donors}
    available = sum(spare.values())
    moved = min(amount, available)
    if moved <= 0:
        return result

    for d, s in spare.items():
        result[d] = result[d] - moved * (s / available)
    result[target] = result.get(target, 0.0) + moved
    return result


def shares_for_profile(profile: BuildProfile) -> Dict[ComponentType, float]:
    """Compute the final per-category budget shares for a profile.

    Order: purpose → priority component → performance ambition → aesthetics.
    """
    shares = dict(BASE_SHARES)

    for target, amount, donors in PURPOSE_SHIFTS.get(profile.purpose, ()):
        shares = shift_share(shares, target, amount, donors)

    priority = PRIORITY_CATEGORY[profile.priority_component]
    shares = shift_share(shares, priority, PRIORITY_SHIFT, AESTHETIC_CATEGORIES)

    if profile.performance_ambition == PerformanceAmbition.MAXIMUM:
        shares = shift_share(shares, ComponentType.GPU, MAXIMUM_GPU_SHIFT, AESTHETIC_CATEGORIES)
        shares = shift_share(shares, ComponentType.CPU, MAXIMUM_CPU_SHIFT, AESTHETIC_CATEGORIES)
    elif profile.performance_ambition == PerformanceAmbition.EFFICIENT:
        shares = shift_share(shares, ComponentType.PSU, EFFICIENT_PSU_SHIFT, (ComponentType.GPU,))

    if profile.aesthetics == Aesthetics.RGB_MAX:
        half = RGB_MAX_SHIFT / 2
        shares = shift_share(shares, ComponentType.CASE, half, (ComponentType.GPU,))
        shares = shift_share(shares, ComponentType.FAN, half, (ComponentType.GPU,))

    return shares
