"""Budget allocator — turns an intent profile into a concrete candidate build.

Greedy, share-based selection: every category gets a slice of the budget
(see weights.py) and takes the most expensive entry that fits its slice.
Selection runs in dependency order so later picks can be narrowed to parts
compatible with what is already chosen. Cases and fans are further narrowed
to the requested aesthetic, and coolers to what the chosen CPU needs.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from pcfinder.engine.compatibility import platform_issues
from pcfinder.engine.weights import shares_for_profile
from pcfinder.errors import BudgetTooLow, CatalogUnavailable
from pcfinder.models.build import CandidateBuild, Fulfilment
from pcfinder.models.components import ComponentSpec, ComponentType, CoolingTier
from pcfinder.models.profile import (
    Aesthetics,
    BuildProfile,
    PerformanceAmbition,
    Timeline,
)

logger = logging.getLogger(__name__)

# ──────────────────────────────────────────────
# Configuration
# ──────────────────────────────────────────────

MINIMUM_BUDGET = float(os.getenv("PCFINDER_MIN_BUDGET", "500"))
RUSH_SURCHARGE = float(os.getenv("PCFINDER_RUSH_SURCHARGE", "150"))
PREMIUM_BUDGET_THRESHOLD = 3000

# timeline → (eta days, surcharge, priority flag)
FULFILMENT_BY_TIMELINE: Dict[Timeline, Tuple[int, float, bool]] = {
    Timeline.RUSH: (3, RUSH_SURCHARGE, True),
    Timeline.STANDARD: (5, 0.0, False),
    Timeline.FLEXIBLE: (7, 0.0, False),
}

# Selection order: dependencies first
SELECTION_ORDER: Tuple[ComponentType, ...] = (
    ComponentType.CPU,          # Determines socket/platform
    ComponentType.MOTHERBOARD,  # Must match CPU socket
    ComponentType.RAM,          # Must match motherboard memory type
    ComponentType.GPU,          # Must match motherboard PCIe
    ComponentType.PSU,          # Headroom checked once the build is complete
    ComponentType.STORAGE,
    ComponentType.CASE,         # Must clear the GPU
    ComponentType.COOLER,
    ComponentType.FAN,
)

REQUIRED_CATEGORIES = frozenset({
    ComponentType.CPU,
    ComponentType.MOTHERBOARD,
    ComponentType.RAM,
    ComponentType.GPU,
    ComponentType.STORAGE,
    ComponentType.PSU,
    ComponentType.CASE,
})

# Categories whose entries carry a `style` spec matching an Aesthetics value
STYLED_CATEGORIES = frozenset({ComponentType.CASE, ComponentType.FAN})

# CPUs at or above this core count only get liquid coolers
LIQUID_COOLING_CORES = 16


# ──────────────────────────────────────────────
# Result Types
# ──────────────────────────────────────────────


@dataclass(frozen=True)
class Allocation:
    """Output of the allocator: the build plus how it was reached."""

    build: CandidateBuild
    shares: Dict[ComponentType, float]
    allocated: Dict[ComponentType, float]
    fulfilment: Fulfilment
    notes: Tuple[str, ...] = ()
    degraded: Tuple[ComponentType, ...] = field(default_factory=tuple)

    @property
    def total_price(self) -> float:
        return self.build.total_price


# ──────────────────────────────────────────────
# Helpers
# ──────────────────────────────────────────────


def fulfilment_for(timeline: Timeline) -> Fulfilment:
    """Map the delivery timeline to fulfilment metadata.

    The rush surcharge is recorded here and never taken out of the
    component budget.
    """
    eta_days, surcharge, priority = FULFILMENT_BY_TIMELINE[timeline]
    return Fulfilment(surcharge=surcharge, priority_flag=priority, eta_days=eta_days)


def _pick_within(
    candidates: Sequence[ComponentSpec], limit: float
) -> Optional[ComponentSpec]:
    """Highest-priced entry not above `limit`; ties → higher performance, lower id."""
    fitting = [c for c in candidates if c.price <= limit]
    if not fitting:
        return None
    return min(fitting, key=lambda c: (-c.price, -c.performance_score, c.id))


def _cheapest(candidates: Sequence[ComponentSpec]) -> ComponentSpec:
    return min(candidates, key=lambda c: (c.price, -c.performance_score, c.id))


def _compatible_candidates(
    build: CandidateBuild, candidates: Sequence[ComponentSpec]
) -> List[ComponentSpec]:
    """Candidates that add no new platform issue to the build so far.

    Falls back to every candidate when none fit, leaving the mismatch for
    the compatibility validator to report.
    """
    baseline = len(platform_issues(build))
    compatible = [
        c for c in candidates
        if len(platform_issues(build.with_component(c))) <= baseline
    ]
    return compatible or list(candidates)


def _styled_candidates(
    candidates: Sequence[ComponentSpec], aesthetics: Aesthetics
) -> List[ComponentSpec]:
    """Entries tagged with the requested style, or every entry when none are."""
    styled = [c for c in candidates if c.spec("style") == aesthetics.value]
    return styled or list(candidates)


def _cooling_candidates(
    build: CandidateBuild, candidates: Sequence[ComponentSpec]
) -> List[ComponentSpec]:
    """Liquid coolers only for high core-count CPUs, when the catalog has any."""
    cores = int(build.cpu.spec("cores", 0)) if build.cpu else 0
    if cores < LIQUID_COOLING_CORES:
        return list(candidates)
    liquid = [
        c for c in candidates
        if str(c.spec("cooler_type", "")).lower() == CoolingTier.LIQUID.value
    ]
    return liquid or list(candidates)


def _narrow(
    category: ComponentType,
    build: CandidateBuild,
    profile: BuildProfile,
    candidates: Sequence[ComponentSpec],
) -> List[ComponentSpec]:
    narrowed = _compatible_candidates(build, candidates)
    if category in STYLED_CATEGORIES:
        narrowed = _styled_candidates(narrowed, profile.aesthetics)
    elif category == ComponentType.COOLER:
        narrowed = _cooling_candidates(build, narrowed)
    return narrowed


def catalog_minimum_budget(
    catalog: Mapping[ComponentType, Sequence[ComponentSpec]]
) -> float:
    """Price of the cheapest entry in every required category, summed."""
    return sum(
        min(c.price for c in catalog[category])
        for category in REQUIRED_CATEGORIES
        if catalog.get(category)
    )


def _profile_notes(profile: BuildProfile, fulfilment: Fulfilment) -> List[str]:
    notes: List[str] = []
    if profile.budget >= PREMIUM_BUDGET_THRESHOLD:
        notes.append("Premium stability tier: extended stress testing included.")
    if profile.performance_ambition == PerformanceAmbition.EFFICIENT:
        notes.append("Balanced for efficiency: prioritised performance-per-watt.")
    notes.append(
        f"Budget emphasis applied to {profile.priority_component.value.upper()}."
    )
    if fulfilment.priority_flag:
        notes.append("Express build prioritised in production queue.")
    return notes


# ──────────────────────────────────────────────
# Main Allocator
# ──────────────────────────────────────────────


def allocate(
    profile: BuildProfile,
    catalog: Mapping[ComponentType, Sequence[ComponentSpec]],
    minimum_budget: float = MINIMUM_BUDGET,
) -> Allocation:
    """Select one entry per category within the profile's budget shares.

    Args:
        profile: Validated intent profile.
        catalog: Category-grouped, non-empty catalog.
        minimum_budget: Budgets below this fail instead of producing a partial
            build. Raised to the cheapest complete build the catalog allows.

    Returns:
        An Allocation with the candidate build, shares, notes, and fulfilment.

    Raises:
        BudgetTooLow: budget under the effective minimum.
        CatalogUnavailable: catalog empty or missing a required category.
    """
    if not any(catalog.values()):
        raise CatalogUnavailable("Component catalog is empty")

    missing = sorted(c.value for c in REQUIRED_CATEGORIES if not catalog.get(c))
    if missing:
        raise CatalogUnavailable(
            f"Catalog has no entries for required categories: {', '.join(missing)}"
        )

    floor = max(minimum_budget, catalog_minimum_budget(catalog))
    if profile.budget < floor:
        raise BudgetTooLow(profile.budget, floor)

    shares = shares_for_profile(profile)
    allocated = {
        category: round(profile.budget * share, 2)
        for category, share in shares.items()
    }
    fulfilment = fulfilment_for(profile.timeline)
    notes = _profile_notes(profile, fulfilment)
    degraded: List[ComponentType] = []

    build = CandidateBuild()

    for category in SELECTION_ORDER:
        candidates = catalog.get(category, ())
        if not candidates:
            # Only optional categories reach here
            notes.append(
                f"No {category.value} options in the catalog; "
                f"{'stock cooling assumed' if category == ComponentType.COOLER else 'slot left empty'}."
            )
            continue

        candidates = _narrow(category, build, profile, candidates)
        limit = allocated.get(category, 0.0)
        pick = _pick_within(candidates, limit)

        if pick is None:
            pick = _cheapest(candidates)
            degraded.append(category)
            notes.append(
                f"No {category.value} fits the £{limit:,.2f} allocation; "
                f"selected the most affordable option ({pick.name}, £{pick.price:,.2f})."
            )
            logger.warning(
                "Catalog exhausted for %s at £%.2f, degraded to %s",
                category.value, limit, pick.id,
            )

        build = build.with_component(pick)

    total = build.total_price
    if total > profile.budget:
        notes.append(
            f"Selection exceeds the £{profile.budget:,.0f} budget by "
            f"£{total - profile.budget:,.2f} after fallback picks."
        )

    logger.info(
        "Allocated %s build: £%.2f of £%.2f (%d degraded)",
        profile.purpose.value, total, profile.budget, len(degraded),
    )

    return Allocation(
        build=build,
        shares=shares,
        allocated=allocated,
        fulfilment=fulfilment,
        notes=tuple(notes),
        degraded=tuple(degraded),
    )
