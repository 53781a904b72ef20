"""Recommendation facade — wires the engine stages into one call.

Flow:
  parse profile → allocate → validate (→ one PSU fix) → metrics
  → synergy score → profile → advisories → RecommendationResult

Every stage is a pure function over the injected catalog, so the facade
holds no per-request state and can be shared across threads.
"""

from __future__ import annotations

import hashlib
import json
import logging
import random
from datetime import date
from typing import Any, Callable, List, Mapping, Optional, Tuple, Union

from pcfinder.advisor.composer import (
    AdvisoryContext,
    compose_advisories,
    grade_feedback,
    use_case_for_purpose,
)
from pcfinder.catalog.repository import CatalogRepository
from pcfinder.engine.allocator import MINIMUM_BUDGET, allocate
from pcfinder.engine.compatibility import (
    CompatibilityResult,
    check_compatibility,
    estimate_power_draw,
    psu_wattage,
    required_psu_wattage,
)
from pcfinder.engine.metrics import BuildMetrics, derive_metrics, detect_bottlenecks
from pcfinder.engine.profiles import classify_profile
from pcfinder.engine.synergy import resolve_points, score_synergy
from pcfinder.models.build import (
    CandidateBuild,
    Fulfilment,
    IssueSummary,
    PartSummary,
    RecommendationResult,
    SynergyResult,
)
from pcfinder.models.components import ComponentSpec, ComponentType, Severity
from pcfinder.models.profile import BuildProfile, parse_profile

logger = logging.getLogger(__name__)

NOT_SELECTED = "Not selected"
STOCK_COOLER = "Stock CPU cooler"


# ──────────────────────────────────────────────
# Helpers
# ──────────────────────────────────────────────


def _seeded_rng(payload: Any) -> random.Random:
    """Random source seeded from the request, so equal inputs word alike."""
    raw = json.dumps(payload, sort_keys=True, default=str)
    return random.Random(int(hashlib.sha256(raw.encode()).hexdigest()[:16], 16))


def _names(parts: Tuple[ComponentSpec, ...]) -> str:
    return " + ".join(p.name for p in parts) if parts else NOT_SELECTED


def summarize_parts(build: CandidateBuild) -> PartSummary:
    """Display names per slot for the checkout hand-off."""
    return PartSummary(
        cpu=build.cpu.name if build.cpu else NOT_SELECTED,
        gpu=build.gpu.name if build.gpu else NOT_SELECTED,
        memory=_names(build.ram),
        storage=_names(build.storage),
        cooling=build.cooler.name if build.cooler else STOCK_COOLER,
        psu=build.psu.name if build.psu else NOT_SELECTED,
        case=build.case.name if build.case else NOT_SELECTED,
        case_fans=_names(build.fans) if build.fans else None,
    )


def _issue_summaries(result: CompatibilityResult) -> Tuple[IssueSummary, ...]:
    return tuple(
        IssueSummary(
            rule=i.rule,
            category_pair=i.category_pair,
            message=i.message,
            severity=i.severity.value,
        )
        for i in result.issues
    )


# ──────────────────────────────────────────────
# Facade
# ──────────────────────────────────────────────


class RecommendationFacade:
    """Single entry point over the recommendation engine.

    Args:
        catalog: Read-only component catalog.
        points: Optional synergy rule point overrides.
        clock: Returns today's date; drives the market-timing advisory.
        minimum_budget: Smallest budget that yields a complete build.
    """

    def __init__(
        self,
        catalog: CatalogRepository,
        points: Optional[Mapping[str, int]] = None,
        clock: Callable[[], date] = date.today,
        minimum_budget: float = MINIMUM_BUDGET,
    ) -> None:
        self.catalog = catalog
        self.points = resolve_points(points)
        self.clock = clock
        self.minimum_budget = minimum_budget

    # ── Full pipeline ──

    def recommend(
        self,
        answers: Union[BuildProfile, Mapping[str, Any]],
        rng: Optional[random.Random] = None,
    ) -> RecommendationResult:
        """Turn questionnaire answers into a complete recommendation.

        Raises:
            InvalidProfile: answers missing, unrecognised, or budget too low.
            CatalogUnavailable: catalog lacks a required category.
        """
        profile = parse_profile(answers)
        if rng is None:
            rng = _seeded_rng(profile.model_dump(mode="json"))

        logger.info(
            "Recommending %s build: budget £%.2f, ambition=%s, priority=%s",
            profile.purpose.value,
            profile.budget,
            profile.performance_ambition.value,
            profile.priority_component.value,
        )

        allocation = allocate(profile, self.catalog.grouped(), self.minimum_budget)
        build = allocation.build
        notes: List[str] = list(allocation.notes)

        compat = check_compatibility(build)
        if compat.has_issue("psu_headroom", Severity.CRITICAL):
            build, note = self._upgrade_psu(build)
            notes.append(note)
            if build.total_price > max(profile.budget, allocation.total_price):
                notes.append(
                    f"Power supply upgrade takes the selection "
                    f"£{build.total_price - profile.budget:,.2f} over the "
                    f"£{profile.budget:,.0f} budget."
                )
            # Re-validate exactly once; anything left is reported as-is
            compat = check_compatibility(build)

        metrics = derive_metrics(build)
        use_case = use_case_for_purpose(profile.purpose, metrics.vram_gb)
        synergy = self._synergy(build, metrics, use_case, rng)

        if not compat.passed:
            logger.warning(
                "Build has %d unresolved compatibility issue(s): %s",
                len(compat.issues),
                [i.rule for i in compat.issues],
            )

        logger.info(
            "Recommendation ready: score %d (%s), profile=%s, total £%.2f",
            synergy.score, synergy.grade.value, synergy.profile, build.total_price,
        )

        return self._result(build, synergy, compat, allocation.fulfilment, tuple(notes))

    # ── Caller-assembled builds ──

    def evaluate_build(
        self,
        build: CandidateBuild,
        context: Optional[AdvisoryContext] = None,
        rng: Optional[random.Random] = None,
    ) -> RecommendationResult:
        """Validate, score, classify and advise on an existing build.

        No allocation and no PSU fix: the caller's selection is judged as-is.
        """
        if rng is None:
            rng = _seeded_rng(build.selection_ids())

        compat = check_compatibility(build)
        metrics = derive_metrics(build)
        if context is None:
            synergy = self._synergy(build, metrics, None, rng)
        else:
            synergy = self._score(metrics, context, rng)

        return self._result(build, synergy, compat, Fulfilment(), ())

    # ── Internals ──

    def _upgrade_psu(self, build: CandidateBuild) -> Tuple[CandidateBuild, str]:
        """Swap in a PSU that covers the draw. Called at most once per build.

        Prefers the cheapest unit that clears the safety margin; otherwise the
        largest unit above the current one.
        """
        draw = estimate_power_draw(build)
        required = required_psu_wattage(draw)
        current = psu_wattage(build.psu)
        psus = self.catalog.by_category(ComponentType.PSU)

        adequate = [p for p in psus if psu_wattage(p) >= required]
        if adequate:
            pick = min(adequate, key=lambda p: (p.price, -p.performance_score, p.id))
        else:
            larger = [p for p in psus if psu_wattage(p) > current]
            if not larger:
                logger.warning("No PSU in catalog exceeds %dW for a %dW draw", current, draw)
                return build, (
                    f"No power supply in the catalog covers the estimated {draw}W draw."
                )
            pick = max(larger, key=lambda p: (psu_wattage(p), -p.price, p.id))

        logger.info("PSU upgraded %dW → %dW for %dW draw", current, psu_wattage(pick), draw)
        return build.replace_psu(pick), (
            f"Power supply upgraded to {pick.name} to cover the estimated {draw}W draw."
        )

    def _synergy(
        self,
        build: CandidateBuild,
        metrics: BuildMetrics,
        use_case: Optional[str],
        rng: random.Random,
    ) -> SynergyResult:
        cpu_bound, gpu_bound = detect_bottlenecks(metrics)
        context = AdvisoryContext(
            total_price=build.total_price,
            use_case=use_case,
            storage_interface=metrics.storage_interface,
            cpu_bottleneck=cpu_bound,
            gpu_bottleneck=gpu_bound,
            ram_speed_mhz=metrics.ram_speed_mhz,
            today=self.clock(),
        )
        return self._score(metrics, context, rng)

    def _score(
        self, metrics: BuildMetrics, context: AdvisoryContext, rng: random.Random
    ) -> SynergyResult:
        outcome = score_synergy(metrics, self.points)
        return SynergyResult(
            score=outcome.score,
            grade=outcome.grade,
            profile=classify_profile(metrics),
            feedback=grade_feedback(outcome.grade, rng),
            ctas=compose_advisories(outcome.grade, metrics, context, rng),
            triggered_rules=outcome.triggered_rules,
        )

    def _result(
        self,
        build: CandidateBuild,
        synergy: SynergyResult,
        compat: CompatibilityResult,
        fulfilment: Fulfilment,
        notes: Tuple[str, ...],
    ) -> RecommendationResult:
        return RecommendationResult(
            parts=summarize_parts(build),
            fulfilment=fulfilment,
            notes=notes,
            grade=synergy.grade,
            profile=synergy.profile,
            ctas=synergy.ctas,
            score=synergy.score,
            feedback=synergy.feedback,
            valid=compat.passed,
            issues=_issue_summaries(compat),
            total_price=build.total_price,
            triggered_rules=synergy.triggered_rules,
            build=build,
        )
