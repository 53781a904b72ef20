"""Hardware compatibility rules for candidate builds.

A build is valid only when no rule reports an issue. Each issue carries a
severity: critical issues stop the machine from working at all, normal
issues degrade it.
"""

from __future__ import annotations

import math
import os
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from pcfinder.models.build import CandidateBuild
from pcfinder.models.components import ComponentSpec, ComponentType, Severity

# Minimum PSU headroom over the summed component draw (0.20 = 20%)
PSU_SAFETY_MARGIN = float(os.getenv("PCFINDER_PSU_SAFETY_MARGIN", "0.20"))


# ──────────────────────────────────────────────
# Result Types
# ──────────────────────────────────────────────


@dataclass(frozen=True)
class CompatibilityIssue:
    """A single compatibility problem between two categories."""

    rule: str
    category_pair: Tuple[str, str]
    message: str
    severity: Severity = Severity.NORMAL

    @property
    def critical(self) -> bool:
        return self.severity == Severity.CRITICAL

    def to_dict(self) -> dict:
        return {
            "rule": self.rule,
            "categoryPair": list(self.category_pair),
            "message": self.message,
            "severity": self.severity.value,
        }


@dataclass(frozen=True)
class CompatibilityResult:
    """Result of a full compatibility check."""

    passed: bool
    issues: Tuple[CompatibilityIssue, ...] = field(default_factory=tuple)

    @property
    def critical_issues(self) -> Tuple[CompatibilityIssue, ...]:
        return tuple(i for i in self.issues if i.critical)

    def has_issue(self, rule: str, severity: Optional[Severity] = None) -> bool:
        return any(
            i.rule == rule and (severity is None or i.severity == severity)
            for i in self.issues
        )


# ──────────────────────────────────────────────
# Power Estimation
# ──────────────────────────────────────────────


def estimate_power_draw(build: CandidateBuild) -> int:
    """Summed typical draw of every non-PSU component, in watts."""
    return sum(
        c.power_draw for c in build.components() if c.category != ComponentType.PSU
    )


def psu_wattage(psu: Optional[ComponentSpec]) -> int:
    if psu is None:
        return 0
    return int(psu.spec("wattage", 0) or 0)


def required_psu_wattage(draw: int, margin: float = PSU_SAFETY_MARGIN) -> int:
    """Smallest PSU wattage that clears `draw` by the safety margin."""
    return math.ceil(round(draw * (1 + margin), 6))


# ──────────────────────────────────────────────
# Individual Rule Checkers
# ──────────────────────────────────────────────


def check_cpu_motherboard_socket(
    cpu: ComponentSpec, motherboard: ComponentSpec
) -> Optional[CompatibilityIssue]:
    """RULE 1: CPU socket ∈ motherboard sockets"""
    cpu_sockets = cpu.tags.sockets
    mobo_sockets = motherboard.tags.sockets

    if not cpu_sockets or not mobo_sockets:
        return None  # Can't check if data is missing

    if not set(cpu_sockets) & set(mobo_sockets):
        return CompatibilityIssue(
            rule="cpu_motherboard_socket",
            category_pair=("cpu", "motherboard"),
            message=(
                f"CPU socket ({'/'.join(cpu_sockets)}) does not match "
                f"motherboard socket ({'/'.join(mobo_sockets)})"
            ),
            severity=Severity.CRITICAL,
        )
    return None


def check_ram_motherboard_type(
    ram: ComponentSpec, motherboard: ComponentSpec
) -> Optional[CompatibilityIssue]:
    """RULE 2: RAM memory type == motherboard memory type"""
    ram_type = ram.tags.memory_type
    mobo_type = motherboard.tags.memory_type

    if ram_type is None or mobo_type is None:
        return None

    if ram_type != mobo_type:
        return CompatibilityIssue(
            rule="ram_motherboard_type",
            category_pair=("ram", "motherboard"),
            message=(
                f"RAM type ({ram_type.value}) does not match "
                f"motherboard memory type ({mobo_type.value})"
            ),
            severity=Severity.CRITICAL,
        )
    return None


def check_gpu_motherboard_pcie(
    gpu: ComponentSpec, motherboard: ComponentSpec
) -> Optional[CompatibilityIssue]:
    """RULE 3: GPU PCIe generations ⊆ motherboard PCIe generations"""
    gpu_gens = set(gpu.tags.pcie_gens)
    mobo_gens = set(motherboard.tags.pcie_gens)

    if not gpu_gens or not mobo_gens:
        return None

    if not gpu_gens <= mobo_gens:
        return CompatibilityIssue(
            rule="gpu_motherboard_pcie",
            category_pair=("gpu", "motherboard"),
            message=(
                f"GPU PCIe Gen {'/'.join(str(g) for g in sorted(gpu_gens))} is not "
                f"supported by the motherboard (supports Gen "
                f"{'/'.join(str(g) for g in sorted(mobo_gens))})"
            ),
            severity=Severity.NORMAL,
        )
    return None


def check_psu_headroom(
    psu: ComponentSpec, draw: int, margin: float = PSU_SAFETY_MARGIN
) -> Optional[CompatibilityIssue]:
    """RULE 4: PSU wattage ≥ summed draw × (1 + margin)

    Below the raw draw is critical; inside the margin is normal.
    """
    wattage = psu_wattage(psu)

    if wattage <= 0 or draw <= 0:
        return None

    if wattage < draw:
        return CompatibilityIssue(
            rule="psu_headroom",
            category_pair=("psu", "system"),
            message=(
                f"PSU wattage ({wattage}W) is below the estimated "
                f"system draw ({draw}W)"
            ),
            severity=Severity.CRITICAL,
        )

    headroom = (wattage - draw) / draw
    if headroom < margin:
        return CompatibilityIssue(
            rule="psu_headroom",
            category_pair=("psu", "system"),
            message=(
                f"PSU wattage ({wattage}W) leaves only {headroom:.0%} headroom "
                f"over the estimated draw ({draw}W); {margin:.0%} is recommended"
            ),
            severity=Severity.NORMAL,
        )
    return None


def check_case_gpu_clearance(
    case: ComponentSpec, gpu: ComponentSpec
) -> Optional[CompatibilityIssue]:
    """RULE 5: GPU length ≤ case max GPU length"""
    case_max = case.dimensions.max_gpu_length_mm
    gpu_len = gpu.dimensions.length_mm

    if case_max is None or gpu_len is None:
        return None

    if gpu_len > case_max:
        return CompatibilityIssue(
            rule="case_gpu_clearance",
            category_pair=("case", "gpu"),
            message=(
                f"GPU length ({gpu_len}mm) exceeds case clearance ({case_max}mm)"
            ),
            severity=Severity.CRITICAL,
        )
    return None


# ──────────────────────────────────────────────
# Main Compatibility Check
# ──────────────────────────────────────────────


def _collect_issues(
    build: CandidateBuild, margin: float, include_psu: bool
) -> List[CompatibilityIssue]:
    issues: List[CompatibilityIssue] = []
    cpu, motherboard, gpu = build.cpu, build.motherboard, build.gpu
    psu, case = build.psu, build.case

    # Rule 1: CPU ↔ Motherboard socket
    if cpu and motherboard:
        issue = check_cpu_motherboard_socket(cpu, motherboard)
        if issue:
            issues.append(issue)

    # Rule 2: RAM ↔ Motherboard memory type (every module)
    if motherboard:
        for ram in build.ram:
            issue = check_ram_motherboard_type(ram, motherboard)
            if issue:
                issues.append(issue)

    # Rule 3: GPU ↔ Motherboard PCIe generation
    if gpu and motherboard:
        issue = check_gpu_motherboard_pcie(gpu, motherboard)
        if issue:
            issues.append(issue)

    # Rule 4: PSU headroom over summed draw
    if include_psu and psu:
        issue = check_psu_headroom(psu, estimate_power_draw(build), margin)
        if issue:
            issues.append(issue)

    # Rule 5: Case GPU clearance
    if case and gpu:
        issue = check_case_gpu_clearance(case, gpu)
        if issue:
            issues.append(issue)

    return issues


def platform_issues(build: CandidateBuild) -> List[CompatibilityIssue]:
    """Issues that depend only on which parts are paired (no PSU headroom).

    Used by the allocator to narrow candidates while the build is still
    being assembled and the total draw is not known yet.
    """
    return _collect_issues(build, PSU_SAFETY_MARGIN, include_psu=False)


def check_compatibility(
    build: CandidateBuild, margin: float = PSU_SAFETY_MARGIN
) -> CompatibilityResult:
    """Run every compatibility rule against a candidate build.

    Pure function with no side effects. Returns
    passed=True only when the issue list is empty.
    """
    issues = _collect_issues(build, margin, include_psu=True)
    return CompatibilityResult(passed=len(issues) == 0, issues=tuple(issues))
