"""Build archetype classification."""

from __future__ import annotations

from typing import Tuple

from pcfinder.engine.metrics import BuildMetrics

UNCLASSIFIED = "Unclassified"

# (label, min vram, min cores, min ram) — first match wins
TIER_PROFILES: Tuple[Tuple[str, int, int, int], ...] = (
    ("Extreme Workstation / 4K Creator", 20, 12, 64),
    ("High-End Gaming & Creation", 16, 8, 32),
    ("Balanced Enthusiast", 12, 6, 32),
    ("Mid-Range Gaming", 8, 6, 16),
    ("Entry Gaming", 6, 4, 16),
)

COMPUTE_PROFILE = "Compute / Multi-VM Focus"


def classify_profile(metrics: BuildMetrics) -> str:
    """Label a build by its GPU, CPU, and RAM tiers."""
    vram, cores, ram = metrics.vram_gb, metrics.cores, metrics.ram_capacity_gb

    for label, min_vram, min_cores, min_ram in TIER_PROFILES:
        if vram >= min_vram and cores >= min_cores and ram >= min_ram:
            return label

    # Lots of cores and memory with little graphics
    if ram >= 64 and cores >= 16 and vram < 10:
        return COMPUTE_PROFILE

    return UNCLASSIFIED
