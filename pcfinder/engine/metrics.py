"""Reduce a candidate build to the numeric metrics the scorer works on."""

from __future__ import annotations

from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from pcfinder.engine.compatibility import estimate_power_draw, psu_wattage
from pcfinder.models.build import CandidateBuild
from pcfinder.models.components import CoolingTier, StorageInterface


class BuildMetrics(BaseModel):
    """Scalar view of a build. Missing parts contribute zero."""

    model_config = ConfigDict(frozen=True)

    cores: int = Field(default=0, ge=0)
    vram_gb: int = Field(default=0, ge=0)
    ram_capacity_gb: int = Field(default=0, ge=0)
    ram_speed_mhz: int = Field(default=0, ge=0)
    psu_wattage: int = Field(default=0, ge=0)
    total_power_draw: int = Field(default=0, ge=0)
    psu_load_fraction: float = Field(default=0.0, ge=0)
    cooling_tier: CoolingTier = CoolingTier.NONE
    storage_interface: Optional[StorageInterface] = None


def _cooling_tier(build: CandidateBuild) -> CoolingTier:
    if build.cooler is None:
        return CoolingTier.NONE
    kind = str(build.cooler.spec("cooler_type", "Air")).lower()
    return CoolingTier.LIQUID if kind == "liquid" else CoolingTier.AIR


def _primary_storage(build: CandidateBuild) -> Optional[StorageInterface]:
    if not build.storage:
        return None
    raw = build.storage[0].spec("interface")
    if raw is None:
        return None
    try:
        return StorageInterface(raw)
    except ValueError:
        # Tolerate free-form labels such as "SATA SSD" or "NVMe Gen4"
        for iface in StorageInterface:
            if iface.value.lower() in str(raw).lower():
                return iface
        return None


def derive_metrics(build: CandidateBuild) -> BuildMetrics:
    """Collapse a build into cores, VRAM, RAM, PSU load, cooling, and storage."""
    cores = int(build.cpu.spec("cores", 0)) if build.cpu else 0
    vram = int(build.gpu.spec("vram_gb", 0)) if build.gpu else 0

    ram_capacity = sum(int(m.spec("capacity_gb", 0)) for m in build.ram)
    speeds = [int(m.spec("speed_mhz", 0)) for m in build.ram if m.spec("speed_mhz")]
    ram_speed = min(speeds) if speeds else 0  # mixed kits run at the slowest

    wattage = psu_wattage(build.psu)
    draw = estimate_power_draw(build)
    load = round(draw / wattage, 4) if wattage > 0 else 0.0

    return BuildMetrics(
        cores=cores,
        vram_gb=vram,
        ram_capacity_gb=ram_capacity,
        ram_speed_mhz=ram_speed,
        psu_wattage=wattage,
        total_power_draw=draw,
        psu_load_fraction=load,
        cooling_tier=_cooling_tier(build),
        storage_interface=_primary_storage(build),
    )


def detect_bottlenecks(metrics: BuildMetrics) -> Tuple[bool, bool]:
    """Return (cpu_bottleneck, gpu_bottleneck) flags for the advisor.

    CPU-bound: a 12GB+ card paired with fewer than 8 cores.
    GPU-bound: 8+ cores paired with a card under 8GB.
    """
    cpu_bound = metrics.vram_gb >= 12 and 0 < metrics.cores < 8
    gpu_bound = metrics.cores >= 8 and metrics.vram_gb < 8
    return cpu_bound, gpu_bound
