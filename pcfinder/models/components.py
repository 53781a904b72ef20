"""Shared enums and the catalog component model for the PC Finder engine."""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


# ──────────────────────────────────────────────
# Enums — Shared Vocabulary
# ──────────────────────────────────────────────


class ComponentType(str, Enum):
    """Hardware component categories held in the catalog."""

    CASE = "case"
    MOTHERBOARD = "motherboard"
    CPU = "cpu"
    GPU = "gpu"
    RAM = "ram"
    STORAGE = "storage"
    PSU = "psu"
    COOLER = "cooler"
    FAN = "fan"


class MemoryType(str, Enum):
    """RAM generation types."""

    DDR4 = "DDR4"
    DDR5 = "DDR5"


class StorageInterface(str, Enum):
    """Storage interface types."""

    NVME = "NVMe"
    SATA = "SATA"
    HDD = "HDD"


class CoolingTier(str, Enum):
    """Cooling classes used by the synergy rules."""

    NONE = "none"
    AIR = "air"
    LIQUID = "liquid"


class Severity(str, Enum):
    """Compatibility issue severity."""

    NORMAL = "normal"
    CRITICAL = "critical"


# ──────────────────────────────────────────────
# Component Data Models
# ──────────────────────────────────────────────


class CompatibilityTags(BaseModel):
    """Platform tags checked by the compatibility rules.

    A CPU lists its own socket; a motherboard lists every socket it accepts.
    A GPU lists its PCIe generation; a motherboard lists every generation
    its x16 slot supports.
    """

    model_config = ConfigDict(frozen=True)

    sockets: Tuple[str, ...] = ()
    memory_type: Optional[MemoryType] = None
    pcie_gens: Tuple[int, ...] = ()


class Dimensions(BaseModel):
    """Physical dimensions in millimetres."""

    model_config = ConfigDict(frozen=True)

    length_mm: Optional[int] = Field(default=None, ge=0)
    width_mm: Optional[int] = Field(default=None, ge=0)
    height_mm: Optional[int] = Field(default=None, ge=0)
    max_gpu_length_mm: Optional[int] = Field(default=None, ge=0)


class ComponentSpec(BaseModel):
    """Immutable catalog entry.

    The `specs` dict carries category-specific metrics:
    CPU: {"cores": 8}  GPU: {"vram_gb": 12}  RAM: {"capacity_gb": 32, "speed_mhz": 6000}
    PSU: {"wattage": 850}  Storage: {"interface": "NVMe"}  Cooler: {"cooler_type": "Liquid"}
    """

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    category: ComponentType
    brand: str = ""
    price: float = Field(ge=0, description="Price in GBP (£)")
    performance_score: int = Field(default=50, ge=0, le=100)
    power_draw: int = Field(default=0, ge=0, description="Typical draw in watts")
    tags: CompatibilityTags = Field(default_factory=CompatibilityTags)
    dimensions: Dimensions = Field(default_factory=Dimensions)
    specs: Dict[str, Any] = Field(default_factory=dict)

    def spec(self, key: str, default: Any = None) -> Any:
        """Safely get a category-specific spec value."""
        return self.specs.get(key, default)
