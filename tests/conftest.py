"""Shared fixtures — the fixed 10-entry catalog used by the golden scenario."""

from __future__ import annotations

from datetime import date

import pytest

from pcfinder.catalog.repository import InMemoryCatalog
from pcfinder.models.components import ComponentSpec


GOLDEN_COMPONENTS = [
    {
        "id": "cpu-r5-7600", "name": "AMD Ryzen 5 7600", "category": "cpu",
        "brand": "AMD", "price": 199.0, "performance_score": 64, "power_draw": 88,
        "tags": {"sockets": ["AM5"]}, "specs": {"cores": 6},
    },
    {
        "id": "cpu-r7-7800x3d", "name": "AMD Ryzen 7 7800X3D", "category": "cpu",
        "brand": "AMD", "price": 339.0, "performance_score": 82, "power_draw": 120,
        "tags": {"sockets": ["AM5"]}, "specs": {"cores": 8},
    },
    {
        "id": "mb-b650", "name": "MSI B650M Mortar WiFi", "category": "motherboard",
        "brand": "MSI", "price": 129.0, "performance_score": 60, "power_draw": 45,
        "tags": {"sockets": ["AM5"], "memory_type": "DDR5", "pcie_gens": [4]},
    },
    {
        "id": "ram-16-ddr5", "name": "16GB DDR5-5600", "category": "ram",
        "brand": "Corsair", "price": 59.0, "performance_score": 55, "power_draw": 6,
        "tags": {"memory_type": "DDR5"}, "specs": {"capacity_gb": 16, "speed_mhz": 5600},
    },
    {
        "id": "ram-32-ddr5", "name": "32GB DDR5-6000", "category": "ram",
        "brand": "G.Skill", "price": 125.0, "performance_score": 72, "power_draw": 8,
        "tags": {"memory_type": "DDR5"}, "specs": {"capacity_gb": 32, "speed_mhz": 6000},
    },
    {
        "id": "gpu-rx7800xt", "name": "AMD Radeon RX 7800 XT 16GB", "category": "gpu",
        "brand": "AMD", "price": 479.0, "performance_score": 76, "power_draw": 263,
        "tags": {"pcie_gens": [4]}, "dimensions": {"length_mm": 267},
        "specs": {"vram_gb": 16},
    },
    {
        "id": "gpu-4070tis", "name": "NVIDIA RTX 4070 Ti Super 16GB", "category": "gpu",
        "brand": "NVIDIA", "price": 749.0, "performance_score": 82, "power_draw": 285,
        "tags": {"pcie_gens": [4]}, "dimensions": {"length_mm": 305},
        "specs": {"vram_gb": 16},
    },
    {
        "id": "ssd-1tb-nvme", "name": "1TB NVMe Gen4 SSD", "category": "storage",
        "brand": "Samsung", "price": 69.0, "performance_score": 62, "power_draw": 6,
        "specs": {"interface": "NVMe", "capacity_gb": 1000},
    },
    {
        "id": "psu-750", "name": "750W 80+ Gold PSU", "category": "psu",
        "brand": "Corsair", "price": 89.0, "performance_score": 62,
        "specs": {"wattage": 750},
    },
    {
        "id": "case-mesh", "name": "Airflow Mesh Case", "category": "case",
        "brand": "Montech", "price": 42.0, "performance_score": 50,
        "dimensions": {"max_gpu_length_mm": 360},
    },
]

GOLDEN_PROFILE = {
    "purpose": "gaming",
    "budget": 1500,
    "performanceAmbition": "high",
    "priorityComponent": "gpu",
    "aesthetics": "rgb_moderate",
    "timeline": "standard",
}

# No launch season, sale, or back-to-school advice in June
FIXED_TODAY = date(2025, 6, 15)


@pytest.fixture
def golden_catalog() -> InMemoryCatalog:
    return InMemoryCatalog(ComponentSpec.model_validate(c) for c in GOLDEN_COMPONENTS)


@pytest.fixture
def golden_profile() -> dict:
    return dict(GOLDEN_PROFILE)


@pytest.fixture
def fixed_today() -> date:
    return FIXED_TODAY
