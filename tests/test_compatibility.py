"""Tests for the hardware compatibility rules."""

import pytest

from pcfinder.engine.compatibility import (
    check_case_gpu_clearance,
    check_compatibility,
    check_cpu_motherboard_socket,
    check_gpu_motherboard_pcie,
    check_psu_headroom,
    check_ram_motherboard_type,
    estimate_power_draw,
    platform_issues,
    required_psu_wattage,
)
from pcfinder.models.build import CandidateBuild
from pcfinder.models.components import ComponentSpec, Severity


# ──────────────────────────────────────────────
# Test Fixtures — Helper builders
# ──────────────────────────────────────────────


def _make(category: str, name: str = "Test", specs: dict | None = None, **kw):
    """Quick ComponentSpec factory."""
    return ComponentSpec(
        id=kw.get("id", f"{category}-{name}".lower().replace(" ", "-")),
        name=name,
        category=category,
        price=kw.get("price", 100.0),
        power_draw=kw.get("power_draw", 0),
        tags=kw.get("tags", {}),
        dimensions=kw.get("dimensions", {}),
        specs=specs or {},
    )


def _am5_build(**overrides) -> CandidateBuild:
    parts = {
        "cpu": _make("cpu", "Ryzen 5 7600", {"cores": 6}, tags={"sockets": ["AM5"]}, power_draw=88),
        "motherboard": _make(
            "motherboard", "B650M",
            tags={"sockets": ["AM5"], "memory_type": "DDR5", "pcie_gens": [4]},
            power_draw=45,
        ),
        "ram": _make("ram", "DDR5 Kit", {"capacity_gb": 32}, tags={"memory_type": "DDR5"}, power_draw=8),
        "gpu": _make("gpu", "RTX 4070", {"vram_gb": 12}, tags={"pcie_gens": [4]},
                     dimensions={"length_mm": 267}, power_draw=200),
        "psu": _make("psu", "750W", {"wattage": 750}),
        "case": _make("case", "Mesh", dimensions={"max_gpu_length_mm": 360}),
    }
    parts.update(overrides)
    build = CandidateBuild()
    for component in parts.values():
        build = build.with_component(component)
    return build


# ──────────────────────────────────────────────
# Rule 1: CPU ↔ Motherboard socket
# ──────────────────────────────────────────────


class TestRule1CpuMotherboardSocket:
    def test_matching_socket_passes(self):
        cpu = _make("cpu", "Ryzen 5 7600", tags={"sockets": ["AM5"]})
        mobo = _make("motherboard", "B650M", tags={"sockets": ["AM5"]})
        assert check_cpu_motherboard_socket(cpu, mobo) is None

    def test_board_listing_several_sockets_passes(self):
        cpu = _make("cpu", "Core i5", tags={"sockets": ["LGA1700"]})
        mobo = _make("motherboard", "Dual", tags={"sockets": ["LGA1200", "LGA1700"]})
        assert check_cpu_motherboard_socket(cpu, mobo) is None

    def test_mismatched_socket_is_critical(self):
        cpu = _make("cpu", "Ryzen 5 7600", tags={"sockets": ["AM5"]})
        mobo = _make("motherboard", "B560M", tags={"sockets": ["LGA1200"]})
        v = check_cpu_motherboard_socket(cpu, mobo)
        assert v is not None
        assert v.rule == "cpu_motherboard_socket"
        assert v.severity == Severity.CRITICAL
        assert v.category_pair == ("cpu", "motherboard")

    def test_missing_socket_skipped(self):
        cpu = _make("cpu", "Unknown CPU")
        mobo = _make("motherboard", "B650M", tags={"sockets": ["AM5"]})
        assert check_cpu_motherboard_socket(cpu, mobo) is None


# ──────────────────────────────────────────────
# Rule 2: RAM ↔ Motherboard memory type
# ──────────────────────────────────────────────


class TestRule2RamMotherboardType:
    def test_matching_type_passes(self):
        ram = _make("ram", "DDR5 Kit", tags={"memory_type": "DDR5"})
        mobo = _make("motherboard", "B650M", tags={"memory_type": "DDR5"})
        assert check_ram_motherboard_type(ram, mobo) is None

    def test_mismatched_type_fails(self):
        ram = _make("ram", "DDR4 Kit", tags={"memory_type": "DDR4"})
        mobo = _make("motherboard", "B650M", tags={"memory_type": "DDR5"})
        v = check_ram_motherboard_type(ram, mobo)
        assert v is not None
        assert "DDR4" in v.message
        assert v.critical


# ──────────────────────────────────────────────
# Rule 3: GPU ↔ Motherboard PCIe
# ──────────────────────────────────────────────


class TestRule3GpuMotherboardPcie:
    def test_supported_generation_passes(self):
        gpu = _make("gpu", "RTX 4070", tags={"pcie_gens": [4]})
        mobo = _make("motherboard", "X670E", tags={"pcie_gens": [4, 5]})
        assert check_gpu_motherboard_pcie(gpu, mobo) is None

    def test_unsupported_generation_is_normal(self):
        gpu = _make("gpu", "Next Gen", tags={"pcie_gens": [5]})
        mobo = _make("motherboard", "B650M", tags={"pcie_gens": [3, 4]})
        v = check_gpu_motherboard_pcie(gpu, mobo)
        assert v is not None
        assert v.severity == Severity.NORMAL


# ──────────────────────────────────────────────
# Rule 4: PSU headroom
# ──────────────────────────────────────────────


class TestRule4PsuHeadroom:
    def test_ample_headroom_passes(self):
        psu = _make("psu", "750W", {"wattage": 750})
        assert check_psu_headroom(psu, 400) is None

    def test_inside_margin_is_normal(self):
        psu = _make("psu", "500W", {"wattage": 500})
        v = check_psu_headroom(psu, 450)
        assert v is not None
        assert v.severity == Severity.NORMAL

    def test_below_draw_is_critical(self):
        psu = _make("psu", "500W", {"wattage": 500})
        v = check_psu_headroom(psu, 2000)
        assert v is not None
        assert v.rule == "psu_headroom"
        assert v.severity == Severity.CRITICAL

    def test_exact_margin_passes(self):
        psu = _make("psu", "600W", {"wattage": 600})
        assert check_psu_headroom(psu, 500) is None

    def test_required_wattage_rounds_up(self):
        assert required_psu_wattage(408) == 490
        assert required_psu_wattage(500) == 600


# ──────────────────────────────────────────────
# Rule 5: Case ↔ GPU clearance
# ──────────────────────────────────────────────


class TestRule5CaseGpuClearance:
    def test_gpu_fits(self):
        case = _make("case", "Mesh", dimensions={"max_gpu_length_mm": 360})
        gpu = _make("gpu", "RTX 4070", dimensions={"length_mm": 267})
        assert check_case_gpu_clearance(case, gpu) is None

    def test_gpu_too_long(self):
        case = _make("case", "ITX", dimensions={"max_gpu_length_mm": 280})
        gpu = _make("gpu", "RTX 4090", dimensions={"length_mm": 336})
        v = check_case_gpu_clearance(case, gpu)
        assert v is not None
        assert "336mm" in v.message


# ──────────────────────────────────────────────
# Full Compatibility Check
# ──────────────────────────────────────────────


class TestFullCompatibilityCheck:
    def test_valid_build_passes(self):
        result = check_compatibility(_am5_build())
        assert result.passed is True
        assert result.issues == ()

    def test_socket_mismatch_is_never_valid(self):
        intel = _make("cpu", "Core i5", tags={"sockets": ["LGA1700"]}, power_draw=95)
        result = check_compatibility(_am5_build(cpu=intel))
        assert result.passed is False
        assert result.has_issue("cpu_motherboard_socket", Severity.CRITICAL)

    def test_huge_draw_on_small_psu(self):
        hog = _make("gpu", "Space Heater", {"vram_gb": 24}, tags={"pcie_gens": [4]},
                    dimensions={"length_mm": 300}, power_draw=2000 - 88 - 45 - 8)
        small = _make("psu", "500W", {"wattage": 500})
        build = _am5_build(gpu=hog, psu=small)
        assert estimate_power_draw(build) == 2000

        result = check_compatibility(build)
        assert result.passed is False
        assert result.has_issue("psu_headroom", Severity.CRITICAL)

    def test_issues_follow_rule_order(self):
        build = _am5_build(
            cpu=_make("cpu", "Core i5", tags={"sockets": ["LGA1700"]}),
            case=_make("case", "ITX", dimensions={"max_gpu_length_mm": 200}),
        )
        rules = [i.rule for i in check_compatibility(build).issues]
        assert rules == ["cpu_motherboard_socket", "case_gpu_clearance"]

    def test_empty_build_passes(self):
        assert check_compatibility(CandidateBuild()).passed is True

    def test_platform_issues_ignore_psu(self):
        build = _am5_build(psu=_make("psu", "100W", {"wattage": 100}))
        assert platform_issues(build) == []
        assert check_compatibility(build).has_issue("psu_headroom")

    def test_issue_to_dict_uses_camel_case(self):
        mobo = _make("motherboard", "B560M", tags={"sockets": ["LGA1200"]})
        issue = check_compatibility(_am5_build(motherboard=mobo)).issues[0]
        data = issue.to_dict()
        assert data["categoryPair"] == ["cpu", "motherboard"]
        assert data["severity"] == "critical"

    @pytest.mark.parametrize("margin, expected", [(0.20, False), (0.05, True)])
    def test_margin_is_configurable(self, margin, expected):
        # 563W draw on a 650W unit is ~15% headroom
        build = _am5_build(
            gpu=_make("gpu", "RTX 4080", {"vram_gb": 16}, tags={"pcie_gens": [4]},
                      dimensions={"length_mm": 310}, power_draw=422),
            psu=_make("psu", "650W", {"wattage": 650}),
        )
        assert check_compatibility(build, margin=margin).passed is expected
