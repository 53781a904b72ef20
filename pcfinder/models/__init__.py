"""Pydantic models for profiles, components, builds, and results."""

from pcfinder.models.build import (
    CandidateBuild,
    Fulfilment,
    Grade,
    IssueSummary,
    PartSummary,
    RecommendationResult,
    SynergyResult,
)
from pcfinder.models.components import (
    CompatibilityTags,
    ComponentSpec,
    ComponentType,
    CoolingTier,
    Dimensions,
    MemoryType,
    Severity,
    StorageInterface,
)
from pcfinder.models.profile import (
    Aesthetics,
    BuildProfile,
    PerformanceAmbition,
    PriorityComponent,
    Purpose,
    Timeline,
    parse_profile,
)

__all__ = [
    # Components & enums
    "CompatibilityTags",
    "ComponentSpec",
    "ComponentType",
    "CoolingTier",
    "Dimensions",
    "MemoryType",
    "Severity",
    "StorageInterface",
    # Profile
    "Aesthetics",
    "BuildProfile",
    "PerformanceAmbition",
    "PriorityComponent",
    "Purpose",
    "Timeline",
    "parse_profile",
    # Build models
    "CandidateBuild",
    "Fulfilment",
    "Grade",
    "IssueSummary",
    "PartSummary",
    "RecommendationResult",
    "SynergyResult",
]
