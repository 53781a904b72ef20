"""Questionnaire answers: the typed intent profile fed into the engine."""

from __future__ import annotations

from enum import Enum
from typing import Any, Mapping, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from pcfinder.errors import InvalidProfile


class Purpose(str, Enum):
    """What the machine is for — selectable, not free-text."""

    GAMING = "gaming"
    CREATIVE = "creative"
    CONTENT_CREATION = "content_creation"
    PROFESSIONAL = "professional"
    DEVELOPMENT = "development"
    HOME = "home"


class PerformanceAmbition(str, Enum):
    MAXIMUM = "maximum"
    HIGH = "high"
    BALANCED = "balanced"
    EFFICIENT = "efficient"


class PriorityComponent(str, Enum):
    GPU = "gpu"
    CPU = "cpu"
    MEMORY = "memory"
    STORAGE = "storage"


class Aesthetics(str, Enum):
    RGB_MAX = "rgb_max"
    RGB_MODERATE = "rgb_moderate"
    MINIMAL = "minimal"


class Timeline(str, Enum):
    RUSH = "rush"
    STANDARD = "standard"
    FLEXIBLE = "flexible"


class BuildProfile(BaseModel):
    """User intent snapshot — created once per session, immutable afterwards.

    Every field is an enum except `budget`. JSON input uses the camelCase
    names the questionnaire front end sends; snake_case is accepted too.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    purpose: Purpose
    budget: float = Field(gt=0, description="Total budget in GBP (£)")
    performance_ambition: PerformanceAmbition = Field(alias="performanceAmbition")
    priority_component: PriorityComponent = Field(alias="priorityComponent")
    aesthetics: Aesthetics
    timeline: Timeline


def parse_profile(answers: Union[BuildProfile, Mapping[str, Any]]) -> BuildProfile:
    """Validate raw questionnaire answers into a BuildProfile.

    Raises InvalidProfile listing every offending field; pydantic's own
    ValidationError never escapes.
    """
    if isinstance(answers, BuildProfile):
        return answers
    if not isinstance(answers, Mapping):
        raise InvalidProfile(
            f"Profile must be a mapping, got {type(answers).__name__}"
        )

    try:
        return BuildProfile.model_validate(dict(answers))
    except ValidationError as e:
        errors = [
            {
                "field": ".".join(str(part) for part in err["loc"]),
                "message": err["msg"],
            }
            for err in e.errors()
        ]
        fields = ", ".join(err["field"] for err in errors)
        raise InvalidProfile(f"Invalid build profile: {fields}", errors=errors) from e
