"""Candidate build, synergy, and recommendation result models."""

from __future__ import annotations

from enum import Enum
from typing import Dict, Iterator, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from pcfinder.models.components import ComponentSpec, ComponentType

# Categories holding exactly one component (or none)
SINGLE_SLOTS = ("case", "motherboard", "cpu", "gpu", "psu", "cooler")

# Categories holding a list of components
MULTI_SLOTS = {"ram": "ram", "storage": "storage", "fan": "fans"}


# ──────────────────────────────────────────────
# Candidate Build
# ──────────────────────────────────────────────


class CandidateBuild(BaseModel):
    """The concrete set of components selected for one recommendation.

    Frozen — `with_component` returns a new build instead of mutating.
    """

    model_config = ConfigDict(frozen=True)

    case: Optional[ComponentSpec] = None
    motherboard: Optional[ComponentSpec] = None
    cpu: Optional[ComponentSpec] = None
    gpu: Optional[ComponentSpec] = None
    psu: Optional[ComponentSpec] = None
    cooler: Optional[ComponentSpec] = None
    ram: Tuple[ComponentSpec, ...] = ()
    storage: Tuple[ComponentSpec, ...] = ()
    fans: Tuple[ComponentSpec, ...] = ()

    def with_component(self, component: ComponentSpec) -> "CandidateBuild":
        """Return a copy with `component` placed in its category slot.

        Single slots are replaced; list slots get the component appended.
        """
        category = component.category.value
        if category in SINGLE_SLOTS:
            return self.model_copy(update={category: component})
        field_name = MULTI_SLOTS[category]
        current = getattr(self, field_name)
        return self.model_copy(update={field_name: current + (component,)})

    def replace_psu(self, psu: ComponentSpec) -> "CandidateBuild":
        return self.model_copy(update={"psu": psu})

    def components(self) -> Iterator[ComponentSpec]:
        """Iterate over every selected component in slot order."""
        for slot in SINGLE_SLOTS:
            c = getattr(self, slot)
            if c is not None:
                yield c
        for field_name in MULTI_SLOTS.values():
            yield from getattr(self, field_name)

    def by_category(self, category: ComponentType) -> List[ComponentSpec]:
        return [c for c in self.components() if c.category == category]

    @property
    def total_price(self) -> float:
        return round(sum(c.price for c in self.components()), 2)

    def selection_ids(self) -> Dict[str, List[str]]:
        """Category → selected component ids, for logging and caching."""
        ids: Dict[str, List[str]] = {}
        for c in self.components():
            ids.setdefault(c.category.value, []).append(c.id)
        return ids


# ──────────────────────────────────────────────
# Synergy
# ──────────────────────────────────────────────


class Grade(str, Enum):
    """Letter banding of the synergy score. A is best, F is worst."""

    A = "A"
    B = "B"
    C = "C"
    D = "D"
    E = "E"
    F = "F"

    @property
    def rank(self) -> int:
        """0 for A through 5 for F — higher rank means a weaker build."""
        return "ABCDEF".index(self.value)

    def at_least(self, other: "Grade") -> bool:
        """True when this grade is `other` or better."""
        return self.rank <= other.rank

    def at_most(self, other: "Grade") -> bool:
        """True when this grade is `other` or worse."""
        return self.rank >= other.rank


class SynergyResult(BaseModel):
    """Derived synergy artifact — always replaced wholesale, never patched."""

    model_config = ConfigDict(frozen=True)

    score: int = Field(ge=0, le=100)
    grade: Grade
    profile: str
    feedback: str = ""
    ctas: Tuple[str, ...] = ()
    triggered_rules: Tuple[str, ...] = ()


# ──────────────────────────────────────────────
# Recommendation Result (output contract)
# ──────────────────────────────────────────────


class PartSummary(BaseModel):
    """Display names per slot, as consumed by the checkout hand-off."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    cpu: str
    gpu: str
    memory: str
    storage: str
    cooling: str
    psu: str
    case: str
    case_fans: Optional[str] = Field(default=None, alias="caseFans")


class Fulfilment(BaseModel):
    """Delivery metadata derived from the requested timeline."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    surcharge: float = 0.0
    priority_flag: bool = Field(default=False, alias="priorityFlag")
    eta_days: int = Field(default=5, alias="etaDays")


class IssueSummary(BaseModel):
    """JSON-friendly compatibility issue."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    rule: str
    category_pair: Tuple[str, str] = Field(alias="categoryPair")
    message: str
    severity: str


class RecommendationResult(BaseModel):
    """Immutable, self-contained result of one recommendation call."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    parts: PartSummary
    fulfilment: Fulfilment
    notes: Tuple[str, ...] = ()
    grade: Grade
    profile: str
    ctas: Tuple[str, ...] = ()
    score: int = Field(ge=0, le=100)
    feedback: str = ""
    valid: bool = True
    issues: Tuple[IssueSummary, ...] = ()
    total_price: float = Field(default=0.0, alias="totalPrice")
    triggered_rules: Tuple[str, ...] = Field(default=(), alias="triggeredRules")
    build: Optional[CandidateBuild] = Field(default=None, exclude=True)

    def to_dict(self) -> dict:
        """Serialize to the JSON output contract (camelCase, no null caseFans)."""
        data = self.model_dump(mode="json", by_alias=True)
        if data["parts"].get("caseFans") is None:
            data["parts"].pop("caseFans", None)
        return data
