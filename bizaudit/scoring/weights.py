"""
Weight Resolver

Selects the weighting profile applied to the seven category scores. Groups
with meaningfully different priorities carry an override; every other
sub-vertical (and no sub-vertical at all) uses the base profile.
"""

from dataclasses import dataclass, fields
from typing import Dict, Optional

from .subniches import SubNicheGroup, get_sub_niche_group

WEIGHT_TOLERANCE = 0.001


@dataclass(frozen=True)
class WeightProfile:
    """Seven category weights summing to 1.0."""
    technology: float
    leads: float
    scheduling: float
    communication: float
    followUp: float
    operations: float
    financial: float

    def __post_init__(self):
        if abs(self.total - 1.0) > WEIGHT_TOLERANCE:
            raise ValueError(f"Weight profile sums to {self.total:.3f}, expected 1.0")

    @property
    def total(self) -> float:
        return sum(getattr(self, f.name) for f in fields(self))

    def weight_for(self, category: str) -> float:
        return getattr(self, category)

    def to_dict(self) -> Dict[str, float]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


BASE_WEIGHTS = WeightProfile(
    technology=0.10, leads=0.20, scheduling=0.15,
    communication=0.10, followUp=0.15, operations=0.15, financial=0.15,
)

WEIGHT_OVERRIDES: Dict[SubNicheGroup, WeightProfile] = {
    # Emergency-driven: dispatch speed is the competitive edge
    SubNicheGroup.REACTIVE: WeightProfile(
        technology=0.10, leads=0.20, scheduling=0.20,
        communication=0.10, followUp=0.10, operations=0.15, financial=0.15,
    ),
    # Subscription revenue lives on retention
    SubNicheGroup.RECURRING: WeightProfile(
        technology=0.10, leads=0.15, scheduling=0.15,
        communication=0.10, followUp=0.20, operations=0.15, financial=0.15,
    ),
    # High-value projects: margins are won in operations and financial control
    SubNicheGroup.PROJECT_BASED: WeightProfile(
        technology=0.10, leads=0.15, scheduling=0.10,
        communication=0.10, followUp=0.15, operations=0.20, financial=0.20,
    ),
    SubNicheGroup.COMMERCIAL: WeightProfile(
        technology=0.10, leads=0.15, scheduling=0.20,
        communication=0.10, followUp=0.10, operations=0.20, financial=0.15,
    ),
    SubNicheGroup.PROPERTY_MANAGEMENT: WeightProfile(
        technology=0.10, leads=0.10, scheduling=0.10,
        communication=0.15, followUp=0.15, operations=0.20, financial=0.20,
    ),
    SubNicheGroup.NEW_CONSTRUCTION: WeightProfile(
        technology=0.10, leads=0.20, scheduling=0.20,
        communication=0.10, followUp=0.15, operations=0.10, financial=0.15,
    ),
    SubNicheGroup.LUXURY_RESORT: WeightProfile(
        technology=0.15, leads=0.15, scheduling=0.10,
        communication=0.15, followUp=0.20, operations=0.10, financial=0.15,
    ),
    # residential_sales: base profile
}


def resolve_weights(sub_niche: Optional[str] = None) -> WeightProfile:
    """Weight profile for a sub-vertical id; base profile when none applies."""
    group = get_sub_niche_group(sub_niche)
    if group is None:
        return BASE_WEIGHTS
    return WEIGHT_OVERRIDES.get(group, BASE_WEIGHTS)
