from __future__ import annotations

from dataclasses import dataclass, field

from sourdough.cost_scaling import CostScaling
from sourdough.effect import EffectDef


@dataclass
class ProducerDef:
    """Static definition of a purchasable producer unit."""

    id: str
    display_name: str = ""
    description: str = ""
    base_cost: dict[str, float] = field(default_factory=dict)
    cost_scaling: CostScaling = field(default_factory=CostScaling.fixed)
    effects: list[EffectDef] = field(default_factory=list)
    category: str = "producers"

    def __post_init__(self) -> None:
        if not self.display_name:
            self.display_name = self.id


@dataclass(frozen=True)
class PurchaseStatus:
    """Read-only view of a purchasable kind for query results."""

    id: str
    display_name: str
    kind: str
    owned: int
    affordable: bool
    current_cost: dict[str, int]
    category: str
