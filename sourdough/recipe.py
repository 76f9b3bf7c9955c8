from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import TYPE_CHECKING

from sourdough.cost_scaling import CostScaling

if TYPE_CHECKING:
    from sourdough.state import EconomyState


class OutputKind(Enum):
    RESOURCE = auto()
    PRODUCER = auto()
    STARTER_LEVEL = auto()


@dataclass
class RecipeDef:
    """A conversion: spend input holdings, gain *batch* units of one output."""

    id: str
    display_name: str = ""
    description: str = ""
    inputs: dict[str, float] = field(default_factory=dict)
    cost_scaling: CostScaling = field(default_factory=CostScaling.fixed)
    output_kind: OutputKind = OutputKind.RESOURCE
    output: str = ""
    batch: int = 1
    category: str = "recipes"

    def __post_init__(self) -> None:
        if not self.display_name:
            self.display_name = self.id

    def cost_basis(self, state: EconomyState) -> int:
        """Count that drives cost scaling: how much of the output is held."""
        if self.output_kind is OutputKind.STARTER_LEVEL:
            return state.starter_level - 1
        if self.output_kind is OutputKind.PRODUCER:
            return state.producer_count(self.output)
        return state.resource_count(self.output)
