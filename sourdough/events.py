from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Union


@dataclass(frozen=True)
class GainEvent:
    """Something was credited: a feed, or one firing of a production effect."""

    source: str
    target: str
    amount: int
    time: float


@dataclass(frozen=True)
class PurchaseEvent:
    """A purchase or conversion was applied."""

    kind_id: str
    cost_paid: dict[str, int] = field(default_factory=dict)
    output: str = ""
    amount: int = 1
    time: float = 0.0


EconomyEvent = Union[GainEvent, PurchaseEvent]
Listener = Callable[[EconomyEvent], None]
