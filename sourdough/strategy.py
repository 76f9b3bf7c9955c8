from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable

from sourdough.producer import PurchaseStatus

if TYPE_CHECKING:
    from sourdough.state import EconomyState


@dataclass
class FeedProfile:
    """Configures how often a simulated player feeds the starter."""

    feeds_per_second: float = 0.0
    active_until: Callable[[EconomyState], bool] | None = None
    _carry: float = field(default=0.0, init=False, repr=False)

    def get_feeds(self, state: EconomyState, duration: float) -> int:
        """Number of feeds to perform over *duration* seconds.

        Fractions carry over, so 2 feeds/s at 0.25 s ticks feeds every
        other tick.
        """
        if self.active_until is not None and self.active_until(state):
            return 0
        self._carry += self.feeds_per_second * duration
        feeds = int(self._carry + 1e-9)
        self._carry -= feeds
        return feeds


class Strategy(ABC):
    """Base class for simulation strategies."""

    @abstractmethod
    def decide_purchases(
        self, state: EconomyState, affordable: list[PurchaseStatus]
    ) -> list[str]:
        """Return ordered list of kind IDs to buy."""
        ...

    def get_feeds(self, state: EconomyState, duration: float) -> int:
        """Feeds to perform during this tick. Override or use feed_profile."""
        return 0

    @abstractmethod
    def describe(self) -> str: ...


class GreedyCheapest(Strategy):
    """Buy the cheapest affordable kind first."""

    def __init__(
        self,
        feed_profile: FeedProfile | None = None,
        cost_weights: dict[str, float] | None = None,
    ) -> None:
        self.feed_profile = feed_profile
        self.cost_weights = cost_weights or {}  # holding id -> value in points

    def _weighted_cost(self, cost: dict[str, int]) -> float:
        total = 0.0
        for cur, amt in cost.items():
            total += amt * self.cost_weights.get(cur, 1.0)
        return total

    def decide_purchases(
        self, state: EconomyState, affordable: list[PurchaseStatus]
    ) -> list[str]:
        if not affordable:
            return []
        ordered = sorted(affordable, key=lambda s: self._weighted_cost(s.current_cost))
        return [s.id for s in ordered]

    def get_feeds(self, state: EconomyState, duration: float) -> int:
        if self.feed_profile:
            return self.feed_profile.get_feeds(state, duration)
        return 0

    def describe(self) -> str:
        parts = ["GreedyCheapest"]
        if self.feed_profile and self.feed_profile.feeds_per_second:
            parts.append(f"({self.feed_profile.feeds_per_second} feeds/s)")
        return " ".join(parts)


class PriorityList(Strategy):
    """Follow a designer-specified purchase order."""

    def __init__(
        self,
        priorities: list[tuple[str, int]],
        fallback: Strategy | None = None,
        feed_profile: FeedProfile | None = None,
    ) -> None:
        self.priorities = priorities  # (kind_id, target_owned)
        self.fallback = fallback
        self.feed_profile = feed_profile

    def decide_purchases(
        self, state: EconomyState, affordable: list[PurchaseStatus]
    ) -> list[str]:
        by_id = {s.id: s for s in affordable}

        for kind_id, target in self.priorities:
            status = by_id.get(kind_id)
            if status is not None and status.owned < target:
                return [kind_id]

        if self.fallback:
            return self.fallback.decide_purchases(state, affordable)
        return []

    def get_feeds(self, state: EconomyState, duration: float) -> int:
        if self.feed_profile:
            return self.feed_profile.get_feeds(state, duration)
        return 0

    def describe(self) -> str:
        items = ", ".join(f"{kid}x{cnt}" for kid, cnt in self.priorities)
        return f"PriorityList([{items}])"


class CustomStrategy(Strategy):
    """Strategy defined by callables."""

    def __init__(
        self,
        decide_fn: Callable[
            [EconomyState, list[PurchaseStatus]], list[str]
        ] | None = None,
        feeds_fn: Callable[[EconomyState, float], int] | None = None,
        name: str = "Custom",
    ) -> None:
        self._decide_fn = decide_fn
        self._feeds_fn = feeds_fn
        self._name = name

    def decide_purchases(
        self, state: EconomyState, affordable: list[PurchaseStatus]
    ) -> list[str]:
        if self._decide_fn:
            return self._decide_fn(state, affordable)
        return []

    def get_feeds(self, state: EconomyState, duration: float) -> int:
        if self._feeds_fn:
            return self._feeds_fn(state, duration)
        return 0

    def describe(self) -> str:
        return self._name
