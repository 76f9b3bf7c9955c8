# sourdough - Idle Sourdough Starter economy engine

from sourdough.cost_scaling import CostScaling
from sourdough.resource import POINTS, ResourceDef
from sourdough.effect import Effect, EffectDef, EffectType, StateDelta
from sourdough.producer import ProducerDef, PurchaseStatus
from sourdough.recipe import OutputKind, RecipeDef
from sourdough.definition import EconomyConfig, EconomyDefinition
from sourdough.state import EconomyState, PlayerIdentity
from sourdough.snapshot import RANKING_METRIC, EconomySnapshot
from sourdough.events import GainEvent, PurchaseEvent
from sourdough.scheduler import ProductionClock, ProductionScheduler
from sourdough.engine import EconomyEngine
from sourdough.persistence import (
    InMemoryBackend,
    JsonFileBackend,
    PersistenceBackend,
    PersistenceUnavailable,
)
from sourdough.identity import FileIdentityStore, IdentityStore, MemoryIdentityStore
from sourdough.session import GameSession, LeaderboardResult, LoadResult, SaveResult
from sourdough.driver import RealtimeDriver
from sourdough.strategy import (
    Strategy,
    FeedProfile,
    GreedyCheapest,
    PriorityList,
    CustomStrategy,
)
from sourdough.metrics import MetricsCollector
from sourdough.simulation import Simulation
from sourdough.report import SimulationReport, build_report
from sourdough.formatting import format_leaderboard, format_text_report

__all__ = [
    # Cost
    "CostScaling",
    # Data model
    "POINTS",
    "ResourceDef",
    "Effect",
    "EffectDef",
    "EffectType",
    "StateDelta",
    "ProducerDef",
    "PurchaseStatus",
    "OutputKind",
    "RecipeDef",
    # Definition
    "EconomyConfig",
    "EconomyDefinition",
    # State
    "EconomyState",
    "PlayerIdentity",
    "RANKING_METRIC",
    "EconomySnapshot",
    # Engine
    "GainEvent",
    "PurchaseEvent",
    "ProductionClock",
    "ProductionScheduler",
    "EconomyEngine",
    # Collaborators
    "PersistenceBackend",
    "PersistenceUnavailable",
    "InMemoryBackend",
    "JsonFileBackend",
    "IdentityStore",
    "MemoryIdentityStore",
    "FileIdentityStore",
    "GameSession",
    "SaveResult",
    "LoadResult",
    "LeaderboardResult",
    "RealtimeDriver",
    # Strategy
    "Strategy",
    "FeedProfile",
    "GreedyCheapest",
    "PriorityList",
    "CustomStrategy",
    # Simulation
    "MetricsCollector",
    "Simulation",
    "SimulationReport",
    "build_report",
    # Formatting
    "format_text_report",
    "format_leaderboard",
]
