"""
Package containing the shared data models of the defi.space game.

Defines position, intelligence and analysis models together with the
resource topology used to classify agent strategies.
"""
from protocol.models import (
    ANALYSIS_ERROR,
    ResourceBalances,
    ResourceFocus,
    PathPreference,
    LiquidityStrategy,
    StakingStrategy,
    OverallStrategy,
    PairSnapshot,
    ReactorSnapshot,
    LiquidityPosition,
    StakePosition,
    AgentIntelligence,
    StrategicAnalysis,
    RankedAgent,
    AgentPositions,
    PositionComparison,
)
from protocol.numbers import BALANCE_ERROR, safe_int_conversion, format_token_balance

__all__ = [
    "ANALYSIS_ERROR",
    "BALANCE_ERROR",
    "ResourceBalances",
    # Labels
    "ResourceFocus",
    "PathPreference",
    "LiquidityStrategy",
    "StakingStrategy",
    "OverallStrategy",
    # Models
    "PairSnapshot",
    "ReactorSnapshot",
    "LiquidityPosition",
    "StakePosition",
    "AgentIntelligence",
    "StrategicAnalysis",
    "RankedAgent",
    "AgentPositions",
    "PositionComparison",
    # Helpers
    "safe_int_conversion",
    "format_token_balance",
]
