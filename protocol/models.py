"""
Shared data models for defi.space competitive intelligence.

Position models mirror the indexer's GraphQL schema (camelCase aliases).
Intelligence and analysis models are immutable snapshots: built once per
gathering call and discarded after the caller consumes them.
"""
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from protocol.numbers import safe_int_conversion

ANALYSIS_ERROR = "Analysis Error"

# Resource name -> raw balance, or the BALANCE_ERROR sentinel
ResourceBalances = Dict[str, Union[int, str]]


class ResourceFocus(str, Enum):
    HE3_ACCUMULATION = "He3 Accumulation"
    GRAPHENE_PATH_FOCUS = "Graphene Path Focus"
    YTTRIUM_PATH_FOCUS = "Yttrium Path Focus"
    CARBON_STOCKPILING = "Carbon Stockpiling"
    NEODYMIUM_STOCKPILING = "Neodymium Stockpiling"
    BALANCED = "Balanced Resource Approach"
    UNKNOWN = "Unknown"
    ANALYSIS_ERROR = "Analysis Error"


class PathPreference(str, Enum):
    STRONG_GRAPHENE = "Strong Graphene Path Preference"
    MODERATE_GRAPHENE = "Moderate Graphene Path Preference"
    STRONG_YTTRIUM = "Strong Yttrium Path Preference"
    MODERATE_YTTRIUM = "Moderate Yttrium Path Preference"
    BALANCED = "Balanced Path Approach"
    ANALYSIS_ERROR = "Analysis Error"


class LiquidityStrategy(str, Enum):
    ADVANCED_FOCUS = "Advanced Resource Liquidity Focus"
    INTERMEDIATE_FOCUS = "Intermediate Resource Liquidity Focus"
    BASE_FOCUS = "Base Resource Liquidity Focus"
    DIVERSIFIED = "Diversified Liquidity Strategy"
    NO_POSITIONS = "No Liquidity Positions"
    ANALYSIS_ERROR = "Analysis Error"


class StakingStrategy(str, Enum):
    HE3_SINGLE_STAKE = "He3 Single Stake Focus"
    ADVANCED_FOCUS = "Advanced Resource Staking Focus"
    INTERMEDIATE_FOCUS = "Intermediate Resource Staking Focus"
    BASE_FOCUS = "Base Resource Staking Focus"
    DIVERSIFIED = "Diversified Staking Strategy"
    NO_POSITIONS = "No Staking Positions"
    ANALYSIS_ERROR = "Analysis Error"


class OverallStrategy(str, Enum):
    END_GAME = "End Game - Final He3 Accumulation"
    LATE_GAME = "Late Game - He3 Acceleration"
    MID_GAME_DUAL_PATH = "Mid Game - Dual Path Production"
    MID_GAME_GRAPHENE = "Mid Game - Graphene Path Focus"
    MID_GAME_YTTRIUM = "Mid Game - Yttrium Path Focus"
    EARLY_GAME_CONVERSION = "Early Game - Resource Conversion Setup"
    EARLY_GAME_ACCUMULATION = "Early Game - Resource Accumulation"
    ANALYSIS_ERROR = "Analysis Error"


def _optional_str(value: Any) -> Optional[str]:
    return None if value is None else str(value)


class PairSnapshot(BaseModel):
    """Trading pair state attached to a liquidity position."""
    model_config = ConfigDict(populate_by_name=True)

    token0_address: str = Field(..., alias="token0Address")
    token1_address: str = Field(..., alias="token1Address")
    reserve0: int = Field(0, description="Raw reserve of token0")
    reserve1: int = Field(0, description="Raw reserve of token1")
    total_supply: int = Field(0, alias="totalSupply", description="LP token supply")
    tvl_usd: Optional[str] = Field(None, alias="tvlUsd")

    @field_validator("reserve0", "reserve1", "total_supply", mode="before")
    @classmethod
    def _parse_amount(cls, value: Any) -> int:
        return safe_int_conversion(value)

    @field_validator("tvl_usd", mode="before")
    @classmethod
    def _stringify(cls, value: Any) -> Optional[str]:
        return _optional_str(value)


class ReactorSnapshot(BaseModel):
    """Reactor state attached to a stake position."""
    model_config = ConfigDict(populate_by_name=True)

    lp_token_address: str = Field(..., alias="lpTokenAddress")
    total_staked: int = Field(0, alias="totalStaked")
    active_rewards: bool = Field(False, alias="activeRewards")
    penalty_duration: Optional[str] = Field(None, alias="penaltyDuration")
    withdraw_penalty: Optional[str] = Field(None, alias="withdrawPenalty")

    @field_validator("total_staked", mode="before")
    @classmethod
    def _parse_amount(cls, value: Any) -> int:
        return safe_int_conversion(value)

    @field_validator("penalty_duration", "withdraw_penalty", mode="before")
    @classmethod
    def _stringify(cls, value: Any) -> Optional[str]:
        return _optional_str(value)


class LiquidityPosition(BaseModel):
    """An agent's LP position in one trading pair."""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., description="Indexer position id")
    pair_address: str = Field(..., alias="pairAddress")
    user_address: str = Field(..., alias="userAddress")
    liquidity: int = Field(0, description="LP token amount")
    deposits_token0: Optional[str] = Field(None, alias="depositsToken0")
    deposits_token1: Optional[str] = Field(None, alias="depositsToken1")
    withdrawals_token0: Optional[str] = Field(None, alias="withdrawalsToken0")
    withdrawals_token1: Optional[str] = Field(None, alias="withdrawalsToken1")
    usd_value: Optional[str] = Field(None, alias="usdValue")
    apy_earned: Optional[str] = Field(None, alias="apyEarned")
    pair: Optional[PairSnapshot] = None

    @field_validator("liquidity", mode="before")
    @classmethod
    def _parse_amount(cls, value: Any) -> int:
        return safe_int_conversion(value)

    @field_validator(
        "deposits_token0",
        "deposits_token1",
        "withdrawals_token0",
        "withdrawals_token1",
        "usd_value",
        "apy_earned",
        mode="before",
    )
    @classmethod
    def _stringify(cls, value: Any) -> Optional[str]:
        return _optional_str(value)


class StakePosition(BaseModel):
    """An agent's stake in one reactor."""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., description="Indexer stake id")
    reactor_address: str = Field(..., alias="reactorAddress")
    user_address: str = Field(..., alias="userAddress")
    staked_amount: int = Field(0, alias="stakedAmount")
    rewards: int = Field(0, description="Accrued, unclaimed rewards")
    penalty_end_time: Optional[str] = Field(None, alias="penaltyEndTime")
    reward_per_token_paid: int = Field(0, alias="rewardPerTokenPaid")
    reactor: Optional[ReactorSnapshot] = None

    @field_validator("staked_amount", "rewards", "reward_per_token_paid", mode="before")
    @classmethod
    def _parse_amount(cls, value: Any) -> int:
        return safe_int_conversion(value)

    @field_validator("penalty_end_time", mode="before")
    @classmethod
    def _stringify(cls, value: Any) -> Optional[str]:
        return _optional_str(value)


class AgentIntelligence(BaseModel):
    """Everything gathered about one competing agent."""
    model_config = ConfigDict(frozen=True)

    agent_id: str = Field(..., description="Agent identifier from contracts.json")
    address: str = Field(..., description="Agent wallet address")
    target_balance: int = Field(0, description="Raw balance of the target resource")
    resource_balances: ResourceBalances = Field(default_factory=dict)
    liquidity_positions: List[LiquidityPosition] = Field(default_factory=list)
    stake_positions: List[StakePosition] = Field(default_factory=list)
    error: Optional[str] = Field(None, description="Set when gathering failed")

    @field_serializer("target_balance", when_used="json")
    def _serialize_balance(self, value: int) -> str:
        return str(value)

    @field_serializer("resource_balances", when_used="json")
    def _serialize_balances(self, value: ResourceBalances) -> Dict[str, str]:
        return {name: str(balance) for name, balance in value.items()}


class StrategicAnalysis(BaseModel):
    """Strategy labels derived from one AgentIntelligence."""
    model_config = ConfigDict(frozen=True)

    agent_id: str
    address: str
    target_balance: int = 0
    resource_focus: ResourceFocus
    path_preference: PathPreference
    liquidity_strategy: LiquidityStrategy
    staking_strategy: StakingStrategy
    overall_strategy: OverallStrategy
    counter_strategies: List[str] = Field(default_factory=list)
    error: Optional[str] = None

    @field_serializer("target_balance", when_used="json")
    def _serialize_balance(self, value: int) -> str:
        return str(value)

    @classmethod
    def failed(
        cls, agent_id: str, address: str, target_balance: int, error: str
    ) -> "StrategicAnalysis":
        """Record substituted for an agent that could not be analyzed."""
        return cls(
            agent_id=agent_id,
            address=address,
            target_balance=target_balance,
            resource_focus=ResourceFocus.ANALYSIS_ERROR,
            path_preference=PathPreference.ANALYSIS_ERROR,
            liquidity_strategy=LiquidityStrategy.ANALYSIS_ERROR,
            staking_strategy=StakingStrategy.ANALYSIS_ERROR,
            overall_strategy=OverallStrategy.ANALYSIS_ERROR,
            counter_strategies=[ANALYSIS_ERROR],
            error=error,
        )

    def summary(self) -> str:
        lines = [f"=== {self.agent_id} ({self.address}) ==="]
        lines.append(f"Target balance: {self.target_balance}")
        lines.append(f"Resource focus: {self.resource_focus.value}")
        lines.append(f"Path preference: {self.path_preference.value}")
        lines.append(f"Liquidity strategy: {self.liquidity_strategy.value}")
        lines.append(f"Staking strategy: {self.staking_strategy.value}")
        lines.append(f"Overall strategy: {self.overall_strategy.value}")
        if self.counter_strategies:
            lines.append("Counter-strategies:")
            lines.extend(f"  - {s}" for s in self.counter_strategies)
        if self.error:
            lines.append(f"Error: {self.error}")
        return "\n".join(lines)


class RankedAgent(BaseModel):
    """One row of the target-resource leaderboard."""
    agent_id: str
    address: str
    balance: int

    @field_serializer("balance", when_used="json")
    def _serialize_balance(self, value: int) -> str:
        return str(value)


class AgentPositions(BaseModel):
    """Open LP and reactor positions of one address."""
    address: str
    liquidity_positions: List[LiquidityPosition] = Field(default_factory=list)
    stake_positions: List[StakePosition] = Field(default_factory=list)


class PositionComparison(BaseModel):
    """Side-by-side positions of the observing agent and a rival."""
    current_agent: AgentPositions
    target_agent: AgentPositions
