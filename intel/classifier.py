"""
Strategy classification for competing agents.

Every sub-analysis is a pure function of the gathered data and is
fault-isolated: an unexpected failure downgrades that single label to
"Analysis Error" and leaves the other labels intact.
"""
import logging
from collections import Counter
from typing import Dict, List, Mapping, Sequence

from protocol.game import (
    ADVANCED_PATH_RESOURCES,
    BASE_PATH_RESOURCES,
    END_GAME_THRESHOLD,
    LATE_GAME_THRESHOLD,
    PATH_RESOURCES,
    TARGET_RESOURCE,
    ResourcePath,
    Tier,
)
from protocol.models import (
    ANALYSIS_ERROR,
    AgentIntelligence,
    LiquidityPosition,
    LiquidityStrategy,
    OverallStrategy,
    PathPreference,
    ResourceBalances,
    ResourceFocus,
    StakePosition,
    StakingStrategy,
    StrategicAnalysis,
)
from protocol.numbers import BALANCE_ERROR, safe_int_conversion
from intel.exceptions import ConfigurationError
from intel.registry import ContractRegistry

logger = logging.getLogger(__name__)

# Path evidence per held resource, LP position and stake
RESOURCE_WEIGHT = 1
LIQUIDITY_WEIGHT = 2
STAKE_WEIGHT = 3

RESOURCE_FOCUS_LABELS: Dict[str, ResourceFocus] = {
    ADVANCED_PATH_RESOURCES[ResourcePath.GRAPHENE]: ResourceFocus.GRAPHENE_PATH_FOCUS,
    ADVANCED_PATH_RESOURCES[ResourcePath.YTTRIUM]: ResourceFocus.YTTRIUM_PATH_FOCUS,
    BASE_PATH_RESOURCES[ResourcePath.GRAPHENE]: ResourceFocus.CARBON_STOCKPILING,
    BASE_PATH_RESOURCES[ResourcePath.YTTRIUM]: ResourceFocus.NEODYMIUM_STOCKPILING,
}

GRAPHENE_LEANING = (PathPreference.STRONG_GRAPHENE, PathPreference.MODERATE_GRAPHENE)
YTTRIUM_LEANING = (PathPreference.STRONG_YTTRIUM, PathPreference.MODERATE_YTTRIUM)

# Counter-strategy suggestions
ACCELERATE_TARGET = "Accelerate He3 production to catch up"
FOCUS_SINGLE_STAKE = "Focus exclusively on He3 single staking"
OPTIMIZE_PRODUCTION = "Optimize He3 production path"
BALANCE_STAKE_AND_LIQUIDITY = "Balance between He3 single staking and GPH-Y liquidity"
PIVOT_TO_YTTRIUM = "Focus on Yttrium path to avoid competition"
SECURE_YTTRIUM_INPUTS = "Secure Neodymium and Dysprosium resources"
PIVOT_TO_GRAPHENE = "Focus on Graphene path to avoid competition"
SECURE_GRAPHENE_INPUTS = "Secure Carbon and Graphite resources"
SPECIALIZE = "Specialize in one path for efficiency"
ADVANCE_LIQUIDITY = "Focus on intermediate and advanced resource liquidity"
SECURE_SUPPLY_CHAIN = "Ensure base resource supply chain is secure"


class StrategyClassifier:
    """
    Derives discrete strategy labels from an agent's balances and positions.

    Labels:
    - resource focus: which resource the agent holds most of
    - path preference: Graphene vs Yttrium, weighted 1/2/3 for
      balances/liquidity/stakes
    - liquidity and staking strategy: tier with the most positions
    - overall strategy: game stage from the target balance and holdings
    - counter-strategies: ordered suggestions against that agent
    """

    def __init__(
        self,
        registry: ContractRegistry,
        target_resource: str = TARGET_RESOURCE,
        end_game_threshold: int = END_GAME_THRESHOLD,
        late_game_threshold: int = LATE_GAME_THRESHOLD,
    ):
        if late_game_threshold >= end_game_threshold:
            raise ConfigurationError(
                f"Late game threshold {late_game_threshold} must be below "
                f"end game threshold {end_game_threshold}"
            )
        self.registry = registry
        self.target_resource = target_resource
        self.end_game_threshold = end_game_threshold
        self.late_game_threshold = late_game_threshold

    def analyze_resource_focus(self, resource_balances: ResourceBalances) -> ResourceFocus:
        """
        Classify the agent by its largest resource balance.

        Equal balances are ordered by resource name so the label does not
        depend on the mapping's iteration order.
        """
        try:
            balances = {
                resource: safe_int_conversion(balance)
                for resource, balance in resource_balances.items()
                if balance != BALANCE_ERROR
            }
            ranked = sorted(balances.items(), key=lambda item: (-item[1], item[0]))

            if not ranked or ranked[0][1] <= 0:
                return ResourceFocus.UNKNOWN

            top_resource = ranked[0][0]
            if top_resource == self.target_resource:
                return ResourceFocus.HE3_ACCUMULATION
            return RESOURCE_FOCUS_LABELS.get(top_resource, ResourceFocus.BALANCED)

        except Exception as e:
            logger.error(f"Error analyzing resource focus: {e}", exc_info=True)
            return ResourceFocus.ANALYSIS_ERROR

    def score_paths(
        self,
        resource_balances: ResourceBalances,
        liquidity_positions: Sequence[LiquidityPosition],
        stake_positions: Sequence[StakePosition],
    ) -> Dict[ResourcePath, int]:
        """Accumulate directional evidence for each resource path."""
        scores = {path: 0 for path in ResourcePath}

        for resource, balance in resource_balances.items():
            if balance == BALANCE_ERROR or safe_int_conversion(balance) == 0:
                continue
            for path, resources in PATH_RESOURCES.items():
                if resource in resources:
                    scores[path] += RESOURCE_WEIGHT

        for position in liquidity_positions:
            placement = self.registry.pair_placement(position.pair_address)
            if placement and placement.path:
                scores[placement.path] += LIQUIDITY_WEIGHT

        for stake in stake_positions:
            placement = self.registry.reactor_placement(stake.reactor_address)
            if placement and placement.path:
                scores[placement.path] += STAKE_WEIGHT

        return scores

    @staticmethod
    def classify_path_scores(graphene_score: int, yttrium_score: int) -> PathPreference:
        if graphene_score > yttrium_score * 2:
            return PathPreference.STRONG_GRAPHENE
        if graphene_score > yttrium_score:
            return PathPreference.MODERATE_GRAPHENE
        if yttrium_score > graphene_score * 2:
            return PathPreference.STRONG_YTTRIUM
        if yttrium_score > graphene_score:
            return PathPreference.MODERATE_YTTRIUM
        return PathPreference.BALANCED

    def analyze_path_preference(
        self,
        resource_balances: ResourceBalances,
        liquidity_positions: Sequence[LiquidityPosition],
        stake_positions: Sequence[StakePosition],
    ) -> PathPreference:
        try:
            scores = self.score_paths(resource_balances, liquidity_positions, stake_positions)
            return self.classify_path_scores(
                scores[ResourcePath.GRAPHENE], scores[ResourcePath.YTTRIUM]
            )
        except Exception as e:
            logger.error(f"Error analyzing path preference: {e}", exc_info=True)
            return PathPreference.ANALYSIS_ERROR

    def analyze_liquidity_strategy(
        self, liquidity_positions: Sequence[LiquidityPosition]
    ) -> LiquidityStrategy:
        try:
            if not liquidity_positions:
                return LiquidityStrategy.NO_POSITIONS

            tiers: Counter = Counter()
            for position in liquidity_positions:
                placement = self.registry.pair_placement(position.pair_address)
                if placement:
                    tiers[placement.tier] += 1

            base = tiers[Tier.BASE]
            intermediate = tiers[Tier.INTERMEDIATE]
            advanced = tiers[Tier.ADVANCED]

            if advanced > intermediate and advanced > base:
                return LiquidityStrategy.ADVANCED_FOCUS
            if intermediate > base:
                return LiquidityStrategy.INTERMEDIATE_FOCUS
            if base > 0:
                return LiquidityStrategy.BASE_FOCUS
            return LiquidityStrategy.DIVERSIFIED

        except Exception as e:
            logger.error(f"Error analyzing liquidity strategy: {e}", exc_info=True)
            return LiquidityStrategy.ANALYSIS_ERROR

    def analyze_staking_strategy(
        self, stake_positions: Sequence[StakePosition]
    ) -> StakingStrategy:
        try:
            if not stake_positions:
                return StakingStrategy.NO_POSITIONS

            tiers: Counter = Counter()
            for stake in stake_positions:
                placement = self.registry.reactor_placement(stake.reactor_address)
                if placement:
                    tiers[placement.tier] += 1

            # Single staking of the target resource overrides everything else
            if tiers[Tier.SINGLE_STAKE] > 0:
                return StakingStrategy.HE3_SINGLE_STAKE

            base = tiers[Tier.BASE]
            intermediate = tiers[Tier.INTERMEDIATE]
            advanced = tiers[Tier.ADVANCED]

            if advanced > intermediate and advanced > base:
                return StakingStrategy.ADVANCED_FOCUS
            if intermediate > base:
                return StakingStrategy.INTERMEDIATE_FOCUS
            if base > 0:
                return StakingStrategy.BASE_FOCUS
            return StakingStrategy.DIVERSIFIED

        except Exception as e:
            logger.error(f"Error analyzing staking strategy: {e}", exc_info=True)
            return StakingStrategy.ANALYSIS_ERROR

    def _holds(self, resource_balances: ResourceBalances, resource: str) -> bool:
        return safe_int_conversion(resource_balances.get(resource)) > 0

    def determine_overall_strategy(
        self,
        target_balance: int,
        resource_balances: ResourceBalances,
        liquidity_positions: Sequence[LiquidityPosition],
        stake_positions: Sequence[StakePosition],
    ) -> OverallStrategy:
        """Place the agent in a game stage, first matching rule wins."""
        try:
            balance = safe_int_conversion(target_balance)

            if balance > self.end_game_threshold:
                return OverallStrategy.END_GAME
            if balance > self.late_game_threshold:
                return OverallStrategy.LATE_GAME

            has_graphene = self._holds(
                resource_balances, ADVANCED_PATH_RESOURCES[ResourcePath.GRAPHENE]
            )
            has_yttrium = self._holds(
                resource_balances, ADVANCED_PATH_RESOURCES[ResourcePath.YTTRIUM]
            )

            if has_graphene and has_yttrium:
                return OverallStrategy.MID_GAME_DUAL_PATH
            if has_graphene:
                return OverallStrategy.MID_GAME_GRAPHENE
            if has_yttrium:
                return OverallStrategy.MID_GAME_YTTRIUM

            if liquidity_positions:
                return OverallStrategy.EARLY_GAME_CONVERSION
            return OverallStrategy.EARLY_GAME_ACCUMULATION

        except Exception as e:
            logger.error(f"Error determining overall strategy: {e}", exc_info=True)
            return OverallStrategy.ANALYSIS_ERROR

    def suggest_counter_strategies(
        self,
        target_balance: int,
        resource_balances: ResourceBalances,
        liquidity_positions: Sequence[LiquidityPosition],
        stake_positions: Sequence[StakePosition],
    ) -> List[str]:
        """
        Suggestions against one competitor, highest priority first:
        stage-driven, then path-driven, then liquidity-driven.
        """
        try:
            balance = safe_int_conversion(target_balance)

            if balance > self.end_game_threshold:
                return [ACCELERATE_TARGET, FOCUS_SINGLE_STAKE]
            if balance > self.late_game_threshold:
                return [OPTIMIZE_PRODUCTION, BALANCE_STAKE_AND_LIQUIDITY]

            suggestions: List[str] = []

            path_preference = self.analyze_path_preference(
                resource_balances, liquidity_positions, stake_positions
            )
            if path_preference in GRAPHENE_LEANING:
                suggestions.extend([PIVOT_TO_YTTRIUM, SECURE_YTTRIUM_INPUTS])
            elif path_preference in YTTRIUM_LEANING:
                suggestions.extend([PIVOT_TO_GRAPHENE, SECURE_GRAPHENE_INPUTS])
            elif path_preference is PathPreference.BALANCED:
                suggestions.append(SPECIALIZE)

            liquidity_strategy = self.analyze_liquidity_strategy(liquidity_positions)
            if liquidity_strategy is LiquidityStrategy.BASE_FOCUS:
                suggestions.append(ADVANCE_LIQUIDITY)
            elif liquidity_strategy is LiquidityStrategy.ADVANCED_FOCUS:
                suggestions.append(SECURE_SUPPLY_CHAIN)

            return suggestions

        except Exception as e:
            logger.error(f"Error suggesting counter strategies: {e}", exc_info=True)
            return [ANALYSIS_ERROR]

    def analyze(self, intelligence: AgentIntelligence) -> StrategicAnalysis:
        """Build the full strategic analysis of one agent."""
        if intelligence.error:
            return StrategicAnalysis.failed(
                agent_id=intelligence.agent_id,
                address=intelligence.address,
                target_balance=intelligence.target_balance,
                error=intelligence.error,
            )

        balances = intelligence.resource_balances
        liquidity = intelligence.liquidity_positions
        stakes = intelligence.stake_positions

        return StrategicAnalysis(
            agent_id=intelligence.agent_id,
            address=intelligence.address,
            target_balance=intelligence.target_balance,
            resource_focus=self.analyze_resource_focus(balances),
            path_preference=self.analyze_path_preference(balances, liquidity, stakes),
            liquidity_strategy=self.analyze_liquidity_strategy(liquidity),
            staking_strategy=self.analyze_staking_strategy(stakes),
            overall_strategy=self.determine_overall_strategy(
                intelligence.target_balance, balances, liquidity, stakes
            ),
            counter_strategies=self.suggest_counter_strategies(
                intelligence.target_balance, balances, liquidity, stakes
            ),
        )

    def analyze_competitors(
        self, intelligence: Mapping[str, AgentIntelligence]
    ) -> Dict[str, StrategicAnalysis]:
        """
        Analyze every gathered agent.

        Args:
            intelligence: Agent id -> gathered intelligence

        Returns:
            Agent id -> strategic analysis; agents that could not be gathered
            or analyzed get an all "Analysis Error" record
        """
        analyses: Dict[str, StrategicAnalysis] = {}

        for agent_id, intel in intelligence.items():
            try:
                analyses[agent_id] = self.analyze(intel)
            except Exception as e:
                logger.error(f"Failed to analyze strategy for agent {agent_id}: {e}", exc_info=True)
                analyses[agent_id] = StrategicAnalysis.failed(
                    agent_id=agent_id,
                    address=intel.address,
                    target_balance=intel.target_balance,
                    error=str(e) or "Failed to analyze strategy",
                )

        return analyses
