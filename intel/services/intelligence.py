"""
Competitive intelligence gathering.

Fans out balance reads and indexer queries for every competing agent and
assembles AgentIntelligence snapshots for the classifier. A failing agent
or resource never aborts the whole gathering: failed resource reads become
the "Error" sentinel and a failed agent carries an `error` message.
"""
import asyncio
import logging
from typing import Dict, List, Optional

from protocol.models import (
    AgentIntelligence,
    AgentPositions,
    PositionComparison,
    RankedAgent,
    ResourceBalances,
)
from protocol.numbers import BALANCE_ERROR
from intel.exceptions import ConfigurationError
from intel.ranking import rank_agents_by_target
from intel.registry import ContractCategory, ContractRegistry
from intel.repositories.indexer import IndexerClient
from intel.services.chain import TokenBalanceReader
from intel.utils.env import TARGET_RESOURCE

logger = logging.getLogger(__name__)


class IntelligenceService:
    """
    Gathers balances and positions of the agents registered in the game.
    """

    def __init__(
        self,
        registry: ContractRegistry,
        balance_reader: TokenBalanceReader,
        indexer: IndexerClient,
        target_resource: str = TARGET_RESOURCE,
    ):
        """
        Args:
            registry: Contract address registry
            balance_reader: ERC-20 balance reader
            indexer: Source of liquidity and stake positions
            target_resource: Resource whose accumulation wins the game
        """
        self.registry = registry
        self.balance_reader = balance_reader
        self.indexer = indexer
        self.target_resource = target_resource

    def _target_address(self) -> str:
        try:
            return self.registry.get_address(
                ContractCategory.RESOURCES, self.target_resource
            )
        except ConfigurationError:
            raise ConfigurationError(
                f"Target resource {self.target_resource} has no configured address"
            )

    async def get_agent_resource_balances(self, address: str) -> ResourceBalances:
        """
        Read every configured resource balance of an address.

        A resource whose read failed maps to "Error" instead of a number.
        """
        resources = self.registry.get_category_addresses(ContractCategory.RESOURCES)
        names = list(resources)
        results = await asyncio.gather(
            *(self.balance_reader.get_balance(resources[name], address) for name in names),
            return_exceptions=True,
        )

        balances: ResourceBalances = {}
        for name, result in zip(names, results):
            if isinstance(result, Exception):
                logger.error(f"Failed to get {name} balance for {address}: {result}")
                balances[name] = BALANCE_ERROR
            elif isinstance(result, BaseException):
                raise result
            else:
                balances[name] = result
        return balances

    async def _gather_agent(
        self, agent_id: str, address: str, target_address: str
    ) -> AgentIntelligence:
        results = await asyncio.gather(
            self.balance_reader.get_balance(target_address, address),
            self.get_agent_resource_balances(address),
            self.indexer.get_liquidity_positions(address),
            self.indexer.get_stake_positions(address),
            return_exceptions=True,
        )

        for result in results:
            if isinstance(result, Exception):
                logger.error(
                    f"Failed to gather intelligence for {agent_id}: {result}",
                    exc_info=result,
                )
                return AgentIntelligence(
                    agent_id=agent_id, address=address, error=str(result)
                )
            if isinstance(result, BaseException):
                raise result

        target_balance, balances, liquidity_positions, stake_positions = results
        logger.debug(
            f"{agent_id}: target balance {target_balance}, "
            f"{len(liquidity_positions)} LP positions, {len(stake_positions)} stakes"
        )
        return AgentIntelligence(
            agent_id=agent_id,
            address=address,
            target_balance=target_balance,
            resource_balances=balances,
            liquidity_positions=liquidity_positions,
            stake_positions=stake_positions,
        )

    async def get_competitive_intelligence(
        self, observer_id: Optional[str] = None
    ) -> Dict[str, AgentIntelligence]:
        """
        Gather intelligence on every registered agent.

        Args:
            observer_id: Agent doing the observing; excluded from the result.
                None gathers every agent.

        Returns:
            Mapping of agent id to AgentIntelligence, in registry order

        Raises:
            ConfigurationError: If the observer is not a registered agent or
                the target resource has no address
        """
        agents = self.registry.get_category_addresses(ContractCategory.AGENTS)
        if observer_id is not None and observer_id not in agents:
            raise ConfigurationError(f"Agent address not found for ID: {observer_id}")

        target_address = self._target_address()
        competitors = {
            agent_id: address
            for agent_id, address in agents.items()
            if agent_id != observer_id
        }
        logger.info(f"Gathering intelligence on {len(competitors)} agents")

        snapshots = await asyncio.gather(
            *(
                self._gather_agent(agent_id, address, target_address)
                for agent_id, address in competitors.items()
            )
        )
        intel = {snapshot.agent_id: snapshot for snapshot in snapshots}

        failed = [agent_id for agent_id, snapshot in intel.items() if snapshot.error]
        if failed:
            logger.warning(f"Intelligence incomplete for agents: {failed}")
        return intel

    async def rank_agents_by_target(self) -> List[RankedAgent]:
        """Leaderboard of all registered agents by target resource balance."""
        target_address = self._target_address()
        agents = self.registry.get_category_addresses(ContractCategory.AGENTS)

        async def fetch_balance(address: str) -> int:
            return await self.balance_reader.get_balance(target_address, address)

        return await rank_agents_by_target(agents, fetch_balance)

    async def compare_agent_positions(
        self, current_address: str, target_address: str
    ) -> PositionComparison:
        """
        Fetch the LP and reactor positions of two agents side by side.

        Raises:
            NetworkFetchError: If any of the four indexer queries fails
        """
        (
            current_liquidity,
            target_liquidity,
            current_stakes,
            target_stakes,
        ) = await asyncio.gather(
            self.indexer.get_liquidity_positions(current_address),
            self.indexer.get_liquidity_positions(target_address),
            self.indexer.get_stake_positions(current_address),
            self.indexer.get_stake_positions(target_address),
        )
        return PositionComparison(
            current_agent=AgentPositions(
                address=current_address,
                liquidity_positions=current_liquidity,
                stake_positions=current_stakes,
            ),
            target_agent=AgentPositions(
                address=target_address,
                liquidity_positions=target_liquidity,
                stake_positions=target_stakes,
            ),
        )
