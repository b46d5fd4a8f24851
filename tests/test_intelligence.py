"""
Tests for the IntelligenceService gathering fan-out.
"""
import pytest
from unittest.mock import AsyncMock, MagicMock

from intel.exceptions import ConfigurationError, NetworkFetchError
from intel.registry import ContractRegistry
from intel.services.intelligence import IntelligenceService

from conftest import AGENTS, CONTRACTS, RESOURCES, make_lp, make_stake

HE3 = RESOURCES["helium3"]


def make_reader(balances):
    """
    Balance reader mock.

    Args:
        balances: {(token, owner): balance or exception}; missing keys read as 0
    """
    async def get_balance(token, owner):
        value = balances.get((token, owner), 0)
        if isinstance(value, Exception):
            raise value
        return value

    reader = MagicMock()
    reader.get_balance = AsyncMock(side_effect=get_balance)
    return reader


def make_indexer(liquidity=None, stakes=None):
    """Indexer mock returning per-address positions (or raising)."""
    liquidity = liquidity or {}
    stakes = stakes or {}

    async def get_liquidity_positions(address):
        value = liquidity.get(address, [])
        if isinstance(value, Exception):
            raise value
        return value

    async def get_stake_positions(address):
        value = stakes.get(address, [])
        if isinstance(value, Exception):
            raise value
        return value

    indexer = MagicMock()
    indexer.get_liquidity_positions = AsyncMock(side_effect=get_liquidity_positions)
    indexer.get_stake_positions = AsyncMock(side_effect=get_stake_positions)
    return indexer


@pytest.mark.asyncio
async def test_gathers_every_agent_except_observer(registry):
    agent2, agent3 = AGENTS["agent-2"], AGENTS["agent-3"]
    reader = make_reader({
        (HE3, agent2): 600_000 * 10**18,
        (RESOURCES["graphene"], agent2): 5,
        (HE3, agent3): 10,
    })
    indexer = make_indexer(
        liquidity={agent2: [make_lp("wdCarbon", user=agent2)]},
        stakes={agent3: [make_stake("he3Stake", user=agent3)]},
    )
    service = IntelligenceService(registry, reader, indexer)

    intel = await service.get_competitive_intelligence(observer_id="agent-1")

    assert list(intel) == ["agent-2", "agent-3"]
    assert intel["agent-2"].target_balance == 600_000 * 10**18
    assert intel["agent-2"].resource_balances["graphene"] == 5
    assert intel["agent-2"].resource_balances["helium3"] == 600_000 * 10**18
    assert set(intel["agent-2"].resource_balances) == set(RESOURCES)
    assert len(intel["agent-2"].liquidity_positions) == 1
    assert intel["agent-3"].stake_positions[0].reactor_address == CONTRACTS["reactors"]["he3Stake"].lower()
    assert all(snapshot.error is None for snapshot in intel.values())
    indexer.get_liquidity_positions.assert_any_await(agent2)
    assert AGENTS["agent-1"] not in [c.args[0] for c in indexer.get_liquidity_positions.await_args_list]


@pytest.mark.asyncio
async def test_without_observer_gathers_all_agents(registry):
    service = IntelligenceService(registry, make_reader({}), make_indexer())

    intel = await service.get_competitive_intelligence()

    assert list(intel) == ["agent-1", "agent-2", "agent-3"]


@pytest.mark.asyncio
async def test_failed_resource_read_becomes_error_sentinel(registry):
    agent2 = AGENTS["agent-2"]
    reader = make_reader({(RESOURCES["carbon"], agent2): NetworkFetchError("rpc down")})
    service = IntelligenceService(registry, reader, make_indexer())

    intel = await service.get_competitive_intelligence(observer_id="agent-1")

    assert intel["agent-2"].resource_balances["carbon"] == "Error"
    assert intel["agent-2"].resource_balances["graphite"] == 0
    assert intel["agent-2"].error is None


@pytest.mark.asyncio
async def test_failed_agent_does_not_abort_others(registry):
    agent2, agent3 = AGENTS["agent-2"], AGENTS["agent-3"]
    reader = make_reader({(HE3, agent3): 42})
    indexer = make_indexer(liquidity={agent2: NetworkFetchError("indexer unreachable")})
    service = IntelligenceService(registry, reader, indexer)

    intel = await service.get_competitive_intelligence(observer_id="agent-1")

    assert intel["agent-2"].error == "indexer unreachable"
    assert intel["agent-2"].liquidity_positions == []
    assert intel["agent-3"].error is None
    assert intel["agent-3"].target_balance == 42


@pytest.mark.asyncio
async def test_failed_target_balance_marks_agent(registry):
    agent3 = AGENTS["agent-3"]
    reader = make_reader({(HE3, agent3): NetworkFetchError("timeout")})
    service = IntelligenceService(registry, reader, make_indexer())

    intel = await service.get_competitive_intelligence(observer_id="agent-1")

    assert intel["agent-3"].error == "timeout"
    assert intel["agent-3"].target_balance == 0


@pytest.mark.asyncio
async def test_unknown_observer(registry):
    service = IntelligenceService(registry, make_reader({}), make_indexer())
    with pytest.raises(ConfigurationError):
        await service.get_competitive_intelligence(observer_id="agent-9")


@pytest.mark.asyncio
async def test_missing_target_resource_address():
    contracts = {**CONTRACTS, "resources": {k: v for k, v in RESOURCES.items() if k != "helium3"}}
    service = IntelligenceService(ContractRegistry(contracts), make_reader({}), make_indexer())

    with pytest.raises(ConfigurationError):
        await service.get_competitive_intelligence(observer_id="agent-1")
    with pytest.raises(ConfigurationError):
        await service.rank_agents_by_target()


@pytest.mark.asyncio
async def test_rank_agents_by_target(registry):
    reader = make_reader({
        (HE3, AGENTS["agent-1"]): 100,
        (HE3, AGENTS["agent-2"]): NetworkFetchError("timeout"),
        (HE3, AGENTS["agent-3"]): 2**60,
    })
    service = IntelligenceService(registry, reader, make_indexer())

    ranking = await service.rank_agents_by_target()

    assert [(r.agent_id, r.balance) for r in ranking] == [("agent-3", 2**60), ("agent-1", 100)]


@pytest.mark.asyncio
async def test_get_agent_resource_balances(registry):
    agent = AGENTS["agent-1"]
    reader = make_reader({
        (RESOURCES["yttrium"], agent): 7,
        (RESOURCES["dysprosium"], agent): NetworkFetchError("timeout"),
    })
    service = IntelligenceService(registry, reader, make_indexer())

    balances = await service.get_agent_resource_balances(agent)

    assert balances["yttrium"] == 7
    assert balances["dysprosium"] == "Error"
    assert list(balances) == list(RESOURCES)


@pytest.mark.asyncio
async def test_compare_agent_positions(registry):
    agent1, agent2 = AGENTS["agent-1"], AGENTS["agent-2"]
    indexer = make_indexer(
        liquidity={agent1: [make_lp("wdCarbon", user=agent1)]},
        stakes={agent2: [make_stake("y", user=agent2), make_stake("dy", user=agent2)]},
    )
    service = IntelligenceService(registry, make_reader({}), indexer)

    comparison = await service.compare_agent_positions(agent1, agent2)

    assert comparison.current_agent.address == agent1
    assert len(comparison.current_agent.liquidity_positions) == 1
    assert comparison.current_agent.stake_positions == []
    assert comparison.target_agent.liquidity_positions == []
    assert len(comparison.target_agent.stake_positions) == 2


@pytest.mark.asyncio
async def test_compare_agent_positions_propagates_fetch_errors(registry):
    agent1, agent2 = AGENTS["agent-1"], AGENTS["agent-2"]
    indexer = make_indexer(stakes={agent2: NetworkFetchError("indexer down")})
    service = IntelligenceService(registry, make_reader({}), indexer)

    with pytest.raises(NetworkFetchError):
        await service.compare_agent_positions(agent1, agent2)
